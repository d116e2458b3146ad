"""
Core infrastructure layer
"""
from .client import RemoteClient, ConnectionParams, LineBuffer
from .exceptions import *
from .logging import setup_logging, get_logger, get_remote_logger, get_stdout_console, get_stderr_console
from .interfaces import ConnectionFactory, OutputSink, LoggerSink
from .utils import ErrorPolicy, run_guarded

__all__ = [
    "RemoteClient",
    "ConnectionParams",
    "LineBuffer",
    "setup_logging",
    "get_logger",
    "get_remote_logger",
    "get_stdout_console",
    "get_stderr_console",
    "ConnectionFactory",
    "OutputSink",
    "LoggerSink",
    "ErrorPolicy",
    "run_guarded",
    "RdeployError",
    "ConfigError",
    "ConnectError",
    "AuthError",
    "RemoteExecError",
    "ArchiveError",
    "TransferError",
    "FsError",
    "RemoteTimeoutError",
]
