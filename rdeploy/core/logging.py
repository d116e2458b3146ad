"""
Rich-based logging for rdeploy

Two streams are configured:
- the root logger, for rdeploy's own progress and diagnostics
- ``rdeploy.remote``, which carries lines streamed back from remote commands
  and is rendered without level or timestamp columns
"""
import logging
from typing import Optional
from pathlib import Path

from rich.logging import RichHandler
from rich.console import Console
from rich.highlighter import NullHighlighter

REMOTE_OUTPUT_LOGGER = "rdeploy.remote"
FILE_LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

# Bound to sys.stdout / sys.stderr at write time
_stdout_console = Console()
_stderr_console = Console(stderr=True)


def _file_handler(log_file: Path, level: int) -> logging.Handler:
    log_file.parent.mkdir(parents=True, exist_ok=True)
    handler = logging.FileHandler(log_file, encoding="utf-8")
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(FILE_LOG_FORMAT))
    return handler


def setup_logging(
    level: str = "INFO",
    log_file: Optional[Path] = None,
    rich_tracebacks: bool = True,
) -> None:
    """
    Configure rdeploy logging.
    
    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Also write every record (remote output included) to this file
        rich_tracebacks: Render exceptions with rich tracebacks
    """
    log_level = getattr(logging, level.upper(), logging.INFO)
    
    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    root_logger.handlers.clear()
    root_logger.addHandler(RichHandler(
        console=_stderr_console,
        show_path=False,
        rich_tracebacks=rich_tracebacks,
        markup=False,
    ))
    
    # Remote lines are printed as-is, without columns or highlighting
    remote_logger = logging.getLogger(REMOTE_OUTPUT_LOGGER)
    remote_logger.handlers.clear()
    remote_logger.propagate = False
    remote_logger.setLevel(log_level)
    remote_logger.addHandler(RichHandler(
        console=_stderr_console,
        show_time=False,
        show_level=False,
        show_path=False,
        markup=False,
        highlighter=NullHighlighter(),
    ))
    
    if log_file:
        file_handler = _file_handler(log_file, log_level)
        root_logger.addHandler(file_handler)
        remote_logger.addHandler(file_handler)
    
    # paramiko logs every channel open at INFO
    logging.getLogger("paramiko").setLevel(max(log_level, logging.WARNING))


def get_logger(name: str) -> logging.Logger:
    """Logger by name (usually __name__)"""
    return logging.getLogger(name)


def get_remote_logger() -> logging.Logger:
    """Logger that receives streamed remote command output"""
    return logging.getLogger(REMOTE_OUTPUT_LOGGER)


def get_stdout_console() -> Console:
    """Console for user-facing results"""
    return _stdout_console


def get_stderr_console() -> Console:
    """Console for errors and logs"""
    return _stderr_console
