"""
Core interfaces for dependency injection
"""
import logging
from abc import ABC, abstractmethod
from typing import Any, Optional

from .logging import get_remote_logger


class ConnectionFactory(ABC):
    """SSH connection factory interface"""
    
    @abstractmethod
    def create(self, params: Any) -> Any:
        """Create and connect SSH client"""
        pass


class OutputSink(ABC):
    """Destination for remote command output lines"""
    
    @abstractmethod
    def info(self, line: str) -> None:
        """Receive one stdout line"""
        pass
    
    @abstractmethod
    def error(self, line: str) -> None:
        """Receive one stderr line"""
        pass


class LoggerSink(OutputSink):
    """Forward remote output to a logger (stdout at INFO, stderr at ERROR)"""
    
    def __init__(self, logger: Optional[logging.Logger] = None):
        self.logger = logger or get_remote_logger()
    
    def info(self, line: str) -> None:
        self.logger.info(line)
    
    def error(self, line: str) -> None:
        self.logger.error(line)
