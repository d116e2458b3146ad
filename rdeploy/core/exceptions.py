"""
Unified exception definitions
"""
from typing import Optional


class RdeployError(Exception):
    """Base exception class"""
    pass


class ConfigError(RdeployError):
    """Configuration error"""
    pass


class ConnectError(RdeployError):
    """Network connection or SSH handshake failed"""
    pass


class AuthError(RdeployError):
    """Handshake succeeded but the session is not authenticated"""
    pass


class RemoteExecError(RdeployError):
    """Remote command exited with a nonzero status"""

    def __init__(self, status: int, command: str, stderr: Optional[str] = None):
        self.status = status
        self.command = command
        self.stderr = stderr
        message = f"Remote command failed ({status}): {command}"
        if stderr:
            message += f"\n{stderr}"
        super().__init__(message)


class ArchiveError(RdeployError):
    """Archive creation error"""
    pass


class TransferError(RdeployError):
    """File transfer error"""
    pass


class FsError(RdeployError):
    """Local filesystem error"""
    pass


class RemoteTimeoutError(RdeployError):
    """Remote command produced nothing and did not exit within the configured timeout"""

    def __init__(self, command: str, timeout_secs: float):
        self.command = command
        self.timeout_secs = timeout_secs
        super().__init__(f"Remote command idle for more than {timeout_secs}s: {command}")
