from __future__ import annotations
import time
import shutil
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Optional, Union

import paramiko

from .constants import (
    DEFAULT_SSH_PORT,
    REMOTE_FILE_MODE,
    SFTP_COPY_BUFSIZE,
    CHANNEL_RECV_BUFSIZE,
    STREAM_POLL_INTERVAL,
    NOISE_MARKER,
)
from .exceptions import AuthError, ConnectError, RemoteExecError, RemoteTimeoutError, TransferError
from .interfaces import OutputSink, LoggerSink
from .logging import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class ConnectionParams:
    host: str
    username: str
    password: Optional[str] = None
    port: int = DEFAULT_SSH_PORT
    timeout_secs: Optional[int] = None
    key_file: Optional[str] = None

    def __repr__(self) -> str:
        # keep the secret out of logs and tracebacks
        return (
            f"ConnectionParams(host={self.host!r}, username={self.username!r}, "
            f"port={self.port}, timeout_secs={self.timeout_secs}, key_file={self.key_file!r})"
        )


class LineBuffer:
    """
    Split a byte stream into lines as chunks arrive.

    Complete lines are decoded and handed to ``emit`` immediately. Empty
    lines and lines containing the noise marker are consumed but never
    emitted. A trailing line without newline is delivered by ``flush()``.
    """

    def __init__(self, emit: Callable[[str], None], noise: Optional[str] = NOISE_MARKER):
        self._emit = emit
        self._noise = noise
        self._pending = b""
        self.lines_read = 0

    def feed(self, data: bytes) -> None:
        self._pending += data
        *lines, self._pending = self._pending.split(b"\n")
        for raw in lines:
            self._deliver(raw)

    def flush(self) -> None:
        if self._pending:
            raw, self._pending = self._pending, b""
            self._deliver(raw)

    def _deliver(self, raw: bytes) -> None:
        self.lines_read += 1
        line = raw.decode("utf-8", errors="replace").rstrip("\r")
        if not line:
            return
        if self._noise and self._noise in line:
            return
        self._emit(line)


class RemoteClient:
    """
    One authenticated SSH session to a remote host.

    - password login, or private key (Ed25519 / RSA autodetected)
    - every exec opens its own channel; commands run one at a time
    - exec_captured buffers output, exec_streamed forwards it line by line
    - SFTP client is opened lazily and reused for the session
    - supports with context management
    """
    def __init__(self, params: ConnectionParams) -> None:
        self.params = params

        self.client = paramiko.SSHClient()
        self.client.set_missing_host_key_policy(paramiko.AutoAddPolicy())

        # SFTP connection cache
        self._sftp: Optional[paramiko.SFTPClient] = None

    # --------------------
    # Connection management
    # --------------------
    def connect(self) -> None:
        """
        Open the TCP connection, run the SSH handshake and authenticate.

        Raises:
            ConnectError: Host unreachable, timeout or handshake failure
            AuthError: Credentials rejected or session left unauthenticated
        """
        cfg = self.params
        kwargs = {
            "hostname": cfg.host,
            "port": cfg.port,
            "username": cfg.username,
            "allow_agent": False,
            "look_for_keys": False,
        }
        if cfg.timeout_secs:
            kwargs["timeout"] = cfg.timeout_secs
            kwargs["banner_timeout"] = cfg.timeout_secs
            kwargs["auth_timeout"] = cfg.timeout_secs

        if cfg.key_file:
            kwargs["pkey"] = self._load_private_key(cfg.key_file)
        else:
            kwargs["password"] = cfg.password

        target = f"{cfg.host}:{cfg.port}"
        try:
            self.client.connect(**kwargs)
        except paramiko.AuthenticationException as e:
            self.client.close()
            raise AuthError(f"Authentication failed for {cfg.username}@{target}: {e}") from e
        except (paramiko.SSHException, OSError) as e:
            self.client.close()
            raise ConnectError(f"Failed to connect to {target}: {e}") from e

        transport = self.client.get_transport()
        if transport is None or not transport.is_authenticated():
            self.client.close()
            raise AuthError(f"SSH session to {target} is not authenticated")

        logger.debug(f"[ssh] authenticated as {cfg.username}@{target}")

    def _load_private_key(self, path: str) -> paramiko.PKey:
        """Autodetect Ed25519 and RSA"""
        p = Path(path).expanduser()

        try:
            return paramiko.Ed25519Key.from_private_key_file(str(p))
        except (paramiko.SSHException, OSError):
            try:
                return paramiko.RSAKey.from_private_key_file(str(p))
            except (paramiko.SSHException, OSError) as e:
                raise AuthError(f"Failed to load private key at {p}: {e}") from e

    # --------------------
    # Command execution
    # --------------------
    def _open_channel(self, cmd: str) -> paramiko.Channel:
        """Start cmd on a fresh channel"""
        try:
            stdin, stdout, _ = self.client.exec_command(cmd)
        except paramiko.SSHException as e:
            raise ConnectError(f"Failed to open command channel: {e}") from e
        stdin.close()
        return stdout.channel

    def _drain(
        self,
        cmd: str,
        channel: paramiko.Channel,
        on_stdout: Callable[[bytes], None],
        on_stderr: Callable[[bytes], None],
    ) -> int:
        """
        Pump stdout and stderr chunks of ``channel`` until the command exits.

        Both streams are polled in turn so neither can stall the other, and
        the exit status is read only once both are empty. With
        ``timeout_secs`` set, a channel that stays silent without exiting for
        longer than that is closed.

        Raises:
            RemoteTimeoutError: No output and no exit within timeout_secs
        """
        idle_limit = self.params.timeout_secs
        last_activity = time.monotonic()

        while True:
            has_output = False

            if channel.recv_ready():
                data = channel.recv(CHANNEL_RECV_BUFSIZE)
                if data:
                    has_output = True
                    on_stdout(data)

            if channel.recv_stderr_ready():
                data = channel.recv_stderr(CHANNEL_RECV_BUFSIZE)
                if data:
                    has_output = True
                    on_stderr(data)

            if has_output:
                last_activity = time.monotonic()
                continue

            if (
                channel.exit_status_ready()
                and not channel.recv_ready()
                and not channel.recv_stderr_ready()
            ):
                break

            if idle_limit and time.monotonic() - last_activity > idle_limit:
                channel.close()
                raise RemoteTimeoutError(cmd, idle_limit)

            time.sleep(STREAM_POLL_INTERVAL)

        return channel.recv_exit_status()

    def exec_captured(self, cmd: str) -> str:
        """
        Run a command and return its stdout.

        Raises:
            RemoteExecError: Nonzero exit status (carries captured stderr)
            RemoteTimeoutError: Command stalled past timeout_secs
        """
        out, err = bytearray(), bytearray()
        status = self._drain(cmd, self._open_channel(cmd), out.extend, err.extend)
        if status != 0:
            raise RemoteExecError(status, cmd, err.decode("utf-8", errors="replace"))
        return out.decode("utf-8", errors="replace")

    def exec_streamed(self, cmd: str, sink: Optional[OutputSink] = None) -> None:
        """
        Run a command and forward its output line by line as it arrives.

        stdout lines go to ``sink.info``, stderr lines to ``sink.error``.

        Raises:
            RemoteExecError: Nonzero exit status
            RemoteTimeoutError: Command stalled past timeout_secs
        """
        sink = sink or LoggerSink()
        out_lines = LineBuffer(sink.info)
        err_lines = LineBuffer(sink.error)

        try:
            status = self._drain(cmd, self._open_channel(cmd), out_lines.feed, err_lines.feed)
        finally:
            out_lines.flush()
            err_lines.flush()

        if status != 0:
            raise RemoteExecError(status, cmd)

    # --------------------
    # File transfer
    # --------------------
    def open_sftp(self) -> paramiko.SFTPClient:
        """Return SFTP client, reuse existing connection"""
        if self._sftp is None or self._sftp.get_channel() is None:
            self._sftp = self.client.open_sftp()
            if self.params.timeout_secs:
                # every SFTP request blocks on this channel
                self._sftp.get_channel().settimeout(self.params.timeout_secs)
        return self._sftp

    @staticmethod
    def _remote_exists(sftp: paramiko.SFTPClient, remote_path: str) -> bool:
        try:
            sftp.stat(remote_path)
        except FileNotFoundError:
            return False
        return True

    def upload(self, local_path: Union[str, Path], remote_path: str) -> None:
        """
        Copy a local file to ``remote_path``, replacing any existing file.

        A newly created remote file gets mode 0644; an existing file is
        truncated and keeps its mode. A failure part way leaves the remote
        file truncated.

        Raises:
            TransferError: Local file unreadable, remote file not writable or
                SFTP stalled past timeout_secs
        """
        local_path = Path(local_path)
        try:
            local_file = open(local_path, "rb")
        except OSError as e:
            raise TransferError(f"Cannot open local file {local_path}: {e}") from e

        with local_file:
            try:
                sftp = self.open_sftp()
                created = not self._remote_exists(sftp, remote_path)
                with sftp.open(remote_path, "wb") as remote_file:
                    if created:
                        remote_file.chmod(REMOTE_FILE_MODE)
                    remote_file.set_pipelined(True)
                    shutil.copyfileobj(local_file, remote_file, SFTP_COPY_BUFSIZE)
            except (OSError, paramiko.SSHException) as e:
                raise TransferError(f"Failed to upload {local_path} → {remote_path}: {e}") from e

        logger.debug(f"[push] {local_path} → {remote_path}")

    # --------------------
    # Context manager
    # --------------------
    def close(self) -> None:
        if self._sftp:
            try:
                self._sftp.close()
            except (OSError, paramiko.SSHException):
                pass
            self._sftp = None
        self.client.close()

    def __enter__(self) -> RemoteClient:
        return self

    def __exit__(self, exc_type, exc_value, traceback) -> None:
        self.close()
