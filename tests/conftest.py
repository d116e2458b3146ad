"""
Shared fixtures and fakes for the rdeploy test suite.
"""

import pytest
from unittest.mock import MagicMock

from rdeploy.core.client import ConnectionParams
from rdeploy.core.interfaces import OutputSink
from rdeploy.domain.deploy import DeployConfig, PathsConfig


class CaptureSink(OutputSink):
    """Records every delivered line in arrival order."""

    def __init__(self):
        self.events = []

    def info(self, line):
        self.events.append(("info", line))

    def error(self, line):
        self.events.append(("error", line))

    @property
    def info_lines(self):
        return [line for kind, line in self.events if kind == "info"]

    @property
    def error_lines(self):
        return [line for kind, line in self.events if kind == "error"]


class FakeChannel:
    """
    Scripted stand-in for a paramiko Channel.

    ``events`` is an ordered list of ("out", bytes), ("err", bytes) or
    ("wait", n). A wait event makes the channel look idle for n polls.
    """

    def __init__(self, events, exit_status=0):
        self.events = list(events)
        self.exit_status = exit_status
        self.recv_calls = 0
        self.closed = False

    def _head(self):
        return self.events[0][0] if self.events else None

    def _tick(self):
        if self._head() == "wait":
            kind, remaining = self.events[0]
            if remaining <= 1:
                self.events.pop(0)
            else:
                self.events[0] = (kind, remaining - 1)

    def recv_ready(self):
        return self._head() == "out"

    def recv_stderr_ready(self):
        return self._head() == "err"

    def recv(self, nbytes):
        assert self._head() == "out"
        self.recv_calls += 1
        return self.events.pop(0)[1]

    def recv_stderr(self, nbytes):
        assert self._head() == "err"
        self.recv_calls += 1
        return self.events.pop(0)[1]

    def exit_status_ready(self):
        self._tick()
        return not self.events

    def recv_exit_status(self):
        assert not self.events, "exit status read before streams were drained"
        return self.exit_status

    def close(self):
        self.closed = True


def make_exec_result(channel):
    """Build the (stdin, stdout, stderr) triple SSHClient.exec_command returns."""
    stdout = MagicMock()
    stdout.channel = channel
    return MagicMock(), stdout, MagicMock()


@pytest.fixture
def capture_sink():
    return CaptureSink()


@pytest.fixture
def connection_params():
    return ConnectionParams(
        host="10.0.0.5",
        username="deploy",
        password="s3cret",
        port=2222,
        timeout_secs=15,
    )


@pytest.fixture
def local_trees(tmp_path):
    """Local apps and config-home trees with a few files each."""
    apps = tmp_path / "apps"
    (apps / "lib").mkdir(parents=True)
    (apps / "app.jar").write_bytes(b"jar-bytes")
    (apps / "lib" / "dep.jar").write_bytes(b"dep-bytes")

    cfg_home = tmp_path / "cfgHome"
    cfg_home.mkdir()
    (cfg_home / "application.yml").write_text("server:\n  port: 8080\n")
    return apps, cfg_home


@pytest.fixture
def deploy_config(tmp_path, local_trees, connection_params):
    apps, cfg_home = local_trees
    scratch = tmp_path / "scratch"
    scratch.mkdir()
    return DeployConfig(
        ssh=connection_params,
        paths=PathsConfig(
            local_apps=str(apps),
            local_cfg_home=str(cfg_home),
            remote_apps="/opt/app/apps",
            remote_cfg_home="/opt/app/cfgHome",
            file_target_dir=str(tmp_path / "watched"),
            scratch_dir=str(scratch),
        ),
        shutdown_cmd="/opt/app/bin/shutdown.sh",
        startup_cmd="/opt/app/bin/startup.sh",
        showlog_cmd=None,
    )
