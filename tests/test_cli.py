"""
Integration tests for the typer CLI.

The SSH layer is replaced at the connection factory; everything local
(config loading, change detection, Maven switching) runs for real.
"""

import dataclasses

import pytest
from typer.testing import CliRunner
from unittest.mock import MagicMock, patch

from rdeploy.adapters.cli.app import app
from rdeploy.adapters.cli.common import ensure_credentials
from rdeploy.core.exceptions import AuthError, ConfigError, RemoteExecError

runner = CliRunner()


def _write_config(tmp_path, extra=""):
    apps = tmp_path / "apps"
    apps.mkdir(exist_ok=True)
    (apps / "app.jar").write_bytes(b"jar")
    cfg_home = tmp_path / "cfgHome"
    cfg_home.mkdir(exist_ok=True)
    (cfg_home / "app.yml").write_text("a: 1\n")
    watched = tmp_path / "watched"
    watched.mkdir(exist_ok=True)
    (watched / "one.txt").write_text("1")
    (watched / "two.txt").write_text("2")

    path = tmp_path / "deploy.toml"
    path.write_text(f"""
shutdown_cmd = "/opt/app/bin/shutdown.sh"
{extra}

[ssh]
host = "10.0.0.9"
port = 22
username = "deploy"
password = "pw"

[paths]
local_apps = "{apps.as_posix()}"
local_cfg_home = "{cfg_home.as_posix()}"
remote_apps = "/opt/app/apps"
remote_cfg_home = "/opt/app/cfgHome"
file_target_dir = "{watched.as_posix()}"
scratch_dir = "{tmp_path.as_posix()}"
""")
    return path


@pytest.fixture
def remote_client():
    client = MagicMock()
    client.__enter__.return_value = client
    with patch("rdeploy.adapters.cli.deploy.RemoteConnectionFactory") as factory:
        factory.return_value.create.return_value = client
        yield client


class TestDeployCommand:

    def test_deploy_runs_pipeline_then_shutdown(self, tmp_path, remote_client):
        config = _write_config(tmp_path)

        result = runner.invoke(app, ["--config", str(config), "deploy"])

        assert result.exit_code == 0, result.output
        assert [c.args[1] for c in remote_client.upload.call_args_list] == [
            "/opt/app/apps/apps.tar.gz",
            "/opt/app/cfgHome/cfgHome.tar.gz",
        ]
        commands = [c.args[0] for c in remote_client.exec_streamed.call_args_list]
        assert commands[-1] == "sh /opt/app/bin/shutdown.sh"
        assert len(commands) == 3
        assert "Deploy completed" in result.output

    def test_deploy_is_the_default_command(self, tmp_path, remote_client):
        config = _write_config(tmp_path)

        result = runner.invoke(app, ["--config", str(config)])

        assert result.exit_code == 0, result.output
        assert remote_client.upload.call_count == 2

    def test_auth_failure_exits_nonzero(self, tmp_path):
        config = _write_config(tmp_path)
        with patch("rdeploy.adapters.cli.deploy.RemoteConnectionFactory") as factory:
            factory.return_value.create.side_effect = AuthError("Authentication failed")

            result = runner.invoke(app, ["--config", str(config), "deploy"])

        assert result.exit_code == 1
        assert "Authentication failed" in result.output

    def test_remote_failure_exits_nonzero(self, tmp_path, remote_client):
        config = _write_config(tmp_path)
        remote_client.exec_streamed.side_effect = RemoteExecError(2, "tar -xzvf apps.tar.gz")

        result = runner.invoke(app, ["--config", str(config), "deploy"])

        assert result.exit_code == 1
        assert remote_client.exec_streamed.call_count == 1

    def test_missing_config_exits_nonzero(self, tmp_path):
        result = runner.invoke(app, ["--config", str(tmp_path / "nope.toml"), "deploy"])

        assert result.exit_code == 1
        assert "Config Error" in result.output


class TestRestartCommand:

    def test_restart_runs_stages_in_order(self, tmp_path, remote_client):
        config = _write_config(tmp_path, extra='startup_cmd = "/opt/app/bin/startup.sh"')

        result = runner.invoke(app, ["--config", str(config), "restart"])

        assert result.exit_code == 0, result.output
        commands = [c.args[0] for c in remote_client.exec_streamed.call_args_list]
        assert commands[0] == "sh /opt/app/bin/shutdown.sh"
        assert commands[-2] == "sh /opt/app/bin/startup.sh"
        assert commands[-1] == "bash -lc showLogs.sh"
        assert len(commands) == 5

    def test_showlog_failure_keeps_exit_code_zero(self, tmp_path, remote_client):
        config = _write_config(tmp_path)
        remote_client.exec_streamed.side_effect = [
            None, None, None, None, RemoteExecError(1, "bash -lc showLogs.sh"),
        ]

        result = runner.invoke(app, ["--config", str(config), "restart"])

        assert result.exit_code == 0, result.output
        assert "Ignored" in result.output

    def test_shutdown_failure_exits_nonzero(self, tmp_path, remote_client):
        config = _write_config(tmp_path)
        remote_client.exec_streamed.side_effect = RemoteExecError(1, "sh /opt/app/bin/shutdown.sh")

        result = runner.invoke(app, ["--config", str(config), "restart"])

        assert result.exit_code == 1
        remote_client.upload.assert_not_called()


class TestFileCommand:

    def test_stages_changed_files_and_writes_cache_next_to_config(self, tmp_path):
        config = _write_config(tmp_path)

        first = runner.invoke(app, ["--config", str(config), "file", "--no-open"])
        second = runner.invoke(app, ["--config", str(config), "file", "--no-open"])

        assert first.exit_code == 0, first.output
        assert "2 changed file(s)" in first.output
        assert "0 changed file(s)" in second.output
        assert (tmp_path / "md5_cache.json").exists()
        assert (tmp_path / "watched" / "temp").is_dir()

    def test_open_launches_staging_dir(self, tmp_path):
        config = _write_config(tmp_path)

        with patch("rdeploy.adapters.cli.files.typer.launch") as launch:
            result = runner.invoke(app, ["--config", str(config), "file", "--open"])

        assert result.exit_code == 0, result.output
        launch.assert_called_once_with(str(tmp_path / "watched" / "temp"))


class TestMvnCommand:

    def test_switches_profile_from_config(self, tmp_path):
        home = tmp_path / "maven"
        (home / "conf" / "settings").mkdir(parents=True)
        (home / "conf" / "settings" / "settings-yjd.xml").write_text("<yjd/>")
        config = _write_config(tmp_path, extra="")
        config.write_text(config.read_text() + f'\n[maven]\nmaven_home = "{home.as_posix()}"\n')

        result = runner.invoke(app, ["--config", str(config), "mvn", "yjd"])

        assert result.exit_code == 0, result.output
        assert (home / "conf" / "settings.xml").read_text() == "<yjd/>"

    def test_missing_profile_exits_nonzero(self, tmp_path, monkeypatch):
        home = tmp_path / "maven"
        (home / "conf" / "settings").mkdir(parents=True)
        monkeypatch.setenv("MAVEN_HOME", str(home))
        monkeypatch.chdir(tmp_path)

        result = runner.invoke(app, ["mvn", "nope"])

        assert result.exit_code == 1


class TestEnsureCredentials:

    def test_configured_password_skips_prompt(self, deploy_config):
        provider = MagicMock()

        assert ensure_credentials(deploy_config, provider) is deploy_config
        provider.ask_password.assert_not_called()

    def test_prompts_when_password_missing(self, deploy_config):
        config = dataclasses.replace(
            deploy_config, ssh=dataclasses.replace(deploy_config.ssh, password=None)
        )
        provider = MagicMock()
        provider.ask_password.return_value = "typed"

        result = ensure_credentials(config, provider)

        assert result.ssh.password == "typed"
        provider.ask_password.assert_called_once_with(config.ssh)

    def test_empty_answer_is_a_config_error(self, deploy_config):
        config = dataclasses.replace(
            deploy_config, ssh=dataclasses.replace(deploy_config.ssh, password=None)
        )
        provider = MagicMock()
        provider.ask_password.return_value = ""

        with pytest.raises(ConfigError):
            ensure_credentials(config, provider)
