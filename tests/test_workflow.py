"""
Unit tests for the restart and deploy-only workflows.
"""

import dataclasses

import pytest
from unittest.mock import Mock, call

from rdeploy.core.client import RemoteClient
from rdeploy.core.exceptions import RemoteExecError, TransferError
from rdeploy.domain.deploy import (
    DeployPipeline,
    DeployWorkflow,
    RestartWorkflow,
    Stage,
    resolve_stage_command,
)


@pytest.fixture
def client():
    return Mock(spec=RemoteClient)


@pytest.fixture
def pipeline():
    return Mock(spec=DeployPipeline)


def _commands(client):
    return [c.args[0] for c in client.exec_streamed.call_args_list]


class TestResolveStageCommand:

    def test_explicit_command_runs_through_sh(self):
        assert resolve_stage_command("/opt/app/bin/stop.sh", "shutdown.sh") == "sh /opt/app/bin/stop.sh"

    @pytest.mark.parametrize("explicit", [None, "", "   "])
    def test_fallback_uses_login_shell(self, explicit):
        assert resolve_stage_command(explicit, "startup.sh") == "bash -lc startup.sh"


class TestRestartWorkflow:
    """Stage ordering and gating."""

    def test_runs_all_stages_in_order_on_one_session(self, client, pipeline, deploy_config, capture_sink):
        manager = Mock()
        manager.attach_mock(client.exec_streamed, "exec_streamed")
        manager.attach_mock(pipeline.run, "pipeline_run")
        stages = []

        result = RestartWorkflow(
            client, deploy_config, capture_sink, pipeline=pipeline, on_stage=stages.append
        ).run()

        assert manager.mock_calls == [
            call.exec_streamed("sh /opt/app/bin/shutdown.sh", capture_sink),
            call.pipeline_run(),
            call.exec_streamed("sh /opt/app/bin/startup.sh", capture_sink),
            call.exec_streamed("bash -lc showLogs.sh", capture_sink),
        ]
        assert stages == [Stage.SHUTDOWN, Stage.REDEPLOY, Stage.STARTUP, Stage.SHOWLOG]
        assert result.completed == stages
        assert result.ignored_errors == []
        assert result.success

    def test_fallback_scripts_when_nothing_configured(self, client, pipeline, deploy_config):
        config = dataclasses.replace(deploy_config, shutdown_cmd=None, startup_cmd=None)

        RestartWorkflow(client, config, pipeline=pipeline).run()

        assert _commands(client) == [
            "bash -lc shutdown.sh",
            "bash -lc startup.sh",
            "bash -lc showLogs.sh",
        ]

    def test_shutdown_failure_stops_everything_after_it(self, client, pipeline, deploy_config):
        client.exec_streamed.side_effect = RemoteExecError(1, "sh /opt/app/bin/shutdown.sh")

        with pytest.raises(RemoteExecError) as excinfo:
            RestartWorkflow(client, deploy_config, pipeline=pipeline).run()

        assert excinfo.value.status == 1
        pipeline.run.assert_not_called()
        assert client.exec_streamed.call_count == 1

    def test_redeploy_failure_stops_startup(self, client, pipeline, deploy_config):
        pipeline.run.side_effect = TransferError("upload failed")

        with pytest.raises(TransferError):
            RestartWorkflow(client, deploy_config, pipeline=pipeline).run()

        assert _commands(client) == ["sh /opt/app/bin/shutdown.sh"]

    def test_startup_failure_skips_showlog(self, client, pipeline, deploy_config):
        client.exec_streamed.side_effect = [None, RemoteExecError(127, "sh startup")]

        with pytest.raises(RemoteExecError):
            RestartWorkflow(client, deploy_config, pipeline=pipeline).run()

        assert client.exec_streamed.call_count == 2

    def test_showlog_failure_does_not_fail_the_workflow(self, client, pipeline, deploy_config):
        client.exec_streamed.side_effect = [None, None, RemoteExecError(1, "bash -lc showLogs.sh")]

        result = RestartWorkflow(client, deploy_config, pipeline=pipeline).run()

        assert result.success
        assert result.completed == [Stage.SHUTDOWN, Stage.REDEPLOY, Stage.STARTUP]
        assert len(result.ignored_errors) == 1
        assert result.ignored_errors[0].startswith("showlog: ")

    def test_builds_pipeline_from_config_when_not_given(self, client, deploy_config):
        workflow = RestartWorkflow(client, deploy_config)

        assert isinstance(workflow.pipeline, DeployPipeline)
        assert workflow.pipeline.client is client


class TestDeployWorkflow:
    """Deploy-only entry point: deploy first, then optional shutdown."""

    def test_shutdown_runs_after_deploy(self, client, pipeline, deploy_config, capture_sink):
        manager = Mock()
        manager.attach_mock(client.exec_streamed, "exec_streamed")
        manager.attach_mock(pipeline.run, "pipeline_run")

        DeployWorkflow(client, deploy_config, capture_sink, pipeline=pipeline).run()

        assert manager.mock_calls == [
            call.pipeline_run(),
            call.exec_streamed("sh /opt/app/bin/shutdown.sh", capture_sink),
        ]

    @pytest.mark.parametrize("shutdown_cmd", [None, "  "])
    def test_no_shutdown_without_explicit_command(self, client, pipeline, deploy_config, shutdown_cmd):
        config = dataclasses.replace(deploy_config, shutdown_cmd=shutdown_cmd)

        DeployWorkflow(client, config, pipeline=pipeline).run()

        pipeline.run.assert_called_once()
        client.exec_streamed.assert_not_called()

    def test_deploy_failure_skips_shutdown(self, client, pipeline, deploy_config):
        pipeline.run.side_effect = RemoteExecError(2, "tar")

        with pytest.raises(RemoteExecError):
            DeployWorkflow(client, deploy_config, pipeline=pipeline).run()

        client.exec_streamed.assert_not_called()

    def test_shutdown_failure_propagates(self, client, pipeline, deploy_config):
        client.exec_streamed.side_effect = RemoteExecError(1, "sh /opt/app/bin/shutdown.sh")

        with pytest.raises(RemoteExecError):
            DeployWorkflow(client, deploy_config, pipeline=pipeline).run()
