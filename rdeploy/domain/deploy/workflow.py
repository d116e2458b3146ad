"""
Deploy and restart workflows
"""
import shlex
from typing import Callable, List, Optional

from ...core.client import RemoteClient
from ...core.constants import (
    LOGIN_SHELL,
    SHUTDOWN_SCRIPT,
    STARTUP_SCRIPT,
    SHOWLOG_SCRIPT,
)
from ...core.interfaces import OutputSink, LoggerSink
from ...core.logging import get_logger
from ...core.utils import ErrorPolicy, run_guarded
from .models import DeployConfig, Stage, RestartResult
from .pipeline import DeployPipeline

logger = get_logger(__name__)


def resolve_stage_command(explicit: Optional[str], fallback_script: str) -> str:
    """
    Pick the remote command for a stage.
    
    Args:
        explicit: Configured command, blank counts as absent
        fallback_script: Script name resolved through a login shell's PATH
    
    Returns:
        ``sh <explicit>`` or ``bash -lc <fallback_script>``
    """
    if explicit and explicit.strip():
        return f"sh {explicit.strip()}"
    return f"{LOGIN_SHELL} -lc {shlex.quote(fallback_script)}"


class RestartWorkflow:
    """
    Shutdown → Redeploy → Startup → ShowLog on one session.
    
    Each stage must succeed before the next one starts. A failure in any
    stage but ShowLog propagates to the caller; ShowLog is best effort.
    """
    
    def __init__(
        self,
        client: RemoteClient,
        config: DeployConfig,
        sink: Optional[OutputSink] = None,
        pipeline: Optional[DeployPipeline] = None,
        on_stage: Optional[Callable[[Stage], None]] = None,
    ):
        """
        Initialize restart workflow.
        
        Args:
            client: Connected RemoteClient
            config: Deploy configuration
            sink: Receives streamed remote output
            pipeline: Deploy pipeline for the Redeploy stage (built from config if None)
            on_stage: Callback when a stage starts
        """
        self.client = client
        self.config = config
        self.sink = sink or LoggerSink()
        self.pipeline = pipeline or DeployPipeline(client, config, self.sink)
        self.on_stage = on_stage
    
    def _policy(self, stage: Stage) -> ErrorPolicy:
        if stage is Stage.SHOWLOG:
            return ErrorPolicy.BEST_EFFORT
        return ErrorPolicy.FATAL
    
    def _stage_action(self, stage: Stage) -> Callable[[], None]:
        cfg = self.config
        if stage is Stage.REDEPLOY:
            return self.pipeline.run
        
        explicit, script = {
            Stage.SHUTDOWN: (cfg.shutdown_cmd, SHUTDOWN_SCRIPT),
            Stage.STARTUP: (cfg.startup_cmd, STARTUP_SCRIPT),
            Stage.SHOWLOG: (cfg.showlog_cmd, SHOWLOG_SCRIPT),
        }[stage]
        cmd = resolve_stage_command(explicit, script)
        return lambda: self.client.exec_streamed(cmd, self.sink)
    
    def run(self) -> RestartResult:
        """
        Run all four stages.
        
        Returns:
            RestartResult listing completed stages and ignored errors
        
        Raises:
            RdeployError: Failure in Shutdown, Redeploy or Startup
        """
        result = RestartResult()
        
        for stage in Stage:
            if self.on_stage:
                self.on_stage(stage)
            logger.info(f"[{stage.value}] starting")
            
            failed: List[Exception] = []
            run_guarded(
                self._policy(stage),
                f"Stage {stage.value}",
                self._stage_action(stage),
                on_error=failed.append,
            )
            if failed:
                result.ignored_errors.append(f"{stage.value}: {failed[0]}")
            else:
                result.completed.append(stage)
        
        return result


class DeployWorkflow:
    """
    Redeploy, then run the configured shutdown command if there is one.
    
    Shutdown here runs after the deploy and has no fallback script.
    """
    
    def __init__(
        self,
        client: RemoteClient,
        config: DeployConfig,
        sink: Optional[OutputSink] = None,
        pipeline: Optional[DeployPipeline] = None,
    ):
        self.client = client
        self.config = config
        self.sink = sink or LoggerSink()
        self.pipeline = pipeline or DeployPipeline(client, config, self.sink)
    
    def run(self) -> None:
        self.pipeline.run()
        
        cmd = self.config.shutdown_cmd
        if cmd and cmd.strip():
            self.client.exec_streamed(f"sh {cmd.strip()}", self.sink)
            logger.info(f"Ran shutdown command: {cmd.strip()}")
