"""
Deploy domain models
"""
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Optional, List

from ...core.client import ConnectionParams


@dataclass(frozen=True)
class PathsConfig:
    """Local and remote directory roles"""
    local_apps: str
    local_cfg_home: str
    remote_apps: str
    remote_cfg_home: str
    file_target_dir: str
    scratch_dir: Optional[str] = None


@dataclass(frozen=True)
class MavenConfig:
    """Maven installation used by the settings swap"""
    maven_home: str


@dataclass(frozen=True)
class DeployConfig:
    """
    Everything a deploy run needs.

    Attributes:
        ssh: Connection parameters for the remote host
        paths: Directory roles
        shutdown_cmd: Explicit shutdown command (fallback: shutdown.sh)
        startup_cmd: Explicit startup command (fallback: startup.sh)
        showlog_cmd: Explicit log command (fallback: showLogs.sh)
        source: Path of the configuration file that was loaded
    """
    ssh: ConnectionParams
    paths: PathsConfig
    shutdown_cmd: Optional[str] = None
    startup_cmd: Optional[str] = None
    showlog_cmd: Optional[str] = None
    source: Optional[Path] = None


class Stage(Enum):
    """Restart workflow stages, in execution order"""
    SHUTDOWN = "shutdown"
    REDEPLOY = "redeploy"
    STARTUP = "startup"
    SHOWLOG = "showlog"


@dataclass
class RestartResult:
    """
    Outcome of a restart run that did not abort.

    Attributes:
        completed: Stages that finished without error
        ignored_errors: Messages of best-effort failures (ShowLog)
    """
    completed: List[Stage] = field(default_factory=list)
    ignored_errors: List[str] = field(default_factory=list)

    @property
    def success(self) -> bool:
        return Stage.STARTUP in self.completed
