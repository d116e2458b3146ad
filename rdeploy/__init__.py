"""
rdeploy - remote deployment over SSH

Packs local application and configuration trees, uploads them to a remote
host and drives the remote lifecycle:
- Deploy (archive → upload → unpack, optional shutdown)
- Restart (shutdown → deploy → startup → show logs)
- Local change detection (content digests, changed files staged into temp/)
- Maven settings.xml profile switching
"""

__version__ = "0.1.0"

from .core import (
    RemoteClient,
    ConnectionParams,
    OutputSink,
    LoggerSink,
    ErrorPolicy,
    run_guarded,
)

from .domain.deploy import (
    DeployConfig,
    PathsConfig,
    Stage,
    RestartResult,
    archive_directory,
    DeployPipeline,
    deploy_assets,
    RestartWorkflow,
    DeployWorkflow,
    resolve_stage_command,
)

from .domain.changes import (
    ChangeDetector,
    ChangeReport,
    detect_changes,
    detect_and_stage,
)

__all__ = [
    # Version
    "__version__",
    # Transport
    "RemoteClient",
    "ConnectionParams",
    "OutputSink",
    "LoggerSink",
    "ErrorPolicy",
    "run_guarded",
    # Deploy
    "DeployConfig",
    "PathsConfig",
    "Stage",
    "RestartResult",
    "archive_directory",
    "DeployPipeline",
    "deploy_assets",
    "RestartWorkflow",
    "DeployWorkflow",
    "resolve_stage_command",
    # Change detection
    "ChangeDetector",
    "ChangeReport",
    "detect_changes",
    "detect_and_stage",
]
