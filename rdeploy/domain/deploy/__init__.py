"""
Deploy domain module
"""
from .models import PathsConfig, MavenConfig, DeployConfig, Stage, RestartResult
from .archiver import archive_directory
from .pipeline import DeployPipeline, deploy_assets, build_unpack_command
from .workflow import RestartWorkflow, DeployWorkflow, resolve_stage_command

__all__ = [
    "PathsConfig",
    "MavenConfig",
    "DeployConfig",
    "Stage",
    "RestartResult",
    "archive_directory",
    "DeployPipeline",
    "deploy_assets",
    "build_unpack_command",
    "RestartWorkflow",
    "DeployWorkflow",
    "resolve_stage_command",
]
