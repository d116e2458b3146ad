"""
Deploy configuration parser
"""
from pathlib import Path
from typing import Dict, Any, Optional

from ...core.client import ConnectionParams
from ...core.constants import DEFAULT_SSH_PORT
from ...core.exceptions import ConfigError
from ...domain.deploy import DeployConfig, PathsConfig, MavenConfig

REQUIRED_PATH_KEYS = (
    "local_apps",
    "local_cfg_home",
    "remote_apps",
    "remote_cfg_home",
    "file_target_dir",
)


def _section(cfg: Dict[str, Any], name: str) -> Dict[str, Any]:
    section = cfg.get(name)
    if not isinstance(section, dict):
        raise ConfigError(f"Missing [{name}] section")
    return section


def _optional_str(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = str(value)
    return text if text.strip() else None


def parse_connection_params(cfg: Dict[str, Any]) -> ConnectionParams:
    """Parse the [ssh] section"""
    ssh = _section(cfg, "ssh")
    
    for key in ("host", "username"):
        if not ssh.get(key):
            raise ConfigError(f"Missing ssh.{key}")
    
    try:
        port = int(ssh.get("port", DEFAULT_SSH_PORT))
        timeout = ssh.get("timeout_secs")
        timeout = int(timeout) if timeout is not None else None
    except (TypeError, ValueError) as e:
        raise ConfigError(f"Invalid ssh.port or ssh.timeout_secs: {e}") from e
    
    return ConnectionParams(
        host=str(ssh["host"]),
        username=str(ssh["username"]),
        password=ssh.get("password"),
        port=port,
        timeout_secs=timeout,
        key_file=_optional_str(ssh.get("key_file")),
    )


def parse_paths(cfg: Dict[str, Any]) -> PathsConfig:
    """Parse the [paths] section"""
    paths = _section(cfg, "paths")
    
    missing = [key for key in REQUIRED_PATH_KEYS if not paths.get(key)]
    if missing:
        raise ConfigError(f"Missing paths.{', paths.'.join(missing)}")
    
    return PathsConfig(
        scratch_dir=_optional_str(paths.get("scratch_dir")),
        **{key: str(paths[key]) for key in REQUIRED_PATH_KEYS},
    )


def parse_maven_config(cfg: Dict[str, Any]) -> Optional[MavenConfig]:
    """Parse the optional [maven] section"""
    maven = cfg.get("maven")
    if isinstance(maven, dict) and _optional_str(maven.get("maven_home")):
        return MavenConfig(maven_home=str(maven["maven_home"]))
    return None


def parse_deploy_config(cfg: Dict[str, Any], source: Optional[Path] = None) -> DeployConfig:
    """
    Build a DeployConfig from a merged configuration dictionary.
    
    Raises:
        ConfigError: Required sections or keys are missing
    """
    return DeployConfig(
        ssh=parse_connection_params(cfg),
        paths=parse_paths(cfg),
        shutdown_cmd=_optional_str(cfg.get("shutdown_cmd")),
        startup_cmd=_optional_str(cfg.get("startup_cmd")),
        showlog_cmd=_optional_str(cfg.get("showlog_cmd")),
        source=source,
    )
