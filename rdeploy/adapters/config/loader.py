"""
deploy.toml discovery and layered loading (TOML < env < CLI)
"""
import os
import sys
import tomllib
from pathlib import Path
from typing import Dict, Any, Optional, List, Tuple

from ...core.constants import CONFIG_FILE_NAME, ENV_PREFIX
from ...core.exceptions import ConfigError


def candidate_config_paths(explicit: Optional[Path] = None) -> List[Path]:
    """
    Where to look for deploy.toml, in order.
    
    An explicit path is the only candidate. Otherwise the current working
    directory is tried first, then the directory of the running executable.
    """
    if explicit:
        return [Path(explicit).expanduser()]
    
    candidates = [Path.cwd() / CONFIG_FILE_NAME]
    exe_dir = Path(sys.argv[0]).resolve().parent if sys.argv and sys.argv[0] else None
    if exe_dir and exe_dir / CONFIG_FILE_NAME not in candidates:
        candidates.append(exe_dir / CONFIG_FILE_NAME)
    return candidates


def locate_config(explicit: Optional[Path] = None) -> Path:
    """
    Find the configuration file.
    
    Raises:
        ConfigError: No candidate exists
    """
    candidates = candidate_config_paths(explicit)
    for path in candidates:
        if path.is_file():
            return path
    
    searched = ", ".join(str(p) for p in candidates)
    raise ConfigError(f"Configuration file {CONFIG_FILE_NAME} not found (searched: {searched})")


# RDEPLOY_<NAME> -> ([section], key, type)
ENV_OVERRIDES: Dict[str, Tuple[str, str, type]] = {
    "HOST": ("ssh", "host", str),
    "PORT": ("ssh", "port", int),
    "USERNAME": ("ssh", "username", str),
    "PASSWORD": ("ssh", "password", str),
    "TIMEOUT": ("ssh", "timeout_secs", int),
    "KEY_FILE": ("ssh", "key_file", str),
    "MAVEN_HOME": ("maven", "maven_home", str),
}


class ConfigLoader:
    """deploy.toml loader with environment and CLI overrides"""
    
    def __init__(self, env_prefix: str = ENV_PREFIX):
        self._env_prefix = env_prefix
    
    def load_toml(self, path: Path) -> Dict[str, Any]:
        """Parse a TOML file into a nested dict"""
        try:
            with open(path, "rb") as f:
                return tomllib.load(f)
        except FileNotFoundError as e:
            raise ConfigError(f"Configuration file not found: {path}") from e
        except (OSError, tomllib.TOMLDecodeError) as e:
            raise ConfigError(f"Failed to parse TOML configuration {path}: {e}") from e
    
    def load_env(self) -> Dict[str, Any]:
        """Collect RDEPLOY_* overrides; unset or empty variables are skipped"""
        config: Dict[str, Any] = {}
        for name, (section, key, kind) in ENV_OVERRIDES.items():
            env_key = self._env_prefix + name
            value = os.getenv(env_key)
            if not value:
                continue
            if kind is int:
                try:
                    value = int(value)
                except ValueError as e:
                    raise ConfigError(f"Expected an integer in {env_key}, got {value!r}") from e
            config.setdefault(section, {})[key] = value
        return config
    
    def load(
        self,
        toml_path: Optional[Path] = None,
        cli_overrides: Optional[Dict[str, Any]] = None,
        use_env: bool = True,
    ) -> Dict[str, Any]:
        """
        Build the effective deploy configuration.
        
        Layers, lowest first: deploy.toml, RDEPLOY_* variables, ``cli_overrides``.
        """
        cfg = self.load_toml(toml_path) if toml_path else {}
        if use_env:
            cfg = overlay(cfg, self.load_env())
        return overlay(cfg, cli_overrides or {})


def overlay(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """
    Apply ``override`` on top of ``base`` without mutating either.
    
    Tables ([ssh], [paths], [maven]) are merged key by key; top-level
    values such as shutdown_cmd are replaced outright.
    """
    merged = dict(base)
    for key, value in override.items():
        section = merged.get(key)
        if isinstance(section, dict) and isinstance(value, dict):
            merged[key] = overlay(section, value)
        else:
            merged[key] = value
    return merged
