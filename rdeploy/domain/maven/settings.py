"""
Maven settings.xml profile switching
"""
import os
import shutil
from pathlib import Path
from typing import Optional, Union

from ...core.constants import MAVEN_HOME_ENV_VARS
from ...core.exceptions import ConfigError, FsError
from ...core.logging import get_logger

logger = get_logger(__name__)


def resolve_maven_home(configured: Optional[str] = None) -> Path:
    """
    Maven home from configuration, else from MAVEN_HOME / M2_HOME.
    
    Raises:
        ConfigError: No Maven home available
    """
    if configured:
        return Path(configured).expanduser()
    
    for var in MAVEN_HOME_ENV_VARS:
        value = os.getenv(var)
        if value:
            return Path(value).expanduser()
    
    raise ConfigError(
        "Maven home not configured: set [maven] maven_home or MAVEN_HOME"
    )


def profile_settings_path(maven_home: Path, profile: Optional[str] = None) -> Path:
    """Stored settings file for a profile (conf/settings/settings[-profile].xml)"""
    name = f"settings-{profile}.xml" if profile else "settings.xml"
    return maven_home / "conf" / "settings" / name


def switch_settings(maven_home: Union[str, Path], profile: Optional[str] = None) -> Path:
    """
    Replace conf/settings.xml with the stored settings of ``profile``.
    
    Args:
        maven_home: Maven installation directory
        profile: Profile name, None selects the default settings.xml
    
    Returns:
        Source file that was copied
    
    Raises:
        FsError: Source missing or target not replaceable
    """
    maven_home = Path(maven_home)
    target = maven_home / "conf" / "settings.xml"
    source = profile_settings_path(maven_home, profile)
    
    if not source.is_file():
        raise FsError(f"Settings file does not exist: {source}")
    
    try:
        if target.exists():
            target.unlink()
            logger.info(f"Removed {target}")
        shutil.copyfile(source, target)
    except OSError as e:
        raise FsError(f"Failed to copy {source} → {target}: {e}") from e
    
    logger.info(f"Switched Maven settings to {source.name}")
    return source
