"""
Maven settings domain module
"""
from .settings import resolve_maven_home, profile_settings_path, switch_settings

__all__ = [
    "resolve_maven_home",
    "profile_settings_path",
    "switch_settings",
]
