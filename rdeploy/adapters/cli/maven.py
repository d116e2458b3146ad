"""
Maven settings CLI command
"""
from pathlib import Path
from typing import Optional

import typer

from ...core.exceptions import ConfigError
from ...core.logging import get_logger, get_stdout_console
from ...domain.maven import resolve_maven_home, switch_settings
from ..config.loader import ConfigLoader, locate_config
from ..config.deploy_parser import parse_maven_config
from .common import config_path_option, report_errors

logger = get_logger(__name__)
stdout_console = get_stdout_console()


def register_maven_command(app: typer.Typer) -> None:
    """Register mvn command on the main app"""
    app.command(name="mvn")(mvn_run)


def _configured_maven_home(config_path: Optional[Path]) -> Optional[str]:
    """[maven] maven_home from deploy.toml or RDEPLOY_MAVEN_HOME; the file is optional here"""
    try:
        path = locate_config(config_path)
    except ConfigError:
        if config_path:
            raise
        path = None
    
    maven = parse_maven_config(ConfigLoader().load(toml_path=path))
    return maven.maven_home if maven else None


def mvn_run(
    ctx: typer.Context,
    profile: Optional[str] = typer.Argument(
        None, help="Settings profile (e.g. yjd uses settings-yjd.xml); default settings.xml"
    ),
):
    """
    Switch Maven conf/settings.xml to a stored profile
    
    Examples:
        rdeploy mvn
        rdeploy mvn yjd
    """
    with report_errors("Maven settings switch"):
        maven_home = resolve_maven_home(_configured_maven_home(config_path_option(ctx)))
        source = switch_settings(maven_home, profile)
        label = profile or "default"
        stdout_console.print(
            f"[green]✓[/green] Switched Maven settings to [cyan]{label}[/cyan] (from {source.name})"
        )
