"""
Helpers shared by CLI commands
"""
import dataclasses
from contextlib import contextmanager
from pathlib import Path
from typing import Optional, Iterator

import typer
from rich.markup import escape

from ...core.exceptions import RdeployError, ConfigError
from ...core.logging import get_logger, get_stderr_console
from ...domain.deploy import DeployConfig
from ..config.loader import ConfigLoader, locate_config
from ..config.deploy_parser import parse_deploy_config
from .prompts import RichPromptProvider

logger = get_logger(__name__)
stderr_console = get_stderr_console()


def config_path_option(ctx: typer.Context) -> Optional[Path]:
    """--config value given to the main callback"""
    return (ctx.obj or {}).get("config_path")


def load_deploy_config(config_path: Optional[Path] = None) -> DeployConfig:
    """
    Locate, load and parse the deploy configuration.
    
    Raises:
        ConfigError: File missing, unparsable or incomplete
    """
    path = locate_config(config_path)
    cfg = ConfigLoader().load(toml_path=path)
    logger.debug(f"Loaded configuration from {path}")
    return parse_deploy_config(cfg, source=path)


def ensure_credentials(
    config: DeployConfig,
    prompt_provider: Optional[RichPromptProvider] = None,
) -> DeployConfig:
    """Ask for the SSH password when neither password nor key file is configured"""
    ssh = config.ssh
    if ssh.password or ssh.key_file:
        return config
    
    prompt_provider = prompt_provider or RichPromptProvider()
    password = prompt_provider.ask_password(ssh)
    if not password:
        raise ConfigError("No SSH password or key_file configured")
    return dataclasses.replace(config, ssh=dataclasses.replace(ssh, password=password))


@contextmanager
def report_errors(action: str) -> Iterator[None]:
    """Turn errors into a printed diagnostic and exit code 1"""
    try:
        yield
    except ConfigError as e:
        stderr_console.print(f"[red]Config Error:[/red] {escape(str(e))}")
        raise typer.Exit(1)
    except RdeployError as e:
        stderr_console.print(f"[red]{action} failed:[/red] {escape(str(e))}")
        raise typer.Exit(1)
    except Exception as e:
        logger.exception(f"{action} failed")
        stderr_console.print(f"[red]Error:[/red] {action} failed: {escape(str(e))}")
        raise typer.Exit(1)
