"""
Change detection CLI command
"""
import sys
from typing import Optional

import typer

from ...core.constants import DIGEST_CACHE_NAME
from ...core.logging import get_logger, get_stdout_console
from ...domain.changes import ChangeDetector
from ...infrastructure.state import DigestCacheStore
from .common import config_path_option, load_deploy_config, report_errors

logger = get_logger(__name__)
stdout_console = get_stdout_console()


def register_file_command(app: typer.Typer) -> None:
    """Register file command on the main app"""
    app.command(name="file")(file_run)


def file_run(
    ctx: typer.Context,
    open_dir: Optional[bool] = typer.Option(
        None, "--open/--no-open", help="Open the staging directory when done (default: on macOS)"
    ),
):
    """
    Copy files changed since the last run into {file_target_dir}/temp
    
    Examples:
        rdeploy file
        rdeploy file --no-open
    """
    with report_errors("File change detection"):
        config = load_deploy_config(config_path_option(ctx))
        cache_file = config.source.parent / DIGEST_CACHE_NAME
        
        detector = ChangeDetector(config.paths.file_target_dir, DigestCacheStore(cache_file))
        report = detector.run()
        
        stdout_console.print(
            f"[green]✓[/green] {report.count} changed file(s) staged in [cyan]{report.staging_dir}[/cyan]"
        )
    
    if open_dir is None:
        open_dir = sys.platform == "darwin"
    if open_dir:
        typer.launch(str(report.staging_dir))
