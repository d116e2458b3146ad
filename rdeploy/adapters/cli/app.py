"""
Main CLI application
"""
import typer
from pathlib import Path
from typing import Optional

from ...core.logging import setup_logging, get_logger
from .deploy import register_deploy_commands, deploy_run
from .files import register_file_command
from .maven import register_maven_command

logger = get_logger(__name__)

# Create main app
app = typer.Typer(
    name="rdeploy",
    add_completion=False,
    help="Remote deployment tool: pack, upload, unpack and restart over SSH",
    rich_markup_mode="rich",
)

register_deploy_commands(app)
register_file_command(app)
register_maven_command(app)


@app.callback(invoke_without_command=True)
def main(
    ctx: typer.Context,
    config: Optional[Path] = typer.Option(
        None,
        "--config",
        "-c",
        help="Configuration file (default: ./deploy.toml, then next to the executable)",
    ),
    log_level: str = typer.Option(
        "INFO",
        "--log-level",
        "-l",
        help="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
    ),
    log_file: Optional[Path] = typer.Option(
        None,
        "--log-file",
        help="Log file path",
    ),
):
    """
    rdeploy - remote deployment tool
    
    Subcommands:
    - deploy: pack → upload → unpack (default when no command is given)
    - restart: shutdown → deploy → startup → show logs
    - file: stage locally changed files into temp/
    - mvn: switch Maven settings.xml profile
    """
    setup_logging(level=log_level, log_file=log_file)
    ctx.obj = {"config_path": config}
    
    if ctx.invoked_subcommand is None:
        deploy_run(ctx)


def run():
    """CLI entry point"""
    app()


if __name__ == "__main__":
    run()
