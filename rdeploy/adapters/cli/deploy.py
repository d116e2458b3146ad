"""
Deploy and restart CLI commands
"""
import typer

from ...core.interfaces import LoggerSink
from ...core.logging import get_logger, get_stdout_console
from ...domain.deploy import DeployWorkflow, RestartWorkflow, Stage
from .common import config_path_option, load_deploy_config, ensure_credentials, report_errors
from .connection import RemoteConnectionFactory

logger = get_logger(__name__)
stdout_console = get_stdout_console()


def register_deploy_commands(app: typer.Typer) -> None:
    """Register deploy and restart on the main app"""
    app.command(name="deploy")(deploy_run)
    app.command(name="restart")(restart_run)


def _connect(config):
    params = config.ssh
    client = RemoteConnectionFactory().create(params)
    stdout_console.print(
        f"[green]✓[/green] Connected to [cyan]{params.username}@{params.host}:{params.port}[/cyan]"
    )
    return client


def deploy_run(ctx: typer.Context):
    """
    Pack, upload and unpack apps and config home, then run shutdown_cmd if configured
    
    Examples:
        rdeploy deploy
        rdeploy --config ./staging.toml deploy
    """
    with report_errors("Deploy"):
        config = ensure_credentials(load_deploy_config(config_path_option(ctx)))
        with _connect(config) as client:
            DeployWorkflow(client, config, LoggerSink()).run()
        stdout_console.print("[green]✓[/green] Deploy completed successfully")


def restart_run(ctx: typer.Context):
    """
    Shutdown, redeploy, startup, then show logs
    
    Examples:
        rdeploy restart
    """
    def on_stage(stage: Stage) -> None:
        stdout_console.print(f"[cyan]▶[/cyan] {stage.value}")
    
    with report_errors("Restart"):
        config = ensure_credentials(load_deploy_config(config_path_option(ctx)))
        with _connect(config) as client:
            result = RestartWorkflow(client, config, LoggerSink(), on_stage=on_stage).run()
        for message in result.ignored_errors:
            stdout_console.print(f"[yellow]⊘[/yellow] Ignored: {message}")
        stdout_console.print("[green]✓[/green] Restart completed successfully")
