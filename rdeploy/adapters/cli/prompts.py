"""
Interactive credential prompt
"""
from typing import Optional

from rich.console import Console
from rich.markup import escape
from rich.prompt import Prompt

from ...core.client import ConnectionParams
from ...core.logging import get_stderr_console


class RichPromptProvider:
    """Ask for missing SSH credentials on the terminal"""
    
    def __init__(self, console: Optional[Console] = None):
        # stdout stays clean for command results
        self.console = console or get_stderr_console()
    
    def ask_password(self, params: ConnectionParams) -> str:
        """Hidden password prompt for ``params``; empty string when the user just hits enter"""
        target = escape(f"{params.username}@{params.host}:{params.port}")
        return Prompt.ask(
            f"SSH password for [cyan]{target}[/cyan]",
            password=True,
            default="",
            show_default=False,
            console=self.console,
        )
