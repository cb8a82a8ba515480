"""
Console interface with Rich components.
"""

from typing import List, Optional
from rich.console import Console
from rich.panel import Panel
from rich.prompt import Prompt, Confirm, IntPrompt
from rich.theme import Theme
from rich.markup import escape
from rich import box

from ..config.settings import Settings


class CommitAIConsole:
    """Terminal output and interactive prompts for commit-ai."""

    def __init__(self, settings: Settings, console: Optional[Console] = None):
        """Initialize console with settings."""
        self.settings = settings
        self._setup_styles()
        if console is None:
            console = Console(
                color_system="auto" if settings.ui.use_colors else None,
                theme=self.theme
            )
        else:
            console.push_theme(self.theme)
        self.console = console

    def _setup_styles(self) -> None:
        """Setup custom styles for consistent theming."""
        self.styles = {
            "success": "bold green",
            "warning": "bold yellow",
            "error": "bold red",
            "info": "blue",
            "commit_type": "bold magenta",
        }

        self.theme = Theme(self.styles)

    def print_banner(self) -> None:
        """Print application banner."""
        from .. import __version__

        banner = Panel.fit(
            f"[bold blue]commit-ai v{__version__}[/bold blue]\n"
            "[dim]AI-drafted git commit messages[/dim]",
            box=box.ROUNDED,
            style="blue"
        )
        self.console.print(banner)
        self.console.print()

    def show_ai_backend_info(self, model: str, api_url: str, branch: Optional[str] = None) -> None:
        """Show which model drafts the messages and where commits land."""
        lines = f"Model: [cyan]{model}[/cyan] @ {api_url}"
        if branch:
            lines += f"\nBranch: [bold]{branch}[/bold]"
        self.console.print(Panel(lines, title="commit-ai", box=box.ROUNDED, style="blue"))
        self.console.print()

    def _format_message(self, message: str) -> str:
        """Highlight the conventional-commit prefix, if there is one."""
        if ':' in message:
            prefix, description = message.split(':', 1)
            return f"[commit_type]{escape(prefix.strip())}[/commit_type]: {escape(description.strip())}"
        return escape(message)

    def show_commit_message_preview(self, message: str) -> None:
        """Show commit message preview."""
        message_panel = Panel(
            self._format_message(message),
            title="Commit Message",
            box=box.ROUNDED,
            style="green"
        )
        self.console.print(message_panel)
        self.console.print()

    def show_candidates(self, candidates: List[str]) -> None:
        """List the generated candidates with their selection numbers."""
        self.console.print("[bold blue]Generated commit messages:[/bold blue]")
        for i, candidate in enumerate(candidates, 1):
            self.console.print(f"  [bold cyan]{i}.[/bold cyan] {self._format_message(candidate)}")
        self.console.print()

    def choose_message(self, candidates: List[str]) -> str:
        """Ask the user to pick one of the candidates and return it verbatim."""
        self.show_candidates(candidates)
        choice = IntPrompt.ask(
            "Select a commit message",
            choices=[str(i) for i in range(1, len(candidates) + 1)],
            console=self.console
        )
        return candidates[choice - 1]

    def confirm_push(self) -> bool:
        """Ask whether the new commit should be pushed."""
        return Confirm.ask("Do you want to push the changes?", console=self.console)

    def collect_credential(self) -> str:
        """Read the API token with masked input until something non-empty is typed."""
        while True:
            token = Prompt.ask(
                "Enter your OpenAI API token",
                password=True,
                console=self.console
            )
            if token:
                return token
            self.print_error("Token cannot be empty")

    def show_progress_spinner(self, description: str):
        """Create a progress spinner context manager."""
        return self.console.status(f"[blue]{description}...[/blue]", spinner="dots")

    def print_success(self, message: str) -> None:
        """Print success message."""
        self.console.print(f"[success]✓ {escape(message)}[/success]")

    def print_warning(self, message: str) -> None:
        """Print warning message."""
        self.console.print(f"[warning]⚠ {escape(message)}[/warning]")

    def print_error(self, message: str) -> None:
        """Print error message."""
        self.console.print(f"[error]✗ {escape(message)}[/error]")

    def print_info(self, message: str) -> None:
        """Print info message."""
        self.console.print(f"[info]ℹ {escape(message)}[/info]")
