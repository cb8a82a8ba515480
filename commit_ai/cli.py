"""
CLI interface using Typer with Rich integration.
"""

import asyncio
import sys
from pathlib import Path
from typing import Optional
import typer
from rich.console import Console
from rich.markup import escape
from loguru import logger

from .core import CommitAI
from .config.settings import Settings
from .config.credentials import CredentialStore
from .exceptions import CommitAIError
from .ui.console import CommitAIConsole


# Create Typer app
app = typer.Typer(
    name="commit-ai",
    help="Draft git commit messages with OpenAI, then commit and push",
    add_completion=False,
    rich_markup_mode="rich",
    no_args_is_help=True
)

set_app = typer.Typer(help="Store commit-ai settings", no_args_is_help=True)
app.add_typer(set_app, name="set")

# Global console for error handling
console = Console()


def setup_logging(log_level: str = "WARNING", log_file: Optional[Path] = None):
    """Setup logging configuration."""
    logger.remove()  # Remove default handler

    # Console logging with colors; tracebacks go to the log file only
    logger.add(
        sys.stderr,
        level=log_level,
        format="<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | <cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>",
        filter=lambda record: not record["extra"].get("file_only"),
        colorize=True
    )

    # File logging
    if log_file:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        logger.add(
            log_file,
            level="DEBUG",
            format="{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function}:{line} - {message}",
            rotation="1 MB",
            retention="7 days"
        )


def _version_callback(value: bool):
    if value:
        from . import __version__
        console.print(f"[bold blue]commit-ai[/bold blue] version [green]{__version__}[/green]")
        raise typer.Exit()


@app.callback()
def main_callback(
    ctx: typer.Context,
    verbose: bool = typer.Option(
        False, "--verbose", "-v",
        help="Enable verbose logging"
    ),
    debug: bool = typer.Option(
        False, "--debug", "-d",
        help="Enable debug logging (includes verbose)"
    ),
    repo_path: Optional[Path] = typer.Option(
        None, "--repo", "-r",
        help="Git repository path (default: current directory)"
    ),
    version: bool = typer.Option(
        False, "--version",
        help="Show version information",
        callback=_version_callback,
        is_eager=True
    )
):
    """
    Draft git commit messages with OpenAI, then commit and push.

    [bold blue]Examples:[/bold blue]

    [green]commit-ai set token[/green]                    # Store your OpenAI API token
    [green]commit-ai start[/green]                        # Pick from generated messages
    [green]commit-ai start --auto[/green]                 # Use the first generated message
    [green]commit-ai --debug start[/green]                # Full debug logging
    """
    settings = Settings()

    # Debug overrides verbose
    if debug:
        log_level = "DEBUG"
    elif verbose:
        log_level = "INFO"
    else:
        log_level = settings.ui.log_level
    setup_logging(log_level, settings.log_file)

    ctx.obj = {"settings": settings, "repo_path": repo_path}


@set_app.command("token")
def set_token(ctx: typer.Context):
    """Set the OpenAI API token."""
    settings: Settings = ctx.obj["settings"]
    ui = CommitAIConsole(settings)

    try:
        token = ui.collect_credential()
        CredentialStore(settings.credentials_file).save(token)
    except OSError as e:
        console.print(f"[red]Error:[/red] Could not save token: {escape(str(e))}")
        raise typer.Exit(1)

    ui.print_success("OpenAI API token set successfully!")


@app.command()
def start(
    ctx: typer.Context,
    auto: bool = typer.Option(
        False, "--auto",
        help="Auto-select commit message without asking"
    )
):
    """
    Start the commit process.

    [bold blue]Examples:[/bold blue]

    [green]commit-ai start[/green]                        # Choose a message interactively
    [green]commit-ai start --auto[/green]                 # Take the first suggestion
    """
    asyncio.run(_run_start(ctx.obj["settings"], ctx.obj["repo_path"], auto))


async def _run_start(settings: Settings, repo_path: Optional[Path], auto: bool):
    """Run start command."""
    try:
        commit_ai = CommitAI(settings, repo_path)
        commit_ai.console.print_banner()
        commit_ai.console.show_ai_backend_info(
            commit_ai.ai_backend.model,
            commit_ai.ai_backend.api_url,
            commit_ai.git_repo.current_branch
        )

        final_state = await commit_ai.run_start(auto)
        logger.info(f"Workflow finished in state {final_state.value}")

    except CommitAIError as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(1)
    except KeyboardInterrupt:
        console.print("\n[yellow]Operation cancelled by user[/yellow]")
        raise typer.Exit(130)
    except Exception as e:
        logger.bind(file_only=True).exception("Unexpected error occurred")
        console.print(f"[red]Unexpected error:[/red] {escape(str(e))}")
        raise typer.Exit(1)

    if final_state.is_failure:
        raise typer.Exit(1)


def main():
    """Main entry point for the CLI."""
    try:
        app()
    except KeyboardInterrupt:
        console.print("\n[yellow]Interrupted by user[/yellow]")
        sys.exit(130)


if __name__ == "__main__":
    main()
