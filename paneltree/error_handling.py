"""
Error display and logging setup for the paneltree CLI.

The engine raises PanelTreeError subclasses; this module turns them into
Rich panels on stderr and a non-zero exit code, and configures logging.
"""

import logging
import sys
from pathlib import Path
from typing import Any, Dict, Optional

import typer
from rich.console import Console
from rich.panel import Panel
from rich.text import Text

from .config.constants import LOG_FILE_NAME
from .config.settings import get_config_dir, get_env_var
from .exceptions import BoundaryPolicyError, InvariantViolationError, PanelTreeError

# Console for error display
console = Console(stderr=True)

# Package logger; module loggers propagate into it
logger = logging.getLogger("paneltree")


def setup_logging(
    verbose: bool = False,
    quiet: bool = False,
    log_file: Optional[Path] = None,
) -> None:
    """
    Set up logging for paneltree

    Args:
        verbose: Enable verbose (DEBUG) logging on the console
        quiet: Only show errors on the console
        log_file: Optional log file path (defaults to ~/.config/paneltree/paneltree.log)
    """
    if verbose:
        console_level = logging.DEBUG
    elif quiet:
        console_level = logging.ERROR
    else:
        level_name = get_env_var("PANELTREE_LOG_LEVEL") or "warning"
        console_level = getattr(logging, level_name.upper())

    detailed_formatter = logging.Formatter(
        "%(asctime)s | %(name)s | %(levelname)s | %(funcName)s:%(lineno)d | %(message)s"
    )
    simple_formatter = logging.Formatter("%(levelname)s: %(message)s")

    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.setLevel(logging.DEBUG)

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(console_level)
    console_handler.setFormatter(simple_formatter)
    logger.addHandler(console_handler)

    if log_file is None:
        log_file = get_config_dir() / LOG_FILE_NAME

    try:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(detailed_formatter)
        logger.addHandler(file_handler)
    except OSError as e:
        # If we can't create log file, continue without it
        if verbose:
            console.print(f"[yellow]Warning: Could not create log file {log_file}: {e}[/yellow]")


def _title_for(error: PanelTreeError) -> str:
    if isinstance(error, BoundaryPolicyError):
        return "Refused"
    if isinstance(error, InvariantViolationError):
        return "Invalid Layout"
    return "Error"


def display_error(error: PanelTreeError, show_details: bool = False) -> None:
    """Display a PanelTreeError in a Rich panel."""
    message = Text()
    message.append(error.message, style="bold red")
    if show_details and error.context:
        details = "\n".join(f"- {k}: {v}" for k, v in error.context.items())
        message.append(f"\n\nDetails:\n{details}", style="dim red")
    message.append(f"\n[{error.code}]", style="dim")

    console.print(
        Panel(
            message,
            title=f"[bold]{_title_for(error)}[/bold]",
            title_align="left",
            border_style="red",
            padding=(0, 1),
        )
    )


def handle_error(
    error: Exception,
    operation: str = "unknown",
    context: Optional[Dict[str, Any]] = None,
    show_details: bool = False,
) -> None:
    """
    Log and display an error, then exit with code 1

    Args:
        error: The exception to handle
        operation: Description of the operation that failed
        context: Additional context for logging
        show_details: Whether to show error context to the user
    """
    context = context or {}

    if isinstance(error, PanelTreeError):
        logger.error(f"{operation}: {error}", extra={"operation": operation, **context})
        display_error(error, show_details)
    else:
        logger.error(f"Unexpected error during {operation}: {error}", exc_info=True)
        display_error(
            PanelTreeError(f"An unexpected error occurred during {operation}", error=str(error)),
            show_details=True,
        )

    raise typer.Exit(1)
