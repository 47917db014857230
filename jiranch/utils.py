"""
Utility functions for jiranch
"""

import logging
import os
from pathlib import Path
from typing import Optional

from rich.console import Console
from rich.markup import escape

console = Console()
err_console = Console(stderr=True)

APP_NAME = "jiranch"


def get_default_config_dir() -> Path:
    """
    Get the default jiranch data directory (~/.local/share/jiranch).

    Only resolves the path; nothing is created here.
    """
    return Path.home() / ".local" / "share" / APP_NAME


def ensure_private_dir(path: Path) -> Path:
    """
    Create a directory readable only by its owner.

    Existing directories are tightened to 0700 as well.
    """
    path.mkdir(mode=0o700, parents=True, exist_ok=True)
    os.chmod(path, 0o700)
    return path


def expand_path(path: str) -> Path:
    """
    Expand a path with ~ and environment variables.
    """
    expanded = os.path.expanduser(os.path.expandvars(path))
    return Path(expanded).resolve()


def get_log_path(config_dir: Path) -> Path:
    """Get the path to the jiranch error log."""
    return config_dir / "logs" / f"{APP_NAME}.log"


def setup_logging(config_dir: Optional[Path] = None, verbose: bool = False) -> logging.Logger:
    """
    Configure the "jiranch" logger.

    Errors are appended to <config_dir>/logs/jiranch.log when the data
    directory already exists; the file is only created on the first error.
    With verbose, debug output is also written to stderr.

    Args:
        config_dir: Data directory holding the logs folder (no file log if None
                or missing)
        verbose: Emit debug messages on stderr

    Returns:
        The configured package logger
    """
    logger = logging.getLogger(APP_NAME)
    logger.setLevel(logging.DEBUG)
    logger.propagate = False

    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    if config_dir is not None and Path(config_dir).is_dir():
        try:
            log_path = get_log_path(config_dir)
            ensure_private_dir(log_path.parent)
            file_handler = logging.FileHandler(log_path, delay=True)
            file_handler.setLevel(logging.ERROR)
            file_handler.setFormatter(
                logging.Formatter("%(asctime)s - %(levelname)s - %(message)s")
            )
            logger.addHandler(file_handler)
        except OSError as e:
            print_warning(f"Could not open log file: {e}")

    if verbose:
        stream_handler = logging.StreamHandler()
        stream_handler.setLevel(logging.DEBUG)
        stream_handler.setFormatter(
            logging.Formatter("%(levelname)s %(name)s: %(message)s")
        )
        logger.addHandler(stream_handler)
    else:
        logger.addHandler(logging.NullHandler())

    return logger


def mask_secret(secret: str, visible: int = 4) -> str:
    """
    Mask a secret for display, keeping only its last few characters.

    Examples:
        - "abcdefgh1234" -> "********1234"
        - "abc" -> "***"
    """
    if len(secret) <= visible:
        return "*" * len(secret)
    return "*" * (len(secret) - visible) + secret[-visible:]


def print_success(message: str):
    """Print a success message with formatting."""
    err_console.print(f"[green]✓[/green] {escape(message)}")


def print_error(message: str):
    """Print an error message with formatting."""
    err_console.print(f"[red]✗[/red] {escape(message)}", style="bold red")


def print_warning(message: str):
    """Print a warning message with formatting."""
    err_console.print(f"[yellow]⚠[/yellow] {escape(message)}", style="yellow")


def print_info(message: str):
    """Print an info message with formatting."""
    err_console.print(f"[blue]ℹ[/blue] {escape(message)}")
