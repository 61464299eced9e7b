"""Rich consoles and log setup shared by the CLI and the library modules."""

import logging

from rich.console import Console
from rich.logging import RichHandler

# Trees and progress go to stdout; log records go to stderr so --stdout stays clean
console = Console()
err_console = Console(stderr=True)


def setup_logging(verbose: bool = False) -> None:
    """Route bttgen's log records through rich; debug detail only with --verbose."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=err_console, rich_tracebacks=True, show_path=verbose)],
        force=True,
    )


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)
