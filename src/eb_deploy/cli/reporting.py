"""Console progress reporting and logging setup for the CLI."""

import logging

from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

from eb_deploy.cli.ui import console as default_console


class ConsoleReporter:
    """Print deployment progress with level prefixes."""

    def __init__(self, console: Console | None = None) -> None:
        """Create a reporter.

        Args:
            console: Console to print to. Defaults to the shared CLI console.
        """
        self.console = console or default_console

    def info(self, message: str) -> None:
        """Print an informational message.

        Args:
            message: Message to display.
        """
        self.console.print(f"[green]\\[INFO][/green] {escape(message)}")

    def warning(self, message: str) -> None:
        """Print a warning message.

        Args:
            message: Message to display.
        """
        self.console.print(f"[yellow]\\[WARNING][/yellow] {escape(message)}")

    def error(self, message: str) -> None:
        """Print an error message.

        Args:
            message: Message to display.
        """
        self.console.print(f"[red]\\[ERROR][/red] {escape(message)}")

    def success(self, message: str) -> None:
        """Print a success message.

        Args:
            message: Message to display.
        """
        self.console.print(f"[bold green]\\[SUCCESS][/bold green] {escape(message)}")


def configure_logging(verbose: bool) -> None:
    """Route library logging through Rich.

    Args:
        verbose: Show debug output from eb-deploy and botocore when true.
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=default_console, show_path=False)],
        force=True,
    )
    if not verbose:
        return
    # botocore's wire-level debug output drowns out everything else.
    logging.getLogger("botocore").setLevel(logging.INFO)
    logging.getLogger("urllib3").setLevel(logging.INFO)
