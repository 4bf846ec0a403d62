"""CLI commands for tcreport."""

from __future__ import annotations

from pathlib import Path

import typer
from dotenv import load_dotenv
from rich.console import Console
from rich.table import Table
from rich.text import Text

from tcreport import __version__

# Load .env file from current directory or parent directories
load_dotenv()

app = typer.Typer(
    name="tcreport",
    help="TeamCity service messages from test event streams",
    no_args_is_help=True,
)
# Service messages own stdout; status output goes to stderr
console = Console(stderr=True)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"tcreport version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool | None = typer.Option(
        None,
        "--version",
        "-V",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit",
    ),
) -> None:
    """tcreport - TeamCity reporter for test event streams."""
    pass


@app.command()
def replay(
    events_file: Path = typer.Argument(..., help="JSON-lines event stream to replay"),
    output: Path | None = typer.Option(
        None, "--output", "-o", help="Write service messages to a file instead of stdout"
    ),
    flow_id: bool | None = typer.Option(
        None, "--flow-id/--no-flow-id", help="Attach flowId to every message"
    ),
    capture_output: bool | None = typer.Option(
        None,
        "--capture-output/--no-capture-output",
        help="Ask TeamCity to capture test stdout",
    ),
    message: str | None = typer.Option(
        None, "--message", "-m", help="Test name template ([browser], [title])"
    ),
    screenshot_path: str | None = typer.Option(
        None, "--screenshot-path", "-s", help="Directory for screenshot artifacts"
    ),
    log_dir: Path = typer.Option(
        Path(".tcreport"), "--log-dir", help="Directory for debug.log when verbose"
    ),
    verbose: bool = typer.Option(False, "--verbose", help="Write a debug log"),
) -> None:
    """Replay a recorded event stream as TeamCity service messages."""
    from tcreport.core.config import ConfigLoader, setup_logging
    from tcreport.core.events import EventReplayer, ReplayError
    from tcreport.core.reporter import TeamcityReporter

    if not events_file.exists():
        console.print(f"[red]Error:[/red] Event file not found: {events_file}")
        raise typer.Exit(2)

    config = ConfigLoader.load(
        overrides={
            "flowId": flow_id,
            "captureStandardOutput": capture_output,
            "message": message,
            "screenshotPath": screenshot_path,
            "verbose": verbose or None,
        }
    )

    if config.verbose:
        log_file = setup_logging(verbose=True, log_dir=log_dir)
        if log_file:
            console.print(f"[dim]Verbose logging → {log_file}[/dim]")

    stream = open(output, "w", encoding="utf-8") if output else None
    try:
        reporter = TeamcityReporter(config.options, stream=stream)
        try:
            count = EventReplayer(reporter).replay_file(events_file)
        except ReplayError as e:
            console.print(f"[red]Replay error:[/red] {e}")
            raise typer.Exit(2)
        finally:
            failed = reporter.drain()
            reporter.close()
    finally:
        if stream is not None:
            stream.close()

    console.print(f"[green]Replayed[/green] {count} events")
    if failed:
        console.print(f"[yellow]Warning:[/yellow] {failed} screenshot writes failed")


@app.command()
def escape(
    text: str = typer.Argument(..., help="Text to escape"),
) -> None:
    """Print TEXT escaped for a service-message attribute."""
    from tcreport.core.escape import escape as escape_text

    typer.echo(escape_text(text))


@app.command()
def config() -> None:
    """Show the resolved reporter configuration."""
    from tcreport.core.config import ConfigLoader

    resolved = ConfigLoader.load()
    options = resolved.options

    table = Table(title="tcreport configuration")
    table.add_column("Option", style="cyan")
    table.add_column("Value")

    table.add_row("captureStandardOutput", str(options.capture_standard_output).lower())
    table.add_row("flowId", str(options.flow_id).lower())
    table.add_row("message", Text(options.message))
    table.add_row("screenshotPath", Text(options.screenshot_path))
    table.add_row("verbose", str(resolved.verbose).lower())

    console.print(table)


if __name__ == "__main__":
    app()
