"""Command-line interface for filebrowser."""

import logging
from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel

from filebrowser import __version__
from filebrowser.config import Settings, get_settings

app = typer.Typer(
    name="filebrowser",
    help="Browse and manage a directory tree over HTTP",
    no_args_is_help=True,
)

console = Console()

ConfigOption = Annotated[
    str | None,
    typer.Option(
        "--config",
        "-f",
        help="Path to a YAML config file (overrides default config locations).",
    ),
]


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"filebrowser version {__version__}")
        raise typer.Exit()


def configure_logging(settings: Settings) -> None:
    """Send logs to the console and, if configured, to the log file."""
    handlers: list[logging.Handler] = [
        RichHandler(console=console, show_time=True, show_path=False),
    ]

    if settings.log_file is not None:
        settings.log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(settings.log_file, encoding="utf-8")
        file_handler.setFormatter(
            logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s")
        )
        handlers.append(file_handler)

    logging.basicConfig(
        level=getattr(logging, settings.log_level),
        format="%(message)s",
        handlers=handlers,
        force=True,
    )


def _load_settings(config_file: str | None) -> Settings:
    try:
        return get_settings(config_file=config_file)
    except FileNotFoundError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)


@app.callback()
def main(
    version: Annotated[
        bool | None,
        typer.Option(
            "--version",
            "-v",
            help="Show version and exit.",
            callback=version_callback,
            is_eager=True,
        ),
    ] = None,
) -> None:
    """filebrowser - browse and manage a directory tree over HTTP."""
    pass


@app.command()
def serve(
    root: Annotated[
        Path | None,
        typer.Option(
            "--root",
            "-r",
            help="Root directory to serve (created if missing).",
        ),
    ] = None,
    host: Annotated[
        str | None,
        typer.Option("--host", help="Interface to bind (overrides FILEBROWSER_HOST)."),
    ] = None,
    port: Annotated[
        int | None,
        typer.Option("--port", "-p", help="Port to listen on (overrides FILEBROWSER_PORT)."),
    ] = None,
    config_file: ConfigOption = None,
) -> None:
    """Start the HTTP API server.

    Examples:
        filebrowser serve
        filebrowser serve --root ./shared --port 8080
        filebrowser serve --config filebrowser.yaml
    """
    settings = _load_settings(config_file)

    # CLI > env > yaml > defaults
    if root is not None:
        settings.root_dir = root.expanduser().resolve()
    if host:
        settings.host = host
    if port:
        settings.port = port

    configure_logging(settings)

    if settings.root_dir.exists() and not settings.root_dir.is_dir():
        console.print(f"[red]Error:[/red] Root is not a directory: {settings.root_dir}")
        raise typer.Exit(1)

    console.print(
        Panel(
            f"[bold blue]URL:[/bold blue] http://{settings.host}:{settings.port}\n"
            f"[bold]Root:[/bold] {settings.root_dir}\n"
            f"[bold]Max upload:[/bold] {settings.max_upload_size // (1024 * 1024)} MB\n"
            f"[bold]Rate limit:[/bold] {settings.rate_limit_max_requests} requests / "
            f"{settings.rate_limit_window:g}s\n"
            f"[bold]Log file:[/bold] {settings.log_file or '[dim]disabled[/dim]'}",
            title="filebrowser",
        )
    )

    from filebrowser.api.serve import run_api_server

    try:
        run_api_server(settings)
    except OSError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)


@app.command()
def mcp(
    root: Annotated[
        str | None,
        typer.Argument(help="Root directory to expose (defaults to the configured root)."),
    ] = None,
    config_file: ConfigOption = None,
) -> None:
    """Start an MCP server over stdin/stdout exposing the file tree tools.

    Available tools:
        list_files, rename_entry, delete_entry, create_folder, read_file
    """
    settings = _load_settings(config_file)

    from filebrowser.filesystem.server import run_server

    try:
        run_server(root or str(settings.root_dir))
    except ValueError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)


@app.command()
def config(config_file: ConfigOption = None) -> None:
    """Show current configuration."""
    settings = _load_settings(config_file)

    console.print(Panel("[bold]Current Configuration[/bold]", title="filebrowser"))
    console.print(f"[bold]Root Directory:[/bold] {settings.root_dir}")
    console.print(f"[bold]Host:[/bold] {settings.host}")
    console.print(f"[bold]Port:[/bold] {settings.port}")
    console.print(f"[bold]Request Timeout:[/bold] {settings.request_timeout}s")
    console.print(f"[bold]Max Upload Size:[/bold] {settings.max_upload_size} bytes")
    console.print(
        f"[bold]Rate Limit:[/bold] {settings.rate_limit_max_requests} requests / {settings.rate_limit_window:g}s"
    )
    console.print(f"[bold]CORS Origins:[/bold] {', '.join(settings.cors_origins)}")
    console.print(f"[bold]Log Level:[/bold] {settings.log_level}")
    console.print(f"[bold]Log File:[/bold] {settings.log_file or '[dim]disabled[/dim]'}")


if __name__ == "__main__":
    app()
