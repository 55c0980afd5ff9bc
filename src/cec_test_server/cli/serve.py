from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console

from cec_test_server.config import configure_logging, load_settings

console = Console()


def serve(
    host: Annotated[str, typer.Option(help="Interface to bind.")] = "127.0.0.1",
    port: Annotated[int, typer.Option(help="Port to listen on.")] = 8085,
    project_dir: Annotated[
        Path | None, typer.Option("--project-dir", help="Toolkit project root (default: $CEC_TOOLKIT_PROJECTDIR or cwd).")
    ] = None,
    template: Annotated[str | None, typer.Option(help="Template or content export used when a request names none.")] = None,
    log_level: Annotated[str | None, typer.Option("--log-level", help="Log level (default: $CEC_LOG_LEVEL or INFO).")] = None,
) -> None:
    """Start the local test server."""
    import uvicorn

    from cec_test_server.api.app import create_app

    settings = load_settings(project_dir=project_dir, template=template, log_level=log_level)
    configure_logging(settings.log_level)

    if not settings.src_dir.is_dir():
        console.print(f"[red]No src folder in {settings.project_dir}[/red]")
        raise typer.Exit(code=1)

    app = create_app(settings)
    console.print(f"[green]Starting test server on {host}:{port}[/green]")
    console.print(f"  Project:  {settings.project_dir}")
    if settings.default_template:
        console.print(f"  Template: {settings.default_template}")
    uvicorn.run(app, host=host, port=port, log_level=settings.log_level.lower())
