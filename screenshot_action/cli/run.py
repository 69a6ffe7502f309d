from pathlib import Path
from typing import Optional

import typer

from screenshot_action.errors import ConfigurationError
from screenshot_action.report import RunReporter
from screenshot_action.run import load_config, main

run_app = typer.Typer()


@run_app.callback(invoke_without_command=True)
def run(
    screenshots: Optional[str] = typer.Option(
        None,
        help="comma or newline separated <source>=<destination> pairs",
    ),
    workspace: Optional[Path] = typer.Option(
        None,
        help="directory to serve local paths from and write screenshots into",
    ),
    url: Optional[str] = typer.Option(
        None, help="comma separated urls, used when --screenshots is not given"
    ),
    output: Optional[str] = typer.Option(
        None, help="comma separated destinations for --url"
    ),
    width: Optional[int] = typer.Option(None, help="viewport width"),
    height: Optional[int] = typer.Option(
        None,
        help="viewport height, captures only the viewport when set",
    ),
    host: Optional[str] = typer.Option(None, help="local server host"),
    port: Optional[int] = typer.Option(None, help="local server port"),
    webp_options: Optional[str] = typer.Option(None, help="webp options as json"),
    png_options: Optional[str] = typer.Option(None, help="png options as json"),
    jpeg_options: Optional[str] = typer.Option(None, help="jpeg options as json"),
):
    "capture the configured screenshots"
    try:
        config = load_config(
            screenshots=screenshots,
            github_workspace=workspace,
            url=url,
            output=output,
            width=width,
            height=height,
            host=host,
            port=port,
            webp_options=webp_options,
            png_options=png_options,
            jpeg_options=jpeg_options,
        )
    except ConfigurationError as e:
        RunReporter().fail(e)
        raise typer.Exit(code=1)
    raise typer.Exit(code=main(config))
