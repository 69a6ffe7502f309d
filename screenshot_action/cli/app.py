import typer

from screenshot_action.cli.common import verbose_callback
from screenshot_action.cli.config import config_app
from screenshot_action.cli.run import run_app

app = typer.Typer(
    name="screenshot_action",
    help="Capture screenshots of local pages and urls for CI.",
)
app.add_typer(config_app, name="config")
app.add_typer(run_app, name="run")


def version_callback(value: bool) -> None:
    "print the installed version for --version and stop"
    if value:
        from screenshot_action.__about__ import __version__

        typer.echo(f"{__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        None,
        "--version",
        callback=version_callback,
        is_eager=True,
    ),
    verbose: bool = typer.Option(
        True,
        "--verbose/--quiet",
        callback=verbose_callback,
        help="show the log messages",
    ),
) -> None:
    return


if __name__ == "__main__":
    app()
