from rich.console import Console
import typer

from screenshot_action.config import Config

config_app = typer.Typer()


@config_app.callback()
def config():
    "configuration cli"


@config_app.command()
def show():
    "print the settings a run would use"
    Console().print(Config())
