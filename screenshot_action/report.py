from pathlib import Path
from typing import Optional

from rich.console import Console
from rich.markup import escape

from screenshot_action.console import console as default_console


class RunReporter:
    """Collects the written screenshots and publishes them as step outputs.

    Outputs are appended to the ``GITHUB_OUTPUT`` file when the runner provides
    one, otherwise they are printed as ``::set-output`` workflow commands.
    """

    def __init__(
        self,
        github_output: Optional[Path] = None,
        console: Optional[Console] = None,
    ):
        self.github_output = github_output
        self.console = console or default_console
        self.paths: list[Path] = []

    def event(self, name: str, **fields) -> None:
        """Log one step of the run as a named event with its fields."""
        details = " ".join(f"{key}={value}" for key, value in fields.items())
        self.console.log(f"[bold cyan]{name}[/] {escape(details)}".rstrip())

    def add(self, path: Path) -> Path:
        path = Path(path).resolve()
        self.paths.append(path)
        self.event("write", path=path, count=len(self.paths))
        return path

    @property
    def outputs(self) -> dict[str, str]:
        outputs = {"screenshot_paths": ",".join(str(p) for p in self.paths)}
        if self.paths:
            outputs["screenshot_path"] = str(self.paths[0])
        return outputs

    def set_output(self, name: str, value: str) -> None:
        if self.github_output:
            with open(self.github_output, "a", encoding="utf-8") as f:
                f.write(f"{name}={value}\n")
        else:
            print(f"::set-output name={name}::{value}", flush=True)

    def publish(self) -> dict[str, str]:
        outputs = self.outputs
        for name, value in outputs.items():
            self.set_output(name, value)
        self.event("run.complete", screenshots=len(self.paths))
        return outputs

    def fail(self, error: BaseException) -> None:
        cause = error.__cause__ or error.__context__
        if cause is not None:
            self.event("run.failed", error=repr(str(error)), cause=repr(str(cause)))
        else:
            self.event("run.failed", error=repr(str(error)))
        self.console.print(f"[bold red]Error:[/] {escape(str(error))}")
        print(f"::error::{error}", flush=True)
