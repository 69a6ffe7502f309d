"""Run reporter tests"""

from rich.console import Console

from screenshot_action.errors import NavigationError
from screenshot_action.report import RunReporter


class TestOutputs:
    def test_appends_to_github_output(self, tmp_path, reporter):
        (tmp_path / "github_output").write_text("earlier=step\n")
        reporter.add(tmp_path / "a.webp")
        reporter.add(tmp_path / "out" / "b.png")

        outputs = reporter.publish()

        assert outputs == {
            "screenshot_paths": f"{tmp_path / 'a.webp'},{tmp_path / 'out' / 'b.png'}",
            "screenshot_path": str(tmp_path / "a.webp"),
        }
        assert (tmp_path / "github_output").read_text().splitlines() == [
            "earlier=step",
            f"screenshot_paths={outputs['screenshot_paths']}",
            f"screenshot_path={outputs['screenshot_path']}",
        ]

    def test_set_output_command_without_file(self, tmp_path, log, capsys):
        reporter = RunReporter(console=Console(file=log))
        reporter.add(tmp_path / "a.webp")

        reporter.publish()

        assert capsys.readouterr().out.splitlines() == [
            f"::set-output name=screenshot_paths::{tmp_path / 'a.webp'}",
            f"::set-output name=screenshot_path::{tmp_path / 'a.webp'}",
        ]

    def test_no_first_path_when_empty(self, reporter):
        assert reporter.publish() == {"screenshot_paths": ""}

    def test_paths_are_absolute(self, tmp_path, reporter, monkeypatch):
        monkeypatch.chdir(tmp_path)

        path = reporter.add("relative/shot.webp")

        assert path == tmp_path.resolve() / "relative" / "shot.webp"
        assert reporter.paths == [path]


class TestEvents:
    def test_event_fields(self, reporter, log):
        reporter.event("navigate", url="http://localhost:3000/[id]")

        assert "navigate url=http://localhost:3000/[id]" in log.getvalue()

    def test_fail_logs_error_and_cause(self, reporter, log, capsys):
        try:
            try:
                raise TimeoutError("Timeout 30000ms exceeded")
            except TimeoutError as e:
                raise NavigationError("Timed out loading http://localhost:3000/") from e
        except NavigationError as error:
            reporter.fail(error)

        assert "run.failed" in log.getvalue()
        assert "Timeout 30000ms exceeded" in log.getvalue()
        assert capsys.readouterr().out == "::error::Timed out loading http://localhost:3000/\n"
        assert not reporter.github_output.exists()
