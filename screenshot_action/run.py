import asyncio
from contextlib import AsyncExitStack
from pathlib import Path
from typing import Optional

from pydantic import ValidationError

from screenshot_action.capture import CaptureDriver
from screenshot_action.config import Config, get_config
from screenshot_action.encode import Encoder
from screenshot_action.errors import ConfigurationError
from screenshot_action.report import RunReporter
from screenshot_action.server import LocalServer, needs_server, resolve_url
from screenshot_action.targets import parse_targets


def load_config(**overrides) -> Config:
    """Build the run config, raising ``ConfigurationError`` for invalid inputs."""
    try:
        return get_config(**overrides)
    except ValidationError as e:
        problems = "; ".join(
            f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}"
            for error in e.errors()
        )
        raise ConfigurationError(f"invalid inputs, {problems}") from e


async def take_screenshots(
    config: Config, reporter: Optional[RunReporter] = None
) -> list[Path]:
    """Capture every configured target and publish the written paths.

    The local server, when one is needed, is started before the browser and
    stopped after it, on every exit path.
    """
    reporter = reporter or RunReporter(config.github_output, config.console)
    targets = parse_targets(config.screenshots)
    encoder = Encoder(config.format_options)

    async with AsyncExitStack() as stack:
        server = None
        if needs_server(targets):
            server = await stack.enter_async_context(
                LocalServer(
                    config.workspace_root,
                    host=config.host,
                    port=config.port,
                    ready_timeout=config.server_ready_timeout,
                    reporter=reporter,
                )
            )
        driver = await stack.enter_async_context(
            CaptureDriver(config, encoder, reporter)
        )
        paths = await driver.run(targets, lambda target: resolve_url(target, server))

    reporter.publish()
    return paths


def main(config: Config, reporter: Optional[RunReporter] = None) -> int:
    """Run the action and return its exit code."""
    reporter = reporter or RunReporter(config.github_output, config.console)
    try:
        asyncio.run(take_screenshots(config, reporter))
    except Exception as e:
        reporter.fail(e)
        return 1
    return 0
