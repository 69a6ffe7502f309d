import asyncio
from pathlib import Path
from typing import Iterable, Optional

import uvicorn
from fastapi import FastAPI
from fastapi.staticfiles import StaticFiles

from screenshot_action.errors import ServerStartError
from screenshot_action.models import CaptureTarget
from screenshot_action.report import RunReporter

READY_POLL_INTERVAL = 0.1
ALL_INTERFACES = ("", "0.0.0.0", "::")


def needs_server(targets: Iterable[CaptureTarget]) -> bool:
    """Only serve the workspace when some target is a local path."""
    return any(not target.is_absolute for target in targets)


def create_app(root: Path) -> FastAPI:
    app = FastAPI(docs_url=None, redoc_url=None, openapi_url=None)
    # html=True serves a directory's index.html
    app.mount("/", StaticFiles(directory=str(root), html=True), name="workspace")
    return app


class LocalServer:
    """Static file server for the workspace, run in-process by uvicorn.

    Use it as an async context manager: entering blocks until the server
    accepts connections, leaving always shuts it down.
    """

    def __init__(
        self,
        root: Path,
        host: str = "0.0.0.0",
        port: int = 3000,
        ready_timeout: float = 10.0,
        reporter: Optional[RunReporter] = None,
    ):
        self.root = Path(root)
        self.host = host
        self.port = port
        self.ready_timeout = ready_timeout
        self.reporter = reporter or RunReporter()
        self._server: Optional[uvicorn.Server] = None
        self._task: Optional[asyncio.Task] = None

    @property
    def is_running(self) -> bool:
        return self._task is not None

    @property
    def public_host(self) -> str:
        return "localhost" if self.host in ALL_INTERFACES else self.host

    @property
    def base_url(self) -> str:
        return f"http://{self.public_host}:{self.port}"

    def url_for(self, source: str) -> str:
        return f"{self.base_url}/{source.lstrip('/')}"

    async def __aenter__(self) -> "LocalServer":
        await self.start()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.stop()

    async def _serve(self) -> None:
        try:
            await self._server.serve()
        except SystemExit as e:
            # uvicorn exits the process when it cannot bind
            raise ServerStartError(
                f"could not start server on {self.host}:{self.port}"
            ) from e

    async def start(self) -> None:
        if self.is_running:
            return
        if not self.root.is_dir():
            raise ServerStartError(f"server root {self.root} is not a directory")

        self.reporter.event(
            "server.start", root=self.root, host=self.host, port=self.port
        )
        config = uvicorn.Config(
            create_app(self.root),
            host=self.host,
            port=self.port,
            log_level="warning",
            lifespan="off",
        )
        self._server = uvicorn.Server(config)
        self._task = asyncio.create_task(self._serve())
        try:
            await self.wait_until_ready()
        except BaseException:
            await self.stop()
            raise
        self.reporter.event("server.ready", url=self.base_url)

    async def _accepts_connections(self) -> bool:
        try:
            _, writer = await asyncio.open_connection(self.public_host, self.port)
        except OSError:
            return False
        writer.close()
        await writer.wait_closed()
        return True

    async def wait_until_ready(self) -> None:
        loop = asyncio.get_running_loop()
        deadline = loop.time() + self.ready_timeout
        while True:
            if self._task.done():
                error = self._task.exception()
                if error is not None:
                    raise error
                raise ServerStartError(
                    f"server on {self.host}:{self.port} exited during startup"
                )
            if self._server.started and await self._accepts_connections():
                return
            if loop.time() >= deadline:
                raise ServerStartError(
                    f"server on {self.host}:{self.port} was not ready after "
                    f"{self.ready_timeout}s"
                )
            await asyncio.sleep(READY_POLL_INTERVAL)

    async def stop(self) -> None:
        if not self.is_running:
            return
        task, self._task = self._task, None
        self._server.should_exit = True
        # errors from a failed start were already raised by wait_until_ready
        await asyncio.gather(task, return_exceptions=True)
        self.reporter.event("server.stop", host=self.host, port=self.port)


def resolve_url(target: CaptureTarget, server: Optional[LocalServer]) -> str:
    """Absolute urls pass through, local paths are served by ``server``."""
    if target.is_absolute:
        return target.source
    if server is None:
        raise ServerStartError(f"no local server to serve {target.source!r}")
    return server.url_for(target.source)
