"""FastAPI dev server: on-demand sync, watch status, and live-reload websocket."""

from __future__ import annotations

import asyncio
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any, AsyncIterator, Callable, Dict, List, Optional, Union

from fastapi import FastAPI, Response, WebSocket, WebSocketDisconnect
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from ..config import CONFIG_FILENAME, SyncConfig
from ..logging import get_logger
from ..models import SyncResult
from ..pipeline import SyncPipeline
from ..source_scanner import SourceScanner
from ..watch.controller import WatchController
from ..watch.observer import SourceWatcher
from ..watch.runner import PipelineRunner, SubprocessPipelineRunner

RELOAD_EVENT: Dict[str, str] = {"type": "full-reload"}

logger = get_logger("service")


class SyncResponse(BaseModel):
    generated: int
    skipped: int
    failed: int
    pages: List[str]


class RunRequestResponse(BaseModel):
    started: bool
    state: str


class StatusResponse(BaseModel):
    watching: bool
    state: Optional[str] = None
    runs: int = 0
    clients: int = 0


class HealthResponse(BaseModel):
    status: str


class ReloadBroadcaster:
    """Tracks connected dev clients and pushes reload events to them."""

    def __init__(self) -> None:
        self._connections: List[WebSocket] = []

    @property
    def client_count(self) -> int:
        return len(self._connections)

    async def connect(self, websocket: WebSocket) -> None:
        await websocket.accept()
        self._connections.append(websocket)

    def disconnect(self, websocket: WebSocket) -> None:
        if websocket in self._connections:
            self._connections.remove(websocket)

    async def broadcast(self, message: Dict[str, str]) -> int:
        """Send ``message`` to every client, dropping the ones that went away."""
        delivered = 0
        for websocket in list(self._connections):
            try:
                await websocket.send_json(message)
            except (WebSocketDisconnect, RuntimeError) as exc:
                logger.debug("Dropping reload client: %s", exc)
                self.disconnect(websocket)
                continue
            delivered += 1
        return delivered


def _default_pipeline(config: SyncConfig) -> SyncPipeline:
    return SyncPipeline(
        scanner=SourceScanner(extension=config.extension, exclude_paths=config.exclude_paths)
    )


def create_app(
    config: SyncConfig | None = None,
    *,
    pipeline_factory: Callable[[SyncConfig], SyncPipeline] = _default_pipeline,
    watch: bool = False,
    runner: PipelineRunner | None = None,
) -> FastAPI:
    """Create the dev server.

    With ``watch`` enabled the app lifespan starts a WatchController (using
    ``runner``, or a subprocess runner by default) and a watchdog observer on
    the source root, and stops both on shutdown.
    """
    settings = config or SyncConfig.defaults(Path.cwd())
    broadcaster = ReloadBroadcaster()
    run_lock = asyncio.Lock()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        app.state.controller = None
        if not watch:
            yield
            return

        loop = asyncio.get_running_loop()

        def _notify_reload() -> None:
            asyncio.run_coroutine_threadsafe(broadcaster.broadcast(RELOAD_EVENT), loop)

        controller = WatchController(
            runner
            or SubprocessPipelineRunner(
                settings.source_root,
                settings.output_root,
                config_path=settings.root / CONFIG_FILENAME,
                cwd=settings.root,
            ),
            notify_reload=_notify_reload,
            debounce_seconds=settings.debounce_seconds,
            extension=settings.extension,
        )
        watcher = SourceWatcher(settings.source_root, controller)
        app.state.controller = controller
        watcher.start()
        controller.start()
        try:
            yield
        finally:
            watcher.stop()
            controller.stop()

    app = FastAPI(title="docsync dev server", version="1.0.0", lifespan=lifespan)
    app.state.broadcaster = broadcaster
    app.state.config = settings

    @app.get("/health", response_model=HealthResponse)
    async def health() -> HealthResponse:
        return HealthResponse(status="ok")

    @app.get("/status", response_model=StatusResponse)
    async def status() -> StatusResponse:
        controller: Optional[WatchController] = getattr(app.state, "controller", None)
        if controller is None:
            return StatusResponse(watching=False, clients=broadcaster.client_count)
        return StatusResponse(
            watching=True,
            state=controller.state.value,
            runs=controller.runs_started,
            clients=broadcaster.client_count,
        )

    @app.post("/sync", response_model=Union[SyncResponse, RunRequestResponse])
    async def sync(response: Response) -> Union[SyncResponse, RunRequestResponse]:
        controller: Optional[WatchController] = getattr(app.state, "controller", None)
        if controller is not None:
            # The controller owns the only run slot while watching.
            started = controller.request_run()
            response.status_code = 202
            return RunRequestResponse(started=started, state=controller.state.value)

        pipeline = pipeline_factory(settings)

        def _run() -> SyncResult:
            return pipeline.run(settings.source_root, settings.output_root)

        async with run_lock:
            loop = asyncio.get_running_loop()
            result = await loop.run_in_executor(None, _run)
        await broadcaster.broadcast(RELOAD_EVENT)
        return SyncResponse(
            generated=result.generated,
            skipped=len(result.skipped),
            failed=len(result.failures),
            pages=[str(path) for path in result.written],
        )

    @app.websocket("/reload")
    async def reload_socket(websocket: WebSocket) -> None:
        await broadcaster.connect(websocket)
        try:
            while True:
                await websocket.receive_text()
        except WebSocketDisconnect:
            broadcaster.disconnect(websocket)

    @app.exception_handler(RuntimeError)
    async def runtime_error_handler(_: Any, exc: RuntimeError) -> JSONResponse:
        return JSONResponse(status_code=400, content={"detail": str(exc)})

    return app


def run_service(
    config: SyncConfig, *, host: str | None = None, port: int | None = None, watch: bool = True
) -> None:  # pragma: no cover - integration path
    import uvicorn

    app = create_app(config, watch=watch)
    uvicorn.run(
        app,
        host=host or config.service.host,
        port=port if port is not None else config.service.port,
    )
