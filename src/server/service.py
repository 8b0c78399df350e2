from __future__ import annotations

import asyncio
import contextlib
import logging
import threading
from pathlib import Path
from typing import Any, Callable, Optional
from urllib.parse import urlsplit

import websockets
from websockets.asyncio.server import ServerConnection, broadcast
from websockets.datastructures import Headers
from websockets.http11 import Request, Response

from contracts.ui_protocol import EVENT_HELLO

from .config import HEALTHZ_PATH, INDEX_PATH, ROOT_PATH, UIServerConfig
from .events import StickyEventStore, make_event, parse_client_message

ClientMessageHandler = Callable[[dict[str, Any]], None]

_HTML = "text/html; charset=utf-8"
_TEXT = "text/plain; charset=utf-8"


class UIServer:
    """Serves the status page and pushes timer events to websocket clients.

    The asyncio loop runs on its own daemon thread. `publish` may be called
    from any thread; the latest status is replayed to clients that connect
    later. Inbound messages are validated and handed to `on_message` on the
    server thread, which is expected to forward them to the session loop.
    """

    def __init__(
        self,
        config: UIServerConfig,
        on_message: Optional[ClientMessageHandler] = None,
        logger: Optional[logging.Logger] = None,
    ):
        self._config = config
        self._on_message = on_message
        self._logger = logger or logging.getLogger("ui_server")
        self._sticky_events = StickyEventStore()
        self._clients: set[ServerConnection] = set()
        self._routes: dict[str, tuple[bytes, str]] = {
            ROOT_PATH: (Path(config.index_file).read_bytes(), _HTML),
            HEALTHZ_PATH: (b"ok\n", _TEXT),
        }
        self._routes[INDEX_PATH] = self._routes[ROOT_PATH]

        self._thread: Optional[threading.Thread] = None
        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self._shutdown: Optional[asyncio.Event] = None
        self._ready = threading.Event()
        self._startup_error: Optional[Exception] = None

    @property
    def is_running(self) -> bool:
        return (
            self._thread is not None
            and self._thread.is_alive()
            and self._ready.is_set()
            and self._startup_error is None
        )

    def set_message_handler(self, on_message: Optional[ClientMessageHandler]) -> None:
        self._on_message = on_message

    def sticky_snapshot(self) -> list[str]:
        return self._sticky_events.snapshot()

    def start(self, timeout_seconds: float = 5.0) -> None:
        if self.is_running:
            self._logger.warning("UI server is already running")
            return

        self._startup_error = None
        self._ready.clear()
        self._thread = threading.Thread(target=self._run, daemon=True, name="ui-server")
        self._thread.start()

        if not self._ready.wait(timeout_seconds):
            raise RuntimeError(f"UI server did not start within {timeout_seconds:.1f}s")
        if self._startup_error is not None:
            raise RuntimeError(f"UI server startup failed: {self._startup_error}")

    def stop(self, timeout_seconds: float = 5.0) -> None:
        thread, loop, shutdown = self._thread, self._loop, self._shutdown
        if thread is None:
            return
        if loop is not None and shutdown is not None:
            with contextlib.suppress(RuntimeError):
                loop.call_soon_threadsafe(shutdown.set)

        thread.join(timeout=timeout_seconds)
        if thread.is_alive():
            self._logger.error("UI server thread did not stop within %.1fs", timeout_seconds)
        self._thread = None

    def publish(self, event_type: str, **payload: Any) -> None:
        message = make_event(event_type, **payload)
        self._sticky_events.remember(event_type, message)

        loop = self._loop
        if loop is None or not self.is_running:
            return
        with contextlib.suppress(RuntimeError):
            # The loop may already be closing.
            loop.call_soon_threadsafe(self._broadcast, message)

    def handle_client_message(self, raw: str | bytes) -> bool:
        message = parse_client_message(raw)
        if message is None:
            self._logger.debug("Ignoring unsupported UI message: %r", raw)
            return False
        if self._on_message is None:
            return False
        try:
            self._on_message(message)
        except Exception:
            self._logger.exception("UI message handler failed")
            return False
        return True

    def _run(self) -> None:
        loop = asyncio.new_event_loop()
        asyncio.set_event_loop(loop)
        self._loop = loop
        self._shutdown = asyncio.Event()
        try:
            loop.run_until_complete(self._serve())
        except Exception as error:
            self._startup_error = error
            self._logger.error("UI server failed: %s", error, exc_info=True)
            self._ready.set()
        finally:
            self._loop = None
            self._shutdown = None
            loop.close()

    async def _serve(self) -> None:
        async with websockets.serve(
            self._session,
            host=self._config.host,
            port=self._config.port,
            process_request=self._route,
            logger=self._logger,
        ):
            self._logger.info(
                "UI server running at http://%s:%d (websocket: %s)",
                self._config.host,
                self._config.port,
                self._config.websocket_path,
            )
            self._ready.set()
            await self._shutdown.wait()

    async def _session(self, websocket: ServerConnection) -> None:
        self._clients.add(websocket)
        self._logger.info("Client connected: %s", websocket.remote_address)
        try:
            await websocket.send(make_event(EVENT_HELLO, message="Status websocket connected"))
            for sticky in self._sticky_events.snapshot():
                await websocket.send(sticky)
            async for raw in websocket:
                self.handle_client_message(raw)
        except websockets.exceptions.ConnectionClosed:
            pass
        finally:
            self._clients.discard(websocket)
            self._logger.info("Client disconnected: %s", websocket.remote_address)

    def _route(self, connection: ServerConnection, request: Request) -> Response | None:
        del connection
        path = urlsplit(request.path).path
        if path == self._config.websocket_path:
            return None

        body, content_type = self._routes.get(path, (b"not found\n", _TEXT))
        status = (200, "OK") if path in self._routes else (404, "Not Found")
        headers = Headers()
        headers["Content-Type"] = content_type
        headers["Content-Length"] = str(len(body))
        headers["Cache-Control"] = "no-store"
        return Response(status[0], status[1], headers, body)

    def _broadcast(self, message: str) -> None:
        if self._clients:
            broadcast(self._clients, message)
