"""The application object: router, global middlewares, views and serving."""

from __future__ import annotations

import http
import logging
import os
import posixpath
import signal
import socketserver
import threading
from typing import Any, Callable, Iterable, Mapping, Optional
from wsgiref.simple_server import WSGIRequestHandler, WSGIServer, make_server

from arry.context import Context
from arry.engine import new_engine
from arry.engines.base import Engine
from arry.radix import Handler
from arry.request import Request
from arry.response import ResponseRecorder, ResponseWriter
from arry.router import Middleware, Router, apply_middlewares

_log = logging.getLogger(__name__)


class _Server(socketserver.ThreadingMixIn, WSGIServer):
    daemon_threads = True


class _QuietHandler(WSGIRequestHandler):
    def log_message(self, format: str, *args: Any) -> None:
        return


def _raise_interrupt(signum: int, frame: Any) -> None:
    raise KeyboardInterrupt


def _status_line(code: int) -> str:
    try:
        phrase = http.HTTPStatus(code).phrase
    except ValueError:
        phrase = "Unknown"
    return f"{code} {phrase}"


class Arry:
    """A web application: routes requests through middlewares to handlers."""

    def __init__(self) -> None:
        self._router = Router()
        self.middlewares: list[Middleware] = []
        self.graceful = True
        self.engine: Optional[Engine] = None
        self.server: Optional[WSGIServer] = None
        self._serving = False

    def router(self) -> Router:
        """Return the application's root router."""
        return self._router

    def use(self, middleware: Middleware) -> None:
        """Add a middleware that wraps every request."""
        self.middlewares.append(middleware)

    def views(self, directory: str) -> None:
        """Use the HTML templates in ``directory`` for rendering."""
        self.engine = new_engine(directory, "html")

    def static(self, url: str, directory: str) -> None:
        """Serve files from ``directory`` (relative to the working directory) under ``url``."""
        base = os.getcwd()

        def handler(ctx: Context) -> None:
            target = posixpath.normpath(ctx.param("*"))
            full = os.path.normpath(
                os.path.join(base, directory.lstrip("/\\"), target)
            )
            ctx.file(full)

        self._router.get(url + "/*", handler)

    def serve_http(self, writer: ResponseWriter, request: Request) -> None:
        """Handle one request, writing the response to ``writer``."""
        ctx = Context(request, writer)
        ctx.set_engine(self.engine)

        node = self._router.route(request.path, ctx)
        handler: Handler = self._router.handler
        if node is not None and request.method in node.methods:
            handler = node.methods[request.method]

        apply_middlewares(handler, self.middlewares)(ctx)

    def __call__(
        self,
        environ: Mapping[str, Any],
        start_response: Callable[..., Any],
    ) -> Iterable[bytes]:
        """WSGI entry point."""
        request = Request.from_environ(environ)
        recorder = ResponseRecorder()
        self.serve_http(recorder, request)
        start_response(_status_line(recorder.code), list(recorder.headers.items()))
        return [bytes(recorder.body)]

    def start(self, addr: str) -> None:
        """Serve on ``addr`` (``host:port``) until shut down or interrupted."""
        host, _, port = addr.rpartition(":")
        self.server = make_server(
            host,
            int(port or 0),
            self,
            server_class=_Server,
            handler_class=_QuietHandler,
        )
        _log.info("Listening at %s", addr)

        if not self.graceful or threading.current_thread() is not threading.main_thread():
            self._serve()
            return

        previous = signal.signal(signal.SIGTERM, _raise_interrupt)
        try:
            self._serve()
        except KeyboardInterrupt:
            _log.info("Graceful shutting down...")
            self.server.server_close()
        finally:
            signal.signal(signal.SIGTERM, previous)

    def _serve(self) -> None:
        assert self.server is not None
        self._serving = True
        try:
            self.server.serve_forever()
        finally:
            self._serving = False

    def _require_server(self) -> WSGIServer:
        if self.server is None:
            raise RuntimeError("server has not been started")
        return self.server

    def close(self) -> None:
        """Stop serving and close the listening socket at once."""
        server = self._require_server()
        if self._serving:
            server.shutdown()
        server.server_close()

    def shutdown(self) -> None:
        """Stop accepting requests, wait for the serve loop to end, then close."""
        server = self._require_server()
        if self._serving:
            server.shutdown()
        server.server_close()