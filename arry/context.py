"""Per-request context handed to handlers."""

from __future__ import annotations

import http
import io
import json
import mimetypes
import os
import re
from typing import Any, BinaryIO

from arry.request import Cookie, Request
from arry.response import Response, ResponseWriter

_MIME_TYPES = {
    ".js": "application/javascript",
    ".mjs": "application/javascript",
    ".css": "text/css; charset=utf-8",
    ".html": "text/html; charset=utf-8",
    ".json": "application/json",
    ".xml": "application/xml",
    ".svg": "image/svg+xml",
    ".png": "image/png",
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".gif": "image/gif",
    ".webp": "image/webp",
    ".ico": "image/x-icon",
    ".woff": "font/woff",
    ".woff2": "font/woff2",
    ".ttf": "font/ttf",
    ".otf": "font/otf",
    ".pdf": "application/pdf",
    ".wasm": "application/wasm",
    ".map": "application/json",
}

_INT = re.compile(r"[+-]?\d+")
_CHUNK = 32 * 1024


def _extension(file: str) -> str:
    base = file.replace("\\", "/").rsplit("/", 1)[-1]
    dot = base.rfind(".")
    return base[dot:] if dot >= 0 else ""


def mime_type(file: str) -> str:
    """Return the content type for a file name."""
    ext = _extension(file).lower()
    if ext in _MIME_TYPES:
        return _MIME_TYPES[ext]
    guessed, _ = mimetypes.guess_type("file" + ext) if ext else (None, None)
    return guessed or "application/octet-stream"


def push_type(file: str) -> str:
    """Return the preload ``as`` value for a pushed resource."""
    ext = _extension(file)
    if ext == ".js":
        return "script"
    if ext == ".css":
        return "style"
    return "image"


def _status_text(code: int) -> str:
    try:
        return http.HTTPStatus(code).phrase
    except ValueError:
        return ""


class Context:
    """Request, response and per-request state for one handler call."""

    def __init__(self, request: Request, writer: ResponseWriter) -> None:
        self.request = request
        self.response = Response(writer=writer, code=404)
        self.params: dict[str, str] = {}
        self.store: dict[str, Any] = {}
        self.engine: Any = None
        self._body: bytes | None = None

    def set_engine(self, engine: Any) -> None:
        self.engine = engine

    def param(self, key: str) -> str:
        return self.params.get(key, "")

    def query(self, key: str) -> str:
        values = self.request.query().get(key)
        return values[0] if values else ""

    def query_default(self, key: str, default: str) -> str:
        return self.query(key) or default

    def query_int(self, key: str, default: int) -> int:
        value = self.query(key)
        if value and _INT.fullmatch(value):
            return int(value)
        return default

    def query_params(self) -> dict[str, list[str]]:
        return self.request.query()

    def header(self, key: str) -> str:
        return self.request.headers.get(key)

    def set_header(self, key: str, value: str) -> None:
        self.response.header().set(key, value)

    def cookie(self, name: str) -> Cookie | None:
        try:
            return self.request.cookie(name)
        except KeyError:
            return None

    def cookies(self) -> list[Cookie]:
        return self.request.cookies()

    def set_cookie(self, cookie: Cookie) -> None:
        self.response.header().add("Set-Cookie", cookie.header_value())

    def body(self) -> bytes:
        """Return the request body, read once and cached."""
        if self._body is None:
            try:
                self._body = self.request.body.read()
            except OSError:
                self._body = b""
        return self._body

    def decode(self) -> Any:
        """Parse the body as JSON; raises ``ValueError`` on bad input."""
        return json.loads(self.body())

    def status(self, code: int) -> None:
        self.response.code = code

    def set(self, key: str, value: Any) -> None:
        self.store[key] = value

    def get(self, key: str) -> Any:
        return self.store.get(key)

    def set_content_type(self, value: str) -> None:
        headers = self.response.header()
        if not headers.get("Content-Type"):
            headers.set("Content-Type", value)

    def reply(self, code: int) -> None:
        message = _status_text(code)
        if self.request.headers.get("Accept") == "application/json":
            self.json(code, {"code": code, "message": message})
        else:
            self.text(code, message)

    def text(self, code: int, body: str) -> None:
        self.set_content_type("text/plain")
        self.blob(code, body.encode("utf-8"))

    def json(self, code: int, body: Any) -> None:
        self.set_content_type("application/json")
        self.status(code)
        encoded = json.dumps(body, separators=(",", ":"), ensure_ascii=False) + "\n"
        self.response.write(encoded.encode("utf-8"))

    def json_error(self, code: int, message: str) -> None:
        self.json(code, {"error": message})

    def json_blob(self, code: int, body: bytes) -> None:
        self.set_content_type("application/json")
        self.blob(code, body)

    def blob(self, code: int, body: bytes) -> None:
        self.status(code)
        self.response.write(body)

    def file(self, name: str) -> None:
        """Send a file, or a 404 reply if it is missing or a directory."""
        if os.path.isdir(name):
            self.reply(404)
            return
        try:
            with open(name, "rb") as handle:
                data = handle.read()
        except OSError:
            self.reply(404)
            return
        self.set_content_type(mime_type(name))
        self.response.header().set("Content-Length", str(len(data)))
        self.blob(200, data)

    def render(self, code: int, name: str, data: Any) -> None:
        """Render a template with the context's engine."""
        if self.engine is None:
            raise RuntimeError("no template engine configured")
        self.status(code)
        out = io.StringIO()
        self.engine.render(out, name, data, self)
        self.set_content_type(self.engine.content_type())
        self.blob(code, out.getvalue().encode("utf-8"))

    def push(self, url: str) -> None:
        pusher = getattr(self.response.writer, "push", None)
        if callable(pusher):
            pusher(url)
            return
        self.response.header().add(
            "Link", f"<{url}>; rel=preload; as={push_type(url)}"
        )

    def redirect(self, code: int, url: str) -> None:
        if code < 300 or code > 308:
            code = 302
        self.set_header("Location", url)
        self.status(code)
        self.response.write_header(code)

    def stream(self, code: int, content_type: str, reader: BinaryIO) -> None:
        self.set_content_type(content_type)
        self.status(code)
        while True:
            chunk = reader.read(_CHUNK)
            if not chunk:
                break
            if isinstance(chunk, str):
                chunk = chunk.encode("utf-8")
            self.response.write(chunk)

    def attachment(self, filename: str, reader: BinaryIO) -> None:
        self.set_header("Content-Disposition", f'attachment; filename="{filename}"')
        self.stream(200, "application/octet-stream", reader)

    def client_ip(self) -> str:
        forwarded = self.header("X-Forwarded-For")
        if forwarded:
            return forwarded.split(",", 1)[0].strip()
        real = self.header("X-Real-IP")
        if real:
            return real.strip()
        return self.request.remote_addr.split(":", 1)[0]

    def bind(self) -> Any:
        """Decode the body by content type: JSON data or parsed form values."""
        ctype = self.header("Content-Type")
        if "application/json" in ctype:
            return self.decode()
        if "application/x-www-form-urlencoded" in ctype or "multipart/form-data" in ctype:
            return self.request.parse_form()
        return self.decode()

    def is_authed(self) -> bool:
        return self.get("auth") is True