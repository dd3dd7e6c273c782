"""Incoming HTTP requests and cookies."""

from __future__ import annotations

import io
from dataclasses import dataclass, field
from typing import Any, BinaryIO, Mapping
from urllib.parse import parse_qs, urlsplit

from arry.response import Headers


@dataclass
class Cookie:
    """An HTTP cookie."""

    name: str
    value: str = ""
    path: str = ""
    domain: str = ""
    max_age: int | None = None
    secure: bool = False
    http_only: bool = False
    same_site: str = ""

    def header_value(self) -> str:
        """Return the value of a ``Set-Cookie`` header for this cookie."""
        parts = [f"{self.name}={self.value}"]
        if self.path:
            parts.append(f"Path={self.path}")
        if self.domain:
            parts.append(f"Domain={self.domain}")
        if self.max_age is not None:
            parts.append(f"Max-Age={max(self.max_age, 0)}")
        if self.http_only:
            parts.append("HttpOnly")
        if self.secure:
            parts.append("Secure")
        if self.same_site:
            parts.append(f"SameSite={self.same_site}")
        return "; ".join(parts)


@dataclass
class Request:
    """An HTTP request as seen by handlers."""

    method: str = "GET"
    path: str = "/"
    raw_query: str = ""
    headers: Headers = field(default_factory=Headers)
    body: BinaryIO = field(default_factory=io.BytesIO)
    remote_addr: str = ""
    host: str = ""
    form: dict[str, list[str]] | None = None

    @classmethod
    def from_environ(cls, environ: Mapping[str, Any]) -> "Request":
        """Build a request from a WSGI environment."""
        headers = Headers()
        for key, value in environ.items():
            if key.startswith("HTTP_"):
                headers.set(key[5:].replace("_", "-"), value)
        for key in ("CONTENT_TYPE", "CONTENT_LENGTH"):
            if environ.get(key):
                headers.set(key.replace("_", "-"), environ[key])
        try:
            length = int(environ.get("CONTENT_LENGTH") or 0)
        except ValueError:
            length = 0
        stream = environ.get("wsgi.input")
        data = stream.read(length) if stream is not None and length > 0 else b""
        addr = environ.get("REMOTE_ADDR", "")
        port = environ.get("REMOTE_PORT", "")
        return cls(
            method=environ.get("REQUEST_METHOD", "GET").upper(),
            path=environ.get("PATH_INFO", "") or "/",
            raw_query=environ.get("QUERY_STRING", ""),
            headers=headers,
            body=io.BytesIO(data),
            remote_addr=f"{addr}:{port}" if port else addr,
            host=headers.get("Host") or environ.get("SERVER_NAME", ""),
        )

    def query(self) -> dict[str, list[str]]:
        """Return the parsed query string."""
        return parse_qs(self.raw_query, keep_blank_values=True)

    def cookies(self) -> list[Cookie]:
        """Return the cookies sent in ``Cookie`` headers."""
        found: list[Cookie] = []
        for line in self.headers.get_all("Cookie"):
            for part in line.split(";"):
                part = part.strip()
                if not part:
                    continue
                name, _, value = part.partition("=")
                name = name.strip()
                if name:
                    found.append(Cookie(name=name, value=value.strip().strip('"')))
        return found

    def cookie(self, name: str) -> Cookie:
        """Return the named cookie; raise ``KeyError`` if it was not sent."""
        for item in self.cookies():
            if item.name == name:
                return item
        raise KeyError(name)

    def parse_form(self) -> dict[str, list[str]]:
        """Parse query and url-encoded body values into ``form`` and return it."""
        if self.form is not None:
            return self.form
        values: dict[str, list[str]] = {}
        if self.method in ("POST", "PUT", "PATCH"):
            ctype = self.headers.get("Content-Type").split(";")[0].strip().lower()
            if ctype == "application/x-www-form-urlencoded":
                raw = self.body.read().decode("utf-8")
                for key, items in parse_qs(raw, keep_blank_values=True).items():
                    values.setdefault(key, []).extend(items)
        for key, items in self.query().items():
            values.setdefault(key, []).extend(items)
        self.form = values
        return values


def make_request(
    method: str,
    target: str,
    body: bytes | str | None = None,
    headers: Mapping[str, str] | None = None,
) -> Request:
    """Build a request for ``target`` the way a test client would."""
    parts = urlsplit(target)
    if isinstance(body, str):
        body = body.encode("utf-8")
    return Request(
        method=method.upper(),
        path=parts.path or "/",
        raw_query=parts.query,
        headers=Headers(dict(headers or {})),
        body=io.BytesIO(body or b""),
        remote_addr="192.0.2.1:1234",
        host=parts.netloc or "example.com",
    )