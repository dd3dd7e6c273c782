"""HTTP response headers, writers and the response wrapper used by handlers."""

from __future__ import annotations

import abc
from dataclasses import dataclass, field
from typing import Iterator


def _canonical(key: str) -> str:
    """Return the canonical form of a header name, e.g. ``x-test`` -> ``X-Test``."""
    return "-".join(part[:1].upper() + part[1:].lower() for part in key.split("-"))


class Headers:
    """Case-insensitive, multi-valued HTTP header map."""

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self._values: dict[str, list[str]] = {}
        for key, value in (initial or {}).items():
            self.set(key, value)

    def get(self, key: str) -> str:
        """Return the first value for ``key``, or an empty string."""
        values = self._values.get(_canonical(key))
        return values[0] if values else ""

    def get_all(self, key: str) -> list[str]:
        """Return every value stored for ``key``."""
        return list(self._values.get(_canonical(key), []))

    def set(self, key: str, value: str) -> None:
        """Replace all values of ``key`` with ``value``."""
        self._values[_canonical(key)] = [value]

    def add(self, key: str, value: str) -> None:
        """Append ``value`` to the values of ``key``."""
        self._values.setdefault(_canonical(key), []).append(value)

    def delete(self, key: str) -> None:
        """Remove ``key`` entirely."""
        self._values.pop(_canonical(key), None)

    def items(self) -> Iterator[tuple[str, str]]:
        """Yield ``(name, value)`` pairs, one per value."""
        for key, values in self._values.items():
            for value in values:
                yield key, value

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and _canonical(key) in self._values

    def __repr__(self) -> str:
        return f"Headers({self._values!r})"


class ResponseWriter(abc.ABC):
    """Destination of an HTTP response: headers, status line and body."""

    headers: Headers

    @abc.abstractmethod
    def write(self, data: bytes) -> int:
        """Write body bytes and return how many were written."""

    @abc.abstractmethod
    def write_header(self, code: int) -> None:
        """Send the status code and headers."""


class ResponseRecorder(ResponseWriter):
    """A writer that keeps everything in memory."""

    def __init__(self) -> None:
        self.headers = Headers()
        self.code = 200
        self.body = bytearray()
        self.wrote_header = False

    def write(self, data: bytes) -> int:
        if not self.wrote_header:
            self.write_header(200)
        self.body.extend(data)
        return len(data)

    def write_header(self, code: int) -> None:
        if self.wrote_header:
            return
        self.code = code
        self.wrote_header = True

    def text(self) -> str:
        """Return the recorded body decoded as UTF-8."""
        return self.body.decode("utf-8", errors="replace")


@dataclass
class Response:
    """Wraps a writer, remembering the status code until the first write."""

    writer: ResponseWriter
    code: int = 404
    sent: bool = field(default=False)

    def header(self) -> Headers:
        return self.writer.headers

    def write(self, data: bytes) -> int:
        if not self.sent:
            self.write_header(self.code)
        return self.writer.write(data)

    def write_header(self, code: int) -> None:
        self.writer.write_header(code)
        self.sent = True