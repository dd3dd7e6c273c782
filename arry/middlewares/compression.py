"""Gzip response compression middleware."""

from __future__ import annotations

import gzip as _gzip
from typing import Optional

from arry.radix import Handler
from arry.response import Headers, ResponseWriter

_SNIFF_LEN = 512

_HTML_TAGS = (
    b"<!DOCTYPE HTML",
    b"<HTML",
    b"<HEAD",
    b"<SCRIPT",
    b"<IFRAME",
    b"<H1",
    b"<DIV",
    b"<FONT",
    b"<TABLE",
    b"<A",
    b"<STYLE",
    b"<TITLE",
    b"<B",
    b"<BODY",
    b"<BR",
    b"<P",
    b"<!--",
)

_EXACT = (
    (b"%PDF-", "application/pdf"),
    (b"%!PS-Adobe-", "application/postscript"),
    (b"\xfe\xff", "text/plain; charset=utf-16be"),
    (b"\xff\xfe", "text/plain; charset=utf-16le"),
    (b"\xef\xbb\xbf", "text/plain; charset=utf-8"),
    (b"GIF87a", "image/gif"),
    (b"GIF89a", "image/gif"),
    (b"\x89PNG\r\n\x1a\n", "image/png"),
    (b"\xff\xd8\xff", "image/jpeg"),
    (b"BM", "image/bmp"),
    (b"\x1f\x8b\x08", "application/x-gzip"),
    (b"PK\x03\x04", "application/zip"),
    (b"\x00asm", "application/wasm"),
)

_BINARY = frozenset(range(0x00, 0x09)) | {0x0B} | frozenset(range(0x0E, 0x1B)) | frozenset(
    range(0x1C, 0x20)
)


def detect_content_type(data: bytes) -> str:
    """Guess a content type from the first bytes of a body."""
    head = bytes(data[:_SNIFF_LEN])
    stripped = head.lstrip(b"\t\n\x0c\r ")

    for tag in _HTML_TAGS:
        if stripped[: len(tag)].upper() == tag and len(stripped) > len(tag):
            if stripped[len(tag)] in b" >":
                return "text/html; charset=utf-8"
    if stripped.startswith(b"<?xml"):
        return "text/xml; charset=utf-8"
    for signature, kind in _EXACT:
        if head.startswith(signature):
            return kind
    if head[:4] == b"RIFF" and head[8:14] == b"WEBPVP":
        return "image/webp"
    if any(byte in _BINARY for byte in head):
        return "application/octet-stream"
    return "text/plain; charset=utf-8"


class _Sink:
    """File-like adapter that forwards compressed bytes to a writer."""

    def __init__(self, writer: ResponseWriter) -> None:
        self._writer = writer

    def write(self, data: bytes) -> int:
        if data:
            self._writer.write(bytes(data))
        return len(data)

    def flush(self) -> None:
        return


class GzipWriter(ResponseWriter):
    """Writer that compresses the body and fills in a missing content type."""

    def __init__(self, writer: ResponseWriter) -> None:
        self.writer = writer
        self._stream: Optional[_gzip.GzipFile] = None

    @property
    def headers(self) -> Headers:  # type: ignore[override]
        return self.writer.headers

    def _compressor(self) -> _gzip.GzipFile:
        # Created lazily so the gzip header is not written before the status.
        if self._stream is None:
            self._stream = _gzip.GzipFile(
                fileobj=_Sink(self.writer), mode="wb", compresslevel=5, mtime=0
            )
        return self._stream

    def write(self, data: bytes) -> int:
        if not self.headers.get("Content-Type"):
            self.headers.set("Content-Type", detect_content_type(data))
        self._compressor().write(data)
        return len(data)

    def write_header(self, code: int) -> None:
        self.writer.write_header(code)

    def close(self) -> None:
        """Flush the compressed stream and write the gzip trailer."""
        self._compressor().close()


def gzip(next_handler: Handler) -> Handler:
    """Middleware compressing every response body with gzip."""

    def handler(ctx) -> None:
        writer = GzipWriter(ctx.response.writer)
        writer.headers.set("Content-Encoding", "gzip")
        ctx.response.writer = writer
        try:
            next_handler(ctx)
        finally:
            writer.close()

    return handler