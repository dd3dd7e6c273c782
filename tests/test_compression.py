import gzip as gzip_module

import pytest

from arry.context import Context
from arry.middlewares.compression import GzipWriter, detect_content_type, gzip
from arry.request import make_request
from arry.response import ResponseRecorder


def run(handler):
    rec = ResponseRecorder()
    ctx = Context(make_request("GET", "/"), rec)
    gzip(handler)(ctx)
    return rec


def test_gzip():
    rec = run(lambda ctx: ctx.text(200, "OK"))
    assert rec.code == 200
    assert rec.headers.get("Content-Encoding") == "gzip"
    assert rec.headers.get("Content-Type") == "text/plain"
    assert gzip_module.decompress(bytes(rec.body)) == b"OK"


def test_status_code_is_kept():
    rec = run(lambda ctx: ctx.text(201, "made"))
    assert rec.code == 201
    assert gzip_module.decompress(bytes(rec.body)) == b"made"


def test_content_type_is_sniffed_when_missing():
    page = b"<html><body>x</body></html>"
    rec = run(lambda ctx: ctx.blob(200, page))
    assert rec.headers.get("Content-Type") == "text/html; charset=utf-8"
    assert gzip_module.decompress(bytes(rec.body)) == page


def test_empty_body_is_valid_gzip():
    rec = run(lambda ctx: None)
    assert rec.code == 200
    assert gzip_module.decompress(bytes(rec.body)) == b""


def test_writer_round_trip_large_body():
    rec = ResponseRecorder()
    writer = GzipWriter(rec)
    payload = b"abc" * 50000
    writer.write_header(200)
    assert writer.write(payload) == len(payload)
    writer.close()
    assert gzip_module.decompress(bytes(rec.body)) == payload
    assert len(rec.body) < len(payload)


@pytest.mark.parametrize(
    "data, expected",
    [
        (b"<html><p>hi</p></html>", "text/html; charset=utf-8"),
        (b"  <!DOCTYPE html>\n<html>", "text/html; charset=utf-8"),
        (b'<?xml version="1.0"?><a/>', "text/xml; charset=utf-8"),
        (b"%PDF-1.4", "application/pdf"),
        (b"\x89PNG\r\n\x1a\n\x00\x00", "image/png"),
        (b"GIF89a....", "image/gif"),
        (b"plain words", "text/plain; charset=utf-8"),
        (b"\x00\x01\x02", "application/octet-stream"),
    ],
)
def test_detect_content_type(data, expected):
    assert detect_content_type(data) == expected