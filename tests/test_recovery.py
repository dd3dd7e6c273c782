import json
import logging

from arry.context import Context
from arry.middlewares.recovery import panic, panic_with_handler
from arry.request import make_request
from arry.response import ResponseRecorder


def boom(ctx):
    raise ValueError(200)


def make_ctx(headers=None):
    rec = ResponseRecorder()
    return rec, Context(make_request("GET", "/", None, headers), rec)


def test_panic():
    rec, ctx = make_ctx()
    panic(boom)(ctx)
    assert rec.code == 500
    assert rec.text() == "Internal Server Error"


def test_panic_replies_json_when_accepted():
    rec, ctx = make_ctx({"Accept": "application/json"})
    panic(boom)(ctx)
    assert rec.code == 500
    assert json.loads(rec.text()) == {"code": 500, "message": "Internal Server Error"}


def test_panic_passes_normal_responses():
    rec, ctx = make_ctx()
    panic(lambda c: c.text(200, "OK"))(ctx)
    assert rec.code == 200
    assert rec.text() == "OK"


def test_panic_with_handler(caplog):
    seen = []

    def on_panic(ctx, err):
        seen.append(err)
        ctx.json_error(503, "down")

    rec, ctx = make_ctx()
    with caplog.at_level(logging.ERROR):
        panic_with_handler(on_panic)(boom)(ctx)

    assert len(seen) == 1
    assert isinstance(seen[0], ValueError)
    assert rec.code == 503
    assert json.loads(rec.text()) == {"error": "down"}
    assert "panic recovered" in caplog.text


def test_panic_with_handler_not_called_without_error():
    seen = []
    rec, ctx = make_ctx()
    panic_with_handler(lambda c, e: seen.append(e))(lambda c: c.text(200, "OK"))(ctx)
    assert seen == []
    assert rec.code == 200