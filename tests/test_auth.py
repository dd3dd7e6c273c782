import json

from arry.context import Context
from arry.middlewares.auth import auth
from arry.request import make_request
from arry.response import ResponseRecorder


def run(middleware, method, headers=None):
    rec = ResponseRecorder()
    ctx = Context(make_request(method, "/", None, headers), rec)
    calls = []

    def handler(c):
        calls.append(c.is_authed())
        c.text(200, "OK")

    middleware(handler)(ctx)
    return rec, ctx, calls


def test_guarded_method_without_token_is_forbidden():
    rec, ctx, calls = run(auth("Bearer token", ["POST"]), "POST")
    assert rec.code == 403
    assert json.loads(rec.text()) == {"error": "forbidden"}
    assert calls == []
    assert ctx.is_authed() is False


def test_guarded_method_with_token_passes():
    rec, ctx, calls = run(
        auth("Bearer token", ["POST"]), "POST", {"Authorization": "Bearer token"}
    )
    assert rec.code == 200
    assert calls == [True]


def test_wrong_token_is_forbidden():
    rec, _, calls = run(
        auth("Bearer token", ["POST", "DELETE"]),
        "DELETE",
        {"Authorization": "Bearer placeholder"},
    )
    assert rec.code == 403
    assert calls == []


def test_unguarded_method_passes_unauthenticated():
    rec, ctx, calls = run(auth("Bearer token", ["POST"]), "GET")
    assert rec.code == 200
    assert calls == [False]


def test_no_methods_lets_everything_through():
    rec, _, calls = run(auth("Bearer token", None), "POST")
    assert rec.code == 200
    assert calls == [False]


def test_empty_token_never_authenticates():
    rec, _, calls = run(auth("", ["GET"]), "GET", {"Authorization": ""})
    assert rec.code == 403
    assert calls == []