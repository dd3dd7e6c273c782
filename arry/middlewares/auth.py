"""Token authentication middleware."""

from __future__ import annotations

from typing import Iterable, Optional

from arry.radix import Handler
from arry.router import Middleware


def auth(token: str, methods: Optional[Iterable[str]] = None) -> Middleware:
    """Check the ``Authorization`` header against ``token``.

    The result is stored as ``auth`` on the context. Requests whose method is
    in ``methods`` and that are not authenticated get a 403 JSON error; with no
    methods every request is let through.
    """
    guarded = set(methods or ())

    def middleware(next_handler: Handler) -> Handler:
        def handler(ctx) -> None:
            given = ctx.request.headers.get("Authorization")
            is_authed = bool(given) and given == token
            ctx.set("auth", is_authed)

            if guarded and ctx.request.method in guarded and not is_authed:
                ctx.json_error(403, "forbidden")
                return

            next_handler(ctx)

        return handler

    return middleware