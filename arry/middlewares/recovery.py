"""Middlewares that turn exceptions raised by handlers into error responses."""

from __future__ import annotations

import logging
from typing import Any, Callable

from arry.radix import Handler
from arry.router import Middleware

PanicHandler = Callable[[Any, BaseException], None]

_log = logging.getLogger(__name__)


def panic(next_handler: Handler) -> Handler:
    """Reply 500 when the wrapped handler raises."""

    def handler(ctx) -> None:
        try:
            next_handler(ctx)
        except Exception:
            ctx.reply(500)

    return handler


def panic_with_handler(handler: PanicHandler) -> Middleware:
    """Log exceptions from the wrapped handler and pass them to ``handler``."""

    def middleware(next_handler: Handler) -> Handler:
        def wrapped(ctx) -> None:
            try:
                next_handler(ctx)
            except Exception as exc:
                _log.error("panic recovered: %r", exc)
                handler(ctx, exc)

        return wrapped

    return middleware