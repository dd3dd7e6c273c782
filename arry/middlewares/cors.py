"""Cross-origin resource sharing middleware."""

from __future__ import annotations

import dataclasses

from arry.radix import Handler
from arry.router import Middleware


@dataclasses.dataclass
class CORSConfig:
    """Allowed origins, methods and headers; empty lists take the defaults."""

    allow_origins: list[str] = dataclasses.field(default_factory=list)
    allow_methods: list[str] = dataclasses.field(default_factory=list)
    allow_headers: list[str] = dataclasses.field(default_factory=list)


DEFAULT_CORS_CONFIG = CORSConfig(
    allow_origins=["*"],
    allow_methods=["GET", "POST", "PUT", "DELETE", "PATCH", "OPTIONS"],
    allow_headers=["Origin", "Content-Type", "Accept", "Authorization"],
)


def cors() -> Middleware:
    """Return a CORS middleware with the permissive default configuration."""
    return cors_with_config(DEFAULT_CORS_CONFIG)


def cors_with_config(config: CORSConfig) -> Middleware:
    """Return a CORS middleware for ``config``."""
    origins = list(config.allow_origins or DEFAULT_CORS_CONFIG.allow_origins)
    allow_methods = ", ".join(config.allow_methods or DEFAULT_CORS_CONFIG.allow_methods)
    allow_headers = ", ".join(config.allow_headers or DEFAULT_CORS_CONFIG.allow_headers)

    def middleware(next_handler: Handler) -> Handler:
        def handler(ctx) -> None:
            origin = ctx.header("Origin")
            if not origin or not any(o == "*" or o == origin for o in origins):
                next_handler(ctx)
                return

            ctx.set_header(
                "Access-Control-Allow-Origin", "*" if origins[0] == "*" else origin
            )
            ctx.set_header("Access-Control-Allow-Methods", allow_methods)
            ctx.set_header("Access-Control-Allow-Headers", allow_headers)

            if ctx.request.method == "OPTIONS":
                ctx.status(204)
                return

            next_handler(ctx)

        return handler

    return middleware