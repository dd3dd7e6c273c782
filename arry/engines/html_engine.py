"""HTML template engine with automatic escaping."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Callable, TextIO

from arry.engines.base import _TemplateEngine


class HTMLEngine(_TemplateEngine):
    """Renders ``*.html`` templates from a directory, escaping values."""

    def __init__(
        self,
        basedir: str,
        extension: str = "html",
        func_map: Mapping[str, Callable[..., Any]] | None = None,
        cache: bool = True,
    ) -> None:
        super().__init__(
            basedir, extension or "html", func_map, cache, autoescape=True
        )

    def render(self, out: TextIO, name: str, data: Any, ctx: Any = None) -> None:
        """Render template ``name`` with ``data`` into ``out``."""
        self._execute(out, name, data)

    def content_type(self) -> str:
        return "text/html; charset=utf-8"

    def clear_cache(self) -> None:
        """Forget every cached template."""
        self._reset_cache()