"""Plain-text template engine without escaping."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Callable, TextIO

from arry.engines.base import _TemplateEngine


class PlainEngine(_TemplateEngine):
    """Renders ``*.txt`` templates from a directory, leaving values as they are."""

    def __init__(
        self,
        basedir: str,
        extension: str = "txt",
        func_map: Mapping[str, Callable[..., Any]] | None = None,
        cache: bool = True,
    ) -> None:
        super().__init__(
            basedir, extension or "txt", func_map, cache, autoescape=False
        )

    def render(self, out: TextIO, name: str, data: Any, ctx: Any = None) -> None:
        """Render template ``name`` with ``data`` into ``out``."""
        self._execute(out, name, data)

    def content_type(self) -> str:
        return "text/plain; charset=utf-8"

    def clear_cache(self) -> None:
        """Forget every cached template."""
        self._reset_cache()