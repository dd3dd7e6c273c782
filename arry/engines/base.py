"""Common pieces shared by the template engines."""

from __future__ import annotations

import abc
import glob
import os
import posixpath
import threading
from collections.abc import Mapping
from typing import Any, Callable, TextIO

import jinja2


class Engine(abc.ABC):
    """Something that turns a template name and data into response text."""

    @abc.abstractmethod
    def render(self, out: TextIO, name: str, data: Any, ctx: Any) -> None:
        """Write the rendered output for ``name`` and ``data`` to ``out``."""

    @abc.abstractmethod
    def content_type(self) -> str:
        """Return the content type of the rendered output."""


class BaseEngine:
    """Template directory, cache switch and the lock guarding the cache."""

    def __init__(self, basedir: str, cache_enabled: bool) -> None:
        self.basedir = basedir
        self.cache_enabled = cache_enabled
        self.lock = threading.Lock()

    def full_path(self, name: str) -> str:
        """Return the path of template ``name`` inside the base directory."""
        parts = [part for part in (self.basedir, name) if part]
        if not parts:
            return ""
        return posixpath.normpath("/".join(parts))


class _TemplateEngine(BaseEngine, Engine):
    """File-based engine: loads ``*.<extension>`` templates from a directory."""

    def __init__(
        self,
        basedir: str,
        extension: str,
        func_map: Mapping[str, Callable[..., Any]] | None,
        cache: bool,
        *,
        autoescape: bool,
    ) -> None:
        super().__init__(basedir, cache)
        self.extension = extension
        self.func_map = dict(func_map) if func_map is not None else None
        self.cache: dict[str, jinja2.Template] | None = {} if cache else None
        self._env = jinja2.Environment(
            loader=jinja2.FileSystemLoader(basedir or "."),
            autoescape=autoescape,
            keep_trailing_newline=True,
            cache_size=0,
        )
        if self.func_map:
            self._env.globals.update(self.func_map)
            self._env.filters.update(self.func_map)

        pattern = os.path.join(basedir or ".", f"*.{extension}")
        matches = sorted(glob.glob(pattern))
        if not matches:
            raise FileNotFoundError(f"pattern matches no files: {pattern}")
        for match in matches:
            # Parse every template up front so syntax errors surface immediately.
            self._env.get_template(os.path.basename(match))

    def _template(self, name: str) -> jinja2.Template:
        if self.cache is None:
            return self._env.get_template(name)
        with self.lock:
            template = self.cache.get(name)
            if template is None:
                template = self._env.get_template(name)
                self.cache[name] = template
            return template

    def _execute(self, out: TextIO, name: str, data: Any) -> None:
        template = self._template(name)
        variables: dict[str, Any] = dict(data) if isinstance(data, Mapping) else {}
        variables.setdefault("data", data)
        out.write(template.render(**variables))

    def _reset_cache(self) -> None:
        with self.lock:
            self.cache = {} if self.cache_enabled else None