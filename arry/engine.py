"""Choosing and building a template engine from a configuration."""

from __future__ import annotations

import dataclasses
import enum
import os
from collections.abc import Mapping
from typing import Any, Callable

from arry.engines.base import Engine
from arry.engines.html_engine import HTMLEngine
from arry.engines.json_engine import JSONEngine
from arry.engines.plain_engine import PlainEngine
from arry.engines.xml_engine import XMLEngine


class EngineType(str, enum.Enum):
    """Kinds of template engine."""

    HTML = "html"
    JSON = "json"
    YAML = "yaml"
    XML = "xml"
    PLAIN = "plain"


_EXTENSIONS = {
    EngineType.HTML.value: "html",
    EngineType.JSON.value: "json",
    EngineType.YAML.value: "yaml",
    EngineType.XML.value: "xml",
    EngineType.PLAIN.value: "txt",
}

_BY_EXTENSION = {
    "html": EngineType.HTML,
    "htm": EngineType.HTML,
    "json": EngineType.JSON,
    "yaml": EngineType.YAML,
    "yml": EngineType.YAML,
    "xml": EngineType.XML,
    "txt": EngineType.PLAIN,
    "text": EngineType.PLAIN,
}


@dataclasses.dataclass
class EngineConfig:
    """Settings for building an engine; empty values are filled in."""

    kind: EngineType | str | None = None
    directory: str = ""
    extension: str = ""
    func_map: Mapping[str, Callable[..., Any]] | None = None
    cache: bool = False
    indent: str = ""


def detect_engine_type(extension: str) -> EngineType:
    """Infer the engine type from a file extension; HTML when unknown."""
    ext = extension.lower()
    if ext.startswith("."):
        ext = ext[1:]
    return _BY_EXTENSION.get(ext, EngineType.HTML)


def resolve_dir(directory: str) -> str:
    """Return ``directory`` made absolute against the working directory."""
    if not directory:
        return ""
    if os.path.isabs(directory):
        return directory
    return os.path.normpath(os.path.join(os.getcwd(), directory))


def new_engine(directory: str, kind: str = "html") -> Engine:
    """Build a cached HTML engine for ``directory``; ``kind`` is not consulted."""
    return new_engine_with_config(
        EngineConfig(
            kind=EngineType.HTML, directory=directory, extension="html", cache=True
        )
    )


def new_engine_with_config(config: EngineConfig) -> Engine:
    """Build the engine the configuration asks for."""
    kind = config.kind.value if isinstance(config.kind, EngineType) else (config.kind or "")
    extension = config.extension

    if not extension and kind:
        extension = _EXTENSIONS.get(kind, "")
    if not kind and extension:
        kind = detect_engine_type(extension).value
    if not kind:
        kind = EngineType.HTML.value

    basedir = resolve_dir(config.directory)

    if kind == EngineType.JSON.value:
        return JSONEngine(config.indent)
    if kind == EngineType.XML.value:
        return XMLEngine(config.indent)
    if kind in (EngineType.PLAIN.value, EngineType.YAML.value):
        # YAML templates are rendered as plain text.
        return PlainEngine(basedir, extension, config.func_map, config.cache)
    return HTMLEngine(basedir, extension, config.func_map, config.cache)