"""Engine that serialises data as JSON."""

from __future__ import annotations

import json
from typing import Any, TextIO

from arry.engines.base import Engine


class JSONEngine(Engine):
    """Writes the data as indented JSON; the template name is ignored."""

    def __init__(self, indent: str = "") -> None:
        self.indent = indent or "  "

    def render(self, out: TextIO, name: str, data: Any, ctx: Any = None) -> None:
        out.write(json.dumps(data, indent=self.indent, ensure_ascii=False) + "\n")

    def content_type(self) -> str:
        return "application/json; charset=utf-8"