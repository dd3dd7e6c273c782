"""Engine that serialises data as XML."""

from __future__ import annotations

import copy
import dataclasses
import xml.etree.ElementTree as ET
from collections.abc import Mapping
from typing import Any, TextIO

from arry.engines.base import Engine

XML_HEADER = '<?xml version="1.0" encoding="UTF-8"?>\n'


def _text(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (bytes, bytearray)):
        return bytes(value).decode("utf-8")
    if isinstance(value, (str, int, float)):
        return str(value)
    raise TypeError(f"xml: unsupported type: {type(value).__name__}")


def _is_record(value: Any) -> bool:
    return dataclasses.is_dataclass(value) and not isinstance(value, type)


def _append(parent: ET.Element, tag: str, value: Any) -> None:
    if value is None:
        return
    if isinstance(value, (list, tuple)):
        for item in value:
            _append(parent, tag, item)
        return
    parent.append(_build(tag, value))


def _build(tag: str, value: Any) -> ET.Element:
    if isinstance(value, ET.Element):
        element = copy.deepcopy(value)
        element.tag = tag
        return element
    if isinstance(value, Mapping):
        raise TypeError(f"xml: unsupported type: {type(value).__name__}")
    element = ET.Element(tag)
    if _is_record(value):
        for item in dataclasses.fields(value):
            name = item.metadata.get("xml", item.name)
            if name == "-":
                continue
            _append(element, name, getattr(value, item.name))
    else:
        element.text = _text(value)
    return element


def _root(data: Any) -> ET.Element:
    if isinstance(data, ET.Element):
        return copy.deepcopy(data)
    if _is_record(data):
        tag = getattr(data, "xml_name", None) or type(data).__name__
        return _build(tag, data)
    raise TypeError(f"xml: unsupported type: {type(data).__name__}")


class XMLEngine(Engine):
    """Writes dataclass instances or elements as XML; the template name is ignored.

    A dataclass's root tag is its ``xml_name`` attribute or its class name; a
    field's tag is ``metadata["xml"]`` or its name, and ``"-"`` skips the field.
    """

    def __init__(self, indent: str = "") -> None:
        self.indent = indent or "  "

    def render(self, out: TextIO, name: str, data: Any, ctx: Any = None) -> None:
        out.write(XML_HEADER)
        if data is None:
            return
        root = _root(data)
        if self.indent:
            ET.indent(root, space=self.indent)
        out.write(ET.tostring(root, encoding="unicode"))

    def content_type(self) -> str:
        return "application/xml; charset=utf-8"