"""Radix tree used by the router to match URL paths to handlers."""

from __future__ import annotations

import enum
import posixpath
from dataclasses import dataclass, field
from typing import Any, Callable, Optional

Handler = Callable[[Any], None]


class NodeType(enum.IntEnum):
    """Kind of a tree node, in order of matching priority after the root."""

    ROOT = 0
    STATIC = 1
    PARAM = 2
    CATCH_ALL = 3


def set_params(key: str, value: str, ctx: Any) -> None:
    """Store a path parameter on ``ctx``; does nothing when there is no context."""
    if ctx is None or not hasattr(ctx, "params"):
        return
    if ctx.params is None:
        ctx.params = {}
    ctx.params[key] = value


def longest_common_prefix(a: str, b: str) -> int:
    """Return the length of the longest common prefix of ``a`` and ``b``."""
    length = 0
    for left, right in zip(a, b):
        if left != right:
            break
        length += 1
    return length


def _join_remaining(segments: list[str]) -> str:
    parts = [segment for segment in segments if segment]
    if not parts:
        return ""
    return posixpath.normpath("/".join(parts))


@dataclass(eq=False)
class RadixNode:
    """One node of the routing tree."""

    prefix: str
    label: str
    node_type: NodeType
    children: list["RadixNode"] = field(default_factory=list, repr=False)
    param_child: Optional["RadixNode"] = field(default=None, repr=False)
    catch_all_child: Optional["RadixNode"] = field(default=None, repr=False)
    methods: dict[str, Handler] = field(default_factory=dict, repr=False)
    param_name: str = ""

    def insert(
        self, method: str, segments: list[str], handler: Handler, depth: int = 0
    ) -> None:
        """Insert the route segments starting at ``depth`` below this node."""
        if depth >= len(segments):
            self.methods[method.upper()] = handler
            return

        segment = segments[depth]
        if not segment:
            self.insert(method, segments, handler, depth + 1)
            return

        if segment.startswith(":"):
            name = segment[1:]
            if self.param_child is None:
                self.param_child = RadixNode(
                    prefix=name, label=":", node_type=NodeType.PARAM, param_name=name
                )
            self.param_child.insert(method, segments, handler, depth + 1)
        elif segment.startswith("*"):
            if self.catch_all_child is None:
                self.catch_all_child = RadixNode(
                    prefix="*", label="*", node_type=NodeType.CATCH_ALL, param_name="*"
                )
            # A catch-all swallows everything after it.
            self.catch_all_child.methods[method.upper()] = handler
        else:
            self.insert_static(method, segment, segments, handler, depth)

    def insert_static(
        self,
        method: str,
        segment: str,
        segments: list[str],
        handler: Handler,
        depth: int,
    ) -> None:
        """Insert a static segment, sharing prefixes with existing children."""
        for child in self.children:
            lcp = longest_common_prefix(segment, child.prefix)
            if lcp == 0:
                continue
            if lcp == len(child.prefix) and lcp == len(segment):
                child.insert(method, segments, handler, depth + 1)
                return
            if lcp < len(child.prefix):
                child.split(lcp)
            if lcp < len(segment):
                child.insert_static(method, segment[lcp:], segments, handler, depth)
            else:
                child.insert(method, segments, handler, depth + 1)
            return

        new_child = RadixNode(prefix=segment, label=segment[0], node_type=NodeType.STATIC)
        self.children.append(new_child)
        self.children.sort(key=lambda node: node.label)
        new_child.insert(method, segments, handler, depth + 1)

    def search(self, segments: list[str], ctx: Any) -> Optional["RadixNode"]:
        """Find the node for ``segments``: static first, then param, then catch-all."""
        if not segments:
            return self

        segment = segments[0]
        if not segment:
            return self.search(segments[1:], ctx)

        rest = segments[1:]

        result = self.match_static(segment, rest, ctx)
        if result is not None:
            return result

        if self.param_child is not None:
            set_params(self.param_child.param_name, segment, ctx)
            result = self.param_child.search(rest, ctx)
            if result is not None:
                return result

        if self.catch_all_child is not None:
            set_params("*", _join_remaining(segments), ctx)
            return self.catch_all_child

        return None

    def match_static(
        self, segment: str, next_segments: list[str], ctx: Any
    ) -> Optional["RadixNode"]:
        """Walk prefix-compressed static children to consume a whole segment."""
        for child in self.children:
            if not segment.startswith(child.prefix):
                continue
            remaining = segment[len(child.prefix):]
            if remaining:
                result = child.match_static(remaining, next_segments, ctx)
            else:
                result = child.search(next_segments, ctx)
            if result is not None:
                return result
        return None

    def split(self, pos: int) -> None:
        """Split this node at ``pos``, moving the tail of its prefix into a child."""
        child = RadixNode(
            prefix=self.prefix[pos:],
            label=self.prefix[pos],
            node_type=self.node_type,
            children=self.children,
            param_child=self.param_child,
            catch_all_child=self.catch_all_child,
            methods=self.methods,
            param_name=self.param_name,
        )
        self.prefix = self.prefix[:pos]
        if self.prefix:
            self.label = self.prefix[0]
        self.node_type = NodeType.STATIC
        self.children = [child]
        self.param_child = None
        self.catch_all_child = None
        self.methods = {}
        self.param_name = ""


class RadixTree:
    """A routing tree rooted at ``/``."""

    def __init__(self) -> None:
        self.root = RadixNode(prefix="/", label="/", node_type=NodeType.ROOT)

    def insert(self, method: str, pattern: str, handler: Handler) -> None:
        """Register ``handler`` for ``method`` on ``pattern``."""
        self.root.insert(method, pattern.split("/")[1:], handler, 0)

    def search(self, path: str, ctx: Any) -> Optional[RadixNode]:
        """Return the node matching ``path``, recording parameters on ``ctx``."""
        return self.root.search(path.split("/")[1:], ctx)