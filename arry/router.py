"""HTTP router with per-router middlewares and sub-router grafting."""

from __future__ import annotations

from typing import Any, Callable, Iterable, Optional

from arry.radix import Handler, NodeType, RadixNode, RadixTree

Middleware = Callable[[Handler], Handler]

_ALL_METHODS = ("GET", "POST", "PUT", "DELETE", "PATCH", "OPTIONS", "HEAD")


def apply_middlewares(handler: Handler, middlewares: Iterable[Middleware]) -> Handler:
    """Wrap ``handler`` so the first middleware runs outermost."""
    for middleware in reversed(list(middlewares)):
        handler = middleware(handler)
    return handler


def default_handler(ctx: Any) -> None:
    """Reply 404 Not Found."""
    ctx.reply(404)


class Router:
    """Maps method and path patterns to handlers."""

    def __init__(self, *middlewares: Middleware) -> None:
        self.tree = RadixTree()
        self.handler: Handler = default_handler
        self.middlewares: list[Middleware] = list(middlewares)

    def handle(self, method: str, pattern: str, handler: Handler) -> None:
        """Register ``handler``, wrapped in the router's current middlewares."""
        if self.middlewares:
            handler = apply_middlewares(handler, self.middlewares)
        self.tree.insert(method, pattern, handler)

    def get(self, pattern: str, handler: Handler) -> None:
        self.handle("GET", pattern, handler)

    def post(self, pattern: str, handler: Handler) -> None:
        self.handle("POST", pattern, handler)

    def put(self, pattern: str, handler: Handler) -> None:
        self.handle("PUT", pattern, handler)

    def delete(self, pattern: str, handler: Handler) -> None:
        self.handle("DELETE", pattern, handler)

    def patch(self, pattern: str, handler: Handler) -> None:
        self.handle("PATCH", pattern, handler)

    def options(self, pattern: str, handler: Handler) -> None:
        self.handle("OPTIONS", pattern, handler)

    def head(self, pattern: str, handler: Handler) -> None:
        self.handle("HEAD", pattern, handler)

    def any(self, pattern: str, handler: Handler) -> None:
        """Register ``handler`` for every common HTTP method."""
        for method in _ALL_METHODS:
            self.handle(method, pattern, handler)

    def match(self, methods: Iterable[str], pattern: str, handler: Handler) -> None:
        """Register ``handler`` for each of ``methods``."""
        for method in methods:
            self.handle(method, pattern, handler)

    def graft(self, pattern: str, sub_router: "Router") -> None:
        """Mount every route of ``sub_router`` under ``pattern``."""
        if self.middlewares:
            self._wrap_subtree(sub_router.tree.root, self.middlewares)
        self._graft_node(pattern, sub_router.tree.root, "")

    def _wrap_subtree(self, node: Optional[RadixNode], middlewares: list[Middleware]) -> None:
        if node is None:
            return
        node.methods = {
            method: apply_middlewares(handler, middlewares)
            for method, handler in node.methods.items()
        }
        for child in node.children:
            self._wrap_subtree(child, middlewares)
        self._wrap_subtree(node.param_child, middlewares)
        self._wrap_subtree(node.catch_all_child, middlewares)

    def _graft_node(self, prefix: str, node: RadixNode, current_path: str) -> None:
        if node.node_type == NodeType.ROOT:
            full_path = prefix
        elif node.node_type == NodeType.PARAM:
            full_path = f"{current_path}/:{node.param_name}"
        elif node.node_type == NodeType.CATCH_ALL:
            full_path = f"{current_path}/*"
        else:
            full_path = f"{current_path}/{node.prefix}"

        for method, handler in node.methods.items():
            if node.node_type == NodeType.ROOT and prefix:
                self.tree.insert(method, prefix, handler)
            elif full_path:
                self.tree.insert(method, full_path, handler)

        for child in node.children:
            self._graft_node(prefix, child, full_path)
        if node.param_child is not None:
            self._graft_node(prefix, node.param_child, full_path)
        if node.catch_all_child is not None:
            self._graft_node(prefix, node.catch_all_child, full_path)

    def route(self, url: str, ctx: Any) -> Optional[RadixNode]:
        """Return the tree node matching ``url``, or ``None``."""
        return self.tree.search(url, ctx)

    def use(self, *middlewares: Middleware) -> None:
        """Add middlewares applied to routes registered after this call."""
        self.middlewares.extend(middlewares)