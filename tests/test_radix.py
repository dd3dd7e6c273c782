import pytest

from arry.context import Context
from arry.radix import (
    NodeType,
    RadixNode,
    RadixTree,
    longest_common_prefix,
    set_params,
)
from arry.request import make_request
from arry.response import ResponseRecorder


def _ctx(path="/"):
    return Context(make_request("GET", path), ResponseRecorder())


def _noop(ctx):
    pass


def test_prefix_compression():
    tree = RadixTree()
    for path in ("/users/admin", "/users/list", "/users/create"):
        tree.insert("GET", path, _noop)

    for path in ("/users/admin", "/users/list", "/users/create"):
        node = tree.search(path, _ctx(path))
        assert node is not None
        assert node.methods.get("GET") is _noop


@pytest.mark.parametrize(
    "a, b, want",
    [
        ("", "", 0),
        ("a", "", 0),
        ("", "a", 0),
        ("abc", "abc", 3),
        ("abc", "abd", 2),
        ("hello", "help", 3),
        ("users/admin", "users/list", 6),
    ],
)
def test_longest_common_prefix(a, b, want):
    assert longest_common_prefix(a, b) == want


def test_shared_first_letter_is_split_and_sorted():
    tree = RadixTree()
    tree.insert("GET", "/assets/*", _noop)
    tree.insert("GET", "/article", _noop)

    assert [child.prefix for child in tree.root.children] == ["a"]
    shared = tree.root.children[0]
    assert [child.prefix for child in shared.children] == ["rticle", "ssets"]
    assert shared.node_type == NodeType.STATIC


def test_split_keeps_existing_handlers():
    first = lambda ctx: None  # noqa: E731
    second = lambda ctx: None  # noqa: E731
    tree = RadixTree()
    tree.insert("GET", "/article", first)
    tree.insert("GET", "/art", second)

    assert tree.search("/article", None).methods["GET"] is first
    assert tree.search("/art", None).methods["GET"] is second


def test_split_moves_prefix_tail_into_child():
    node = RadixNode(prefix="hello", label="h", node_type=NodeType.STATIC)
    node.methods["GET"] = _noop
    node.split(2)

    assert node.prefix == "he"
    assert node.methods == {}
    assert len(node.children) == 1
    child = node.children[0]
    assert child.prefix == "llo"
    assert child.label == "l"
    assert child.methods["GET"] is _noop


def test_methods_are_stored_upper_case():
    tree = RadixTree()
    tree.insert("post", "/items", _noop)
    assert set(tree.search("/items", None).methods) == {"POST"}


def test_param_value_is_recorded():
    tree = RadixTree()
    tree.insert("GET", "/users/:id", _noop)
    ctx = _ctx()
    node = tree.search("/users/42", ctx)
    assert node.node_type == NodeType.PARAM
    assert ctx.param("id") == "42"


def test_catch_all_joins_and_cleans_remaining_path():
    tree = RadixTree()
    tree.insert("GET", "/files/*", _noop)
    ctx = _ctx()
    node = tree.search("/files/a/../b//c.txt", ctx)
    assert node.node_type == NodeType.CATCH_ALL
    assert ctx.param("*") == "b/c.txt"


def test_unknown_path_returns_none():
    tree = RadixTree()
    tree.insert("GET", "/users/admin", _noop)
    assert tree.search("/posts", None) is None
    assert tree.search("/users/other", None) is None


def test_root_search_returns_root():
    tree = RadixTree()
    assert tree.search("/", None) is tree.root


def test_set_params_on_context():
    ctx = _ctx()
    set_params("name", "jim", ctx)
    assert ctx.params == {"name": "jim"}


def test_set_params_initialises_missing_map():
    class Holder:
        params = None

    holder = Holder()
    set_params("k", "v", holder)
    assert holder.params == {"k": "v"}