import io

import jinja2
import pytest

from arry.engines.html_engine import HTMLEngine

STATIC = "<!doctype html>\n<html><body><h1>Static & plain</h1></body></html>\n"


@pytest.fixture
def assets(tmp_path):
    (tmp_path / "static.html").write_text(STATIC, encoding="utf-8")
    (tmp_path / "greet.html").write_text("Hello {{ name }}", encoding="utf-8")
    (tmp_path / "raw.html").write_text("{{ data }}", encoding="utf-8")
    (tmp_path / "shout.html").write_text("{{ shout(name) }}", encoding="utf-8")
    return tmp_path


def render(engine, name, data=None):
    out = io.StringIO()
    engine.render(out, name, data, None)
    return out.getvalue()


def test_renders_file_verbatim(assets):
    engine = HTMLEngine(str(assets), "html", None, True)
    assert render(engine, "static.html") == STATIC


def test_caching(assets):
    engine = HTMLEngine(str(assets), "html", None, True)
    first = render(engine, "static.html")
    assert "static.html" in engine.cache
    second = render(engine, "static.html")
    assert first == second


def test_cached_template_survives_file_change(assets):
    engine = HTMLEngine(str(assets), "html", None, True)
    render(engine, "static.html")
    (assets / "static.html").write_text("changed", encoding="utf-8")
    assert render(engine, "static.html") == STATIC


def test_no_caching(assets):
    engine = HTMLEngine(str(assets), "html", None, False)
    assert engine.cache is None
    assert render(engine, "static.html") == STATIC
    (assets / "static.html").write_text("changed", encoding="utf-8")
    assert render(engine, "static.html") == "changed"


def test_content_type(assets):
    engine = HTMLEngine(str(assets), "html", None, True)
    assert engine.content_type() == "text/html; charset=utf-8"


def test_custom_func_map(assets):
    engine = HTMLEngine(str(assets), "html", {"shout": lambda s: s.upper() + "!"}, True)
    assert "shout" in engine.func_map
    assert render(engine, "shout.html", {"name": "jim"}) == "JIM!"


def test_clear_cache(assets):
    engine = HTMLEngine(str(assets), "html", None, True)
    render(engine, "static.html")
    assert len(engine.cache) == 1
    engine.clear_cache()
    assert len(engine.cache) == 0


def test_mapping_data_and_escaping(assets):
    engine = HTMLEngine(str(assets), "html", None, True)
    assert render(engine, "greet.html", {"name": "jim"}) == "Hello jim"
    assert render(engine, "raw.html", "<b>") == "&lt;b&gt;"


def test_missing_template_raises(assets):
    engine = HTMLEngine(str(assets), "html", None, True)
    with pytest.raises(jinja2.TemplateNotFound) as excinfo:
        render(engine, "missing.html")
    assert "missing.html" in str(excinfo.value)
    assert "missing.html" not in engine.cache


def test_directory_without_templates_raises(tmp_path):
    with pytest.raises(FileNotFoundError):
        HTMLEngine(str(tmp_path), "html", None, True)


def test_empty_extension_defaults_to_html(assets):
    engine = HTMLEngine(str(assets), "", None, True)
    assert engine.extension == "html"