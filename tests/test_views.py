"""Tests for wren.views — lifecycle, rendering entry points and HTTP responses."""

import io
import logging
import re
from pathlib import Path

import pytest
from jinja2 import DictLoader

from wren.config import ViewsConfig
from wren.errors import CompileError, NotFoundError, ViewsClosedError
from wren.http.response import Response
from wren.views import Views

TEMPLATES = {
    "index.html": '{% block title %}Home{% endblock %}<h1>{{ greeting }}</h1>',
    "plain.html": '{% layout "none" %}{{ greeting }}',
    "timed.html": '{% layout "none" %}{{ render_time() }}',
    "site.html": '{% layout "none" %}{{ site_name }}',
    "loop.html": '{% layout "loop" %}',
    "layout/main.html": (
        "<title>{% section title %}Untitled{% endsection %}</title>{{ __content__ }}"
    ),
}


def _views(templates: dict[str, str] | None = None, **overrides: object) -> Views:
    config = ViewsConfig(**overrides)  # type: ignore[arg-type]
    return Views(config, loader=DictLoader(templates or TEMPLATES))


class TestLifecycle:
    def test_render_before_open(self) -> None:
        views = _views()
        assert not views.is_open
        with pytest.raises(ViewsClosedError):
            views.render("index")

    def test_render_after_close(self) -> None:
        views = _views().open()
        views.close()
        with pytest.raises(ViewsClosedError):
            views.render("index")

    def test_context_manager(self) -> None:
        views = _views()
        with views as opened:
            assert opened is views
            assert views.is_open
        assert not views.is_open

    def test_open_compiles_eagerly(self) -> None:
        views = _views({"bad.html": "{% block %}{% endblock %}"})
        with pytest.raises(CompileError):
            views.open()
        assert not views.is_open

    def test_open_from_directory(self, tmp_path: Path) -> None:
        (tmp_path / "page.html").write_text('{% layout "none" %}disk', encoding="utf-8")
        with Views(ViewsConfig(template_dir=tmp_path)) as views:
            assert views.store.names() == ["page"]
            assert views.render("page") == b"disk"


class TestRender:
    def test_page_through_default_layout(self) -> None:
        with _views() as views:
            html = views.render("index", {"greeting": "Hi"})
        assert html == b"<title>Home\n</title><h1>Hi</h1>"

    def test_extra_bindings_override_data(self) -> None:
        with _views() as views:
            html = views.render("plain", {"greeting": "data"}, greeting="extra")
        assert html == b"extra"

    def test_render_time_binding(self) -> None:
        with _views() as views:
            html = views.render("timed")
        assert re.fullmatch(rb"\d+ms", html)

    def test_render_to_writer(self) -> None:
        out = io.BytesIO()
        with _views() as views:
            views.render_to(out, "plain", {"greeting": "written"})
        assert out.getvalue() == b"written"

    def test_render_to_writes_nothing_on_failure(self) -> None:
        out = io.BytesIO()
        with _views() as views, pytest.raises(NotFoundError):
            views.render_to(out, "missing")
        assert out.getvalue() == b""

    def test_globals_and_filters(self) -> None:
        views = _views({"shout.html": '{% layout "none" %}{{ site_name }}|{{ "x"|twice }}'})
        views.add_global("site_name", "Acme").add_filter("twice", lambda s: s * 2)
        with views:
            assert views.render("shout") == b"Acme|xx"

    def test_registered_while_open(self) -> None:
        views = _views({"shout.html": '{% layout "none" %}{{ site_name }}|{{ "x"|twice }}'})
        views.add_filter("twice", lambda s: s * 2)
        with views:
            views.add_global("site_name", "Later")
            views.add_filter("twice", lambda s: s + "!")
            assert views.render("shout") == b"Later|x!"

    def test_undefined_global_renders_empty(self) -> None:
        with _views() as views:
            assert views.render("site") == b""

    @pytest.mark.anyio
    async def test_arender(self) -> None:
        with _views() as views:
            html = await views.arender("plain", {"greeting": "async"})
        assert html == b"async"


class TestHTML:
    def test_success(self) -> None:
        with _views(content_type="text/html; charset=latin-1") as views:
            response = views.html("plain", {"greeting": "ok"}, status=201)

        assert isinstance(response, Response)
        assert response.status == 201
        assert response.body == b"ok"
        assert response.content_type == "text/html; charset=latin-1"

    def test_production_error_is_generic(self, caplog: pytest.LogCaptureFixture) -> None:
        with _views() as views, caplog.at_level(logging.ERROR, logger="wren.views"):
            response = views.html("loop")

        assert response.status == 500
        assert response.text == "Internal Server Error"
        assert response.content_type.startswith("text/plain")
        assert "render template error: loop" in caplog.text

    def test_debug_error_is_detailed(self) -> None:
        with _views(debug=True) as views:
            response = views.html("missing")

        assert response.status == 500
        assert "does not exist" in response.text
        assert "missing" in response.text

    def test_injected_logger(self, caplog: pytest.LogCaptureFixture) -> None:
        logger = logging.getLogger("tests.views")
        views = Views(ViewsConfig(), loader=DictLoader(TEMPLATES), logger=logger)
        with views, caplog.at_level(logging.ERROR, logger="tests.views"):
            views.html("missing")

        assert any(record.name == "tests.views" for record in caplog.records)

    def test_closed_views_still_raise(self) -> None:
        with pytest.raises(ViewsClosedError):
            _views().html("plain")
