"""Tests for wren.errors — exception hierarchy and error messages."""

import pytest
from jinja2 import TemplateSyntaxError

from wren.errors import (
    CompileError,
    ConfigurationError,
    LayoutCycleError,
    NotFoundError,
    RenderError,
    TagSyntaxError,
    ViewsClosedError,
    WrenError,
)


class TestHierarchy:
    @pytest.mark.parametrize(
        "error",
        [
            CompileError,
            ConfigurationError,
            LayoutCycleError,
            NotFoundError,
            RenderError,
            TagSyntaxError,
            ViewsClosedError,
        ],
    )
    def test_all_are_wren_errors(self, error: type[Exception]) -> None:
        assert issubclass(error, WrenError)

    def test_tag_syntax_error_is_jinja_syntax_error(self) -> None:
        assert issubclass(TagSyntaxError, TemplateSyntaxError)


class TestMessages:
    def test_compile_error(self) -> None:
        cause = ValueError("bad")
        err = CompileError("pages/index.html", cause)
        assert err.path == "pages/index.html"
        assert err.cause is cause
        assert "pages/index.html" in str(err)

    def test_not_found(self) -> None:
        err = NotFoundError("users/show")
        assert err.name == "users/show"
        assert str(err) == "template 'users/show' does not exist"

    def test_tag_syntax_error(self) -> None:
        err = TagSyntaxError("block", "requires an identifier", 4, "page.html")
        assert err.tag == "block"
        assert err.detail == "requires an identifier"
        assert err.lineno == 4
        assert err.name == "page.html"
        assert "requires an identifier" in err.message

    def test_layout_cycle_without_chain(self) -> None:
        err = LayoutCycleError("A")
        assert err.name == "A"
        assert str(err) == "layout loop 'A'"

    def test_layout_cycle_with_chain(self) -> None:
        err = LayoutCycleError("A", ("A", "B"))
        assert err.chain == ("A", "B")
        assert "A -> B -> A" in str(err)

    def test_render_error(self) -> None:
        cause = ZeroDivisionError("division by zero")
        err = RenderError(cause, "layout/main")
        assert err.cause is cause
        assert err.template == "layout/main"
        assert "layout/main" in str(err)
