"""Jinja2 extensions for layout composition.

Three tags, each a parser paired with a runtime method:

``{% layout "name" %}``
    Declares the layout that wraps this template's output. The last
    declaration executed wins; ``"none"`` disables layout wrapping.

``{% block name [priority] %}...{% endblock [name] %}``
    Renders its body into an isolated buffer and contributes it to the
    render scope under ``name``. Produces no output where it stands. The
    optional priority expression is evaluated when the tag runs; if it
    fails or is not a number the priority is 0.

``{% section name %}...{% endsection [name] %}``
    Emits every fragment contributed under ``name``, highest priority
    first, each followed by a newline. With no contributions it renders
    its own body instead.

Jinja2 dispatches ``block`` to its built-in inheritance statement before
consulting extensions. ``ComposingEnvironment`` swaps in a parser that
hands ``block`` to ``BlockExtension`` when one is registered.

Tags receive the scope bound under the environment's ``wren_scope_key``
as an explicit call argument and act only when it satisfies
``LayoutScope``. Rendered without a scope, ``layout`` is ignored,
``block`` contributes nothing and ``section`` renders its body.
"""

import logging
from collections.abc import Callable
from typing import Any, NoReturn

from jinja2 import Environment, Undefined, nodes
from jinja2.ext import Extension
from jinja2.parser import Parser
from markupsafe import Markup

from wren.errors import TagSyntaxError
from wren.templating.blocks import BlockFragment
from wren.templating.scope import LayoutScope

logger = logging.getLogger("wren.templating")

DISABLE_LAYOUT = "none"


class ComposingParser(Parser):
    """Parser that lets an extension own the ``block`` statement."""

    def parse_block(self) -> Any:
        ext = self.extensions.get("block")
        if ext is not None:
            return ext(self)
        return super().parse_block()


class ComposingEnvironment(Environment):
    """Jinja2 environment whose templates are parsed by ``ComposingParser``."""

    def _parse(self, source: str, name: str | None, filename: str | None) -> nodes.Template:
        return ComposingParser(self, source, name, filename).parse()


class _CompositionTag(Extension):
    """Shared argument parsing for the composition tags."""

    tag: str = ""

    def __init__(self, environment: Environment) -> None:
        super().__init__(environment)
        environment.extend(wren_scope_key="ctx")

    def _scope_ref(self, lineno: int) -> nodes.Name:
        return nodes.Name(self.environment.wren_scope_key, "load", lineno=lineno)  # type: ignore[attr-defined]

    def _fail(self, parser: Parser, detail: str, lineno: int) -> NoReturn:
        raise TagSyntaxError(self.tag, detail, lineno, parser.name, parser.filename)

    def _parse_identifier(self, parser: Parser, lineno: int) -> str:
        token = parser.stream.current
        if token.type == "block_end":
            self._fail(parser, "requires an identifier", lineno)
        if token.type != "name":
            self._fail(parser, "first argument must be an identifier", lineno)
        return next(parser.stream).value

    def _expect_end(self, parser: Parser, detail: str, lineno: int) -> None:
        if parser.stream.current.type != "block_end":
            self._fail(parser, detail, lineno)

    def _parse_end_name(self, parser: Parser, end_tag: str, name: str) -> None:
        """Validate the optional identifier after ``end<tag>``."""
        token = parser.stream.current
        if token.type == "block_end":
            return
        only_one = f"either no or only one argument (identifier) allowed for {end_tag!r}"
        if token.type != "name":
            self._fail(parser, only_one, token.lineno)
        next(parser.stream)
        if token.value != name:
            self._fail(
                parser,
                f"name for {end_tag!r} must equal the {self.tag!r} tag's name "
                f"({name!r} != {token.value!r})",
                token.lineno,
            )
        self._expect_end(parser, only_one, token.lineno)


class LayoutExtension(_CompositionTag):
    """``{% layout "name" %}`` / ``{% layout "none" %}``."""

    tags = {"layout"}
    tag = "layout"

    def parse(self, parser: Parser) -> nodes.Node:
        lineno = next(parser.stream).lineno
        token = parser.stream.current
        if token.type == "block_end":
            self._fail(parser, "requires a layout name", lineno)
        if token.type != "string":
            self._fail(parser, "first argument must be a string literal", lineno)
        name = next(parser.stream).value
        self._expect_end(parser, "takes exactly 1 argument (a string literal)", lineno)

        call = self.call_method(
            "_declare_layout",
            [self._scope_ref(lineno), nodes.Const(name)],
            lineno=lineno,
        )
        return nodes.ExprStmt(call, lineno=lineno)

    def _declare_layout(self, value: Any, name: str) -> str:
        scope = _active_scope(value)
        if scope is None:
            return ""
        if name == DISABLE_LAYOUT:
            scope.disable_layout(True)
            return ""
        scope.disable_layout(False)
        scope.set_layout(name)
        return ""


class BlockExtension(_CompositionTag):
    """``{% block name [priority] %}...{% endblock [name] %}``.

    The priority expression is compiled into a private macro so that any
    failure while evaluating it stays inside ``_priority()``.
    """

    tags = {"block"}
    tag = "block"

    def parse(self, parser: Parser) -> list[nodes.Node]:
        lineno = next(parser.stream).lineno
        name = self._parse_identifier(parser, lineno)

        priority: nodes.Expr | None = None
        if parser.stream.current.type != "block_end":
            priority = parser.parse_expression()
        self._expect_end(
            parser, "takes an identifier and at most one priority expression", lineno
        )

        body = parser.parse_statements(("name:endblock",), drop_needle=True)
        self._parse_end_name(parser, "endblock", name)

        result: list[nodes.Node] = []
        priority_ref: nodes.Expr = nodes.Const(None)
        if priority is not None:
            macro_name = f"_wren_priority_{parser.free_identifier(lineno).name}"
            result.append(
                nodes.Macro(
                    macro_name, [], [], [nodes.Output([priority], lineno=lineno)],
                    lineno=lineno,
                )
            )
            priority_ref = nodes.Name(macro_name, "load", lineno=lineno)

        call = self.call_method(
            "_append_block",
            [self._scope_ref(lineno), nodes.Const(name), priority_ref],
            lineno=lineno,
        )
        result.append(nodes.CallBlock(call, [], [], body, lineno=lineno))
        return result

    def _append_block(
        self,
        value: Any,
        name: str,
        priority: Callable[[], Any] | None,
        caller: Callable[[], str],
    ) -> str:
        scope = _active_scope(value)
        if scope is None:
            return ""
        content = str(caller())
        scope.append_block(name, BlockFragment(content, _priority(name, priority)))
        return ""


class SectionExtension(_CompositionTag):
    """``{% section name %}fallback{% endsection [name] %}``."""

    tags = {"section"}
    tag = "section"

    def parse(self, parser: Parser) -> nodes.Node:
        lineno = next(parser.stream).lineno
        name = self._parse_identifier(parser, lineno)
        self._expect_end(parser, "takes exactly 1 argument (an identifier)", lineno)

        body = parser.parse_statements(("name:endsection",), drop_needle=True)
        self._parse_end_name(parser, "endsection", name)

        call = self.call_method(
            "_emit_section",
            [self._scope_ref(lineno), nodes.Const(name)],
            lineno=lineno,
        )
        return nodes.CallBlock(call, [], [], body, lineno=lineno)

    def _emit_section(self, value: Any, name: str, caller: Callable[[], str]) -> str:
        scope = _active_scope(value)
        fragments = scope.blocks_for(name) if scope is not None else ()
        if not fragments:
            return caller()
        return Markup("".join(f"{fragment.content}\n" for fragment in fragments))


def _active_scope(value: Any) -> LayoutScope | None:
    """The render scope bound for this execution, if there is one.

    Checked against ``Undefined`` first: its ``__getattr__`` raises rather
    than returning ``AttributeError``, which the protocol check relies on.
    """
    if isinstance(value, Undefined) or not isinstance(value, LayoutScope):
        return None
    return value


def _priority(block: str, priority: Callable[[], Any] | None) -> int:
    """Evaluate a block's priority macro, falling back to 0."""
    if priority is None:
        return 0
    try:
        text = str(priority()).strip()
        try:
            return int(text)
        except ValueError:
            return int(float(text))
    except Exception as exc:  # noqa: BLE001
        logger.debug("block %r: priority evaluation failed, using 0 (%s)", block, exc)
        return 0


COMPOSITION_EXTENSIONS: tuple[type[Extension], ...] = (
    LayoutExtension,
    BlockExtension,
    SectionExtension,
)
