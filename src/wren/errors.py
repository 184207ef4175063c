"""Wren exception hierarchy.

Shared across the template store, the tag extensions, the layout loop and
the views facade so every module raises and catches the same types.

Parse problems are fatal at load time, layout cycles are fatal at render
time, and substrate failures during execution are wrapped in
``RenderError``. The one recovered case, a ``block`` priority expression
that fails to evaluate, never reaches this module.
"""

from jinja2 import TemplateSyntaxError


class WrenError(Exception):
    """Base for all wren-specific errors."""


class ConfigurationError(WrenError):
    """Raised when views configuration is invalid.

    Typically raised by ``ViewsConfig.__post_init__``.
    """


class ViewsClosedError(WrenError):
    """Raised when a ``Views`` facade is used before ``open()`` or after ``close()``."""


class CompileError(WrenError):
    """A template failed to compile during ``TemplateStore.load()``.

    The whole load is discarded; the store keeps its previous table.
    """

    def __init__(self, path: str, cause: Exception) -> None:
        self.path = path
        self.cause = cause
        super().__init__(f"template {path!r} failed to compile: {cause}")


class NotFoundError(WrenError):  # noqa: N818
    """No compiled template is registered under the requested name."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"template {name!r} does not exist")


class TagSyntaxError(TemplateSyntaxError, WrenError):
    """A composition tag was malformed.

    Raised by the parser, so it is also a ``jinja2.TemplateSyntaxError``
    and carries the line number and template name jinja2 reports.
    """

    def __init__(
        self,
        tag: str,
        detail: str,
        lineno: int,
        name: str | None = None,
        filename: str | None = None,
    ) -> None:
        self.tag = tag
        self.detail = detail
        super().__init__(f"{tag!r} tag: {detail}", lineno, name, filename)

    def __reduce__(self):  # type: ignore[override]
        return self.__class__, (self.tag, self.detail, self.lineno, self.name, self.filename)


class LayoutCycleError(WrenError):
    """A layout name recurred within one render chain."""

    def __init__(self, name: str, chain: tuple[str, ...] = ()) -> None:
        self.name = name
        self.chain = chain
        if chain:
            path = " -> ".join((*chain, name))
            super().__init__(f"layout loop {name!r} ({path})")
        else:
            super().__init__(f"layout loop {name!r}")


class RenderError(WrenError):
    """The template substrate failed while executing a template body."""

    def __init__(self, cause: Exception, template: str | None = None) -> None:
        self.cause = cause
        self.template = template
        where = f" in {template!r}" if template else ""
        super().__init__(f"render failed{where}: {cause}")
