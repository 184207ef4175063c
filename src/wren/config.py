"""Views configuration.

ViewsConfig is a frozen dataclass — immutable after creation, IDE-autocompletable,
no string-key dict lookups.
"""

from dataclasses import dataclass
from pathlib import Path

from wren.errors import ConfigurationError


@dataclass(frozen=True, slots=True)
class ViewsConfig:
    """Template composition configuration. Immutable after creation.

    All fields have sensible defaults. Override what you need::

        config = ViewsConfig(template_dir="templates", reload=True)
    """

    # Template source
    template_dir: str | Path = "views"
    extension: str = ".html"

    # Layouts
    default_layout: str | None = "layout/main"  # None = pages without a layout render bare

    # Development
    reload: bool = False  # Recompile the whole tree on every render
    debug: bool = False  # Log parsed templates on load, detailed error bodies

    # Jinja2 environment
    autoescape: bool = False
    trim_blocks: bool = True
    lstrip_blocks: bool = True

    # Output
    content_type: str = "text/html; charset=utf-8"
    encoding: str = "utf-8"

    # Reserved bindings
    content_key: str = "__content__"
    scope_key: str = "ctx"

    def __post_init__(self) -> None:
        if not self.extension:
            raise ConfigurationError("extension must not be empty")
        if not self.extension.startswith("."):
            msg = f"extension must start with '.', got {self.extension!r}"
            raise ConfigurationError(msg)
        if self.default_layout == "none":
            raise ConfigurationError(
                "default_layout 'none' is reserved; use default_layout=None instead"
            )
        for key in (self.content_key, self.scope_key):
            if not key.isidentifier():
                msg = f"reserved binding keys must be identifiers, got {key!r}"
                raise ConfigurationError(msg)
        if self.content_key == self.scope_key:
            msg = f"content_key and scope_key must differ (both {self.content_key!r})"
            raise ConfigurationError(msg)
