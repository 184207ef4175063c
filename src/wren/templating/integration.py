"""Jinja2 environment setup for the template store.

Creates a ``ComposingEnvironment`` from ``ViewsConfig`` with the
composition tags installed and user-registered filters and globals bound.
The environment is created once per store and shared by every render.
"""

from collections.abc import Callable, Mapping
from typing import Any

from jinja2 import BaseLoader, FileSystemLoader

from wren.config import ViewsConfig
from wren.templating.tags import COMPOSITION_EXTENSIONS, ComposingEnvironment


def create_loader(config: ViewsConfig) -> BaseLoader:
    """Filesystem loader rooted at ``config.template_dir``."""
    return FileSystemLoader(str(config.template_dir))


def create_environment(
    config: ViewsConfig,
    loader: BaseLoader,
    filters: Mapping[str, Callable[..., Any]] | None = None,
    globals_: Mapping[str, Any] | None = None,
) -> ComposingEnvironment:
    """Create the Jinja2 environment templates are compiled against.

    ``include`` and ``import`` resolve through the same *loader* by file
    name (``{% include "partials/nav.html" %}``).
    """
    env = ComposingEnvironment(
        loader=loader,
        extensions=list(COMPOSITION_EXTENSIONS),
        autoescape=config.autoescape,
        auto_reload=config.reload,
        trim_blocks=config.trim_blocks,
        lstrip_blocks=config.lstrip_blocks,
    )
    env.wren_scope_key = config.scope_key  # type: ignore[attr-defined]

    if filters:
        env.filters.update(filters)

    if globals_:
        env.globals.update(globals_)

    return env
