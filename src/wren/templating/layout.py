"""Layout resolution: render a page, then the layouts that wrap it.

The chain is an iterative fold rather than recursion::

    content  ->  layout A  ->  layout B  ->  ...  ->  terminal

Each step renders one template against the same ``RenderScope`` and
strips surrounding whitespace from the result. Before a layout step the
previous output is bound under the content key and layout wrapping is
switched off, so a layout wraps further only when it declares
``{% layout %}`` itself. A layout name that comes around a second time
raises ``LayoutCycleError``; every name is rendered as a layout at most
once, which bounds a page at (distinct layouts + 1) steps.
"""

import logging
from collections.abc import Mapping
from typing import Any

from markupsafe import Markup

from wren.errors import LayoutCycleError
from wren.templating.scope import RenderScope
from wren.templating.store import TemplateStore

logger = logging.getLogger("wren.templating")


def compose(
    store: TemplateStore,
    name: str,
    bindings: Mapping[str, Any] | None = None,
    *,
    default_layout: str | None = None,
    content_key: str = "__content__",
    scope_key: str = "ctx",
) -> str:
    """Render page *name* wrapped in its layout chain.

    Args:
        store: Where templates are looked up.
        name: The content template.
        bindings: View data. Copied; the caller's mapping is untouched.
        default_layout: Layout applied when the page declares none.
            ``None`` leaves undeclared pages unwrapped.
        content_key: Binding that carries the wrapped output into a layout.
        scope_key: Binding the composition tags read the scope from.

    Returns:
        The final whitespace-trimmed output.

    Raises:
        CompileError, NotFoundError, RenderError: From any step; the page
            is abandoned with no partial output.
        LayoutCycleError: A layout name recurred.
    """
    scope = RenderScope(bindings=dict(bindings or {}))
    scope.bindings[scope_key] = scope

    output = store.render(name, scope.bindings).strip()
    chain: list[str] = []

    while not scope.layout_disabled:
        layout = scope.layout or default_layout
        if not layout:
            break
        if layout in chain:
            raise LayoutCycleError(layout, tuple(chain))
        chain.append(layout)

        scope.bindings[content_key] = Markup(output)
        scope.layout = None
        scope.layout_disabled = True
        output = store.render(layout, scope.bindings).strip()

    if chain:
        logger.debug("rendered %s through layouts %s", name, " -> ".join(chain))
    return output


def render_page(
    store: TemplateStore,
    name: str,
    bindings: Mapping[str, Any] | None = None,
) -> bytes:
    """``compose()`` configured from ``store.config``, encoded to bytes."""
    config = store.config
    output = compose(
        store,
        name,
        bindings,
        default_layout=config.default_layout,
        content_key=config.content_key,
        scope_key=config.scope_key,
    )
    return output.encode(config.encoding)
