"""Wren — layouts, blocks and sections for server-rendered Jinja2 pages.

Pages declare the layout that wraps them and contribute named, prioritized
fragments that layouts collect, with no composition code in the caller.

Basic usage::

    from wren import Views, ViewsConfig

    views = Views(ViewsConfig(template_dir="views"))
    with views:
        html = views.render("users/index", {"users": users})

Templates::

    {% layout "layout/main" %}
    {% block scripts 10 %}<script src="/users.js"></script>{% endblock %}
    <ul>{% for user in users %}<li>{{ user.name }}</li>{% endfor %}</ul>

    {# layout/main.html #}
    <body>{{ __content__ }}{% section scripts %}{% endsection %}</body>
"""

__version__ = "0.1.0"
__all__ = [
    "BlockAggregator",
    "BlockFragment",
    "CompileError",
    "ConfigurationError",
    "LayoutCycleError",
    "LayoutScope",
    "NotFoundError",
    "RenderError",
    "RenderScope",
    "Response",
    "TagSyntaxError",
    "TemplateStore",
    "Views",
    "ViewsClosedError",
    "ViewsConfig",
    "WrenError",
    "compose",
    "render_page",
]


def __getattr__(name: str) -> object:
    """Lazy imports for public API.

    Keeps ``import wren`` fast while providing a clean top-level API.
    """
    if name == "Views":
        from wren.views import Views

        return Views

    if name == "ViewsConfig":
        from wren.config import ViewsConfig

        return ViewsConfig

    if name == "Response":
        from wren.http.response import Response

        return Response

    if name == "TemplateStore":
        from wren.templating.store import TemplateStore

        return TemplateStore

    if name in ("compose", "render_page"):
        from wren.templating import layout as _layout

        return getattr(_layout, name)

    if name in ("BlockAggregator", "BlockFragment"):
        from wren.templating import blocks as _blocks

        return getattr(_blocks, name)

    if name in ("LayoutScope", "RenderScope"):
        from wren.templating import scope as _scope

        return getattr(_scope, name)

    if name in (
        "CompileError",
        "ConfigurationError",
        "LayoutCycleError",
        "NotFoundError",
        "RenderError",
        "TagSyntaxError",
        "ViewsClosedError",
        "WrenError",
    ):
        from wren import errors as _errors

        return getattr(_errors, name)

    msg = f"module {__name__!r} has no attribute {name!r}"
    raise AttributeError(msg)
