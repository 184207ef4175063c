"""Views — the process-scoped entry point for page rendering.

A ``Views`` owns one ``TemplateStore`` and one logger for its whole
lifetime. Nothing is global: create it at startup, ``open()`` it to
compile the template tree, hand it to whatever renders pages, and
``close()`` it at shutdown::

    views = Views(ViewsConfig(template_dir="views", reload=debug))
    views.add_global("site_name", "Acme")

    with views:
        body = views.render("users/index", {"users": users})
        response = views.html("users/show", {"user": user}, status=200)

Thread safety:
    ``render()`` may be called from many threads at once; each call gets
    its own ``RenderScope``. ``open()`` and ``close()`` are serialized.
"""

from __future__ import annotations

import logging
import threading
import time
from collections.abc import Callable, Mapping
from functools import partial
from http import HTTPStatus
from types import TracebackType
from typing import Any, Protocol

import anyio
from jinja2 import BaseLoader

from wren.config import ViewsConfig
from wren.errors import ViewsClosedError, WrenError
from wren.http.response import Response
from wren.templating.layout import render_page
from wren.templating.store import TemplateStore

RENDER_TIME_KEY = "render_time"


class Writer(Protocol):
    def write(self, data: bytes, /) -> Any: ...


class Views:
    """Template composition bound to one configuration.

    Args:
        config: Views configuration. Defaults to ``ViewsConfig()``.
        loader: Optional jinja2 loader replacing ``config.template_dir``.
        logger: Where render failures are reported. Defaults to the
            ``wren.views`` logger.
    """

    __slots__ = (
        "config",
        "logger",
        "_loader",
        "_filters",
        "_globals",
        "_store",
        "_lock",
    )

    def __init__(
        self,
        config: ViewsConfig | None = None,
        *,
        loader: BaseLoader | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self.config: ViewsConfig = config or ViewsConfig()
        self.logger: logging.Logger = logger or logging.getLogger("wren.views")
        self._loader = loader
        self._filters: dict[str, Callable[..., Any]] = {}
        self._globals: dict[str, Any] = {}
        self._store: TemplateStore | None = None
        self._lock = threading.Lock()

    # -- Lifecycle --

    def open(self) -> Views:
        """Create the store and compile the template tree.

        Compile errors surface here, at startup, rather than on the
        first request. Opening an open ``Views`` recompiles.

        Raises:
            CompileError: A template failed to parse.
            ConfigurationError: ``template_dir`` is not a directory.
        """
        with self._lock:
            store = TemplateStore(
                self.config,
                loader=self._loader,
                filters=self._filters,
                globals_=self._globals,
            )
            store.load()
            self._store = store
        self.logger.debug("views opened with %d templates", len(store.names()))
        return self

    def close(self) -> None:
        """Drop the store. Renders after this raise ``ViewsClosedError``."""
        with self._lock:
            self._store = None

    @property
    def is_open(self) -> bool:
        return self._store is not None

    @property
    def store(self) -> TemplateStore:
        store = self._store
        if store is None:
            raise ViewsClosedError("views are not open; call open() first")
        return store

    def __enter__(self) -> Views:
        return self.open()

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    # -- Template functions --

    def add_global(self, name: str, value: Any) -> Views:
        """Expose *value* to every template. Chainable."""
        self._globals[name] = value
        if self._store is not None:
            self._store.add_global(name, value)
        return self

    def add_filter(self, name: str, func: Callable[..., Any]) -> Views:
        """Register a template filter. Chainable."""
        self._filters[name] = func
        if self._store is not None:
            self._store.add_filter(name, func)
        return self

    # -- Rendering --

    def render(
        self,
        name: str,
        data: Mapping[str, Any] | None = None,
        /,
        **extra: Any,
    ) -> bytes:
        """Render page *name* through its layout chain.

        *data* and *extra* are merged into the view data; *extra* wins.
        ``render_time()`` is available to templates and reports the time
        spent so far, e.g. ``"12ms"``.

        Raises:
            ViewsClosedError: ``open()`` was not called.
            CompileError, NotFoundError, LayoutCycleError, RenderError:
                The page could not be rendered.
        """
        return render_page(self.store, name, self._bindings(data, extra))

    def render_to(
        self,
        out: Writer,
        name: str,
        data: Mapping[str, Any] | None = None,
        /,
        **extra: Any,
    ) -> None:
        """Render page *name* and write the bytes to *out*.

        Nothing is written when rendering fails.
        """
        out.write(self.render(name, data, **extra))

    async def arender(
        self,
        name: str,
        data: Mapping[str, Any] | None = None,
        /,
        **extra: Any,
    ) -> bytes:
        """``render()`` in an anyio worker thread, for async servers."""
        return await anyio.to_thread.run_sync(partial(self.render, name, data, **extra))

    def html(
        self,
        name: str,
        data: Mapping[str, Any] | None = None,
        /,
        *,
        status: int = 200,
        **extra: Any,
    ) -> Response:
        """Render page *name* into a ``Response``.

        A render failure is logged and turned into a 500. With
        ``config.debug`` the body carries the error message; otherwise it
        is the generic reason phrase.

        Raises:
            ViewsClosedError: ``open()`` was not called.
        """
        store = self.store
        try:
            body = render_page(store, name, self._bindings(data, extra))
        except WrenError as exc:
            self.logger.exception("render template error: %s", name)
            phrase = HTTPStatus.INTERNAL_SERVER_ERROR.phrase
            detail = f"{phrase}: {exc}" if self.config.debug else phrase
            return Response(
                body=detail,
                status=500,
                content_type="text/plain; charset=utf-8",
            )
        return Response(body=body, status=status, content_type=self.config.content_type)

    def _bindings(self, data: Mapping[str, Any] | None, extra: Mapping[str, Any]) -> dict[str, Any]:
        bindings: dict[str, Any] = {**(data or {}), **extra}
        started = time.perf_counter()
        bindings[RENDER_TIME_KEY] = lambda: f"{int((time.perf_counter() - started) * 1000)}ms"
        return bindings
