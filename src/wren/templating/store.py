"""Compiled template table with all-or-nothing loading.

The store walks its loader, compiles every template carrying the
configured extension and keys it by logical name: the relative path with
the extension stripped and ``/`` separators (``partials/footer.html`` ->
``partials/footer``).

Thread safety:
    ``load()`` holds the exclusive side of a ``ReadWriteLock`` and swaps
    the table in one assignment. Lookups hold the shared side; a render
    holds it only while resolving the name, so templates may call back
    into the store.
    With ``reload=True`` every render reloads first, which serializes
    renders; that mode is meant for development only.
"""

import logging
from collections.abc import Callable, Mapping
from pathlib import Path
from typing import Any

from jinja2 import BaseLoader, Template, TemplateSyntaxError

from wren._internal.rwlock import ReadWriteLock
from wren.config import ViewsConfig
from wren.errors import CompileError, ConfigurationError, NotFoundError, RenderError, WrenError
from wren.templating.integration import create_environment, create_loader
from wren.templating.tags import ComposingEnvironment

logger = logging.getLogger("wren.templating")


class TemplateStore:
    """Named, compiled templates loaded from a source tree.

    The source is ``config.template_dir`` unless a jinja2 *loader* is
    given. Any loader implementing ``list_templates()`` works, so virtual
    trees (``DictLoader``, ``PackageLoader``) load the same way::

        store = TemplateStore(ViewsConfig(template_dir="views"))
        store.load()
        html = store.render_bytes("users/index", {"users": users})
    """

    __slots__ = ("config", "_loader", "_from_config", "_env", "_lock", "_templates", "_loaded")

    def __init__(
        self,
        config: ViewsConfig | None = None,
        *,
        loader: BaseLoader | None = None,
        filters: Mapping[str, Callable[..., Any]] | None = None,
        globals_: Mapping[str, Any] | None = None,
    ) -> None:
        self.config: ViewsConfig = config or ViewsConfig()
        self._from_config = loader is None
        self._loader: BaseLoader = loader or create_loader(self.config)
        self._env: ComposingEnvironment = create_environment(
            self.config, self._loader, filters, globals_
        )
        self._lock = ReadWriteLock()
        self._templates: dict[str, Template] = {}
        self._loaded = False

    @property
    def environment(self) -> ComposingEnvironment:
        return self._env

    @property
    def loaded(self) -> bool:
        return self._loaded

    # -- Registration --

    def add_global(self, name: str, value: Any) -> None:
        """Expose *value* to every template under *name*.

        Compiled templates read globals at render time, so this takes
        effect on the next render.
        """
        with self._lock.write():
            self._env.globals[name] = value

    def add_filter(self, name: str, func: Callable[..., Any]) -> None:
        """Register a template filter.

        jinja2 rejects unknown filter names at compile time, so the next
        render recompiles the tree, cached includes among it.
        """
        with self._lock.write():
            self._env.filters[name] = func
            self._loaded = False

    # -- Loading --

    def load(self) -> None:
        """Compile the whole tree and replace the table.

        The environment cache is emptied with it, so templates reached
        through ``include``, ``import`` or ``extends`` are recompiled too.

        Raises:
            CompileError: A template failed to parse. Nothing is replaced.
            ConfigurationError: ``template_dir`` is not a directory.
        """
        with self._lock.write():
            self._templates = self._compile_all()
            if self._env.cache is not None:
                self._env.cache.clear()
            self._loaded = True

    def _compile_all(self) -> dict[str, Template]:
        if self._from_config and not Path(self.config.template_dir).is_dir():
            msg = f"template_dir {str(self.config.template_dir)!r} is not a directory"
            raise ConfigurationError(msg)

        extension = self.config.extension
        table: dict[str, Template] = {}
        for path in self._loader.list_templates():
            if len(path) <= len(extension) or not path.endswith(extension):
                continue
            name = path[: -len(extension)].replace("\\", "/")
            try:
                table[name] = self._loader.load(self._env, path)
            except (TemplateSyntaxError, UnicodeDecodeError) as exc:
                raise CompileError(path, exc) from exc
            if self.config.debug:
                logger.info("parsed template: %s", name)

        logger.debug("loaded %d templates", len(table))
        return table

    # -- Lookup --

    def lookup(self, name: str) -> Template:
        """Return the compiled template registered under *name*.

        Raises:
            NotFoundError: No such template in the loaded table.
        """
        with self._lock.read():
            return self._lookup(name)

    def _lookup(self, name: str) -> Template:
        try:
            return self._templates[name]
        except KeyError:
            raise NotFoundError(name) from None

    def names(self) -> list[str]:
        """Logical names in the loaded table, sorted."""
        with self._lock.read():
            return sorted(self._templates)

    def __contains__(self, name: object) -> bool:
        with self._lock.read():
            return name in self._templates

    # -- Rendering --

    def render(self, name: str, bindings: Mapping[str, Any] | None = None) -> str:
        """Render the template registered under *name*.

        Loads the tree first when it was never loaded, and on every call
        when ``config.reload`` is set.

        Raises:
            CompileError: (Re)loading failed.
            NotFoundError: Unknown template name.
            RenderError: The template body failed while executing.
        """
        if self.config.reload or not self._loaded:
            self.load()

        template = self.lookup(name)
        try:
            return template.render(bindings or {})
        except WrenError:
            raise
        except Exception as exc:
            raise RenderError(exc, name) from exc

    def render_bytes(self, name: str, bindings: Mapping[str, Any] | None = None) -> bytes:
        """Like ``render()``, encoded with ``config.encoding``."""
        return self.render(name, bindings).encode(self.config.encoding)
