"""``wren render`` — render one page through its layouts to stdout."""

import argparse
import sys

from wren.config import ViewsConfig
from wren.errors import WrenError
from wren.views import Views


def parse_vars(pairs: list[str]) -> dict[str, str]:
    """Turn ``["key=value", ...]`` into a bindings dict.

    Raises:
        ValueError: A pair has no ``=`` or an empty key.
    """
    bindings: dict[str, str] = {}
    for pair in pairs:
        key, sep, value = pair.partition("=")
        key = key.strip()
        if not sep or not key:
            msg = f"expected KEY=VALUE, got {pair!r}"
            raise ValueError(msg)
        bindings[key] = value
    return bindings


def run_render(args: argparse.Namespace) -> None:
    """Render ``args.name`` and write the bytes to stdout.

    Raises ``SystemExit(1)`` with the error on stderr when the page
    cannot be rendered, ``SystemExit(2)`` on malformed ``--var``.
    """
    try:
        bindings = parse_vars(args.var)
    except ValueError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        raise SystemExit(2) from exc

    default_layout = None if args.no_default_layout else args.default_layout
    try:
        config = ViewsConfig(
            template_dir=args.template_dir,
            extension=args.extension,
            default_layout=default_layout,
        )
        with Views(config) as views:
            views.render_to(sys.stdout.buffer, args.name, bindings)
    except WrenError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        raise SystemExit(1) from exc
    sys.stdout.buffer.write(b"\n")
    sys.stdout.flush()
