"""``wren check`` — compile a template tree and list what it contains.

Exits with code 1 when the tree does not compile.
"""

import argparse
import sys

from wren.config import ViewsConfig
from wren.errors import WrenError
from wren.templating.store import TemplateStore


def run_check(args: argparse.Namespace) -> None:
    """Load every template under ``args.template_dir``.

    Prints one logical name per line unless ``--quiet``; prints the
    compile error and raises ``SystemExit(1)`` on failure.
    """
    try:
        config = ViewsConfig(template_dir=args.template_dir, extension=args.extension)
        store = TemplateStore(config)
        store.load()
    except WrenError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        raise SystemExit(1) from exc

    names = store.names()
    if not args.quiet:
        for name in names:
            print(name)
    print(f"{len(names)} templates OK", file=sys.stderr)
