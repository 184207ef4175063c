"""Wren CLI — template tree validation and one-off page rendering.

Entry point registered as ``wren`` in ``pyproject.toml``::

    [project.scripts]
    wren = "wren.cli:main"
"""

import argparse
import sys


def _add_tree_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("template_dir", help="Template source root")
    parser.add_argument(
        "--extension",
        default=".html",
        help="Template file extension (default: .html)",
    )


def main(argv: list[str] | None = None) -> None:
    """CLI entry point for the ``wren`` command."""
    parser = argparse.ArgumentParser(
        prog="wren",
        description="Wren — layout, block and section composition for Jinja2 templates.",
    )
    subparsers = parser.add_subparsers(dest="command")

    # -- wren check -------------------------------------------------------
    check_parser = subparsers.add_parser("check", help="Compile every template in a tree")
    _add_tree_arguments(check_parser)
    check_parser.add_argument(
        "--quiet",
        action="store_true",
        help="Only report errors",
    )

    # -- wren render ------------------------------------------------------
    render_parser = subparsers.add_parser("render", help="Render one page to stdout")
    _add_tree_arguments(render_parser)
    render_parser.add_argument("name", help="Logical template name (e.g. users/index)")
    render_parser.add_argument(
        "--var",
        action="append",
        default=[],
        metavar="KEY=VALUE",
        help="View data binding; repeatable",
    )
    render_parser.add_argument(
        "--default-layout",
        default="layout/main",
        help="Layout for pages that declare none (default: layout/main)",
    )
    render_parser.add_argument(
        "--no-default-layout",
        action="store_true",
        help="Leave pages that declare no layout unwrapped",
    )

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(0)

    if args.command == "check":
        from wren.cli._check import run_check

        run_check(args)
    elif args.command == "render":
        from wren.cli._render import run_render

        run_render(args)
