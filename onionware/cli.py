"""CLI argument parsing and main entry point.

Provides two subcommands:

* ``onionware check`` — load the config and resolve every middleware.
* ``onionware list``  — print the registered global and named middleware.
"""

from __future__ import annotations

import argparse
import logging
import sys
from typing import List, Optional, Tuple

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from onionware.config.loader import find_config_file, load_config
from onionware.config.schema import MiddlewareConfig
from onionware.constants import PACKAGE_NAME, PACKAGE_VERSION
from onionware.container import Container
from onionware.display.logging_config import setup_logging
from onionware.errors import ConfigurationError, ResolutionError
from onionware.middleware.registry import MiddlewareRegistry
from onionware.middleware.resolver import MiddlewareResolver

module_logger = logging.getLogger(__name__)

console = Console()


def _load(args: argparse.Namespace) -> Tuple[MiddlewareConfig, MiddlewareRegistry]:
    """Load the config named on the command line and build a registry from it."""
    cfg_fpath = find_config_file(args.config)
    try:
        config = load_config(cfg_fpath)
    except ConfigurationError as exc:
        console.print(f"[bold red]Error:[/] {escape(str(exc))}")
        sys.exit(2)

    setup_logging(
        args.log_level or config.logging.level,
        log_dir=config.logging.log_dir,
        quiet=True,
    )
    module_logger.info("---- %s v%s (config: %s) ----", PACKAGE_NAME, PACKAGE_VERSION, cfg_fpath)

    registry = MiddlewareRegistry()
    registry.load_config(config)
    return config, registry


# ── ``onionware check`` ─────────────────────────────────────────────────


def _cmd_check(args: argparse.Namespace) -> None:
    config, registry = _load(args)
    resolver = MiddlewareResolver(Container(), method=config.method)

    rows: List[Tuple[str, str, Optional[str]]] = []
    targets = [("global", ns) for ns in registry.get_global()]
    targets += [(key, ns) for key, ns in registry.get_named().items()]
    for label, namespace in targets:
        try:
            resolver.resolve_one(namespace)
            rows.append((label, namespace, None))
        except ResolutionError as exc:
            module_logger.warning("Check failed for %s: %s", namespace, exc)
            rows.append((label, namespace, str(exc)))

    table = Table(title=f"{PACKAGE_NAME} check")
    table.add_column("Key")
    table.add_column("Namespace")
    table.add_column("Status")
    for label, namespace, error in rows:
        status = "[green]ok[/]" if error is None else f"[red]{escape(error)}[/]"
        table.add_row(escape(label), escape(namespace), status)
    console.print(table)

    failures = sum(1 for _, _, error in rows if error is not None)
    if failures:
        console.print(f"[bold red]{failures} middleware could not be resolved.[/]")
        sys.exit(1)
    console.print(f"[bold green]All {len(rows)} middleware resolved.[/]")


# ── ``onionware list`` ──────────────────────────────────────────────────


def _cmd_list(args: argparse.Namespace) -> None:
    _, registry = _load(args)

    global_table = Table(title="Global middleware (run order)")
    global_table.add_column("#", justify="right")
    global_table.add_column("Namespace")
    for position, namespace in enumerate(registry.get_global(), start=1):
        global_table.add_row(str(position), escape(namespace))

    named_table = Table(title="Named middleware")
    named_table.add_column("Key")
    named_table.add_column("Namespace")
    for key, namespace in sorted(registry.get_named().items()):
        named_table.add_row(escape(key), escape(namespace))

    console.print(global_table)
    console.print(named_table)


def _build_parser() -> argparse.ArgumentParser:
    """Build the argparse parser with check/list subcommands."""
    parser = argparse.ArgumentParser(
        prog="onionware",
        description=f"{PACKAGE_NAME} v{PACKAGE_VERSION}",
    )

    subparsers = parser.add_subparsers(dest="command")

    common = argparse.ArgumentParser(add_help=False)
    common.add_argument(
        "--config",
        type=str,
        default=None,
        metavar="PATH",
        help=(
            "Path to configuration file (YAML). "
            "Default: $ONIONWARE_CONFIG or auto-detect middleware.yaml/middleware.yml"
        ),
    )
    common.add_argument(
        "--log-level",
        type=str,
        default=None,
        choices=["debug", "info", "warning", "error", "critical"],
        help="Set file logging level (default: from config, else info)",
    )

    sp_check = subparsers.add_parser(
        "check",
        parents=[common],
        help="Resolve every configured middleware and report failures",
    )
    sp_check.set_defaults(func=_cmd_check)

    sp_list = subparsers.add_parser(
        "list",
        parents=[common],
        help="Show the configured global and named middleware",
    )
    sp_list.set_defaults(func=_cmd_list)

    return parser


def main(argv: Optional[List[str]] = None) -> None:
    """Program entry point: parse arguments and dispatch to subcommand."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(1)
    else:
        args.func(args)
