"""CLI application entry point and command routing for sf-registry.

This module is the **sole error boundary** for the entire application.
It catches :class:`~sf_registry.exceptions.RegistryError`,
``KeyboardInterrupt``, and any unexpected ``Exception``, rendering
user-friendly messages via Rich and returning well-defined exit codes.

No business logic lives here; commands are delegated to
:mod:`sf_registry.cli.deploy` and :mod:`sf_registry.cli.download`.
"""

from __future__ import annotations

import argparse
import sys

from rich.markup import escape

from sf_registry.cli import exit_codes
from sf_registry.cli.console import console
from sf_registry.config import load_settings
from sf_registry.exceptions import RegistryError
from sf_registry.logs import configure_logging
from sf_registry.version import __version__


# ---------------------------------------------------------------------------
# Argument parser
# ---------------------------------------------------------------------------

def _build_parser() -> argparse.ArgumentParser:
    """Construct the top-level argument parser.

    * ``sf-registry deploy``    — publish a component or class
    * ``sf-registry download``  — unpack a published version locally
    * ``sf-registry --version``
    """
    parser = argparse.ArgumentParser(
        prog="sf-registry",
        description="Private registry for Salesforce LWC components and Apex classes.",
    )
    parser.add_argument(
        "-V",
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Log diagnostic events to stderr.",
    )
    parser.add_argument(
        "--log-json",
        action="store_true",
        help="Render diagnostic events as JSON lines.",
    )
    subparsers = parser.add_subparsers(dest="command")
    subparsers.add_parser(
        "deploy",
        help="Deploy a component or class with its dependencies.",
    )
    subparsers.add_parser(
        "download",
        help="Download a published component or class into the project.",
    )
    return parser


# ---------------------------------------------------------------------------
# Command dispatch
# ---------------------------------------------------------------------------

def _handle_deploy() -> int:
    from sf_registry.cli.deploy import run_deploy

    return run_deploy(load_settings())


def _handle_download() -> int:
    from sf_registry.cli.download import run_download

    return run_download(load_settings())


# ---------------------------------------------------------------------------
# Main entry point
# ---------------------------------------------------------------------------

def main(argv: list[str] | None = None) -> int:
    """Run the sf-registry CLI.

    Parameters
    ----------
    argv:
        Explicit argument list.  When ``None`` (default), ``sys.argv[1:]``
        is used.

    Returns
    -------
    int
        OS process exit code.
    """
    parser = _build_parser()
    args = parser.parse_args(argv)
    configure_logging(verbose=args.verbose, json_format=args.log_json)

    if args.command == "deploy":
        return _handle_deploy()
    if args.command == "download":
        return _handle_download()

    parser.print_help()
    return exit_codes.SUCCESS


# ---------------------------------------------------------------------------
# Script-level error boundary
# ---------------------------------------------------------------------------

def cli() -> None:
    """Top-level error boundary invoked by the console-script entry point.

    Wraps :func:`main` and guarantees the process never exits with a raw
    stack trace during normal usage.
    """
    try:
        code = main()
        sys.exit(code)
    except RegistryError as exc:
        console.print(f"[bold red]Error:[/bold red] {escape(str(exc))}")
        if exc.hint:
            console.print(f"[yellow]Hint:[/yellow] {escape(exc.hint)}")
        sys.exit(exit_codes.GENERAL_ERROR)
    except KeyboardInterrupt:
        console.print("\n[yellow]Aborted by user.[/yellow]")
        sys.exit(exit_codes.KEYBOARD_INTERRUPT)
    except Exception as exc:  # noqa: BLE001
        console.print(
            "[bold red]Unexpected error.[/bold red] "
            "Please report this issue.\n"
            f"  {type(exc).__name__}: {exc}"
        )
        sys.exit(exit_codes.UNEXPECTED_ERROR)
