"""CLI entry point for pyMGSem.

Usage::

    pymgsem parse -g grammar.json "ε alice.NOM chase -s bob"
    pymgsem eval  -g grammar.json -m model.json "ε alice.NOM chase -s bob"
    pymgsem repl  [-g grammar.json] [-m model.json]
"""

from __future__ import annotations

import argparse
import logging
import sys

from pymgsem._version import __version__


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the ``pymgsem`` CLI."""
    parser = argparse.ArgumentParser(
        prog="pymgsem",
        description="pyMGSem — Minimalist Grammar parsing with model-theoretic evaluation",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # --- parse ---
    parse_parser = subparsers.add_parser("parse", help="Parse a sentence")
    parse_parser.add_argument("-g", "--grammar", required=True, help="Path to JSON grammar file")
    parse_parser.add_argument("--derivation", action="store_true", help="Print the derivation")
    parse_parser.add_argument("--json", action="store_true", help="Emit JSON output")
    parse_parser.add_argument("sentence", help="Input sentence (tokens separated by single spaces)")

    # --- eval ---
    eval_parser = subparsers.add_parser("eval", help="Parse a sentence and evaluate it in a model")
    eval_parser.add_argument("-g", "--grammar", required=True, help="Path to JSON grammar file")
    eval_parser.add_argument("-m", "--model", required=True, help="Path to JSON model file")
    eval_parser.add_argument(
        "-a", "--assign", action="append", default=[], metavar="I=ENTITY",
        help="Bind pronoun index I to ENTITY (repeatable)",
    )
    eval_parser.add_argument(
        "--expect", choices=["true", "false"], default=None,
        help="Expected truth value; exit with code 2 on mismatch",
    )
    eval_parser.add_argument("--derivation", action="store_true", help="Print the derivation")
    eval_parser.add_argument("--json", action="store_true", help="Emit JSON output")
    eval_parser.add_argument("sentence", help="Input sentence (tokens separated by single spaces)")

    # --- repl ---
    repl_parser = subparsers.add_parser("repl", help="Interactive REPL")
    repl_parser.add_argument("-g", "--grammar", default=None, help="Path to JSON grammar file to load")
    repl_parser.add_argument("-m", "--model", default=None, help="Path to JSON model file to load")

    args = parser.parse_args(argv)

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")

    if args.command is None:
        parser.print_help()
        return 0

    if args.command == "parse":
        from pymgsem.cli.parse import run_parse
        return run_parse(args)
    elif args.command == "eval":
        from pymgsem.cli.evaluate import run_eval
        return run_eval(args)
    elif args.command == "repl":
        from pymgsem.cli.repl import run_repl
        return run_repl(args)

    return 0


if __name__ == "__main__":
    sys.exit(main())
