"""``pymgsem parse`` subcommand — parse a sentence with a grammar."""

from __future__ import annotations

import argparse
import logging

from pymgsem.chart import format_derivation
from pymgsem.cli.exitcodes import EXIT_ERROR, EXIT_SUCCESS
from pymgsem.cli.output import emit_error, emit_json, parse_response
from pymgsem.grammar import Grammar
from pymgsem.parser import ChartParser

logger = logging.getLogger(__name__)


def run_parse(args: argparse.Namespace) -> int:
    """Execute the ``parse`` subcommand."""
    json_mode = getattr(args, "json", False)

    try:
        grammar = Grammar.from_file(args.grammar)
    except (OSError, ValueError) as e:
        emit_error(f"Cannot load grammar {args.grammar}: {e}", json_mode=json_mode)
        return EXIT_ERROR

    result = ChartParser(grammar).run(args.sentence)

    if json_mode:
        emit_json(parse_response(args.sentence, result, derivation=args.derivation))
    elif result.entry is not None:
        expr = result.entry.expression
        print("ACCEPTED")
        print(f"  phon:    {expr.phon}")
        print(f"  meaning: {expr.meaning}")
        if args.derivation:
            print("\nDerivation:")
            for line in format_derivation(result.entry).splitlines():
                print(f"  {line}")
    else:
        print("NO PARSE")
        if result.unknown_tokens:
            print(f"  unknown tokens: {', '.join(repr(t) for t in result.unknown_tokens)}")

    logger.info(
        "Parse %r: %s (%d chart entries, %d steps)",
        args.sentence,
        "ACCEPTED" if result.accepted else "NO PARSE",
        result.chart_size,
        result.steps,
    )
    return EXIT_SUCCESS
