"""``pymgsem eval`` subcommand — parse a sentence and evaluate it in a model."""

from __future__ import annotations

import argparse
import logging

from pymgsem.chart import format_derivation
from pymgsem.cli.exitcodes import EXIT_ERROR, EXIT_MISMATCH, EXIT_SUCCESS
from pymgsem.cli.output import emit_error, emit_json, eval_response
from pymgsem.evaluation import EvaluationError, evaluate
from pymgsem.grammar import Grammar
from pymgsem.model import Model
from pymgsem.parser import ChartParser

logger = logging.getLogger(__name__)


def parse_assignment(spec: str) -> tuple[int, str]:
    """Parse ``I=ENTITY`` into (index, entity)."""
    index_str, sep, entity = spec.partition("=")
    if not sep or not entity.strip():
        raise ValueError(f"Invalid assignment {spec!r}. Expected 'I=ENTITY'.")
    try:
        index = int(index_str.strip())
    except ValueError:
        raise ValueError(f"Invalid assignment index in {spec!r}.") from None
    return index, entity.strip()


def apply_assignments(model: Model, specs: list[str]) -> Model:
    """Return *model* with each ``I=ENTITY`` binding added."""
    for spec in specs:
        index, entity = parse_assignment(spec)
        if not model.is_entity(entity):
            raise ValueError(f"Cannot assign x_{index}: {entity!r} is not an entity.")
        model = model.with_assignment(index, entity)
    return model


def run_eval(args: argparse.Namespace) -> int:
    """Execute the ``eval`` subcommand."""
    json_mode = getattr(args, "json", False)

    try:
        grammar = Grammar.from_file(args.grammar)
        model = Model.from_file(args.model)
        model = apply_assignments(model, args.assign)
    except (OSError, ValueError) as e:
        emit_error(str(e), json_mode=json_mode)
        return EXIT_ERROR

    result = ChartParser(grammar).run(args.sentence)
    if result.entry is None:
        emit_error(f"No parse for {args.sentence!r}", json_mode=json_mode)
        return EXIT_ERROR

    meaning = result.entry.expression.meaning
    try:
        value = evaluate(model, meaning)
    except EvaluationError as e:
        emit_error(f"Cannot evaluate {meaning}: {e}", json_mode=json_mode)
        return EXIT_ERROR

    expected = None if args.expect is None else args.expect == "true"

    if json_mode:
        response = eval_response(args.sentence, meaning, value, expected)
        if args.derivation:
            response["derivation"] = format_derivation(result.entry).splitlines()
        emit_json(response)
    else:
        if args.derivation:
            print(format_derivation(result.entry))
        print(meaning)
        print("TRUE" if value else "FALSE")
        if expected is not None:
            print("PASS" if value == expected else "FAIL")

    logger.info("Eval %r: %s = %s", args.sentence, meaning, value)

    if expected is not None and value != expected:
        return EXIT_MISMATCH
    return EXIT_SUCCESS
