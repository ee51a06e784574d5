"""``pymgsem repl`` subcommand — interactive REPL."""

from __future__ import annotations

import argparse
import logging
from pathlib import Path

from pymgsem.chart import format_derivation
from pymgsem.cli.evaluate import parse_assignment
from pymgsem.evaluation import EvaluationError, evaluate
from pymgsem.grammar import Grammar
from pymgsem.model import Model
from pymgsem.parser import ChartParser
from pymgsem.syntax import parse_formula

logger = logging.getLogger(__name__)

HELP_TEXT = """\
Commands:
  parse <sentence>        Parse a sentence and show its meaning
  eval <sentence>         Parse a sentence and evaluate it in the model
  formula <formula>       Evaluate a formula given in notation, e.g. <run & ext(alice)>
  assign <i> <entity>     Bind pronoun index i to an entity
  derivation on/off       Toggle derivation display
  show lexicon            Display the grammar
  show model              Display the model
  load grammar <file>     Load a grammar from a JSON file
  load model <file>       Load a model from a JSON file
  help                    Show this help
  quit                    Exit the REPL
"""


def _load_initial(path: str | None, loader, empty, label: str):
    if path and Path(path).exists():
        print(f"Loaded {label} from {path}")
        return loader(path)
    if path:
        print(f"{label.capitalize()} file {path} not found, starting with an empty {label}.")
    return empty()


def _show_model(model: Model) -> None:
    data = model.to_dict()
    print(f"Entities: {', '.join(data['entities'])}")
    print(f"Events: {', '.join(data['events'])}")
    if data["assignments"]:
        bindings = ", ".join(f"x_{i} = {e}" for i, e in data["assignments"].items())
        print(f"Assignments: {bindings}")
    print(f"Predicates ({len(data['predicates'])}):")
    for name, ext in data["predicates"].items():
        print(f"  {name}: {', '.join(ext)}")
    for name, pairs in data["predicates2"].items():
        print(f"  {name}: {', '.join(f'({ev}, {en})' for ev, en in pairs)}")


def run_repl(args: argparse.Namespace) -> int:
    """Execute the ``repl`` subcommand."""
    try:
        grammar = _load_initial(args.grammar, Grammar.from_file, Grammar, "grammar")
        model = _load_initial(args.model, Model.from_file, Model, "model")
    except (OSError, ValueError) as e:
        print(f"Error loading: {e}")
        return 1

    print("pyMGSem REPL. Type 'help' for commands.\n")

    show_derivation = False

    try:
        while True:
            try:
                raw = input("pymgsem> ")
            except EOFError:
                print()
                break

            # Sentences are taken verbatim: spaces inside them are tokens.
            line = raw.lstrip()
            command = line.strip()

            if not command:
                continue

            if command in ("quit", "exit"):
                break

            if command == "help":
                print(HELP_TEXT)
                continue

            if command == "show lexicon":
                print(f"Start symbols: {', '.join(sorted(grammar.start_symbols))}")
                print(f"Lexicon ({len(grammar.lexicon)} items):")
                for item in grammar.lexicon:
                    print(f"  {item}")
                continue

            if command == "show model":
                _show_model(model)
                continue

            if command.startswith("derivation "):
                val = command[len("derivation "):].strip().lower()
                if val == "on":
                    show_derivation = True
                    print("Derivation: ON")
                elif val == "off":
                    show_derivation = False
                    print("Derivation: OFF")
                else:
                    print("Usage: derivation on/off")
                continue

            if command.startswith("load "):
                parts = command.split(None, 2)
                if len(parts) != 3 or parts[1] not in ("grammar", "model"):
                    print("Usage: load grammar <file> | load model <file>")
                    continue
                try:
                    if parts[1] == "grammar":
                        grammar = Grammar.from_file(parts[2])
                    else:
                        model = Model.from_file(parts[2])
                    print(f"Loaded {parts[1]} from {parts[2]}")
                except (OSError, ValueError) as e:
                    print(f"Error loading: {e}")
                continue

            if command.startswith("assign "):
                parts = command.split()
                try:
                    if len(parts) != 3:
                        raise ValueError("Usage: assign <i> <entity>")
                    index, entity = parse_assignment(f"{parts[1]}={parts[2]}")
                    if not model.is_entity(entity):
                        raise ValueError(f"{entity!r} is not an entity of the model.")
                    model = model.with_assignment(index, entity)
                    print(f"Assigned x_{index} = {entity}")
                except ValueError as e:
                    print(f"Error: {e}")
                continue

            if command.startswith("formula "):
                try:
                    formula = parse_formula(command[len("formula "):])
                    print("TRUE" if evaluate(model, formula) else "FALSE")
                except (ValueError, EvaluationError) as e:
                    print(f"Error: {e}")
                continue

            if line.startswith(("parse ", "eval ")):
                name, sentence = line.split(" ", 1)
                result = ChartParser(grammar).run(sentence)
                if result.entry is None:
                    print("NO PARSE")
                    if result.unknown_tokens:
                        print(f"  unknown tokens: {', '.join(repr(t) for t in result.unknown_tokens)}")
                    continue
                meaning = result.entry.expression.meaning
                if show_derivation:
                    print(format_derivation(result.entry))
                print(meaning)
                if name == "eval":
                    try:
                        print("TRUE" if evaluate(model, meaning) else "FALSE")
                    except EvaluationError as e:
                        print(f"Error: {e}")
                continue

            print(f"Unknown command: {command!r}. Type 'help' for commands.")

    except KeyboardInterrupt:
        print("\nInterrupted.")

    return 0
