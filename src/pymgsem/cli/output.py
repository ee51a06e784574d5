"""Structured JSON output for the pyMGSem CLI."""

from __future__ import annotations

import json
import sys

from pymgsem.chart import format_derivation
from pymgsem.parser import ParseResult
from pymgsem.syntax import Formula


def emit_json(data: dict) -> None:
    """Print compact single-line JSON to stdout."""
    print(json.dumps(data, separators=(",", ":"), ensure_ascii=False))


def parse_response(sentence: str, result: ParseResult, *, derivation: bool = False) -> dict:
    """Build a parse response dict."""
    d: dict = {
        "status": "ACCEPTED" if result.accepted else "NO_PARSE",
        "input": sentence,
        "tokens": result.tokens,
        "chart_size": result.chart_size,
        "steps": result.steps,
    }
    if result.entry is not None:
        d["phon"] = result.entry.expression.phon
        d["meaning"] = str(result.entry.expression.meaning)
        if derivation:
            d["derivation"] = format_derivation(result.entry).splitlines()
    if result.unknown_tokens:
        d["unknown_tokens"] = result.unknown_tokens
    return d


def eval_response(
    sentence: str,
    meaning: Formula,
    value: bool,
    expected: bool | None = None,
) -> dict:
    """Build an eval response dict."""
    d: dict = {
        "input": sentence,
        "meaning": str(meaning),
        "value": value,
    }
    if expected is not None:
        d["expected"] = expected
        d["status"] = "PASS" if value == expected else "FAIL"
    return d


def error_response(message: str) -> dict:
    """Build an error response dict."""
    return {"error": message}


def emit_error(message: str, *, json_mode: bool = False) -> None:
    """Print an error message to stderr, or as JSON to stdout."""
    if json_mode:
        emit_json(error_response(message))
    else:
        print(f"Error: {message}", file=sys.stderr)
