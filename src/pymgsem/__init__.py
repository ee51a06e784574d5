"""pyMGSem — Minimalist Grammar parsing with Neo-Davidsonian model evaluation.

Merge/insert Minimalist Grammars with conjunctivist logical forms, after
Hunter (2011), evaluated against finite models of entities and events.

Public API::

    from pymgsem import Grammar, LexicalItem, Model
    from pymgsem import ChartParser, ParseResult, parse, recognize
    from pymgsem import evaluate, EvaluationError, parse_formula
"""

from pymgsem._version import __version__
from pymgsem.chart import ChartEntry, Derivation, format_derivation
from pymgsem.counters import Counters
from pymgsem.evaluation import Entity, EvaluationError, evaluate, has_value
from pymgsem.expression import Argument, Expression
from pymgsem.grammar import Grammar, LexicalItem, tokenize
from pymgsem.model import Model
from pymgsem.parser import ChartParser, ParseResult, parse, recognize
from pymgsem.syntax import (
    Feature,
    Formula,
    is_quantificational,
    parse_features,
    parse_formula,
)

__all__ = [
    "__version__",
    "Argument",
    "ChartEntry",
    "ChartParser",
    "Counters",
    "Derivation",
    "Entity",
    "EvaluationError",
    "Expression",
    "Feature",
    "Formula",
    "Grammar",
    "LexicalItem",
    "Model",
    "ParseResult",
    "evaluate",
    "format_derivation",
    "has_value",
    "is_quantificational",
    "parse",
    "parse_features",
    "parse_formula",
    "recognize",
    "tokenize",
]
