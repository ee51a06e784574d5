"""Truth conditions of logical forms in a finite model.

``has_value(value, model, formula)`` asks whether *formula* has *value* in
*model*, where *value* is ``True``, ``False`` or an ``Entity``. A formula has a
truth value only through closure over events or through a quantifier; monadic
predicates are checked against a particular individual:

* ``c`` holds of ``e`` if ``e`` is in the extension of ``c``, or ``e`` is the
  entity named ``c``.
* ``x_i`` holds of ``e`` if the assignment maps ``i`` to ``e``.
* ``φ & ψ`` holds if both conjuncts have the same value.
* ``<φ>`` is true if some event satisfies ``φ``; at an event it is ``φ`` itself.
* ``int(φ)`` / ``ext(φ)`` hold of event ``e`` if some entity bearing that
  theta role in ``e`` satisfies ``φ``; as truth values they close over events.
* ``(some & int_i(R)) & φ`` is true if some entity satisfying ``R``, assigned to
  ``x_i``, makes ``φ`` true; ``every`` requires all of them to.

Malformed formulas (ones no well-behaved derivation produces) raise
``EvaluationError`` rather than evaluating to False.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from pymgsem.model import EXTERNAL, INTERNAL, Model
from pymgsem.syntax import (
    EXISTS,
    FORALL,
    Closure,
    Conjunction,
    Constant,
    Ext,
    Formula,
    IndexedInternal,
    Int,
    QuantifierTag,
    Variable,
)

logger = logging.getLogger(__name__)


class EvaluationError(RuntimeError):
    """A formula that cannot be evaluated: a defect, not a false sentence."""


@dataclass(frozen=True, slots=True)
class Entity:
    """An individual (entity or event) used as an evaluation value."""

    name: str


Value = bool | Entity


def evaluate(model: Model, formula: Formula) -> bool:
    """Return the truth value of *formula* in *model*."""
    result = has_value(True, model, formula)
    logger.debug("Evaluated %s: %s", formula, result)
    return result


def has_value(value: Value, model: Model, formula: Formula) -> bool:
    """True if *formula* has *value* in *model*."""
    if isinstance(formula, Conjunction) and _is_quantifier_prefix(formula.left):
        return _quantify(formula.left.left.kind, value, model, formula.left.right, formula.right)
    if isinstance(formula, Constant):
        return _constant(value, model, formula.name)
    if isinstance(formula, Conjunction):
        return has_value(value, model, formula.left) and has_value(
            value, model, formula.right
        )
    if isinstance(formula, Closure):
        return _closure(value, model, formula.sub)
    if isinstance(formula, Int):
        return _theta(INTERNAL, value, model, formula.sub)
    if isinstance(formula, Ext):
        return _theta(EXTERNAL, value, model, formula.sub)
    if isinstance(formula, Variable):
        return _variable(value, model, formula.index)
    if isinstance(formula, IndexedInternal):
        raise EvaluationError(
            f"{formula} outside a quantified conjunction has no interpretation"
        )
    if isinstance(formula, QuantifierTag):
        return False
    raise TypeError(f"Not a formula: {formula!r}")


def _is_quantifier_prefix(formula: Formula) -> bool:
    return isinstance(formula, Conjunction) and isinstance(formula.left, QuantifierTag)


def _quantify(
    kind: str, value: Value, model: Model, restrictor: Formula, body: Formula
) -> bool:
    if isinstance(value, Entity):
        raise EvaluationError(f"Individual {value.name!r} cannot be quantified")
    if not value:
        return not _quantify(kind, True, model, restrictor, body)
    if not isinstance(restrictor, IndexedInternal):
        raise EvaluationError(
            f"Quantifier {kind!r} must restrict an indexed theta role, got {restrictor}"
        )

    satisfiers = [
        e for e in model.entities if has_value(Entity(e), model, restrictor.sub)
    ]
    logger.debug(
        "Quantifier %s over x_%d: %d satisfiers of %s",
        kind, restrictor.index, len(satisfiers), restrictor.sub,
    )
    scope = (
        has_value(True, model.with_assignment(restrictor.index, e), body)
        for e in satisfiers
    )
    if kind == EXISTS:
        return any(scope)
    if kind == FORALL:
        return all(scope)
    raise EvaluationError(f"Unknown quantifier {kind!r}")


def _constant(value: Value, model: Model, name: str) -> bool:
    if not isinstance(value, Entity):
        return False
    e = value.name
    return model.satisfies(name, e) or (e == name and model.is_entity(e))


def _variable(value: Value, model: Model, index: int) -> bool:
    if not isinstance(value, Entity):
        raise EvaluationError(f"Variable x_{index} has no truth value")
    try:
        return model.assignment(index) == value.name
    except KeyError:
        raise EvaluationError(f"Unbound variable x_{index}") from None


def _closure(value: Value, model: Model, formula: Formula) -> bool:
    if isinstance(value, Entity):
        return has_value(value, model, formula)
    if value:
        return any(has_value(Entity(e), model, formula) for e in model.events)
    return not _closure(True, model, formula)


def _theta(relation: str, value: Value, model: Model, formula: Formula) -> bool:
    if isinstance(value, Entity):
        event = value.name
        return any(
            model.related(relation, event, x) and has_value(Entity(x), model, formula)
            for x in model.entities
        )
    if value:
        return any(_theta(relation, Entity(e), model, formula) for e in model.events)
    return not _theta(relation, True, model, formula)
