"""Structure-building operations on expressions.

Every operator is a partial function: it returns the new expression, or None
when the operands do not have the right shape. Inapplicability is never an
error; the chart parser simply tries the next operator.

    merge_comp      +f head (lexical) with one -f child  -> complement
    merge_spec      +f head (derived) with one -f child  -> specifier
    merge_nonfinal  +f head with one -f child that has more features
                    -> the child stays attached and can move on
    insert          +f host, -f expression               -> attach as child
    insert_adjunct  -f host, *f adjunct                  -> attach as child
    spellout        -f head with 1-2 arguments           -> word order + meaning

These follow Kobele (2006, p. 118) and Fowlie's treatment of adjunction.
"""

from __future__ import annotations

from dataclasses import replace

from pymgsem.counters import Counters
from pymgsem.expression import DERIVED, LEXICAL, PLACEHOLDER, Argument, Expression
from pymgsem.syntax import (
    ADJUNCT,
    LICENSEE,
    LICENSOR,
    Closure,
    Conjunction,
    Ext,
    Formula,
    IndexedInternal,
    Int,
    Variable,
    bound_index,
    is_quantificational,
    licensee,
)

CLAUSE = "c"
VERB = "v"


def _is_final_licensee(expr: Expression, category: str) -> bool:
    return expr.features == (licensee(category),)


def _merge_final(expr: Expression, token: str | None) -> Expression | None:
    if not expr.outer_is(LICENSOR):
        return None
    f = expr.features[0].category
    matches = [c for c in expr.children if _is_final_licensee(c, f)]
    if len(matches) != 1:
        return None
    (child,) = matches
    rest = tuple(c for c in expr.children if not _is_final_licensee(c, f))
    arg = Argument(child.phon if token is None else token, f, child.meaning)
    return replace(
        expr,
        kind=DERIVED,
        features=expr.features[1:],
        arguments=(arg,) + expr.arguments,
        children=rest + child.children,
    )


def merge_comp(expr: Expression) -> Expression | None:
    """Merge a lexical head with its complement."""
    if expr.kind != LEXICAL:
        return None
    return _merge_final(expr, None)


def merge_spec(expr: Expression) -> Expression | None:
    """Merge a derived head with its specifier, which is not pronounced here."""
    if expr.kind != DERIVED:
        return None
    return _merge_final(expr, PLACEHOLDER)


def merge_nonfinal(expr: Expression) -> Expression | None:
    """Check one feature of a child that still has features left to check.

    If the child is a quantifier phrase, the argument is the variable its
    ``int_i`` binds, and the quantifier itself waits for its own scope position.
    """
    if not expr.outer_is(LICENSOR):
        return None
    f = expr.features[0].category
    matches = [c for c in expr.children if c.outer_is(LICENSEE, f)]
    if len(matches) != 1 or len(matches[0].features) < 2:
        return None
    (child,) = matches

    meaning = child.meaning
    if is_quantificational(meaning):
        index = bound_index(meaning)
        if index is None:
            # quantifier phrase not spelled out yet, nothing to bind
            return None
        meaning = Variable(index)

    children = tuple(
        replace(c, features=c.features[1:]) if c is child else c for c in expr.children
    )
    return replace(
        expr,
        kind=DERIVED,
        features=expr.features[1:],
        arguments=(Argument(child.phon, f, meaning),) + expr.arguments,
        children=children,
    )


def _attach(host: Expression, child: Expression) -> Expression:
    return replace(host, children=(child,) + host.children)


def _same_category(a: Expression, b: Expression) -> bool:
    return a.features[0].category == b.features[0].category


def insert(a: Expression, b: Expression) -> Expression | None:
    """Attach a ``-f`` expression to a ``+f`` host, in either argument order.

    Neither feature is checked here; the following merge step checks both.
    """
    if a.outer_is(LICENSOR) and b.outer_is(LICENSEE) and _same_category(a, b):
        return _attach(a, b)
    if a.outer_is(LICENSEE) and b.outer_is(LICENSOR) and _same_category(a, b):
        return _attach(b, a)
    return None


def insert_adjunct(a: Expression, b: Expression) -> Expression | None:
    """Attach a ``*f`` adjunct to a ``-f`` host, in either argument order."""
    if a.outer_is(LICENSEE) and b.outer_is(ADJUNCT) and _same_category(a, b):
        return _attach(a, b)
    if a.outer_is(ADJUNCT) and b.outer_is(LICENSEE) and _same_category(a, b):
        return _attach(b, a)
    return None


def _conjoin_adjuncts(base: Formula, adjuncts: tuple[Expression, ...]) -> Formula:
    for adj in reversed(adjuncts):
        base = Conjunction(adj.meaning, base)
    return base


def spellout(
    expr: Expression,
    counters: Counters,
    *,
    clause: str = CLAUSE,
    verb: str = VERB,
) -> Expression | None:
    """Linearize a head with its arguments and assemble its meaning.

    Attached adjuncts are pronounced after the phrase and conjoined onto its
    meaning. A quantificational head binds its restrictor through a fresh
    ``int_i``. Two-argument phrases are pronounced external-head-internal,
    which reverses Hunter (2011, p. 74).
    """
    if len(expr.arguments) not in (1, 2):
        return None
    category = expr.features[0].category if expr.outer_is(LICENSEE) else None

    adjuncts = tuple(c for c in expr.children if c.outer_is(ADJUNCT))
    children = tuple(c for c in expr.children if not c.outer_is(ADJUNCT))

    if len(expr.arguments) == 1:
        if category is None:
            return None
        (ext,) = expr.arguments
        if category == clause:
            words = [ext.token]
            base = ext.meaning
        elif category == verb:
            words = [ext.token, expr.phon]
            base = Conjunction(expr.meaning, Ext(ext.meaning))
        elif is_quantificational(expr.meaning):
            words = [expr.phon, ext.token]
            base = Conjunction(
                expr.meaning, IndexedInternal(ext.meaning, counters.next_index())
            )
        else:
            words = [expr.phon, ext.token]
            base = Conjunction(expr.meaning, ext.meaning)
        meaning = _conjoin_adjuncts(base, adjuncts)
    else:
        ext, int_ = expr.arguments
        if category == clause:
            words = [int_.token]
            meaning = _conjoin_adjuncts(Conjunction(ext.meaning, int_.meaning), adjuncts)
        else:
            words = [ext.token, expr.phon, int_.token]
            if category == verb:
                base = Conjunction(
                    expr.meaning, Conjunction(Int(int_.meaning), Ext(ext.meaning))
                )
                meaning = _conjoin_adjuncts(base, adjuncts)
            else:
                meaning = Closure(Conjunction(expr.meaning, int_.meaning))

    phon = " ".join(words)
    if adjuncts:
        phon += " " + " ".join(a.phon for a in adjuncts)
    return replace(expr, phon=phon, arguments=(), children=children, meaning=meaning)
