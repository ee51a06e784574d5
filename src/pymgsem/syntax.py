"""Features and logical forms for conjunctivist Neo-Davidsonian semantics.

Logical forms are conjunctions of monadic predicates. Events are first-class
individuals, so adverbial modifiers are ordinary predicates of the event, and
the existential closure ``<φ>`` asserts that some event satisfies ``φ``. Theta
roles are introduced by ``int(φ)`` and ``ext(φ)``; ``int_i(φ)`` is an internal
role still waiting for the variable ``x_i`` it will bind. Quantifiers are
first-class formulas (``some``/``every``) rather than special predicates.

Notation (as produced by ``str`` and accepted by ``parse_formula``)::

    formula ::= atom ( '&' formula )?          (right-assoc)
    atom    ::= '(' formula ')' | '<' formula '>'
              | 'int(' formula ')' | 'int_' index '(' formula ')'
              | 'ext(' formula ')' | 'x_' index | 'some' | 'every' | name
              | '"' quoted-name '"'

A constant is written in double quotes (with ``\\`` escaping ``"`` and ``\\``)
when its bare name would read as something else: the empty constant of a null
head is ``""``, and ``"some"`` or ``"x_1"`` stay constants.

Features drive combination. ``+f`` (licensor) selects a ``-f`` (licensee);
``*f`` marks an adjunct that attaches to a ``-f`` expression.
"""

from __future__ import annotations

import re
from collections.abc import Iterator
from dataclasses import dataclass
from typing import Union

# Feature kinds
LICENSOR = "+"
LICENSEE = "-"
ADJUNCT = "*"

# Quantifier kinds
EXISTS = "some"
FORALL = "every"

_FEATURE_KINDS = (LICENSOR, LICENSEE, ADJUNCT)
_RESERVED = "()<>&\""

_VARIABLE_RE = re.compile(r"^x_(-?\d+)$")
_INDEXED_RE = re.compile(r"^int_(-?\d+)\((.*)\)$", re.DOTALL)
_UNARY_RE = re.compile(r"^(int|ext)\((.*)\)$", re.DOTALL)
_QUOTED_RE = re.compile(r'^"((?:[^"\\]|\\.)*)"$', re.DOTALL)
_ESCAPE_RE = re.compile(r"\\(.)", re.DOTALL)


@dataclass(frozen=True, slots=True)
class Feature:
    """A typed category tag. Only the first feature of an expression is ever checked.

    Attributes:
        kind: One of LICENSOR, LICENSEE, ADJUNCT.
        category: Opaque category name, compared by exact string equality.
    """

    kind: str
    category: str

    def __str__(self) -> str:
        return f"{self.kind}{self.category}"


def licensor(category: str) -> Feature:
    return Feature(LICENSOR, category)


def licensee(category: str) -> Feature:
    return Feature(LICENSEE, category)


def adjunct(category: str) -> Feature:
    return Feature(ADJUNCT, category)


def parse_features(s: str) -> tuple[Feature, ...]:
    """Parse a whitespace-separated feature list such as ``"+d +d -v"``."""
    features = []
    for item in s.split():
        kind, category = item[:1], item[1:]
        if kind not in _FEATURE_KINDS or not category:
            raise ValueError(
                f"Malformed feature {item!r} in {s!r}. "
                f"Expected '+cat', '-cat' or '*cat'."
            )
        features.append(Feature(kind, category))
    return tuple(features)


def format_features(features: tuple[Feature, ...]) -> str:
    return " ".join(str(f) for f in features)


# --- Logical forms ---


@dataclass(frozen=True, slots=True)
class Constant:
    name: str

    def __str__(self) -> str:
        if _needs_quotes(self.name):
            escaped = self.name.replace("\\", "\\\\").replace('"', '\\"')
            return f'"{escaped}"'
        return self.name


@dataclass(frozen=True, slots=True)
class Variable:
    index: int

    def __str__(self) -> str:
        return f"x_{self.index}"


@dataclass(frozen=True, slots=True)
class Int:
    sub: Formula

    def __str__(self) -> str:
        return f"int({self.sub})"


@dataclass(frozen=True, slots=True)
class IndexedInternal:
    """An internal theta role whose filler will be bound to ``x_index``.

    Indices are negative so they never collide with pronoun indices.
    """

    sub: Formula
    index: int

    def __str__(self) -> str:
        return f"int_{self.index}({self.sub})"


@dataclass(frozen=True, slots=True)
class Ext:
    sub: Formula

    def __str__(self) -> str:
        return f"ext({self.sub})"


@dataclass(frozen=True, slots=True)
class Conjunction:
    left: Formula
    right: Formula

    def __str__(self) -> str:
        left = f"({self.left})" if isinstance(self.left, Conjunction) else str(self.left)
        return f"{left} & {self.right}"


@dataclass(frozen=True, slots=True)
class Closure:
    """Existential closure over events."""

    sub: Formula

    def __str__(self) -> str:
        return f"<{self.sub}>"


@dataclass(frozen=True, slots=True)
class QuantifierTag:
    kind: str

    def __str__(self) -> str:
        return self.kind


Formula = Union[
    Constant, Variable, Int, IndexedInternal, Ext, Conjunction, Closure, QuantifierTag
]


def is_quantificational(formula: Formula) -> bool:
    """Return True if the conjunct spine of *formula* ends in a quantifier.

    The spine is followed through the first conjunct of each ``Conjunction``, so
    both ``some`` and ``some & int_-1(girl)`` are quantificational while
    ``girl & some`` is not. This position is what marks a phrase as taking scope.
    """
    while isinstance(formula, Conjunction):
        formula = formula.left
    return isinstance(formula, QuantifierTag)


def bound_index(formula: Formula) -> int | None:
    """Return the index of the rightmost ``int_i`` conjunct, or None."""
    while isinstance(formula, Conjunction):
        formula = formula.right
    if isinstance(formula, IndexedInternal):
        return formula.index
    return None


# --- Parsing ---


def _needs_quotes(name: str) -> bool:
    """True if the bare *name* would not parse back as the same constant."""
    return (
        not name
        or name != name.strip()
        or name in (EXISTS, FORALL)
        or _VARIABLE_RE.match(name) is not None
        or any(c in _RESERVED for c in name)
    )


def _scan(s: str) -> Iterator[tuple[int, str, int]]:
    """Yield (position, char, bracket depth after it) outside quoted constants."""
    depth = 0
    quoted = escaped = False
    for i, c in enumerate(s):
        if quoted:
            if escaped:
                escaped = False
            elif c == "\\":
                escaped = True
            elif c == '"':
                quoted = False
            continue
        if c == '"':
            quoted = True
            continue
        if c in "(<":
            depth += 1
        elif c in ")>":
            depth -= 1
        yield i, c, depth
    if quoted:
        raise ValueError(f"Unterminated quoted constant in: {s!r}")


def _wrapped(s: str, open_char: str, close_char: str) -> bool:
    """True if the first char opens a bracket that closes at the last char."""
    if not (s.startswith(open_char) and s.endswith(close_char)):
        return False
    for i, _, depth in _scan(s):
        if depth == 0 and i < len(s) - 1:
            return False
    return True


def parse_formula(s: str) -> Formula:
    """Parse the rendered notation back into a formula.

    The empty string is the empty constant used for phonologically null heads,
    as is ``""``.

    Examples:
        >>> parse_formula("chase & int(bob)")
        Conjunction(left=Constant(name='chase'), right=Int(sub=Constant(name='bob')))
        >>> parse_formula('"some" & x_1')
        Conjunction(left=Constant(name='some'), right=Variable(index=1))
    """
    s = s.strip()
    if not s:
        return Constant("")

    if _wrapped(s, "(", ")"):
        return parse_formula(s[1:-1])

    # Conjunction (right-associative): split at the first '&' at depth 0
    depth = 0
    for i, c, depth in _scan(s):
        if depth < 0:
            raise ValueError(f"Unbalanced brackets in: {s!r}")
        if depth == 0 and c == "&":
            left_str = s[:i].strip()
            right_str = s[i + 1 :].strip()
            if not left_str or not right_str:
                raise ValueError(f"Malformed conjunction in: {s!r}")
            return Conjunction(parse_formula(left_str), parse_formula(right_str))
    if depth != 0:
        raise ValueError(f"Unbalanced brackets in: {s!r}")

    if _wrapped(s, "<", ">"):
        return Closure(_parse_operand(s[1:-1], s))

    m = _INDEXED_RE.match(s)
    if m and _wrapped(s[s.index("(") :], "(", ")"):
        return IndexedInternal(_parse_operand(m.group(2), s), int(m.group(1)))

    m = _UNARY_RE.match(s)
    if m and _wrapped(s[s.index("(") :], "(", ")"):
        sub = _parse_operand(m.group(2), s)
        return Int(sub) if m.group(1) == "int" else Ext(sub)

    m = _QUOTED_RE.match(s)
    if m:
        return Constant(_ESCAPE_RE.sub(r"\1", m.group(1)))

    m = _VARIABLE_RE.match(s)
    if m:
        return Variable(int(m.group(1)))

    if s == EXISTS:
        return QuantifierTag(EXISTS)
    if s == FORALL:
        return QuantifierTag(FORALL)

    if any(c in _RESERVED for c in s):
        raise ValueError(f"Malformed formula: {s!r}")
    return Constant(s)


def _parse_operand(inner: str, whole: str) -> Formula:
    if not inner.strip():
        raise ValueError(f"Operator with no operand in: {whole!r}")
    return parse_formula(inner)
