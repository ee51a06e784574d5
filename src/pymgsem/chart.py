"""Chart entries, derivations and the retired-set discipline.

Each chart entry records how it was built. A derived entry carries the set of
entry ids its derivation has consumed (its retired set). Combining two entries
is only allowed when neither has consumed the other and their retired sets are
disjoint, so every lexical insertion is used by at most one path through the
final derivation.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Iterator
from dataclasses import dataclass

from pymgsem.counters import Counters
from pymgsem.expression import Expression
from pymgsem.syntax import LICENSEE

UnaryOperator = Callable[[Expression], "Expression | None"]
BinaryOperator = Callable[[Expression, Expression], "Expression | None"]


@dataclass(frozen=True, slots=True)
class Derivation:
    """How a chart entry was built.

    Attributes:
        operator: Operator name, or None for a lexical entry.
        sources: The entries the operator was applied to.
        retired: Ids of every entry consumed along the way.
    """

    operator: str | None = None
    sources: tuple[ChartEntry, ...] = ()
    retired: frozenset[int] = frozenset()

    @property
    def is_lexical(self) -> bool:
        return self.operator is None


LEXICAL_ENTRY = Derivation()


@dataclass(frozen=True, slots=True)
class ChartEntry:
    id: int
    expression: Expression
    derivation: Derivation = LEXICAL_ENTRY

    @property
    def retired(self) -> frozenset[int]:
        return self.derivation.retired


def apply_unary(
    name: str, operator: UnaryOperator, entry: ChartEntry, counters: Counters
) -> ChartEntry | None:
    """Apply *operator* to *entry*, retiring the entry in the result."""
    retired = entry.retired
    if entry.id in retired:
        return None
    result = operator(entry.expression)
    if result is None:
        return None
    return ChartEntry(
        counters.next_id(), result, Derivation(name, (entry,), retired | {entry.id})
    )


def apply_binary(
    name: str,
    operator: BinaryOperator,
    first: ChartEntry,
    second: ChartEntry,
    counters: Counters,
) -> ChartEntry | None:
    """Apply *operator* to two entries whose derivations share no material."""
    if first.id == second.id:
        return None
    retired = first.retired | second.retired
    if first.id in retired or second.id in retired:
        return None
    if not first.retired.isdisjoint(second.retired):
        return None
    result = operator(first.expression, second.expression)
    if result is None:
        return None
    return ChartEntry(
        counters.next_id(),
        result,
        Derivation(name, (first, second), retired | {first.id, second.id}),
    )


def is_accepting(
    entry: ChartEntry, start_symbols: frozenset[str], lexical_ids: frozenset[int]
) -> bool:
    """A single start-category licensee left, and every lexical entry consumed."""
    features = entry.expression.features
    if len(features) != 1:
        return False
    (feature,) = features
    if feature.kind != LICENSEE or feature.category not in start_symbols:
        return False
    return lexical_ids <= entry.retired


class Chart:
    """The entries built so far, in insertion (and therefore id) order."""

    def __init__(self, entries: Iterable[ChartEntry] = ()) -> None:
        self._entries: list[ChartEntry] = []
        self._seen: set[ChartEntry] = set()
        for entry in entries:
            self.add(entry)

    def add(self, entry: ChartEntry) -> bool:
        """Add *entry*; return False if an equal entry is already present."""
        if entry in self._seen:
            return False
        self._seen.add(entry)
        self._entries.append(entry)
        return True

    def newest_first(self) -> list[ChartEntry]:
        return self._entries[::-1]

    def __contains__(self, entry: object) -> bool:
        return entry in self._seen

    def __iter__(self) -> Iterator[ChartEntry]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)


def format_derivation(entry: ChartEntry) -> str:
    """Render the derivation of *entry*, one line per step, leaves first.

    Example::

        e0 = <bob::-d = bob, {}>
        e1 = <chase::+d +d -v = chase, {}>
        e2 = insert(e0, e1) = <chase::+d +d -v = chase, {<bob::-d = bob, {}>}>
    """
    lines: list[str] = []

    def traverse(node: ChartEntry) -> str:
        deriv = node.derivation
        labels = [traverse(source) for source in deriv.sources]
        label = f"e{len(lines)}"
        if deriv.is_lexical:
            lines.append(f"{label} = {node.expression}")
        else:
            lines.append(f"{label} = {deriv.operator}({', '.join(labels)}) = {node.expression}")
        return label

    traverse(entry)
    return "\n".join(lines)
