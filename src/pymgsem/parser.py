"""Agenda-driven chart parsing for the merge/insert Minimalist Grammar.

Because the grammar has only licensing features, anything may combine with
anything in any position, so the parser is a chart parser without spans:

1. Every lexical item matching an input token, plus every null item, becomes a
   chart entry and goes on the agenda (newest first).
2. The entry at the front of the agenda is combined, trying operators in a
   fixed order: insert_adjunct (with every chart entry), spellout, merge_comp,
   merge_spec, merge_nonfinal, insert (with every chart entry). Chart entries are
   scanned newest first.
3. Only the first successful combination is kept. It is added to the chart and
   to the front of the agenda, and is itself combined at once; the chain ends
   when nothing applies.
4. Parsing stops as soon as the chart holds an accepting entry (see
   ``chart.is_accepting``), or when the agenda runs out.

Keeping only the first combination makes the search greedy: it follows one
derivation at a time and can miss a parse that needs a different local choice.
"""

from __future__ import annotations

import logging
from collections import deque
from collections.abc import Iterator
from dataclasses import dataclass, field
from functools import partial
from itertools import chain

from pymgsem.chart import (
    Chart,
    ChartEntry,
    apply_binary,
    apply_unary,
    is_accepting,
)
from pymgsem.counters import DEFAULT_COUNTERS, Counters
from pymgsem.expression import Expression
from pymgsem.grammar import Grammar, tokenize
from pymgsem.operators import (
    CLAUSE,
    VERB,
    insert,
    insert_adjunct,
    merge_comp,
    merge_nonfinal,
    merge_spec,
    spellout,
)
from pymgsem.syntax import Formula

logger = logging.getLogger(__name__)


@dataclass
class ParseResult:
    """Result of parsing one input string.

    Attributes:
        entry: The accepted (and spelled out) chart entry, or None.
        tokens: The tokens the input was split into.
        chart_size: Number of entries in the chart when parsing stopped.
        steps: Number of derived entries added to the chart.
        unknown_tokens: Tokens with no lexical entry.
    """

    entry: ChartEntry | None
    tokens: list[str] = field(default_factory=list)
    chart_size: int = 0
    steps: int = 0
    unknown_tokens: list[str] = field(default_factory=list)

    @property
    def accepted(self) -> bool:
        return self.entry is not None

    @property
    def expression(self) -> Expression | None:
        return self.entry.expression if self.entry is not None else None

    @property
    def meaning(self) -> Formula | None:
        return self.entry.expression.meaning if self.entry is not None else None


class ChartParser:
    """Greedy agenda-based parser for a grammar.

    Parameters:
        grammar: The lexicon and start categories.
        counters: Id and index generators. Defaults to the process-wide
            ``DEFAULT_COUNTERS`` so ids never repeat across parsers.
        clause: Category spelled out as a clause.
        verb: Category spelled out as a verb phrase.
    """

    def __init__(
        self,
        grammar: Grammar,
        *,
        counters: Counters | None = None,
        clause: str = CLAUSE,
        verb: str = VERB,
    ) -> None:
        self.grammar = grammar
        self.counters = counters if counters is not None else DEFAULT_COUNTERS
        self._spellout = partial(spellout, counters=self.counters, clause=clause, verb=verb)
        self._unary = [
            ("spellout", self._spellout),
            ("merge_comp", merge_comp),
            ("merge_spec", merge_spec),
            ("merge_nonfinal", merge_nonfinal),
        ]

    def run(self, text: str) -> ParseResult:
        """Parse *text* and return a ``ParseResult`` with statistics."""
        tokens = tokenize(text)
        unknown = [tok for tok in tokens if not self.grammar.lookup(tok)]
        if unknown:
            logger.debug("No lexical entry for %s; not parsing %r", unknown, text)
            return ParseResult(None, tokens=tokens, unknown_tokens=unknown)

        entries = self._initial_entries(tokens)
        lexical_ids = frozenset(e.id for e in entries)
        chart = Chart(entries)
        agenda = deque(reversed(entries))
        logger.debug("Parsing %r: %d tokens, %d lexical entries", text, len(tokens), len(entries))

        accepted: list[ChartEntry] = []
        steps = 0
        while agenda and not accepted:
            item: ChartEntry | None = agenda.popleft()
            while True:
                item = self._derive(item, chart)
                if item is None or not chart.add(item):
                    break
                agenda.appendleft(item)
                steps += 1
                logger.debug(
                    "e%d = %s%s", item.id, item.derivation.operator,
                    tuple(s.id for s in item.derivation.sources),
                )
                if is_accepting(item, self.grammar.start_symbols, lexical_ids):
                    accepted.append(item)

        if not accepted:
            logger.debug("No parse for %r (%d chart entries, %d steps)", text, len(chart), steps)
            return ParseResult(None, tokens=tokens, chart_size=len(chart), steps=steps)

        result = min(accepted, key=lambda e: e.id)
        spelled = apply_unary("spellout", self._spellout, result, self.counters)
        if spelled is not None:
            result = spelled
        logger.debug(
            "Parsed %r as e%d: %s (%d chart entries, %d steps)",
            text, result.id, result.expression.meaning, len(chart), steps,
        )
        return ParseResult(result, tokens=tokens, chart_size=len(chart), steps=steps)

    def parse(self, text: str) -> ChartEntry | None:
        """Return the accepted chart entry for *text*, or None if there is no parse."""
        return self.run(text).entry

    def recognize(self, text: str) -> bool:
        return self.run(text).accepted

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _initial_entries(self, tokens: list[str]) -> list[ChartEntry]:
        """Null items first, then the items of each token in input order."""
        items = list(self.grammar.null_items)
        for tok in tokens:
            items.extend(self.grammar.lookup(tok))
        return [
            ChartEntry(self.counters.next_id(), Expression.from_lexical(item))
            for item in items
        ]

    def _candidates(self, entry: ChartEntry, chart: Chart) -> Iterator[ChartEntry | None]:
        others = chart.newest_first()
        return chain(
            (apply_binary("insert_adjunct", insert_adjunct, entry, other, self.counters)
             for other in others),
            (apply_unary(name, op, entry, self.counters) for name, op in self._unary),
            (apply_binary("insert", insert, entry, other, self.counters)
             for other in others),
        )

    def _derive(self, entry: ChartEntry, chart: Chart) -> ChartEntry | None:
        """The first combination of *entry* that succeeds, or None."""
        return next((c for c in self._candidates(entry, chart) if c is not None), None)


def parse(grammar: Grammar, text: str) -> ChartEntry | None:
    """Parse *text* with *grammar*; None when there is no parse."""
    return ChartParser(grammar).parse(text)


def recognize(grammar: Grammar, text: str) -> bool:
    """True if *text* has a parse in *grammar*."""
    return ChartParser(grammar).recognize(text)
