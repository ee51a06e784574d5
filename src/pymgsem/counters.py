"""Fresh chart-entry ids and theta-role indices."""

from __future__ import annotations

import itertools


class Counters:
    """Monotonic generators for chart-entry ids and ``int_i`` indices.

    Ids count up from 0; indices count down from -1 so that they stay apart from
    the positive indices of pronouns. A parser shares one instance across all of
    its parses, and ``DEFAULT_COUNTERS`` is shared by every parser that is not
    given its own, so neither value repeats within a process.
    """

    def __init__(self) -> None:
        self._ids = itertools.count()
        self._indices = itertools.count(-1, -1)

    def next_id(self) -> int:
        return next(self._ids)

    def next_index(self) -> int:
        return next(self._indices)


DEFAULT_COUNTERS = Counters()
