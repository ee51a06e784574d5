"""Finite relational models for evaluating logical forms.

A model lists the entities and events of a world, an assignment of pronoun
indices to entities, the extensions of monadic predicates, and the two dyadic
theta relations ``int`` and ``ext`` as sets of (event, entity) pairs. The logical
forms themselves stay monadic; the theta relations are only consulted when
``int(φ)`` or ``ext(φ)`` is evaluated at an event.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Iterable, Mapping
from pathlib import Path

logger = logging.getLogger(__name__)

INTERNAL = "int"
EXTERNAL = "ext"

Pair = tuple[str, str]


class Model:
    """A model of entities, events, assignments and predicate extensions.

    Parameters:
        entities: Names of the individuals.
        events: Names of the events. Kept apart from entities by convention only.
        assignments: Pronoun/variable index to entity.
        predicates: Monadic predicate name to the entities/events it holds of.
        predicates2: Relation name (``int``/``ext``) to (event, entity) pairs.
    """

    def __init__(
        self,
        entities: Iterable[str] = (),
        events: Iterable[str] = (),
        assignments: Mapping[int, str] | None = None,
        predicates: Mapping[str, Iterable[str]] | None = None,
        predicates2: Mapping[str, Iterable[Pair]] | None = None,
    ) -> None:
        self._entities: tuple[str, ...] = tuple(dict.fromkeys(entities))
        self._events: tuple[str, ...] = tuple(dict.fromkeys(events))
        self._assignments: dict[int, str] = dict(assignments) if assignments else {}
        self._predicates: dict[str, frozenset[str]] = {
            name: frozenset(ext) for name, ext in (predicates or {}).items()
        }
        self._predicates2: dict[str, frozenset[Pair]] = {
            name: frozenset((event, entity) for event, entity in pairs)
            for name, pairs in (predicates2 or {}).items()
        }

        for index, entity in self._assignments.items():
            if not isinstance(index, int):
                raise ValueError(f"Assignment index {index!r} is not an integer.")
            if entity not in self._entities:
                raise ValueError(
                    f"Assignment x_{index} -> {entity!r}: not an entity of the model."
                )

        logger.debug(
            "Model created: %d entities, %d events, %d predicates",
            len(self._entities),
            len(self._events),
            len(self._predicates),
        )

    # --- Read-only properties ---

    @property
    def entities(self) -> tuple[str, ...]:
        return self._entities

    @property
    def events(self) -> tuple[str, ...]:
        return self._events

    @property
    def assignments(self) -> dict[int, str]:
        """Current assignment (read-only view)."""
        return dict(self._assignments)

    @property
    def predicates(self) -> dict[str, frozenset[str]]:
        return dict(self._predicates)

    @property
    def predicates2(self) -> dict[str, frozenset[Pair]]:
        return dict(self._predicates2)

    # --- Lookups ---

    def is_entity(self, name: str) -> bool:
        return name in self._entities

    def satisfies(self, predicate: str, individual: str) -> bool:
        """True if *individual* is in the extension of *predicate*."""
        return individual in self._predicates.get(predicate, frozenset())

    def related(self, relation: str, event: str, entity: str) -> bool:
        """True if (*event*, *entity*) is in the theta relation *relation*."""
        return (event, entity) in self._predicates2.get(relation, frozenset())

    def assignment(self, index: int) -> str:
        """Return the entity assigned to ``x_index``; KeyError if unbound."""
        return self._assignments[index]

    def with_assignment(self, index: int, entity: str) -> Model:
        """Return a copy of the model with ``x_index`` bound to *entity*.

        The receiver is left untouched, so a binding made for one branch of a
        quantifier is never visible to another.
        """
        model = Model.__new__(Model)
        model._entities = self._entities
        model._events = self._events
        model._assignments = {**self._assignments, index: entity}
        model._predicates = self._predicates
        model._predicates2 = self._predicates2
        return model

    # --- Serialization ---

    def to_dict(self) -> dict:
        """Serialize to a JSON-compatible dict."""
        return {
            "entities": list(self._entities),
            "events": list(self._events),
            "assignments": {str(i): e for i, e in sorted(self._assignments.items())},
            "predicates": {
                name: sorted(ext) for name, ext in sorted(self._predicates.items())
            },
            "predicates2": {
                name: [list(pair) for pair in sorted(pairs)]
                for name, pairs in sorted(self._predicates2.items())
            },
        }

    @classmethod
    def from_dict(cls, data: dict) -> Model:
        """Deserialize from a dict (as produced by ``to_dict``)."""
        try:
            assignments = {int(i): e for i, e in data.get("assignments", {}).items()}
        except ValueError as e:
            raise ValueError(f"Assignment indices must be integers: {e}") from e
        predicates2: dict[str, list[Pair]] = {}
        for name, pairs in data.get("predicates2", {}).items():
            checked = []
            for pair in pairs:
                if len(pair) != 2:
                    raise ValueError(
                        f"Relation {name!r}: expected [event, entity], got {pair!r}"
                    )
                checked.append((pair[0], pair[1]))
            predicates2[name] = checked
        return cls(
            entities=data.get("entities", []),
            events=data.get("events", []),
            assignments=assignments,
            predicates=data.get("predicates", {}),
            predicates2=predicates2,
        )

    def to_file(self, path: str | Path) -> None:
        """Write the model to a JSON file."""
        with open(path, "w", encoding="utf-8") as f:
            json.dump(self.to_dict(), f, indent=2, ensure_ascii=False)
        logger.debug("Saved model to %s", path)

    @classmethod
    def from_file(cls, path: str | Path) -> Model:
        """Load a model from a JSON file."""
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
        logger.debug("Loaded model from %s", path)
        return cls.from_dict(data)
