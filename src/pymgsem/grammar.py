"""Lexicon and grammar for the Minimalist Grammar fragment.

A grammar is a lexicon of (token, features, meaning) triples plus a set of
start categories. A derivation is complete when a single ``-f`` feature is left
and ``f`` is a start category. Lexical items whose token is the empty string are
phonologically null and available in every parse.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from pathlib import Path

from pymgsem.syntax import (
    Feature,
    Formula,
    format_features,
    parse_features,
    parse_formula,
)

logger = logging.getLogger(__name__)


def tokenize(text: str) -> list[str]:
    """Split *text* on single spaces.

    Consecutive spaces yield empty tokens, which look up null lexical items.
    No trimming, case folding or punctuation handling is done.
    """
    return text.split(" ")


@dataclass(frozen=True, slots=True)
class LexicalItem:
    """A lexical entry ``token :: features = meaning``."""

    token: str
    features: tuple[Feature, ...]
    meaning: Formula

    def __str__(self) -> str:
        return f"{self.token}::{format_features(self.features)} = {self.meaning}"

    @classmethod
    def of(
        cls,
        token: str,
        features: str | Sequence[Feature],
        meaning: str | Formula,
    ) -> LexicalItem:
        """Build an item, parsing string features and meanings."""
        if isinstance(features, str):
            features = parse_features(features)
        if isinstance(meaning, str):
            meaning = parse_formula(meaning)
        if not features:
            raise ValueError(f"Lexical item {token!r} has no features.")
        return cls(token, tuple(features), meaning)


LexicalTriple = tuple[str, "str | Sequence[Feature]", "str | Formula"]


class Grammar:
    """An immutable lexicon plus the start categories that end a derivation.

    Parameters:
        lexicon: Lexical items, or (token, features, meaning) triples where
            features and meaning may be given in string notation.
        start_symbols: Categories accepted as the final licensee.
    """

    def __init__(
        self,
        lexicon: Iterable[LexicalItem | LexicalTriple] = (),
        start_symbols: Iterable[str] = (),
    ) -> None:
        items = []
        for entry in lexicon:
            if not isinstance(entry, LexicalItem):
                entry = LexicalItem.of(*entry)
            items.append(entry)
        self._lexicon: tuple[LexicalItem, ...] = tuple(items)
        self._start_symbols: frozenset[str] = frozenset(start_symbols)

        logger.debug(
            "Grammar created: %d lexical items, start symbols %s",
            len(self._lexicon),
            sorted(self._start_symbols),
        )

    @property
    def lexicon(self) -> tuple[LexicalItem, ...]:
        return self._lexicon

    @property
    def start_symbols(self) -> frozenset[str]:
        return self._start_symbols

    def lookup(self, token: str) -> list[LexicalItem]:
        """Return every item whose token equals *token* exactly, in lexicon order."""
        return [item for item in self._lexicon if item.token == token]

    @property
    def null_items(self) -> list[LexicalItem]:
        """Phonologically null items (empty token)."""
        return self.lookup("")

    def is_start(self, category: str) -> bool:
        return category in self._start_symbols

    # --- Serialization ---

    def to_dict(self) -> dict:
        """Serialize to a JSON-compatible dict."""
        return {
            "start_symbols": sorted(self._start_symbols),
            "lexicon": [
                {
                    "token": item.token,
                    "features": format_features(item.features),
                    "meaning": str(item.meaning),
                }
                for item in self._lexicon
            ],
        }

    @classmethod
    def from_dict(cls, data: dict) -> Grammar:
        """Deserialize from a dict (as produced by ``to_dict``)."""
        lexicon = []
        for entry in data.get("lexicon", []):
            try:
                token = entry["token"]
                features = entry["features"]
            except (KeyError, TypeError) as e:
                raise ValueError(f"Malformed lexical entry {entry!r}") from e
            lexicon.append(LexicalItem.of(token, features, entry.get("meaning", "")))
        return cls(lexicon=lexicon, start_symbols=data.get("start_symbols", []))

    def to_file(self, path: str | Path) -> None:
        """Write the grammar to a JSON file."""
        with open(path, "w", encoding="utf-8") as f:
            json.dump(self.to_dict(), f, indent=2, ensure_ascii=False)
        logger.debug("Saved grammar to %s", path)

    @classmethod
    def from_file(cls, path: str | Path) -> Grammar:
        """Load a grammar from a JSON file."""
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
        logger.debug("Loaded grammar from %s", path)
        return cls.from_dict(data)
