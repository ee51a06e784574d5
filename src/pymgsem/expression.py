"""Expressions built during a derivation.

An expression is a phonological string, a kind (lexical or derived), a feature
list, the arguments it has discharged, the expressions attached to it but not
yet merged (its children), and a logical form.

Merge and insert replace the usual merge and move: insert attaches any
expression to a host as a child, and a later merge step checks the host's
licensor against that child and records the child as an argument. Arguments are
kept newest first, so a two-argument expression lists its external argument
before its internal one.
"""

from __future__ import annotations

from dataclasses import dataclass

from pymgsem.grammar import LexicalItem
from pymgsem.syntax import Feature, Formula, format_features

# Expression kinds
LEXICAL = "lexical"
DERIVED = "derived"

# Token recorded for a specifier, which contributes meaning but no sound.
PLACEHOLDER = "_"


@dataclass(frozen=True, slots=True)
class Argument:
    """A discharged complement or specifier, kept until spellout."""

    token: str
    category: str
    meaning: Formula

    def __str__(self) -> str:
        return f"{self.token} {self.category} = {self.meaning}"


@dataclass(frozen=True, slots=True)
class Expression:
    phon: str
    kind: str
    features: tuple[Feature, ...]
    meaning: Formula
    arguments: tuple[Argument, ...] = ()
    children: tuple[Expression, ...] = ()

    @classmethod
    def from_lexical(cls, item: LexicalItem) -> Expression:
        return cls(item.token, LEXICAL, item.features, item.meaning)

    @property
    def outer(self) -> Feature | None:
        """The first feature, the only one an operator may check."""
        return self.features[0] if self.features else None

    def outer_is(self, kind: str, category: str | None = None) -> bool:
        outer = self.outer
        if outer is None or outer.kind != kind:
            return False
        return category is None or outer.category == category

    def __str__(self) -> str:
        sep = "::" if self.kind == LEXICAL else ":"
        args = "".join(f", {a}" for a in self.arguments)
        children = ", ".join(str(c) for c in self.children)
        return (
            f"<{self.phon}{sep}{format_features(self.features)} = {self.meaning}"
            f"{args}, {{{children}}}>"
        )
