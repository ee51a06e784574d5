"""Shared fixtures for pyMGSem test suite."""

import pytest

from pymgsem import ChartParser, Counters, Grammar, Model

# A small fragment of English with case-marked subjects, quantified noun
# phrases, adjectives, an event adverb and two null complementizers.
ENGLISH_LEXICON = [
    ("alice", "-d", "alice"),
    ("alice.NOM", "-d -k", "alice"),
    ("bob", "-d", "bob"),
    ("bob.NOM", "-d -k", "bob"),
    ("some", "+n -d -q", "some"),
    ("some.NOM", "+n -d -k -q", "some"),
    ("every", "+n -d -q", "every"),
    ("every.NOM", "+n -d -k -q", "every"),
    ("boy", "-n", "boy"),
    ("girl", "-n", "girl"),
    ("fast", "+n -n", "fast"),
    ("blonde", "+n -n", "blonde"),
    ("chase", "+d +d -v", "chase"),
    ("run", "+d -v", "run"),
    ("-s", "+v +k -t", "present"),
    ("quickly", "*v", "quick"),
    ("he.1.NOM", "-d -k", "x_1"),
    ("ε", "+t -c", ""),
    ("ε.Q", "+t +q -c", ""),
]


@pytest.fixture
def english_grammar():
    """The English fragment with start category c."""
    return Grammar(lexicon=ENGLISH_LEXICON, start_symbols=["c"])


@pytest.fixture
def world():
    """Alice chases Carol (quickly), Carol chases Bob, Alice runs.

    Pronoun 1 refers to Bob. Carol is the only girl, and she is fast.
    """
    return Model(
        entities=["alice", "bob", "carol"],
        events=["chasing", "running", "alice chasing carol", "carol chasing bob"],
        assignments={1: "bob"},
        predicates={
            "present": ["chasing", "running", "alice chasing carol", "carol chasing bob"],
            "chase": ["chasing", "alice chasing carol", "carol chasing bob"],
            "quick": ["chasing", "alice chasing carol"],
            "run": ["running"],
            "girl": ["carol"],
            "fast": ["carol"],
        },
        predicates2={
            "int": [
                ("chasing", "bob"),
                ("alice chasing carol", "carol"),
                ("carol chasing bob", "bob"),
            ],
            "ext": [
                ("chasing", "alice"),
                ("running", "alice"),
                ("alice chasing carol", "alice"),
                ("carol chasing bob", "carol"),
            ],
        },
    )


@pytest.fixture
def parser(english_grammar):
    """A parser over the English fragment with its own id counters."""
    return ChartParser(english_grammar, counters=Counters())
