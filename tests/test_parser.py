"""Tests for pymgsem.parser — agenda-driven chart parsing."""

import pytest

from pymgsem import ChartParser, Counters, Grammar, evaluate, parse, recognize
from pymgsem.chart import Chart, ChartEntry
from pymgsem.expression import DERIVED, LEXICAL, Argument, Expression
from pymgsem.grammar import LexicalItem
from pymgsem.syntax import Constant, bound_index, licensee, parse_features


def leaves(entry):
    if entry.derivation.is_lexical:
        return [entry]
    return [leaf for source in entry.derivation.sources for leaf in leaves(source)]


def nodes(entry):
    yield entry
    for source in entry.derivation.sources:
        yield from nodes(source)


class TestSentences:
    @pytest.mark.parametrize(
        "sentence, expected",
        [
            ("ε alice.NOM chase -s bob", True),
            ("ε alice.NOM chase -s bob quickly", True),
            ("ε alice.NOM run -s", True),
            ("ε alice.NOM run -s quickly", False),
            ("ε bob.NOM chase -s alice", False),
            ("ε he.1.NOM chase -s alice", False),
            ("ε.Q alice.NOM chase -s some girl", True),
            ("ε.Q alice.NOM chase -s some fast girl", True),
            ("ε.Q alice.NOM chase -s some fast girl quickly", True),
            ("ε.Q alice.NOM chase -s every girl", True),
            ("ε.Q bob.NOM chase -s some girl", False),
            ("ε.Q bob.NOM chase -s every girl", False),
            ("ε.Q some.NOM girl chase -s bob", True),
            ("ε.Q some.NOM girl chase -s alice", False),
            ("ε.Q every.NOM girl chase -s bob", True),
            ("ε.Q every.NOM girl chase -s alice", False),
        ],
    )
    def test_truth_value(self, parser, world, sentence, expected):
        result = parser.run(sentence)
        assert result.accepted
        assert evaluate(world, result.meaning) is expected

    def test_transitive_meaning(self, parser):
        result = parser.run("ε alice.NOM chase -s bob")
        assert result.expression.phon == "_ -s alice.NOM chase bob"
        assert str(result.meaning) == "<present & chase & int(bob) & ext(alice)>"

    def test_adverb_meaning(self, parser):
        result = parser.run("ε alice.NOM run -s quickly")
        assert str(result.meaning) == "<present & quick & run & ext(alice)>"

    def test_object_quantifier_meaning(self, parser):
        result = parser.run("ε.Q alice.NOM chase -s some girl")
        assert str(result.meaning) == (
            "(some & int_-1(girl)) & <present & chase & int(x_-1) & ext(alice)>"
        )

    def test_subject_quantifier_meaning(self, parser):
        result = parser.run("ε.Q every.NOM girl chase -s bob")
        assert str(result.meaning) == (
            "(every & int_-1(girl)) & <present & chase & int(bob) & ext(x_-1)>"
        )

    def test_pronoun_follows_assignment(self, parser, world):
        meaning = parser.parse("ε he.1.NOM chase -s bob").expression.meaning
        assert not evaluate(world, meaning)
        assert evaluate(world.with_assignment(1, "carol"), meaning)

    def test_accepted_entry_is_a_clause(self, parser):
        entry = parser.parse("ε alice.NOM run -s")
        assert entry.expression.features == (licensee("c"),)
        assert entry.expression.kind == DERIVED
        assert entry.expression.children == ()


class TestNoParse:
    def test_unknown_token(self, parser):
        result = parser.run("ε alice.NOM chase -s zed")
        assert result.entry is None
        assert result.unknown_tokens == ["zed"]
        assert result.chart_size == 0

    def test_token_lookup_is_exact(self, parser):
        assert parser.run("ε Alice.NOM run -s").unknown_tokens == ["Alice.NOM"]

    def test_incomplete_sentence(self, parser):
        result = parser.run("alice.NOM chase")
        assert not result.accepted
        assert result.unknown_tokens == []
        assert result.chart_size > 2

    def test_nothing_combines(self, parser):
        assert not parser.recognize("ε bob")

    def test_stray_empty_token(self, parser):
        assert parser.run("ε alice.NOM  run -s").unknown_tokens == [""]


class TestNullItems:
    def test_null_complementizer(self, english_grammar):
        lexicon = [i for i in english_grammar.lexicon if not i.token.startswith("ε")]
        g = Grammar(lexicon + [("", "+t -c", "")], ["c"])
        result = ChartParser(g, counters=Counters()).run("alice.NOM chase -s bob")
        assert result.accepted
        assert str(result.meaning) == "<present & chase & int(bob) & ext(alice)>"

    def test_null_items_come_first(self):
        g = Grammar([("bob", "-d", "bob"), ("", "+d -c", "")], ["c"])
        counters = Counters()
        entry = ChartParser(g, counters=counters).parse("bob")
        [null, bob] = sorted(leaves(entry), key=lambda e: e.id)
        assert null.expression.phon == ""
        assert bob.expression.phon == "bob"


class TestDerivationInvariants:
    SENTENCES = [
        "ε alice.NOM chase -s bob quickly",
        "ε.Q alice.NOM chase -s some fast girl",
        "ε.Q every.NOM girl chase -s bob",
    ]

    @pytest.mark.parametrize("sentence", SENTENCES)
    def test_every_word_used_once(self, parser, sentence):
        result = parser.run(sentence)
        used = leaves(result.entry)
        assert sorted(e.expression.phon for e in used) == sorted(result.tokens)
        assert len({e.id for e in used}) == len(used)
        assert {e.id for e in used} <= result.entry.retired

    @pytest.mark.parametrize("sentence", SENTENCES)
    def test_binary_sources_are_disjoint(self, parser, sentence):
        for node in nodes(parser.parse(sentence)):
            sources = node.derivation.sources
            if len(sources) == 2:
                first, second = sources
                assert first.retired.isdisjoint(second.retired)
                assert first.id not in second.retired
                assert second.id not in first.retired
            for source in sources:
                assert source.retired < node.retired
                assert source.id in node.retired

    def test_ids_never_repeat(self, english_grammar):
        p = ChartParser(english_grammar, counters=Counters())
        first = {n.id for n in nodes(p.parse("ε alice.NOM run -s"))}
        second = {n.id for n in nodes(p.parse("ε alice.NOM run -s"))}
        assert first.isdisjoint(second)

    def test_fresh_counters_repeat_the_parse(self, english_grammar):
        a = ChartParser(english_grammar, counters=Counters()).run("ε.Q every.NOM girl chase -s bob")
        b = ChartParser(english_grammar, counters=Counters()).run("ε.Q every.NOM girl chase -s bob")
        assert a.meaning == b.meaning
        assert a.entry.id == b.entry.id
        assert (a.chart_size, a.steps) == (b.chart_size, b.steps)


class TestOperatorPriority:
    def _entry(self, counters, expression):
        return ChartEntry(counters.next_id(), expression)

    def test_adjunct_before_spellout(self):
        counters = Counters()
        vp = self._entry(counters, Expression(
            "run", DERIVED, parse_features("-v"), Constant("run"),
            arguments=(Argument("alice", "d", Constant("alice")),),
        ))
        adverb = self._entry(
            counters, Expression.from_lexical(LexicalItem.of("quickly", "*v", "quick"))
        )
        p = ChartParser(Grammar(), counters=counters)
        derived = p._derive(vp, Chart([vp, adverb]))
        assert derived.derivation.operator == "insert_adjunct"

    def test_merge_before_insert(self):
        counters = Counters()
        bob = Expression.from_lexical(LexicalItem.of("bob", "-d", "bob"))
        alice = self._entry(counters, Expression.from_lexical(LexicalItem.of("alice", "-d", "alice")))
        host = self._entry(counters, Expression(
            "chase", LEXICAL, parse_features("+d +d -v"), Constant("chase"), children=(bob,)
        ))
        p = ChartParser(Grammar(), counters=counters)
        derived = p._derive(host, Chart([alice, host]))
        assert derived.derivation.operator == "merge_comp"

    def test_insert_scans_newest_first(self):
        counters = Counters()
        alice = self._entry(counters, Expression.from_lexical(LexicalItem.of("alice", "-d", "alice")))
        bob = self._entry(counters, Expression.from_lexical(LexicalItem.of("bob", "-d", "bob")))
        run = self._entry(counters, Expression.from_lexical(LexicalItem.of("run", "+d -v", "run")))
        p = ChartParser(Grammar(), counters=counters)
        derived = p._derive(run, Chart([alice, bob, run]))
        assert derived.derivation.sources == (run, bob)

    def test_nothing_applies(self):
        counters = Counters()
        bob = self._entry(counters, Expression.from_lexical(LexicalItem.of("bob", "-d", "bob")))
        p = ChartParser(Grammar(), counters=counters)
        assert p._derive(bob, Chart([bob])) is None


class TestParseResult:
    def test_statistics(self, parser):
        result = parser.run("ε alice.NOM run -s")
        assert result.tokens == ["ε", "alice.NOM", "run", "-s"]
        assert result.steps > 0
        assert result.chart_size >= result.steps + 4

    def test_no_parse_properties(self, parser):
        result = parser.run("alice.NOM chase")
        assert result.expression is None
        assert result.meaning is None


class TestModuleFunctions:
    def test_parse(self, english_grammar):
        entry = parse(english_grammar, "ε alice.NOM run -s")
        assert str(entry.expression.meaning) == "<present & run & ext(alice)>"

    def test_recognize(self, english_grammar):
        assert recognize(english_grammar, "ε alice.NOM run -s")
        assert not recognize(english_grammar, "ε alice.NOM run")

    def test_default_counters_shared_across_calls(self, english_grammar):
        sentence = "ε.Q alice.NOM chase -s some girl"
        first = parse(english_grammar, sentence)
        second = parse(english_grammar, sentence)
        assert {n.id for n in nodes(first)}.isdisjoint({n.id for n in nodes(second)})
        first_index = bound_index(first.expression.meaning.left)
        second_index = bound_index(second.expression.meaning.left)
        assert first_index is not None and second_index is not None
        assert first_index != second_index
