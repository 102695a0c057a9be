"""Tests for feeding and generating with :class:`markov_chain.Chain`."""

import importlib
import random
import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

markov_chain = importlib.import_module("markov_chain")
Chain = markov_chain.Chain
Context = markov_chain.Context
START = markov_chain.START
END = markov_chain.END


def _counts(chain):
    return {(ctx, tok): n for ctx, tok, n in chain.table.triples()}


@pytest.mark.parametrize("order", [0, -1, 1.5, "2", True])
def test_invalid_order_rejected(order):
    """Construction fails with ``InvalidOrder`` for anything but ints >= 1."""
    with pytest.raises(markov_chain.InvalidOrder):
        Chain(order)


def test_invalid_order_is_value_error():
    """``InvalidOrder`` can be caught as a ``ValueError``."""
    assert issubclass(markov_chain.InvalidOrder, ValueError)


def test_order_is_read_only():
    """The order is fixed for the lifetime of the chain."""
    chain = Chain(2)
    with pytest.raises(AttributeError):
        chain.order = 3
    assert chain.order == 2


def test_new_chain_is_empty_and_generates_nothing():
    """An empty chain yields an empty sequence rather than failing."""
    chain = Chain(1)
    assert chain.is_empty()
    assert chain.generate() == []
    assert chain.generate_text() == ""


def test_empty_feed_is_noop():
    """Feeding an empty sequence leaves the chain untouched."""
    chain = Chain(1)
    assert chain.feed([]) is chain
    assert chain.is_empty()


def test_feed_records_sentinel_windows():
    """Feeding pads the sequence with ``START``/``END`` sentinels."""
    chain = Chain(2)
    chain.feed(["a", "b"])
    assert _counts(chain) == {
        (Context((START, START)), "a"): 1,
        (Context((START, "a")), "b"): 1,
        (Context(("a", "b")), END): 1,
    }
    assert not chain.is_empty()


def test_feeding_twice_doubles_counts():
    """Counts accumulate monotonically."""
    once = Chain(2).feed("one fish two fish".split())
    twice = Chain(2).feed("one fish two fish".split()).feed("one fish two fish".split())
    single = _counts(once)
    assert _counts(twice) == {key: 2 * n for key, n in single.items()}


def test_totals_match_successor_counts_after_many_feeds():
    """Every stored total equals the sum of its successor counts."""
    rng = random.Random(5)
    chain = Chain(2)
    for _ in range(50):
        chain.feed([rng.choice("abc") for _ in range(rng.randint(0, 8))])
    for context in chain.table:
        assert sum(chain.table.successors_of(context).values()) == chain.table.total(context)
    assert chain.table.check_consistency() is None


@pytest.mark.parametrize("seed", range(5))
def test_single_example_replays_exactly(seed):
    """One training sequence at order 1 is reproduced verbatim."""
    chain = Chain(1, rng=random.Random(seed))
    chain.feed(["a", "b", "c"])
    assert chain.generate() == ["a", "b", "c"]


def test_generate_accepts_per_call_rng():
    """Equal seeds passed per call give equal output."""
    chain = Chain(1).feed_text("a b c. a c b. b a c. c c a.")
    first = [chain.generate(rng=random.Random(42)) for _ in range(3)]
    second = [chain.generate(rng=random.Random(42)) for _ in range(3)]
    assert first == second


def test_generated_tokens_come_from_corpus():
    """Generation never invents tokens or leaks sentinels."""
    chain = Chain(1, rng=random.Random(0))
    chain.feed(list("mississippi"))
    for _ in range(50):
        out = chain.generate()
        assert set(out) <= set("misp")
        assert START not in out and END not in out


def test_generic_tokens():
    """Non-string hashable tokens work unchanged."""
    chain = Chain(1, rng=random.Random(1))
    chain.feed([1, (2, 3), None, 4.5])
    assert chain.generate() == [1, (2, 3), None, 4.5]


def test_generate_from_unknown_token_is_empty():
    """An unseen start token produces an empty result for any chain state."""
    chain = Chain(1)
    assert chain.generate_from("x") == []
    chain.feed(["a", "b"])
    assert chain.generate_from("x") == []
    assert chain.generate_text_from("x") == ""


def test_generate_from_known_token_starts_with_it():
    """The seed token leads the generated sequence."""
    chain = Chain(1, rng=random.Random(2))
    chain.feed(["a", "b", "c"])
    assert chain.generate_from("b") == ["b", "c"]
    assert chain.generate_text_from("a") == "a b c"


def test_generate_from_seeds_order_copies():
    """At higher orders the seed context repeats the token ``order`` times."""
    chain = Chain(2, rng=random.Random(0))
    chain.feed(["x", "x", "y"])
    assert chain.generate_from("x") == ["x", "y"]


def test_runs_dry_without_error():
    """A context with no successors ends generation early."""
    chain = Chain.from_triples(1, [(Context((START,)), "a", 1)])
    assert chain.generate() == ["a"]


def test_cyclic_table_stops_at_iteration_cap():
    """A table that never reaches ``END`` is cut off by the cap."""
    triples = [(Context((START,)), "x", 1), (Context(("x",)), "x", 1)]
    chain = Chain.from_triples(1, triples, max_iterations=25)
    assert chain.generate() == ["x"] * 25
    assert chain.generate(max_iterations=3) == ["x"] * 3


def test_invalid_max_iterations_rejected():
    """The iteration cap must be a positive integer."""
    with pytest.raises(ValueError):
        Chain(1, max_iterations=0)
    chain = Chain(1).feed(["a"])
    with pytest.raises(ValueError):
        chain.generate(max_iterations=-1)


def test_feed_text_splits_sentences():
    """Each sentence is fed as its own sequence."""
    chain = Chain(1)
    chain.feed_text("The cat sat. The dog ran!\nBirds sing")
    starts = chain.table.successors_of(Context((START,)))
    assert starts == {"The": 2, "Birds": 1}


def test_feed_file_uses_one_sentence_per_line(tmp_path):
    """Blank lines are skipped and every line becomes a sequence."""
    corpus = tmp_path / "corpus.txt"
    corpus.write_text("hello world\n\n  hello   there \n", encoding="utf-8")
    chain = Chain(1, rng=random.Random(0)).feed_file(corpus)
    assert chain.table.successors_of(Context(("hello",))) == {"world": 1, "there": 1}
    assert chain.generate_text() in {"hello world", "hello there"}


def test_clear_empties_chain():
    """``clear`` forgets all transitions but keeps the order."""
    chain = Chain(3).feed(["a", "b"])
    chain.clear()
    assert chain.is_empty()
    assert chain.order == 3
