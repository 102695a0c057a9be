"""Tests for saving and loading chains."""

import importlib
import json
import random
import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

markov_chain = importlib.import_module("markov_chain")
persistence = importlib.import_module("markov_chain.persistence")
Chain = markov_chain.Chain


def _sample_chain():
    chain = Chain(2)
    chain.feed_text("the cat sat on the mat. the cat ran away. a dog sat.")
    chain.feed(["the", "cat", "sat"])
    return chain


def test_dict_round_trip_preserves_table():
    """Encoding then decoding reproduces every triple."""
    chain = _sample_chain()
    restored = persistence.chain_from_dict(persistence.chain_to_dict(chain))
    assert restored.order == chain.order
    assert restored.table == chain.table
    assert list(restored.table.triples()) == list(chain.table.triples())


def test_sentinels_encoded_explicitly():
    """Sentinels become tagged mappings in the document."""
    data = persistence.chain_to_dict(Chain(1).feed(["a"]))
    assert data["format"] == "markov-chain"
    assert data["version"] == 1
    assert data["transitions"][0] == {"context": [{"$sentinel": "START"}], "token": "a", "count": 1}
    assert data["transitions"][1]["token"] == {"$sentinel": "END"}


def test_json_file_round_trip(tmp_path):
    """Chains saved as JSON load back identically."""
    chain = _sample_chain()
    path = tmp_path / "chain.json"
    persistence.save(chain, path)
    assert json.loads(path.read_text(encoding="utf-8"))["order"] == 2
    restored = persistence.load(path)
    assert restored.table == chain.table


def test_yaml_file_round_trip(tmp_path):
    """Chains saved as YAML load back identically."""
    pytest.importorskip("yaml")
    chain = _sample_chain()
    path = tmp_path / "chain.yml"
    persistence.save(chain, path)
    assert persistence.load(path).table == chain.table


def test_tuple_tokens_survive_round_trip(tmp_path):
    """Tuple tokens are written as lists and restored as tuples."""
    chain = Chain(1).feed([(1, 2), (3, "x"), None, True])
    path = tmp_path / "tuples.json"
    persistence.save(chain, path)
    restored = persistence.load(path, rng=random.Random(0))
    assert restored.table == chain.table
    assert restored.generate() == [(1, 2), (3, "x"), None, True]


def test_load_forwards_chain_options(tmp_path):
    """Keyword arguments reach the restored chain."""
    path = tmp_path / "chain.json"
    persistence.save(_sample_chain(), path)
    restored = persistence.load(path, max_iterations=7)
    assert restored.max_iterations == 7


def test_unsupported_extension(tmp_path):
    """Only JSON and YAML extensions are understood."""
    with pytest.raises(ValueError):
        persistence.save(_sample_chain(), tmp_path / "chain.txt")
    with pytest.raises(ValueError):
        persistence.load(tmp_path / "chain")


def test_malformed_json_raises_value_error(tmp_path):
    """Unparseable files surface as ``ValueError``."""
    path = tmp_path / "bad.json"
    path.write_text("{not json", encoding="utf-8")
    with pytest.raises(ValueError):
        persistence.load(path)


@pytest.mark.parametrize(
    "mutate",
    [
        lambda d: d.update(version=99),
        lambda d: d.update(format="other"),
        lambda d: d.update(order=0),
        lambda d: d.update(transitions="nope"),
        lambda d: d["transitions"][0].update(count=0),
        lambda d: d["transitions"][0].update(context=["a", "b", "c"]),
        lambda d: d["transitions"][0].pop("token"),
        lambda d: d["transitions"][0].update(token={"$sentinel": "BOGUS"}),
    ],
)
def test_invalid_documents_rejected(mutate):
    """Structural problems in a document raise ``ValueError``."""
    data = persistence.chain_to_dict(_sample_chain())
    mutate(data)
    with pytest.raises(ValueError):
        persistence.chain_from_dict(data)


def test_non_mapping_document_rejected():
    """The top level value must be a mapping."""
    with pytest.raises(ValueError):
        persistence.chain_from_dict(["not", "a", "mapping"])


@pytest.mark.parametrize("name", ["chain.json", "chain.yaml"])
def test_unrepresentable_token_leaves_existing_file_untouched(tmp_path, name):
    """A failed save raises ``ValueError`` and keeps the previous snapshot."""
    if name.endswith(".yaml"):
        pytest.importorskip("yaml")
    path = tmp_path / name
    persistence.save(_sample_chain(), path)
    good = path.read_text(encoding="utf-8")

    bad_chain = Chain(1).feed(["a", frozenset({1})])
    with pytest.raises(ValueError):
        persistence.save(bad_chain, path)
    assert path.read_text(encoding="utf-8") == good
    assert persistence.load(path).table == _sample_chain().table


def test_save_creates_parent_directories(tmp_path):
    """Nested output directories are created for accepted extensions."""
    path = tmp_path / "models" / "nested" / "chain.json"
    persistence.save(_sample_chain(), path)
    assert persistence.load(path).table == _sample_chain().table


def test_rejected_extension_creates_nothing(tmp_path):
    """An unsupported extension fails before any directory is created."""
    out_dir = tmp_path / "out"
    with pytest.raises(ValueError):
        persistence.save(_sample_chain(), out_dir / "chain.txt")
    assert not out_dir.exists()
