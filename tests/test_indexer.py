import sys
from pathlib import Path

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

import math

import joblib
import pytest

from support_agent.indexer import (
    IndexFileError,
    build_index,
    load_index,
    load_or_build_index,
    save_index,
    tokenize,
)
from support_agent.matcher import answer

DATA_PATH = Path(__file__).resolve().parent.parent / "data" / "qa_data.json"

CATALOG = {
    "How do I reset my password?": "Use the reset link.",
    "How do I change my email?": "Open account settings.",
    "Where is the billing page?": "Under Account > Billing.",
}


def test_tokenize_lowercases_and_splits_on_whitespace():
    assert tokenize("  What IS\tThoughtful\n AI? ") == ["what", "is", "thoughtful", "ai?"]
    assert tokenize("   ") == []


def test_one_vector_per_question():
    index = build_index(CATALOG)

    assert list(index.vectors) == list(CATALOG)
    assert index.matrix.shape[0] == len(CATALOG)


def test_idf_keys_are_the_vocabulary():
    """IDF is defined for exactly the union of the question tokens"""
    index = build_index(CATALOG)

    vocabulary = {term for question in CATALOG for term in tokenize(question)}
    assert set(index.idf) == vocabulary


def test_idf_values():
    index = build_index(CATALOG)

    # "how", "do", "i", "my" appear in 2 of 3 questions; "billing" in 1
    assert index.idf["how"] == pytest.approx(math.log(3 / 2))
    assert index.idf["billing"] == pytest.approx(math.log(3))
    assert all(value >= 0 for value in index.idf.values())


def test_term_in_every_question_has_zero_idf():
    index = build_index({"red apple": "A", "red pear": "B"})

    assert index.idf["red"] == 0.0
    assert index.vectors["red apple"]["red"] == 0.0


def test_term_frequency_counts_duplicates():
    """Repeated terms count per occurrence, document frequency counts once"""
    index = build_index({"a a b": "x", "c": "y"})

    idf = math.log(2)
    assert index.idf["a"] == pytest.approx(idf)
    assert index.vectors["a a b"] == pytest.approx({"a": 2 / 3 * idf, "b": 1 / 3 * idf})
    assert index.vectors["c"] == pytest.approx({"c": idf})


def test_empty_catalog():
    index = build_index({})

    assert index.vectors == {}
    assert index.idf == {}
    assert not index.has_vocabulary


def test_empty_question_gets_empty_vector():
    index = build_index({"": "blank", "reset password": "link"})

    assert index.vectors[""] == {}
    assert set(index.vectors["reset password"]) == {"reset", "password"}


def test_catalog_of_blank_questions_has_no_vocabulary():
    index = build_index({"   ": "blank"})

    assert index.vectors == {"   ": {}}
    assert index.idf == {}


def test_index_cache_round_trip(tmp_path):
    """A saved index answers the same way after loading"""
    index = build_index(CATALOG)
    path = tmp_path / "models" / "index.joblib"

    save_index(index, path)
    loaded = load_index(path)

    assert loaded.idf == index.idf
    query = "how do i reset my password?"
    assert answer(loaded, query) == answer(index, query) == "Use the reset link."


def test_load_index_rejects_other_objects(tmp_path):
    path = tmp_path / "index.joblib"
    joblib.dump({"not": "an index"}, path)

    with pytest.raises(IndexFileError):
        load_index(path)


def test_load_index_rejects_garbage(tmp_path):
    path = tmp_path / "index.joblib"
    path.write_bytes(b"definitely not a pickle")

    with pytest.raises(IndexFileError):
        load_index(path)


def test_load_or_build_without_cache_builds_from_catalog(tmp_path):
    index = load_or_build_index(DATA_PATH, tmp_path / "missing.joblib")

    assert len(index.catalog) == 5
    assert len(index.vectors) == 5
