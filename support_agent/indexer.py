import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional

import joblib
import numpy as np
from scipy import sparse
from sklearn.feature_extraction.text import CountVectorizer

from .catalog import load_catalog

logger = logging.getLogger(__name__)

SparseVector = Dict[str, float]


class IndexFileError(Exception):
    """Raised when a cached index file cannot be loaded."""


# =========================================================
# TOKENIZER
# =========================================================

def tokenize(text: str) -> List[str]:
    """Lowercase and split on runs of whitespace. No stemming, punctuation kept."""
    return text.lower().split()


# =========================================================
# INDEX
# =========================================================

@dataclass(frozen=True, eq=False)
class SearchIndex:
    """
    Everything a query needs, built once from the catalog and never mutated.

    vectors and idf are the readable forms (term -> weight). vectorizer,
    idf_weights and matrix hold the same numbers aligned to the vocabulary
    columns, which is what the matcher scores against.
    """
    catalog: Dict[str, str]
    vectors: Dict[str, SparseVector]
    idf: Dict[str, float]
    vectorizer: Optional[CountVectorizer] = None
    idf_weights: Optional[np.ndarray] = None
    matrix: Optional[sparse.csr_matrix] = None

    @property
    def questions(self) -> List[str]:
        return list(self.catalog)

    @property
    def has_vocabulary(self) -> bool:
        return self.vectorizer is not None


def build_index(catalog: Dict[str, str]) -> SearchIndex:
    """
    Compute the IDF table and one TF-IDF vector per catalog question.

    idf(term) = ln(N / df(term)), tf = count / tokens in the question.
    Questions with no tokens get an empty vector.
    """
    catalog = dict(catalog)
    questions = list(catalog)

    if not questions:
        logger.warning("Building an index over an empty catalog")
        return SearchIndex(catalog=catalog, vectors={}, idf={})

    if not any(tokenize(q) for q in questions):
        logger.warning("No catalog question contains any terms")
        return SearchIndex(catalog=catalog, vectors={q: {} for q in questions}, idf={})

    vectorizer = CountVectorizer(tokenizer=tokenize, lowercase=False, token_pattern=None)
    counts = sparse.csr_matrix(vectorizer.fit_transform(questions), dtype=np.float64)
    n_docs, n_terms = counts.shape
    terms = vectorizer.get_feature_names_out()

    # Each (question, term) pair is stored once, so column hits are document frequencies
    doc_freq = np.bincount(counts.indices, minlength=n_terms)
    idf_weights = np.log(float(n_docs) / doc_freq)

    lengths = np.asarray(counts.sum(axis=1)).ravel()
    scale = np.divide(1.0, lengths, out=np.zeros_like(lengths), where=lengths > 0)

    rows = np.repeat(np.arange(n_docs), np.diff(counts.indptr))
    matrix = counts
    matrix.data = counts.data * scale[rows] * idf_weights[counts.indices]

    vectors: Dict[str, SparseVector] = {}
    for i, question in enumerate(questions):
        start, end = matrix.indptr[i], matrix.indptr[i + 1]
        vectors[question] = {
            str(terms[j]): float(w)
            for j, w in zip(matrix.indices[start:end], matrix.data[start:end])
        }

    idf = {str(term): float(w) for term, w in zip(terms, idf_weights)}

    logger.info("Indexed %d questions over %d terms", n_docs, n_terms)
    return SearchIndex(
        catalog=catalog,
        vectors=vectors,
        idf=idf,
        vectorizer=vectorizer,
        idf_weights=idf_weights,
        matrix=matrix,
    )


# =========================================================
# CACHE
# =========================================================

def save_index(index: SearchIndex, path: Path) -> None:
    """Write a built index to disk"""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    joblib.dump(index, path)
    logger.info("Saved search index to %s", path)


def load_index(path: Path) -> SearchIndex:
    """Load an index written by save_index"""
    path = Path(path)
    try:
        index = joblib.load(path)
    except Exception as e:
        raise IndexFileError(f"Cannot load search index from {path}: {e}") from e

    if not isinstance(index, SearchIndex):
        raise IndexFileError(f"{path} does not contain a search index")

    logger.info("Loaded search index with %d questions from %s", len(index.catalog), path)
    return index


def load_or_build_index(data_path: Path, index_path: Optional[Path] = None) -> SearchIndex:
    """Use the cached index when one exists, otherwise build from the catalog file"""
    if index_path is not None and Path(index_path).exists():
        return load_index(index_path)
    return build_index(load_catalog(data_path))
