from typing import NamedTuple, Optional

import numpy as np
from scipy import sparse
from sklearn.feature_extraction import DictVectorizer
from sklearn.metrics.pairwise import cosine_similarity as pairwise_cosine_similarity

from . import config
from .indexer import SearchIndex, SparseVector, tokenize

# =========================================================
# RESPONSES
# =========================================================

ANSWER = "ANSWER"
SUGGESTION = "SUGGESTION"
NO_MATCH = "NO_MATCH"

NO_MATCH_MESSAGE = (
    "I'm sorry, I couldn't find a relevant question. "
    "Please try rephrasing your question."
)
SUGGESTION_TEMPLATE = (
    "I'm sorry, I don't have specific information about that. "
    "The closest question I can answer is: '{question}'. "
    "Would you like me to answer that instead?"
)


class Match(NamedTuple):
    question: str
    answer: str
    score: float


class Response(NamedTuple):
    kind: str
    text: str
    match: Optional[Match]


# =========================================================
# VECTORS
# =========================================================

def _query_row(index: SearchIndex, query: str) -> sparse.csr_matrix:
    """TF-IDF weights of the query laid out on the index vocabulary (1 x terms)"""
    row = sparse.csr_matrix(index.vectorizer.transform([query]), dtype=np.float64)
    total = len(tokenize(query))
    if total:
        # Unseen terms are not columns, but still count towards the query length
        row.data = row.data / total * index.idf_weights[row.indices]
    return row


def query_vector(index: SearchIndex, query: str) -> SparseVector:
    """
    TF-IDF vector of a query under the index's IDF table.

    Terms missing from the catalog vocabulary have no weight and are left
    out. Empty or whitespace-only queries give an empty vector.
    """
    if not index.has_vocabulary or not tokenize(query):
        return {}

    row = _query_row(index, query)
    terms = index.vectorizer.get_feature_names_out()
    return {str(terms[j]): float(w) for j, w in zip(row.indices, row.data)}


def cosine_similarity(v1: SparseVector, v2: SparseVector) -> float:
    """Cosine similarity of two sparse vectors; 0.0 when either has no magnitude"""
    if not v1 or not v2:
        return 0.0
    features = DictVectorizer().fit_transform([v1, v2])
    score = pairwise_cosine_similarity(features[0], features[1])[0, 0]
    return float(np.nan_to_num(score, nan=0.0))


# =========================================================
# MATCHING
# =========================================================

def score_questions(index: SearchIndex, query: str) -> np.ndarray:
    """Similarity of the query to every catalog question, in catalog order"""
    if not index.has_vocabulary:
        return np.zeros(len(index.catalog))

    scores = pairwise_cosine_similarity(_query_row(index, query), index.matrix)[0]
    return np.nan_to_num(scores, nan=0.0)


def best_match(index: SearchIndex, query: str) -> Optional[Match]:
    """
    Find the catalog question closest to the query.

    Ties go to the question that comes first in the catalog. Returns None
    only when the catalog is empty.
    """
    scores = score_questions(index, query)
    if scores.size == 0:
        return None

    # argmax returns the first maximum
    best = int(np.argmax(scores))
    question = index.questions[best]
    return Match(question=question, answer=index.catalog[question], score=float(scores[best]))


def respond(match: Optional[Match], threshold: Optional[float] = None) -> Response:
    """Turn the best match into the user-facing response"""
    if threshold is None:
        threshold = config.MATCH_THRESHOLD

    if match is None:
        return Response(kind=NO_MATCH, text=NO_MATCH_MESSAGE, match=None)

    if match.score > threshold:
        return Response(kind=ANSWER, text=match.answer, match=match)

    return Response(
        kind=SUGGESTION,
        text=SUGGESTION_TEMPLATE.format(question=match.question),
        match=match,
    )


def answer(index: SearchIndex, query: str, threshold: Optional[float] = None) -> str:
    """Answer a free-text question from the index. Never raises for any query text."""
    return respond(best_match(index, query), threshold).text
