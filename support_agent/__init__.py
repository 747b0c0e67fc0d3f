# This file marks the support_agent directory as a Python package
# and re-exports the pieces the CLI and server use

from .catalog import CatalogError, load_catalog
from .indexer import (
    IndexFileError,
    SearchIndex,
    build_index,
    load_index,
    load_or_build_index,
    save_index,
    tokenize,
)
from .matcher import answer, best_match, cosine_similarity, query_vector, respond

__all__ = [
    'CatalogError', 'load_catalog',
    'IndexFileError', 'SearchIndex', 'build_index', 'load_index',
    'load_or_build_index', 'save_index', 'tokenize',
    'answer', 'best_match', 'cosine_similarity', 'query_vector', 'respond',
]
