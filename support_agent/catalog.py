import json
import logging
from pathlib import Path
from typing import Dict, List

import pandas as pd

logger = logging.getLogger(__name__)

CATALOG_COLUMNS = ["question", "answer"]


class CatalogError(Exception):
    """Raised when the Q&A catalog cannot be read or has the wrong shape."""


def load_catalog(path: Path) -> Dict[str, str]:
    """
    Load the question/answer catalog from a JSON file.

    Accepts {"questions": [{"question": ..., "answer": ...}, ...]} or a bare
    list of the same entries.

    Returns:
        Insertion-ordered mapping of question text to answer text
    """
    path = Path(path)
    try:
        with open(path, "r", encoding="utf-8") as f:
            document = json.load(f)
    except OSError as e:
        raise CatalogError(f"Cannot read catalog file {path}: {e}") from e
    except json.JSONDecodeError as e:
        raise CatalogError(f"Malformed JSON in catalog file {path}: {e}") from e

    entries = document.get("questions") if isinstance(document, dict) else document
    if not isinstance(entries, list):
        raise CatalogError(f"Catalog file {path} does not contain a list of questions")
    if not all(isinstance(entry, dict) for entry in entries):
        raise CatalogError(f"Catalog file {path} has entries that are not objects")

    catalog = catalog_from_records(entries)
    logger.info("Loaded %d catalog entries from %s", len(catalog), path)
    return catalog


def catalog_from_records(entries: List[dict]) -> Dict[str, str]:
    """Build the question -> answer mapping, skipping entries without text fields"""
    df = pd.DataFrame(entries, columns=CATALOG_COLUMNS)

    valid = (
        df["question"].map(lambda v: isinstance(v, str)).astype(bool)
        & df["answer"].map(lambda v: isinstance(v, str)).astype(bool)
    )
    skipped = int((~valid).sum())
    if skipped:
        logger.warning("Skipped %d catalog entries without a text question and answer", skipped)

    # Later duplicates replace the answer; the question keeps its first position
    catalog: Dict[str, str] = {}
    for question, answer in df.loc[valid, CATALOG_COLUMNS].itertuples(index=False, name=None):
        catalog[question] = answer
    return catalog
