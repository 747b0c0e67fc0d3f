import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

# --------------------------------------------------
# PATHS
# --------------------------------------------------
BASE_DIR = Path(__file__).resolve().parent.parent
DATA_DIR = BASE_DIR / "data"
MODELS_DIR = BASE_DIR / "models"

QA_DATA_PATH = Path(os.environ.get("QA_DATA_PATH", DATA_DIR / "qa_data.json"))

# Unset means "build from the catalog on startup"
INDEX_PATH = Path(os.environ["INDEX_PATH"]) if os.environ.get("INDEX_PATH") else None
DEFAULT_INDEX_PATH = MODELS_DIR / "search_index.joblib"

# --------------------------------------------------
# MATCHING
# --------------------------------------------------
MATCH_THRESHOLD = float(os.environ.get("MATCH_THRESHOLD", 0.5))

# --------------------------------------------------
# RUNTIME
# --------------------------------------------------
LOG_LEVEL = os.environ.get("LOG_LEVEL", "WARNING").upper()
PORT = int(os.environ.get("PORT", 5000))
