import sys
import logging
from pathlib import Path

# Allow importing support_agent/ without installing
sys.path.append(str(Path(__file__).resolve().parent.parent))

from flask import Flask, request, jsonify
from flask_cors import CORS

from support_agent import config
from support_agent.indexer import SearchIndex, load_or_build_index
from support_agent.matcher import ANSWER, SUGGESTION, best_match, respond

logging.basicConfig(level=config.LOG_LEVEL)
logger = logging.getLogger(__name__)

RESPONSE_TYPES = {
    ANSWER: "QA",
    SUGGESTION: "SUGGESTION",
}


# --------------------------------------------------
# APP SETUP
# --------------------------------------------------
def create_app(index: SearchIndex = None) -> Flask:
    """Build the API around a finished index (loaded from config when not given)"""
    if index is None:
        # A bad catalog or index file is fatal: let it abort startup
        index = load_or_build_index(config.QA_DATA_PATH, config.INDEX_PATH)

    app = Flask(__name__)
    CORS(app)

    # --------------------------------------------------
    # API ROUTES
    # --------------------------------------------------
    @app.route("/", methods=["GET", "HEAD"])
    def health_check():
        return jsonify({
            "status": "ok",
            "message": "Thoughtful AI Support Agent is running",
            "questions": len(index.catalog)
        })

    @app.route("/api/query", methods=["POST"])
    def api_query():
        payload = request.get_json(silent=True) or {}
        text = payload.get("text", "") if isinstance(payload, dict) else ""
        if not isinstance(text, str):
            text = ""
        text = text.strip()

        response = respond(best_match(index, text))
        match = response.match
        logger.info("Query %r -> %s", text, response.kind)

        return jsonify({
            "type": RESPONSE_TYPES.get(response.kind, "NO_ANSWER"),
            "answer": response.text,
            "confidence": match.score if match else 0.0,
            "matched_question": match.question if match else None
        })

    return app


app = create_app()

# --------------------------------------------------
# ENTRY POINT
# --------------------------------------------------
if __name__ == "__main__":
    app.run(host="0.0.0.0", port=config.PORT)
