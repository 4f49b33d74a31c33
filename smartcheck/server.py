# HTTP wrapper around the engine: POST /api/analyze, GET /api/history, GET /health.
# The history store is injected into create_app(); the engine never touches it.

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Optional, Sequence

from flask import Flask, jsonify, request

from smartcheck.config import Config
from smartcheck.engine import analyze
from smartcheck.errors import StorageError
from smartcheck.findings.models import Finding
from smartcheck.storage import HistoryStore

logger = logging.getLogger(__name__)

USER_HEADER = "X-User-Id"
HISTORY_WRITER = "smartcheck.history_writer"


def _current_user() -> Optional[str]:
    user_id = (request.headers.get(USER_HEADER) or "").strip()
    return user_id or None


def _save_quietly(store: HistoryStore, source_code: str, results: Sequence[Finding], user_id: str) -> None:
    try:
        store.save_analysis(source_code, results, user_id)
    except StorageError as e:
        logger.error("Failed to store analysis for user %s: %s", user_id, e)
    except Exception:
        logger.exception("Unexpected error storing analysis for user %s", user_id)


def create_app(store: Optional[HistoryStore] = None, config: Optional[Config] = None) -> Flask:
    """
    Build the Flask app.

    store: where analyses of identified users are recorded; None disables
        history (POST still works, GET /api/history returns 503).
    config: analyzer config passed to every analyze() call.

    Saves run on a single background worker, kept in
    app.extensions[HISTORY_WRITER], so a slow or locked database never holds
    up a response.
    """
    app = Flask(__name__)
    writer = ThreadPoolExecutor(max_workers=1, thread_name_prefix="history-writer")
    app.extensions[HISTORY_WRITER] = writer

    @app.route("/health")
    def health():
        return jsonify({"status": "healthy"})

    @app.route("/api/analyze", methods=["POST"])
    def analyze_endpoint():
        data = request.get_json(silent=True) or {}
        source_code = data.get("sourceCode") if isinstance(data, dict) else None
        if not isinstance(source_code, str) or not source_code.strip():
            return jsonify({"error": "Source code is required"}), 400

        try:
            results = analyze(source_code, config=config)
        except Exception:
            logger.exception("Analysis error")
            return jsonify({"error": "Failed to analyze contract"}), 500

        user_id = _current_user()
        if store is not None and user_id:
            writer.submit(_save_quietly, store, source_code, results, user_id)

        return jsonify({"results": [f.to_dict() for f in results]})

    @app.route("/api/history", methods=["GET"])
    def history_endpoint():
        user_id = _current_user()
        if not user_id:
            return jsonify({"error": "Authentication required"}), 401
        if store is None:
            return jsonify({"error": "History is not enabled"}), 503
        try:
            records = store.list_history(user_id)
        except StorageError as e:
            logger.error("Failed to load history for user %s: %s", user_id, e)
            return jsonify({"error": "Failed to load history"}), 500
        return jsonify({"history": [r.to_dict() for r in records]})

    return app
