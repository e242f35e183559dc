"""Flask web application for judgepad."""

from __future__ import annotations

import json
import os
import queue
import sqlite3
import threading

from flask import Flask, Response, jsonify, request, stream_with_context

from judgepad.config import Config
from judgepad.formatting import format_result, format_verdict
from judgepad.history import HistoryStore
from judgepad.models import ExecutionResult, TestCase, Verdict
from judgepad.sequencer import CancelToken, Sequencer
from judgepad.web.db import close_history, get_history

app = Flask(__name__)
app.config["HISTORY_DB"] = os.environ.get("JUDGEPAD_HISTORY_DB", Config.history_db)
app.config["STREAM_TIMEOUT"] = 300
app.teardown_appcontext(close_history)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _load_config() -> Config:
    return Config.from_env(history_db=app.config["HISTORY_DB"], verbose=False)


def _collect_test_cases(data: dict) -> list[TestCase]:
    """Collect test cases from a JSON request body."""
    cases = data.get("test_cases") or []
    if not isinstance(cases, list):
        return []
    return [TestCase.from_dict(tc) for tc in cases if isinstance(tc, dict)]


def _result_data(result: ExecutionResult) -> dict:
    return {
        "kind": result.kind.value,
        "text": result.text,
        "stderr": result.stderr,
        "status": result.status,
        "display": format_result(result),
    }


def _verdict_data(verdict: Verdict) -> dict:
    return {
        "case_index": verdict.case_index,
        "outcome": verdict.outcome.value,
        "reason": verdict.reason,
        "display": format_verdict(verdict),
    }


# ---------------------------------------------------------------------------
# Editor: single run
# ---------------------------------------------------------------------------

@app.route("/run", methods=["POST"])
def run_code():
    data = request.get_json(silent=True) or {}
    code = data.get("code", "")
    if not isinstance(code, str) or not code.strip():
        return jsonify({"error": "No code provided"}), 400

    try:
        config = _load_config()
    except ValueError as e:
        return jsonify({"error": str(e)}), 500

    sequencer = Sequencer(config, history=get_history())
    return jsonify(_result_data(sequencer.run_once(code)))


# ---------------------------------------------------------------------------
# Custom question: streamed test-case run
# ---------------------------------------------------------------------------

@app.route("/test", methods=["POST"])
def run_tests():
    data = request.get_json(silent=True) or {}
    code = data.get("code", "")
    if not isinstance(code, str) or not code.strip():
        return jsonify({"error": "No code provided"}), 400

    try:
        config = _load_config()
    except ValueError as e:
        return jsonify({"error": str(e)}), 500

    test_cases = _collect_test_cases(data)
    events: queue.Queue = queue.Queue()
    cancel = CancelToken()
    stream_timeout = app.config["STREAM_TIMEOUT"]

    def run_suite():
        history: HistoryStore | None = None
        try:
            try:
                history = HistoryStore(config.history_db)
            except (OSError, sqlite3.Error) as e:
                # Run without history rather than dropping the test run
                app.logger.warning("History unavailable (%s): %s", config.history_db, e)
            sequencer = Sequencer(config, history=history)
            run = sequencer.run(
                code,
                test_cases,
                on_verdict=lambda v: events.put({"type": "verdict", **_verdict_data(v)}),
                cancel=cancel,
            )
            events.put({
                "type": "done",
                "status": run.status.value,
                "passed": run.passed,
                "total": run.total,
                "summary": run.summary,
            })
        except Exception as e:
            events.put({"type": "error", "message": f"{type(e).__name__}: {e}"})
        finally:
            if history is not None:
                history.close()

    thread = threading.Thread(target=run_suite, daemon=True)
    thread.start()

    def generate():
        try:
            while True:
                try:
                    msg = events.get(timeout=stream_timeout)
                except queue.Empty:
                    yield f"data: {json.dumps({'type': 'error', 'message': 'Test run timed out'})}\n\n"
                    break
                yield f"data: {json.dumps(msg)}\n\n"
                if msg["type"] in ("done", "error"):
                    break
        finally:
            # Client went away or stream ended: stop dispatching further cases
            cancel.cancel()

    return Response(
        stream_with_context(generate()),
        mimetype="text/event-stream",
        headers={"Cache-Control": "no-cache", "X-Accel-Buffering": "no"},
    )


# ---------------------------------------------------------------------------
# History
# ---------------------------------------------------------------------------

@app.route("/history")
def list_history():
    snippets = get_history().list_all()
    return jsonify([
        {
            "id": s.id,
            "language": s.language,
            "code": s.code,
            "created_at": s.created_at.isoformat(),
            "file_name": s.file_name,
        }
        for s in snippets
    ])


@app.route("/history/<int:snippet_id>/export")
def export_history(snippet_id: int):
    snippet = get_history().get(snippet_id)
    if snippet is None:
        return jsonify({"error": "Snippet not found"}), 404
    return Response(
        snippet.code,
        mimetype="text/plain",
        headers={"Content-Disposition": f'attachment; filename="{snippet.file_name}"'},
    )


if __name__ == "__main__":
    app.run(debug=True, port=5000)
