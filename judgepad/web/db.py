"""History store helpers for the judgepad web app."""

from __future__ import annotations

from flask import current_app, g

from judgepad.history import HistoryStore


def get_history() -> HistoryStore:
    """Return a per-request history store stored on Flask *g*."""
    if "history" not in g:
        g.history = HistoryStore(current_app.config["HISTORY_DB"])
    return g.history


def close_history(exc=None):
    """Close the history connection at the end of a request."""
    history = g.pop("history", None)
    if history is not None:
        history.close()
