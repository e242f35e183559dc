"""SQLite-backed, append-only history of submitted code."""

from __future__ import annotations

import sqlite3
from datetime import datetime
from pathlib import Path

from judgepad.models import HistorySnippet

SCHEMA = """
CREATE TABLE IF NOT EXISTS snippets (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    language TEXT NOT NULL,
    code TEXT NOT NULL,
    created_at TEXT NOT NULL
);
"""


class HistoryStore:
    """Append-only snippet log. Entries are never updated or deleted."""

    def __init__(self, path: str | Path = ":memory:") -> None:
        path = str(path)
        if path != ":memory:":
            Path(path).parent.mkdir(parents=True, exist_ok=True)
        self._conn = sqlite3.connect(path, check_same_thread=False)
        self._conn.row_factory = sqlite3.Row
        self._conn.executescript(SCHEMA)
        self._conn.commit()

    def append(self, snippet: HistorySnippet) -> HistorySnippet:
        cur = self._conn.execute(
            "INSERT INTO snippets (language, code, created_at) VALUES (?, ?, ?)",
            (snippet.language, snippet.code, snippet.created_at.isoformat()),
        )
        self._conn.commit()
        return HistorySnippet(
            language=snippet.language,
            code=snippet.code,
            created_at=snippet.created_at,
            id=cur.lastrowid,
        )

    def list_all(self) -> list[HistorySnippet]:
        """Return every snippet in append order."""
        rows = self._conn.execute("SELECT * FROM snippets ORDER BY id").fetchall()
        return [_snippet_from_row(row) for row in rows]

    def get(self, snippet_id: int) -> HistorySnippet | None:
        row = self._conn.execute("SELECT * FROM snippets WHERE id = ?", (snippet_id,)).fetchone()
        return _snippet_from_row(row) if row is not None else None

    def close(self) -> None:
        self._conn.close()


def _snippet_from_row(row) -> HistorySnippet:
    return HistorySnippet(
        language=row["language"],
        code=row["code"],
        created_at=datetime.fromisoformat(row["created_at"]),
        id=row["id"],
    )


def export_snippet(snippet: HistorySnippet, directory: str | Path) -> Path:
    """Write a snippet's code to ``directory/<file_name>`` and return the path."""
    dest_dir = Path(directory)
    dest_dir.mkdir(parents=True, exist_ok=True)
    dest = dest_dir / snippet.file_name
    dest.write_text(snippet.code, encoding="utf-8")
    return dest
