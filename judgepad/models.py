"""Data models for judgepad."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from datetime import datetime


class ResultKind(enum.Enum):
    STDOUT = "stdout"
    STDERR = "stderr"
    COMPILE_ERROR = "compile_error"
    STATUS_MESSAGE = "status_message"
    TRANSPORT_FAILURE = "transport_failure"


class Outcome(enum.Enum):
    PASSED = "PASSED"
    FAILED = "FAILED"


class RunStatus(enum.Enum):
    IDLE = "IDLE"
    RUNNING = "RUNNING"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"


@dataclass(frozen=True)
class Submission:
    source_code: str
    stdin: str = ""
    language_id: int = 71  # Python 3

    def __post_init__(self) -> None:
        if not self.source_code:
            raise ValueError("source_code is required")
        if self.language_id <= 0:
            raise ValueError(f"invalid language_id: {self.language_id}")


@dataclass(frozen=True)
class ExecutionResult:
    """Normalized outcome of one remote execution.

    Exactly one ``kind`` is populated per attempt; ``text`` carries its payload.
    ``stderr`` keeps the full remote stderr even when ``kind`` is not STDERR,
    and ``status`` the remote status description when one was returned.
    """

    kind: ResultKind
    text: str
    stderr: str = ""
    status: str = ""

    @classmethod
    def transport_failure(cls, reason: str) -> ExecutionResult:
        return cls(kind=ResultKind.TRANSPORT_FAILURE, text=reason)

    @property
    def ok(self) -> bool:
        return self.kind == ResultKind.STDOUT


@dataclass
class TestCase:
    input: str
    expected_output: str

    @classmethod
    def from_dict(cls, data: dict) -> TestCase:
        """Build a case from decoded JSON; missing or null fields become ""."""
        return cls(
            input=_as_text(data.get("input")),
            expected_output=_as_text(data.get("expected_output")),
        )

    @property
    def is_valid(self) -> bool:
        return bool(self.input) and bool(self.expected_output)


def _as_text(value) -> str:
    if value is None:
        return ""
    return value if isinstance(value, str) else str(value)


@dataclass(frozen=True)
class Verdict:
    case_index: int  # 1-based; 0 marks a whole-run error
    outcome: Outcome
    reason: str = ""

    @property
    def passed(self) -> bool:
        return self.outcome == Outcome.PASSED


@dataclass
class HistorySnippet:
    language: str
    code: str
    created_at: datetime = field(default_factory=datetime.now)
    id: int | None = None

    @property
    def file_name(self) -> str:
        """Export name, e.g. ``python_1700000000.py``."""
        lang = self.language.lower()
        ext = _EXTENSIONS.get(lang, "txt")
        return f"{lang}_{int(self.created_at.timestamp())}.{ext}"


_EXTENSIONS = {
    "python": "py",
    "c": "c",
    "c++": "cpp",
    "java": "java",
    "javascript": "js",
    "rust": "rs",
    "go": "go",
}


@dataclass
class SuiteRun:
    """Accumulator for one test-suite run, owned by the caller."""

    status: RunStatus = RunStatus.IDLE
    verdicts: list[Verdict] = field(default_factory=list)
    total: int = 0

    @property
    def passed(self) -> int:
        return sum(1 for v in self.verdicts if v.passed)

    @property
    def failed(self) -> int:
        return len(self.verdicts) - self.passed

    @property
    def all_passed(self) -> bool:
        return self.total > 0 and self.passed == self.total

    @property
    def summary(self) -> str:
        if self.total == 0:
            return "No valid test cases."
        text = f"{self.passed}/{self.total} test case(s) passed."
        if self.status == RunStatus.CANCELLED:
            text += f" Cancelled after {len(self.verdicts)}."
        return text
