"""Serialized test-case runs against the remote execution service."""

from __future__ import annotations

import sys
import threading
from typing import Callable

from judgepad.config import Config
from judgepad.executor_base import CodeExecutor
from judgepad.executor_factory import create_executor
from judgepad.grading import classify
from judgepad.history import HistoryStore
from judgepad.models import (
    ExecutionResult,
    HistorySnippet,
    Outcome,
    RunStatus,
    Submission,
    SuiteRun,
    TestCase,
    Verdict,
)

NO_VALID_CASES_MESSAGE = "provide at least one valid test case"


class CancelToken:
    """Lets a caller stop a run between cases."""

    def __init__(self) -> None:
        self._event = threading.Event()

    def cancel(self) -> None:
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()


class Sequencer:
    def __init__(
        self,
        config: Config,
        executor: CodeExecutor | None = None,
        history: HistoryStore | None = None,
    ) -> None:
        self.config = config
        self._executor: CodeExecutor = executor or create_executor(config)
        self._history = history

    def run_once(self, source_code: str) -> ExecutionResult:
        """Execute code once with empty stdin (editor mode)."""
        submission = Submission(source_code, stdin="", language_id=self.config.language_id)
        self._record(source_code)
        self._log("Submitting code...")
        result = self._executor.submit(submission)
        self._log(f"Result: {result.kind.value}")
        return result

    def run_test_suite(self, source_code: str, test_cases: list[TestCase]) -> list[Verdict]:
        return self.run(source_code, test_cases).verdicts

    def run(
        self,
        source_code: str,
        test_cases: list[TestCase],
        on_verdict: Callable[[Verdict], None] | None = None,
        cancel: CancelToken | None = None,
    ) -> SuiteRun:
        """Run every valid test case in order and return the finished run.

        Each call builds its own SuiteRun, so concurrent runs never share state.
        """
        if not source_code:
            raise ValueError("source code is required")

        state = SuiteRun(status=RunStatus.RUNNING)
        valid = [tc for tc in test_cases if tc.is_valid]

        if not valid:
            self._log("No valid test cases; nothing submitted.")
            self._emit(state, Verdict(0, Outcome.FAILED, NO_VALID_CASES_MESSAGE), on_verdict)
            state.status = RunStatus.COMPLETED
            return state

        state.total = len(valid)
        self._record(source_code)

        for index, test_case in enumerate(valid, start=1):
            if cancel is not None and cancel.cancelled:
                self._log(f"Run cancelled before test case {index}/{state.total}.")
                state.status = RunStatus.CANCELLED
                return state

            self._log(f"--- Test case {index}/{state.total} ---")
            submission = Submission(
                source_code,
                stdin=test_case.input,
                language_id=self.config.language_id,
            )
            result = self._executor.submit(submission)
            verdict = classify(result, test_case.expected_output, index)
            if verdict.passed:
                self._log("Passed")
            else:
                self._log(f"Failed: {verdict.reason[:200]}")
            self._emit(state, verdict, on_verdict)

        state.status = RunStatus.COMPLETED
        self._log(state.summary)
        return state

    @staticmethod
    def _emit(
        state: SuiteRun,
        verdict: Verdict,
        on_verdict: Callable[[Verdict], None] | None,
    ) -> None:
        state.verdicts.append(verdict)
        if on_verdict is not None:
            on_verdict(verdict)

    def _record(self, source_code: str) -> None:
        """Append the code to history; failures never affect the run."""
        if self._history is None:
            return
        try:
            self._history.append(HistorySnippet(language=self.config.language, code=source_code))
        except Exception as e:
            self._log(f"Could not save history: {type(e).__name__}: {e}")

    def _log(self, message: str) -> None:
        if self.config.verbose:
            print(message, file=sys.stderr)
