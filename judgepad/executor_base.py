"""Abstract executor interface for submitting code to an execution service."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from judgepad.models import ExecutionResult, Submission


@runtime_checkable
class CodeExecutor(Protocol):
    def submit(self, submission: Submission) -> ExecutionResult: ...
