"""Turning execution results into per-case verdicts."""

from __future__ import annotations

from judgepad.models import ExecutionResult, Outcome, ResultKind, Verdict


def normalize_output(text: str) -> str:
    """Strip leading/trailing whitespace, newlines included."""
    return text.strip()


def last_non_empty_line(text: str) -> str:
    """Return the last line of *text* with content, or *text* if there is none."""
    for line in reversed(text.splitlines()):
        if line.strip():
            return line
    return text


def classify(result: ExecutionResult, expected_output: str, case_index: int) -> Verdict:
    """Grade one execution result against the expected output.

    Pure: the same arguments always yield the same verdict.
    """
    if result.kind == ResultKind.TRANSPORT_FAILURE:
        return Verdict(case_index, Outcome.FAILED, f"transport error: {result.text}")

    if result.kind == ResultKind.STDERR:
        return Verdict(case_index, Outcome.FAILED, f"runtime error: {last_non_empty_line(result.text)}")

    if result.kind == ResultKind.STDOUT:
        expected = normalize_output(expected_output)
        actual = normalize_output(result.text)
        if actual == expected:
            return Verdict(case_index, Outcome.PASSED)
        return Verdict(case_index, Outcome.FAILED, f"expected {expected}, got {actual}")

    # Compile error or bare status: nothing comparable was produced
    return Verdict(case_index, Outcome.FAILED, result.text)
