"""Display strings for execution results and verdicts."""

from __future__ import annotations

from judgepad.models import ExecutionResult, ResultKind, Verdict

_PREFIXES = {
    ResultKind.STDOUT: "Output:\n",
    ResultKind.STDERR: "Error:\n",
    ResultKind.COMPILE_ERROR: "Compilation Error:\n",
    ResultKind.STATUS_MESSAGE: "Status: ",
    ResultKind.TRANSPORT_FAILURE: "Error: ",
}


def format_result(result: ExecutionResult) -> str:
    return f"{_PREFIXES[result.kind]}{result.text}"


def format_verdict(verdict: Verdict) -> str:
    if verdict.case_index == 0:
        return f"Error: {verdict.reason}"
    if verdict.passed:
        return f"Test Case {verdict.case_index}: Passed"
    return f"Test Case {verdict.case_index}: Failed ({verdict.reason})"
