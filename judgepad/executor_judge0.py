"""Judge0 REST API client for remote code execution."""

from __future__ import annotations

import json
from dataclasses import dataclass, field

import httpx

from judgepad.models import ExecutionResult, ResultKind, Submission

NO_OUTPUT_MESSAGE = "no output received"


@dataclass
class Judge0Config:
    base_url: str = "http://localhost:2358"
    headers: dict[str, str] = field(default_factory=dict)  # auth headers
    timeout: float = 30.0


class Judge0Executor:
    """Submits one program to Judge0 and waits for the run to finish.

    The request asks the server to block until the submission completes
    (``wait=true``), so every call maps to exactly one HTTP round trip.
    Transport problems are returned as TRANSPORT_FAILURE results, never raised.
    """

    def __init__(self, config: Judge0Config | None = None) -> None:
        self._config = config or Judge0Config()

    def submit(self, submission: Submission) -> ExecutionResult:
        headers: dict[str, str] = {"Content-Type": "application/json", **self._config.headers}
        payload = {
            "source_code": submission.source_code,
            "language_id": submission.language_id,
            "stdin": submission.stdin,
        }

        try:
            body = json.dumps(payload)
        except (TypeError, ValueError) as e:
            return ExecutionResult.transport_failure(f"failed to serialize request: {e}")

        base = self._config.base_url.rstrip("/")
        try:
            resp = httpx.post(
                f"{base}/submissions?base64_encoded=false&wait=true",
                content=body,
                headers=headers,
                timeout=self._config.timeout,
            )
        except httpx.TimeoutException:
            return ExecutionResult.transport_failure(
                f"request timed out after {self._config.timeout:g}s"
            )
        except httpx.HTTPError as e:
            return ExecutionResult.transport_failure(str(e) or type(e).__name__)

        # Judge0 answers 201 Created for submissions; both mean the run finished.
        if resp.status_code not in (200, 201):
            return ExecutionResult.transport_failure(f"HTTP {resp.status_code}")

        try:
            data = resp.json()
        except ValueError:
            return ExecutionResult.transport_failure("invalid response from server")
        if not isinstance(data, dict):
            return ExecutionResult.transport_failure("invalid response from server")

        return parse_response(data)


def parse_response(data: dict) -> ExecutionResult:
    """Map a Judge0 submission body to a normalized result.

    Precedence is fixed: stderr, then stdout, then compile output, then the
    status description.
    """
    stdout = data.get("stdout") or ""
    stderr = data.get("stderr") or ""
    compile_output = data.get("compile_output") or ""
    status = data.get("status")
    description = ""
    if isinstance(status, dict):
        description = status.get("description") or ""

    if stderr:
        kind, text = ResultKind.STDERR, stderr
    elif stdout:
        kind, text = ResultKind.STDOUT, stdout
    elif compile_output:
        kind, text = ResultKind.COMPILE_ERROR, compile_output
    elif description:
        kind, text = ResultKind.STATUS_MESSAGE, description
    else:
        kind, text = ResultKind.STATUS_MESSAGE, NO_OUTPUT_MESSAGE

    return ExecutionResult(kind=kind, text=text, stderr=stderr, status=description)
