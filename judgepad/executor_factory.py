"""Factory for creating code executors based on configuration."""

from __future__ import annotations

from typing import TYPE_CHECKING

from judgepad.executor_base import CodeExecutor
from judgepad.executor_judge0 import Judge0Config, Judge0Executor

if TYPE_CHECKING:
    from judgepad.config import Config


def create_executor(config: Config) -> CodeExecutor:
    """Create a Judge0 executor for config.executor_type ("judge0" or "rapidapi")."""
    return Judge0Executor(
        Judge0Config(
            base_url=config.judge0_url,
            headers=config.auth_headers(),
            timeout=config.request_timeout,
        )
    )
