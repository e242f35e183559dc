"""Configuration for judgepad, loaded from environment variables."""

from __future__ import annotations

import os
from dataclasses import dataclass

RAPIDAPI_URL = "https://judge0-ce.p.rapidapi.com"
RAPIDAPI_HOST = "judge0-ce.p.rapidapi.com"


@dataclass
class Config:
    executor_type: str = "rapidapi"  # "rapidapi" or "judge0"
    judge0_url: str = RAPIDAPI_URL
    judge0_api_key: str = ""
    rapidapi_host: str = RAPIDAPI_HOST
    language_id: int = 71  # Python 3
    language: str = "Python"
    request_timeout: float = 30.0  # seconds, per submission
    history_db: str = "instance/history.db"
    verbose: bool = True

    def auth_headers(self) -> dict[str, str]:
        """Headers the execution service expects for the active executor type."""
        if self.executor_type == "rapidapi":
            return {
                "x-rapidapi-key": self.judge0_api_key,
                "x-rapidapi-host": self.rapidapi_host,
            }
        if self.judge0_api_key:
            return {"X-Auth-Token": self.judge0_api_key}
        return {}

    @classmethod
    def from_env(cls, **overrides) -> Config:
        kwargs: dict = {}
        env_map: dict[str, tuple[str, type]] = {
            "JUDGEPAD_EXECUTOR": ("executor_type", str),
            "JUDGE0_URL": ("judge0_url", str),
            "JUDGE0_API_KEY": ("judge0_api_key", str),
            "RAPIDAPI_HOST": ("rapidapi_host", str),
            "JUDGEPAD_LANGUAGE_ID": ("language_id", int),
            "JUDGEPAD_LANGUAGE": ("language", str),
            "JUDGEPAD_REQUEST_TIMEOUT": ("request_timeout", float),
            "JUDGEPAD_HISTORY_DB": ("history_db", str),
        }
        for env_var, (field_name, conv) in env_map.items():
            val = os.environ.get(env_var)
            if val is not None:
                try:
                    kwargs[field_name] = conv(val)
                except ValueError:
                    raise ValueError(f"{env_var} must be a valid {conv.__name__}, got {val!r}") from None
        # JUDGEPAD_VERBOSE: "0" or "false" silences progress output
        verbose_val = os.environ.get("JUDGEPAD_VERBOSE")
        if verbose_val is not None:
            kwargs["verbose"] = verbose_val.lower() not in ("0", "false", "no")
        kwargs.update({k: v for k, v in overrides.items() if v is not None})

        executor_type = kwargs.get("executor_type", cls.executor_type)
        if executor_type not in ("rapidapi", "judge0"):
            raise ValueError(f"Unknown executor type: {executor_type!r}")
        if executor_type == "rapidapi" and not kwargs.get("judge0_api_key"):
            raise ValueError("JUDGE0_API_KEY environment variable is required for the RapidAPI executor")
        if executor_type == "judge0" and "judge0_url" not in kwargs:
            kwargs["judge0_url"] = "http://localhost:2358"
        return cls(**kwargs)
