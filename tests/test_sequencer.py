"""Tests for the test-case sequencer."""

from __future__ import annotations

import threading
from unittest.mock import MagicMock, patch

import pytest

from judgepad.config import Config
from judgepad.history import HistoryStore
from judgepad.models import (
    ExecutionResult,
    Outcome,
    ResultKind,
    RunStatus,
    TestCase,
)
from judgepad.sequencer import CancelToken, Sequencer


def _make_config(**overrides) -> Config:
    defaults = {
        "executor_type": "judge0",
        "judge0_url": "http://fake:2358",
        "verbose": False,
    }
    defaults.update(overrides)
    return Config(**defaults)


def _stdout(text: str) -> ExecutionResult:
    return ExecutionResult(ResultKind.STDOUT, text)


def _make_sequencer(results, history=None, **config_overrides):
    executor = MagicMock()
    executor.submit.side_effect = list(results)
    return Sequencer(_make_config(**config_overrides), executor=executor, history=history), executor


CASES = [
    TestCase(input="1", expected_output="1"),
    TestCase(input="2", expected_output="2"),
    TestCase(input="3", expected_output="3"),
]


class TestSequencing:
    def test_all_pass_in_order(self):
        seq, executor = _make_sequencer([_stdout("1\n"), _stdout("2\n"), _stdout("3\n")])
        run = seq.run("print(input())", CASES)
        assert run.status == RunStatus.COMPLETED
        assert [v.case_index for v in run.verdicts] == [1, 2, 3]
        assert all(v.passed for v in run.verdicts)
        assert run.all_passed
        stdins = [c.args[0].stdin for c in executor.submit.call_args_list]
        assert stdins == ["1", "2", "3"]

    def test_submission_uses_configured_language(self):
        seq, executor = _make_sequencer([_stdout("1")], language_id=54)
        seq.run("code", CASES[:1])
        submission = executor.submit.call_args.args[0]
        assert submission.language_id == 54
        assert submission.source_code == "code"

    def test_invalid_cases_skipped_and_not_counted(self):
        cases = [
            TestCase(input="", expected_output="1"),
            TestCase(input="2", expected_output="2"),
            TestCase(input="3", expected_output=""),
        ]
        seq, executor = _make_sequencer([_stdout("2")])
        verdicts = seq.run_test_suite("code", cases)
        assert len(verdicts) == 1
        assert verdicts[0].case_index == 1
        assert verdicts[0].passed
        assert executor.submit.call_count == 1

    def test_partial_transport_failure(self):
        seq, _ = _make_sequencer([
            _stdout("1"),
            ExecutionResult.transport_failure("connection reset"),
            _stdout("3"),
        ])
        verdicts = seq.run_test_suite("code", CASES)
        assert len(verdicts) == 3
        assert verdicts[0].passed
        assert verdicts[1].outcome == Outcome.FAILED
        assert verdicts[1].reason == "transport error: connection reset"
        assert verdicts[2].passed

    def test_stderr_wins_over_stdout(self):
        # The client already resolved precedence; a STDERR result never passes
        seq, _ = _make_sequencer([
            ExecutionResult(ResultKind.STDERR, "Traceback...\nValueError: boom\n"),
        ])
        verdicts = seq.run_test_suite("code", CASES[:1])
        assert verdicts[0].outcome == Outcome.FAILED
        assert verdicts[0].reason == "runtime error: ValueError: boom"

    def test_echo_sum_scenario(self):
        seq, _ = _make_sequencer([_stdout("8\n")])
        verdicts = seq.run_test_suite(
            "a = int(input()); b = int(input()); print(a + b)",
            [TestCase(input="5\n3", expected_output="8")],
        )
        assert verdicts[0].passed

    def test_progress_callback_sees_each_verdict(self):
        seq, _ = _make_sequencer([_stdout("1"), _stdout("x"), _stdout("3")])
        seen = []
        run = seq.run("code", CASES, on_verdict=seen.append)
        assert seen == run.verdicts
        assert run.summary == "2/3 test case(s) passed."

    def test_empty_code_rejected(self):
        seq, executor = _make_sequencer([])
        with pytest.raises(ValueError):
            seq.run("", CASES)
        executor.submit.assert_not_called()


class TestEmptyGuard:
    @pytest.mark.parametrize("cases", [[], [TestCase(input="", expected_output="")]])
    def test_single_error_verdict_without_network(self, cases):
        history = HistoryStore()
        seq, executor = _make_sequencer([], history=history)
        verdicts = seq.run_test_suite("code", cases)
        assert len(verdicts) == 1
        assert verdicts[0].outcome == Outcome.FAILED
        assert "at least one valid test case" in verdicts[0].reason
        executor.submit.assert_not_called()
        assert history.list_all() == []


class TestCancellation:
    def test_cancel_between_cases(self):
        cancel = CancelToken()
        executor = MagicMock()

        def submit(submission):
            cancel.cancel()
            return _stdout(submission.stdin)

        executor.submit.side_effect = submit
        seq = Sequencer(_make_config(), executor=executor)
        run = seq.run("code", CASES, cancel=cancel)
        assert run.status == RunStatus.CANCELLED
        assert len(run.verdicts) == 1
        assert executor.submit.call_count == 1

    def test_runs_do_not_share_state(self):
        executor = MagicMock()
        executor.submit.side_effect = lambda s: _stdout(s.stdin)
        seq = Sequencer(_make_config(), executor=executor)
        runs = []

        def worker():
            runs.append(seq.run("code", CASES))

        threads = [threading.Thread(target=worker) for _ in range(4)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()
        assert len(runs) == 4
        for run in runs:
            assert [v.case_index for v in run.verdicts] == [1, 2, 3]
            assert run.all_passed


class TestHistory:
    def test_one_entry_per_suite_run(self):
        history = HistoryStore()
        seq, _ = _make_sequencer([_stdout("1"), _stdout("2"), _stdout("3")], history=history)
        seq.run("print(input())", CASES)
        snippets = history.list_all()
        assert len(snippets) == 1
        assert snippets[0].code == "print(input())"
        assert snippets[0].language == "Python"

    def test_run_once_records_and_returns_result(self):
        history = HistoryStore()
        seq, executor = _make_sequencer([_stdout("Hello, World!\n")], history=history)
        result = seq.run_once("print('Hello, World!')")
        assert result.kind == ResultKind.STDOUT
        assert executor.submit.call_args.args[0].stdin == ""
        assert len(history.list_all()) == 1

    def test_history_failure_does_not_affect_verdicts(self):
        history = MagicMock()
        history.append.side_effect = RuntimeError("disk full")
        seq, _ = _make_sequencer([_stdout("1"), _stdout("2"), _stdout("3")], history=history)
        verdicts = seq.run_test_suite("code", CASES)
        assert all(v.passed for v in verdicts)
        history.append.assert_called_once()


class TestExecutorWiring:
    @patch("judgepad.sequencer.create_executor")
    def test_default_executor_from_config(self, mock_create):
        config = _make_config()
        Sequencer(config)
        mock_create.assert_called_once_with(config)
