"""Tests for Parallel Executor."""

import time

import pytest

from storyreel.utils.parallel_executor import ParallelExecutor


@pytest.fixture
def executor(settings, logger):
    return ParallelExecutor(settings, logger)


def test_results_follow_submission_order(executor):
    def task(value, delay):
        def run():
            time.sleep(delay)
            return value

        return run

    results = executor.execute_api_calls([task("a", 0.05), task("b", 0.0), task("c", 0.02)])

    assert [result for result, _ in results] == ["a", "b", "c"]
    assert all(error is None for _, error in results)


def test_failures_are_returned_not_raised(executor):
    def boom():
        raise RuntimeError("boom")

    results = executor.execute_api_calls([lambda: 1, boom], task_names=["ok", "bad"])

    assert results[0] == (1, None)
    assert results[1][0] is None
    assert isinstance(results[1][1], RuntimeError)


def test_sequential_mode(executor):
    results = executor.execute_api_calls([lambda: 1, lambda: 2], max_workers=1)
    assert results == [(1, None), (2, None)]


def test_empty_batch(executor):
    assert executor.execute_api_calls([]) == []
