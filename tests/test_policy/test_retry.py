"""Tests for netresponse.policy.retry -- capped exponential backoff."""

from __future__ import annotations

import asyncio
import itertools
from typing import Any

import httpx
import pytest

from netresponse.models import RetryConfig
from netresponse.policy import backoff_delays, execute_with_retry
from netresponse.response import NetworkError, ServerError, Success, UnknownError


def _retry(operation: Any, config: RetryConfig | None, sleep: Any) -> Any:
    return asyncio.run(execute_with_retry(operation, config, sleep=sleep))


def _failures(count: int) -> list[Any]:
    return [ServerError(body=None, code=503) for _ in range(count)]


class TestBackoffDelays:
    def test_default_sequence(self) -> None:
        delays = list(itertools.islice(backoff_delays(100, 2.0, 1000), 6))
        assert delays == [100, 200, 400, 800, 1000, 1000]

    def test_fractional_factor_truncates(self) -> None:
        delays = list(itertools.islice(backoff_delays(100, 1.5, 10_000), 4))
        assert delays == [100, 150, 225, 337]

    def test_initial_delay_above_cap_is_used_once(self) -> None:
        delays = list(itertools.islice(backoff_delays(5000, 2.0, 1000), 3))
        assert delays == [5000, 1000, 1000]


class TestExecuteWithRetry:
    def test_success_first_time(self, make_operation: Any, recording_sleep: Any) -> None:
        operation = make_operation(Success(body="ok"))
        assert _retry(operation, RetryConfig(), recording_sleep) == Success(body="ok")
        assert operation.calls == 1
        assert recording_sleep.delays == []

    @pytest.mark.parametrize("failures", [1, 2])
    def test_recovers_after_failures(self, failures: int, make_operation: Any, recording_sleep: Any) -> None:
        operation = make_operation(*_failures(failures), Success(body="ok"))

        outcome = _retry(operation, RetryConfig(max_attempts=3), recording_sleep)

        assert outcome == Success(body="ok")
        assert operation.calls == failures + 1
        assert recording_sleep.delays_ms == [100, 200][:failures]

    def test_exhausted_returns_last_outcome(self, make_operation: Any, recording_sleep: Any) -> None:
        last = ServerError(body="final", code=500)
        operation = make_operation(*_failures(2), last)

        outcome = _retry(operation, RetryConfig(max_attempts=3), recording_sleep)

        assert outcome is last
        assert operation.calls == 3

    def test_delay_sequence_is_capped(self, make_operation: Any, recording_sleep: Any) -> None:
        operation = make_operation(ServerError(body=None, code=503))

        _retry(operation, RetryConfig(max_attempts=7), recording_sleep)

        assert operation.calls == 7
        assert recording_sleep.delays_ms == [100, 200, 400, 800, 1000, 1000]

    @pytest.mark.parametrize("max_attempts", [1, 0, -3])
    def test_single_attempt_when_max_attempts_not_above_one(
        self, max_attempts: int, make_operation: Any, recording_sleep: Any
    ) -> None:
        failure = ServerError(body=None, code=503)
        operation = make_operation(failure)

        outcome = _retry(operation, RetryConfig(max_attempts=max_attempts), recording_sleep)

        assert outcome is failure
        assert operation.calls == 1
        assert recording_sleep.delays == []

    def test_custom_predicate(self, make_operation: Any, recording_sleep: Any) -> None:
        config = RetryConfig(
            max_attempts=5,
            should_retry=lambda outcome: isinstance(outcome, ServerError) and outcome.code >= 500,
        )
        not_found = ServerError(body=None, code=404)
        operation = make_operation(ServerError(body=None, code=502), not_found)

        outcome = _retry(operation, config, recording_sleep)

        assert outcome is not_found
        assert operation.calls == 2

    def test_predicate_can_retry_successes(self, make_operation: Any, recording_sleep: Any) -> None:
        config = RetryConfig(max_attempts=3, should_retry=lambda o: isinstance(o, Success) and o.body is None)
        operation = make_operation(Success(body=None), Success(body="ready"))
        assert _retry(operation, config, recording_sleep) == Success(body="ready")

    def test_default_predicate_retries_every_error_variant(
        self, make_operation: Any, recording_sleep: Any
    ) -> None:
        operation = make_operation(
            NetworkError(httpx.ConnectError("refused")),
            UnknownError(ValueError("bad")),
            Success(body="ok"),
        )
        assert _retry(operation, RetryConfig(max_attempts=3), recording_sleep) == Success(body="ok")
        assert operation.calls == 3

    def test_transport_exception_on_intermediate_attempt_is_retried(
        self, make_operation: Any, recording_sleep: Any
    ) -> None:
        operation = make_operation(httpx.ConnectTimeout("slow"), Success(body="ok"))

        outcome = _retry(operation, RetryConfig(max_attempts=3), recording_sleep)

        assert outcome == Success(body="ok")
        assert operation.calls == 2
        assert recording_sleep.delays_ms == [100]

    def test_transport_exception_on_final_attempt_propagates(
        self, make_operation: Any, recording_sleep: Any
    ) -> None:
        operation = make_operation(httpx.ConnectError("refused"))

        with pytest.raises(httpx.ConnectError):
            _retry(operation, RetryConfig(max_attempts=3), recording_sleep)

        assert operation.calls == 3

    def test_non_transport_exception_propagates_immediately(
        self, make_operation: Any, recording_sleep: Any
    ) -> None:
        operation = make_operation(KeyError("bug"), Success(body="ok"))

        with pytest.raises(KeyError):
            _retry(operation, RetryConfig(max_attempts=3), recording_sleep)

        assert operation.calls == 1

    def test_none_config_uses_defaults(self, make_operation: Any, recording_sleep: Any) -> None:
        operation = make_operation(ServerError(body=None, code=503))
        _retry(operation, None, recording_sleep)
        assert operation.calls == 3
        assert recording_sleep.delays_ms == [100, 200]

    def test_real_sleep_waits(self, make_operation: Any) -> None:
        operation = make_operation(ServerError(body=None, code=503), Success(body="ok"))
        config = RetryConfig(max_attempts=2, initial_delay_ms=1)
        assert asyncio.run(execute_with_retry(operation, config)) == Success(body="ok")


class TestCancellation:
    def test_cancel_during_backoff_stops_attempts(self, make_operation: Any) -> None:
        operation = make_operation(ServerError(body=None, code=503), Success(body="ok"))

        async def scenario() -> None:
            sleeping = asyncio.Event()

            async def blocking_sleep(seconds: float) -> None:
                sleeping.set()
                await asyncio.sleep(3600)

            task = asyncio.create_task(
                execute_with_retry(operation, RetryConfig(max_attempts=3), sleep=blocking_sleep)
            )
            await sleeping.wait()
            task.cancel()
            with pytest.raises(asyncio.CancelledError):
                await task

        asyncio.run(scenario())
        assert operation.calls == 1
