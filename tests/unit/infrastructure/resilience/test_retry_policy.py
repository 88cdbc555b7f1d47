import asyncio
import pytest
from unittest.mock import MagicMock

from catfacts.domain.models.policy import RetryConfig
from catfacts.infrastructure.resilience.backoff import linear_backoff
from catfacts.infrastructure.resilience.failure_predicates import handle
from catfacts.infrastructure.resilience.retry_policy import RetryPolicy

class TransientError(Exception):
    pass

class FlakyOperation:
    """Raises `error` for the first `failures` calls, then returns `result`."""

    def __init__(self, failures: int, error: Exception = None, result: str = "ok"):
        self.failures = failures
        self.error = error or TransientError("boom")
        self.result = result
        self.calls = 0

    async def __call__(self):
        self.calls += 1
        if self.calls <= self.failures:
            raise self.error
        return self.result

def make_policy(max_attempts, sleep, on_retry=None, base=0.3):
    return RetryPolicy(
        handles=handle(TransientError),
        config=RetryConfig(max_attempts=max_attempts, backoff=linear_backoff(base), on_retry=on_retry),
        sleep=sleep,
    )

@pytest.mark.asyncio
async def test_first_attempt_success_returns_without_observer(recording_sleep):
    observer = MagicMock()
    policy = make_policy(5, recording_sleep, observer)
    operation = FlakyOperation(failures=0)

    assert await policy.execute(operation) == "ok"
    assert operation.calls == 1
    observer.assert_not_called()
    assert recording_sleep.waits == []

@pytest.mark.asyncio
@pytest.mark.parametrize("max_attempts", [1, 2, 5, 8])
async def test_always_failing_operation_is_attempted_max_attempts_times(recording_sleep, max_attempts):
    observer = MagicMock()
    policy = make_policy(max_attempts, recording_sleep, observer)
    operation = FlakyOperation(failures=max_attempts + 10)

    with pytest.raises(TransientError):
        await policy.execute(operation)

    assert operation.calls == max_attempts
    assert observer.call_count == max_attempts - 1
    assert [c.args[1] for c in observer.call_args_list] == list(range(1, max_attempts))

@pytest.mark.asyncio
@pytest.mark.parametrize("max_attempts, failures", [(5, 1), (5, 4), (3, 2), (2, 1)])
async def test_recovers_after_k_failures(recording_sleep, max_attempts, failures):
    observer = MagicMock()
    policy = make_policy(max_attempts, recording_sleep, observer)
    operation = FlakyOperation(failures=failures, result="fact")

    assert await policy.execute(operation) == "fact"
    assert operation.calls == failures + 1
    assert observer.call_count == failures

@pytest.mark.asyncio
async def test_unhandled_failure_propagates_immediately(recording_sleep):
    observer = MagicMock()
    policy = make_policy(5, recording_sleep, observer)
    error = ValueError("bad argument")
    operation = FlakyOperation(failures=1, error=error)

    with pytest.raises(ValueError) as exc_info:
        await policy.execute(operation)

    assert exc_info.value is error
    assert operation.calls == 1
    observer.assert_not_called()
    assert recording_sleep.waits == []

@pytest.mark.asyncio
async def test_last_handled_failure_is_raised_unchanged(recording_sleep):
    errors = [TransientError(f"attempt {n}") for n in range(1, 4)]

    async def operation():
        raise errors.pop(0)

    with pytest.raises(TransientError, match="attempt 3"):
        await make_policy(3, recording_sleep).execute(operation)

@pytest.mark.asyncio
async def test_observer_receives_failure_attempt_and_wait(recording_sleep):
    observer = MagicMock()
    policy = make_policy(5, recording_sleep, observer)
    error = TransientError("down")

    async def operation():
        raise error

    with pytest.raises(TransientError):
        await policy.execute(operation)

    received = [c.args for c in observer.call_args_list]
    assert [r[0] for r in received] == [error] * 4
    assert [r[1] for r in received] == [1, 2, 3, 4]
    assert [r[2] for r in received] == pytest.approx([0.3, 0.6, 0.9, 1.2])
    assert recording_sleep.waits == pytest.approx([0.3, 0.6, 0.9, 1.2])

@pytest.mark.asyncio
async def test_async_observer_is_awaited(recording_sleep):
    seen = []

    async def observer(failure, attempt, wait):
        seen.append(attempt)

    with pytest.raises(TransientError):
        await make_policy(3, recording_sleep, observer).execute(FlakyOperation(failures=5))

    assert seen == [1, 2]

@pytest.mark.asyncio
async def test_observer_errors_do_not_stop_retries(recording_sleep):
    observer = MagicMock(side_effect=RuntimeError("observer broke"))
    operation = FlakyOperation(failures=2)

    assert await make_policy(5, recording_sleep, observer).execute(operation) == "ok"
    assert observer.call_count == 2
    assert operation.calls == 3

@pytest.mark.asyncio
async def test_negative_backoff_is_clamped_to_zero(recording_sleep):
    policy = RetryPolicy(
        handles=handle(TransientError),
        config=RetryConfig(max_attempts=2, backoff=lambda attempt: -1.0),
        sleep=recording_sleep,
    )
    assert await policy.execute(FlakyOperation(failures=1)) == "ok"
    assert recording_sleep.waits == [0.0]

@pytest.mark.asyncio
async def test_executions_do_not_share_attempt_state(recording_sleep):
    policy = make_policy(3, recording_sleep)
    first, second = FlakyOperation(failures=2), FlakyOperation(failures=2)

    assert await policy.execute(first) == "ok"
    assert await policy.execute(second) == "ok"
    assert first.calls == second.calls == 3

@pytest.mark.asyncio
async def test_concurrent_executions_are_isolated():
    """Real asyncio.sleep with a tiny base: the waits must not block each other."""
    policy = make_policy(4, asyncio.sleep, base=0.001)
    operations = [FlakyOperation(failures=n, result=n) for n in range(4)]

    results = await asyncio.gather(*(policy.execute(op) for op in operations))

    assert results == [0, 1, 2, 3]
    assert [op.calls for op in operations] == [1, 2, 3, 4]

def test_config_rejects_zero_attempts():
    with pytest.raises(ValueError, match="max_attempts"):
        RetryConfig(max_attempts=0, backoff=linear_backoff(0.3))

def test_config_rejects_non_int_attempts():
    with pytest.raises(TypeError):
        RetryConfig(max_attempts=2.5, backoff=linear_backoff(0.3))

def test_config_is_frozen():
    config = RetryConfig(max_attempts=2, backoff=linear_backoff(0.3))
    with pytest.raises(AttributeError):
        config.max_attempts = 3
