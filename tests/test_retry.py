import pytest

from ace.research.retry import RetryError, RetryPolicy, call_with_retry


class Flaky:
    def __init__(self, failures: int, exc: Exception = ConnectionError("down")):
        self.failures = failures
        self.exc = exc
        self.calls = 0

    def __call__(self):
        self.calls += 1
        if self.calls <= self.failures:
            raise self.exc
        return "ok"


class TestRetryPolicy:
    """Test delay schedules."""

    def test_fixed_delay_default(self):
        policy = RetryPolicy()
        assert policy.max_attempts == 2
        assert [policy.delay_for(n) for n in (1, 2, 3)] == [1.0, 1.0, 1.0]

    def test_exponential_backoff_capped(self):
        policy = RetryPolicy(max_attempts=5, delay_seconds=1.0, backoff=2.0, max_delay_seconds=3.0)
        assert [policy.delay_for(n) for n in (1, 2, 3, 4)] == [1.0, 2.0, 3.0, 3.0]


class TestCallWithRetry:
    """Test the retry loop with a simulated sleep."""

    def test_success_first_try(self):
        sleeps = []
        fn = Flaky(0)
        assert call_with_retry(fn, RetryPolicy(), sleep=sleeps.append) == "ok"
        assert fn.calls == 1
        assert sleeps == []

    def test_recovers_after_failure(self):
        sleeps = []
        fn = Flaky(1)
        assert call_with_retry(fn, RetryPolicy(), sleep=sleeps.append) == "ok"
        assert fn.calls == 2
        assert sleeps == [1.0]

    def test_exhaustion_raises_retry_error(self):
        sleeps = []
        fn = Flaky(5)
        with pytest.raises(RetryError) as exc_info:
            call_with_retry(fn, RetryPolicy(max_attempts=3, delay_seconds=0.5), sleep=sleeps.append)
        assert exc_info.value.attempts == 3
        assert isinstance(exc_info.value.__cause__, ConnectionError)
        assert fn.calls == 3
        assert sleeps == [0.5, 0.5]

    def test_unlisted_exception_propagates(self):
        fn = Flaky(1, exc=KeyError("boom"))
        with pytest.raises(KeyError):
            call_with_retry(fn, RetryPolicy(), retry_on=(ConnectionError,), sleep=lambda s: None)
        assert fn.calls == 1

    def test_on_retry_callback(self):
        seen = []
        fn = Flaky(1)
        call_with_retry(fn, RetryPolicy(), sleep=lambda s: None, on_retry=lambda n, e, d: seen.append((n, d)))
        assert seen == [(1, 1.0)]

    def test_zero_attempts_still_calls_once(self):
        fn = Flaky(0)
        assert call_with_retry(fn, RetryPolicy(max_attempts=0), sleep=lambda s: None) == "ok"
        assert fn.calls == 1
