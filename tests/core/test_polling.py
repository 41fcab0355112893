"""Tests for the bounded poller and deadlines."""

import asyncio

from planotto.polling import PENDING, Deadline, Done, Failed, bounded_timeout, is_expired, poll


def run(coro):
    """Run an async coroutine synchronously (no pytest-asyncio needed)."""
    return asyncio.run(coro)


class FakeClock:
    def __init__(self, now: float = 100.0):
        self.now = now

    def __call__(self) -> float:
        return self.now


def scripted(*statuses):
    """Async check returning the given statuses in order, counting calls."""
    remaining = list(statuses)

    async def check():
        check.calls += 1
        return remaining.pop(0)

    check.calls = 0
    return check


class TestPoll:
    def test_returns_first_done(self, no_sleep):
        check = scripted(PENDING, PENDING, Done({"text": "ok"}))
        result = run(poll(check, max_attempts=5, delay=1.2, sleep=no_sleep))
        assert result == Done({"text": "ok"})
        assert check.calls == 3
        assert no_sleep.delays == [1.2, 1.2]

    def test_returns_failure_immediately(self, no_sleep):
        check = scripted(PENDING, Failed("error"), Done("never"))
        result = run(poll(check, max_attempts=5, delay=1, sleep=no_sleep))
        assert result == Failed("error")
        assert check.calls == 2

    def test_exhaustion_is_timeout(self, no_sleep):
        check = scripted(*([PENDING] * 20))
        result = run(poll(check, max_attempts=20, delay=1.2, sleep=no_sleep))
        assert result == Failed("timeout")
        assert check.calls == 20
        # No sleep after the last attempt
        assert len(no_sleep.delays) == 19

    def test_zero_attempts(self, no_sleep):
        check = scripted()
        assert run(poll(check, max_attempts=0, delay=1, sleep=no_sleep)) == Failed("timeout")
        assert check.calls == 0

    def test_expired_deadline_stops_before_calling(self, no_sleep):
        clock = FakeClock()
        deadline = Deadline.after(0, clock)
        check = scripted(Done("never"))
        assert run(poll(check, max_attempts=3, delay=1, deadline=deadline, sleep=no_sleep)) == Failed(
            "deadline"
        )
        assert check.calls == 0

    def test_deadline_expiring_mid_poll(self):
        clock = FakeClock()
        deadline = Deadline.after(2.5, clock)

        async def advancing_sleep(seconds):
            clock.now += seconds

        check = scripted(*([PENDING] * 10))
        result = run(poll(check, max_attempts=10, delay=1, deadline=deadline, sleep=advancing_sleep))
        assert result == Failed("deadline")
        assert check.calls == 3


class TestDeadline:
    def test_remaining_and_expired(self):
        clock = FakeClock()
        deadline = Deadline.after(5, clock)
        assert deadline.remaining() == 5
        assert not deadline.expired
        clock.now += 6
        assert deadline.remaining() == 0
        assert deadline.expired

    def test_helpers_accept_none(self):
        assert is_expired(None) is False
        assert bounded_timeout(30.0, None) == 30.0

    def test_bounded_timeout_capped_by_deadline(self):
        clock = FakeClock()
        assert bounded_timeout(30.0, Deadline.after(4, clock)) == 4
        assert bounded_timeout(3.0, Deadline.after(4, clock)) == 3.0
