"""Tests for PollLoop."""

import asyncio

import pytest

from fakes import wait_until
from pollsub.subscription.poller import PollLoop


class Gate:
    """Blocked flag shared between a test and a PollLoop."""

    def __init__(self, blocked=False):
        self.blocked = blocked

    def __call__(self):
        return self.blocked


class TestPollLoop:
    """Test PollLoop class."""

    @pytest.mark.asyncio
    async def test_wake_runs_cycles_until_blocked(self):
        """Cycles repeat after the interval until blocked() turns true."""
        gate = Gate()
        calls = []

        async def cycle():
            calls.append(len(calls))
            if len(calls) == 3:
                gate.blocked = True

        loop = PollLoop(cycle, interval=0, blocked=gate)

        assert loop.wake() is True
        await loop.join()

        assert calls == [0, 1, 2]
        assert loop.running is False
        assert loop.cycles == 3

    @pytest.mark.asyncio
    async def test_wake_is_noop_while_blocked(self):
        """wake() starts nothing while blocked."""
        loop = PollLoop(lambda: asyncio.sleep(0), interval=0, blocked=Gate(blocked=True))

        assert loop.wake() is False
        assert loop.running is False

    @pytest.mark.asyncio
    async def test_wake_is_noop_while_running(self):
        """Only one task exists, so a second wake() starts nothing."""
        release = asyncio.Event()
        gate = Gate()
        started = []

        async def cycle():
            started.append(True)
            await release.wait()
            gate.blocked = True

        loop = PollLoop(cycle, interval=0, blocked=gate)
        loop.wake()
        await wait_until(lambda: started)

        assert loop.wake() is False

        release.set()
        await loop.join()
        assert started == [True]

    @pytest.mark.asyncio
    async def test_cancel_timer_stops_sleeping_loop(self):
        """cancel_timer() ends a loop that is waiting between cycles."""
        calls = []

        async def cycle():
            calls.append(True)

        loop = PollLoop(cycle, interval=60, blocked=Gate())
        loop.wake()
        await wait_until(lambda: loop.sleeping)

        assert loop.cancel_timer() is True
        await loop.join()

        assert loop.running is False
        assert calls == [True]

    @pytest.mark.asyncio
    async def test_wake_right_after_cancel_timer_starts_new_task(self):
        """A cancelled wait no longer counts as running, so wake() re-arms in the same tick."""
        calls = []

        async def cycle():
            calls.append(True)

        loop = PollLoop(cycle, interval=60, blocked=Gate())
        loop.wake()
        await wait_until(lambda: loop.sleeping)

        assert loop.cancel_timer() is True
        assert loop.running is False
        assert loop.sleeping is False
        assert loop.wake() is True
        await wait_until(lambda: len(calls) == 2 and loop.sleeping)

        assert loop.cancel_timer() is True
        await loop.join()
        assert loop.running is False

    @pytest.mark.asyncio
    async def test_cancel_timer_leaves_in_flight_cycle(self):
        """An in-flight cycle is not cancelled by cancel_timer()."""
        release = asyncio.Event()
        gate = Gate()
        finished = []

        async def cycle():
            await release.wait()
            finished.append(True)
            gate.blocked = True

        loop = PollLoop(cycle, interval=0, blocked=gate)
        loop.wake()
        await asyncio.sleep(0)

        assert loop.cancel_timer() is False

        release.set()
        await loop.join()
        assert finished == [True]

    @pytest.mark.asyncio
    async def test_wake_after_dormant_restarts(self):
        """A dormant loop can be re-armed."""
        gate = Gate()
        calls = []

        async def cycle():
            calls.append(True)
            gate.blocked = True

        loop = PollLoop(cycle, interval=0, blocked=gate)
        loop.wake()
        await loop.join()

        gate.blocked = False
        assert loop.wake() is True
        await loop.join()

        assert calls == [True, True]

    @pytest.mark.asyncio
    async def test_join_without_task_returns(self):
        """join() on a loop that never started returns at once."""
        loop = PollLoop(lambda: asyncio.sleep(0), interval=0, blocked=Gate())

        await loop.join()
