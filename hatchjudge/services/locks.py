"""
Per-hackathon write discipline.

Scoring and submission intake enter a hackathon's gate in shared mode and
additionally hold a lock for their (team, phase) pair, so writes to
different pairs run concurrently. Elimination enters the gate exclusively:
it waits for in-flight shared holders and blocks new ones until its
read-leaderboard-then-write sequence has committed.

Waiting eliminations take priority over newly arriving scorers.
"""
import asyncio
import logging
import weakref
from contextlib import asynccontextmanager
from typing import AsyncIterator

logger = logging.getLogger(__name__)


class HackathonGate:
    """Shared/exclusive gate for one hackathon."""

    def __init__(self):
        self._condition = asyncio.Condition()
        self._shared_holders = 0
        self._exclusive_held = False
        self._exclusive_waiting = 0

    @property
    def shared_holders(self) -> int:
        return self._shared_holders

    @property
    def exclusive_held(self) -> bool:
        return self._exclusive_held

    @asynccontextmanager
    async def shared(self) -> AsyncIterator[None]:
        async with self._condition:
            await self._condition.wait_for(
                lambda: not self._exclusive_held and self._exclusive_waiting == 0
            )
            self._shared_holders += 1
        try:
            yield
        finally:
            async with self._condition:
                self._shared_holders -= 1
                self._condition.notify_all()

    @asynccontextmanager
    async def exclusive(self) -> AsyncIterator[None]:
        async with self._condition:
            self._exclusive_waiting += 1
            try:
                await self._condition.wait_for(
                    lambda: not self._exclusive_held and self._shared_holders == 0
                )
            finally:
                self._exclusive_waiting -= 1
                self._condition.notify_all()
            self._exclusive_held = True
        try:
            yield
        finally:
            async with self._condition:
                self._exclusive_held = False
                self._condition.notify_all()


class LockRegistry:
    """
    Process-wide registry of hackathon gates and (team, phase) locks.

    Entries are created on first use and held weakly: a gate or pair lock
    that nobody holds or waits on is dropped. Locks bind to the running
    event loop, so tests that start a fresh loop must call ``reset()``.
    """

    def __init__(self):
        self._gates = weakref.WeakValueDictionary()
        self._pair_locks = weakref.WeakValueDictionary()

    @property
    def gate_count(self) -> int:
        return len(self._gates)

    @property
    def pair_lock_count(self) -> int:
        return len(self._pair_locks)

    def gate(self, code: str) -> HackathonGate:
        gate = self._gates.get(code)
        if gate is None:
            gate = self._gates[code] = HackathonGate()
        return gate

    def pair_lock(self, code: str, team_id: str, phase_index: int) -> asyncio.Lock:
        key = (code, team_id, phase_index)
        lock = self._pair_locks.get(key)
        if lock is None:
            lock = self._pair_locks[key] = asyncio.Lock()
        return lock

    @asynccontextmanager
    async def scoring(self, code: str, team_id: str, phase_index: int) -> AsyncIterator[None]:
        """Shared gate plus the (team, phase) lock."""
        async with self.gate(code).shared():
            async with self.pair_lock(code, team_id, phase_index):
                yield

    @asynccontextmanager
    async def elimination(self, code: str) -> AsyncIterator[None]:
        async with self.gate(code).exclusive():
            logger.debug(f"Exclusive gate acquired for hackathon {code}")
            yield

    def reset(self) -> None:
        self._gates.clear()
        self._pair_locks.clear()


lock_registry = LockRegistry()
