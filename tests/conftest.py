"""Shared fixtures: an in-memory stand-in for an asyncpg pool."""

from contextlib import asynccontextmanager
from typing import Any, List, Tuple

import pytest

# A valid 48-character SS58 address
ACCOUNT_ID = "5GrwvaEF5zXb26Fz9rcQpDWS57CtERHpNehXCPcNoHGKutQY"

class FakeConnection:
    """Records every query and replays scripted results in order.

    Each queued result is returned by the next fetch/fetchrow/fetchval/execute
    call; an exception instance is raised instead. When the queue is empty,
    the method's natural empty value is returned.
    """

    def __init__(self, results=None):
        self.results: List[Any] = list(results or [])
        self.calls: List[Tuple[str, str, tuple]] = []

    async def _next(self, method: str, query: str, args: tuple, default: Any) -> Any:
        self.calls.append((method, query, args))
        if not self.results:
            return default
        result = self.results.pop(0)
        if isinstance(result, BaseException):
            raise result
        return result

    async def fetch(self, query, *args):
        return await self._next('fetch', query, args, [])

    async def fetchrow(self, query, *args):
        return await self._next('fetchrow', query, args, None)

    async def fetchval(self, query, *args):
        return await self._next('fetchval', query, args, None)

    async def execute(self, query, *args):
        return await self._next('execute', query, args, 'OK')

    @asynccontextmanager
    async def transaction(self):
        yield

class FakePool:
    """Pool double handing out a single recording connection."""

    def __init__(self, *results):
        self.conn = FakeConnection(results)

    @asynccontextmanager
    async def acquire(self):
        yield self.conn

    @property
    def calls(self):
        return self.conn.calls

    def queue(self, *results):
        self.conn.results.extend(results)

@pytest.fixture
def fake_pool():
    """Empty pool; tests queue results with fake_pool.queue(...)."""
    return FakePool()
