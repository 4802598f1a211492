import asyncio
import logging
import time
from typing import Callable, NamedTuple, Protocol

from app.core.exceptions import RateLimitError

logger = logging.getLogger(__name__)


class WindowState(NamedTuple):
    count: int
    reset_at: float


class CounterStore(Protocol):
    async def get(self, key: str) -> WindowState | None: ...

    async def set(self, key: str, state: WindowState) -> None: ...


class InMemoryCounterStore:
    """Process-local counters; a multi-instance deployment needs a shared store."""

    def __init__(self):
        self._states: dict[str, WindowState] = {}

    async def get(self, key: str) -> WindowState | None:
        return self._states.get(key)

    async def set(self, key: str, state: WindowState) -> None:
        self._states[key] = state

    def clear(self) -> None:
        self._states.clear()


class FixedWindowRateLimiter:
    """
    Allows ``limit`` calls per key inside a window of ``window_seconds``.

    The window starts on the first call and resets once its horizon has
    passed. Refused calls do not count against the limit.
    """

    def __init__(
        self,
        limit: int,
        window_seconds: float,
        store: CounterStore | None = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.limit = limit
        self.window_seconds = window_seconds
        self.store = store or InMemoryCounterStore()
        self.clock = clock
        self._lock = asyncio.Lock()

    async def _current(self, key: str, now: float) -> WindowState:
        state = await self.store.get(key)
        if state is None or now >= state.reset_at:
            state = WindowState(count=0, reset_at=now + self.window_seconds)
        return state

    async def check(self, key: str) -> bool:
        """Consume one call for ``key`` if any are left."""
        async with self._lock:
            now = self.clock()
            state = await self._current(key, now)
            if state.count >= self.limit:
                return False
            await self.store.set(key, state._replace(count=state.count + 1))
            return True

    async def remaining(self, key: str) -> int:
        state = await self._current(key, self.clock())
        return max(0, self.limit - state.count)

    async def consume(self, key: str) -> int:
        """Consume one call or raise ``RateLimitError``; returns calls left."""
        if not await self.check(key):
            remaining = await self.remaining(key)
            logger.warning("Rate limit exceeded for %s", key)
            raise RateLimitError(remaining=remaining)
        return await self.remaining(key)
