"""Async rate limiting for outbound Gemini requests."""

from __future__ import annotations

import asyncio
import threading
import time
from collections import deque
from dataclasses import dataclass, field
from typing import Deque, Optional

from src.shared.utils.logging import get_logger

LOGGER = get_logger(__name__)

_WINDOW_SECONDS = 60.0


class RateLimitExceeded(RuntimeError):
    """Raised when a slot does not free up within the allowed wait."""


@dataclass
class RateLimiter:
    """Sliding one-minute window shared by all concurrent summarization attempts.

    Flask serves requests from several threads, each driving its own event
    loop; the window is guarded by a thread lock.
    """

    max_requests_per_minute: int = 60
    _calls: Deque[float] = field(init=False, repr=False, default_factory=deque)
    _lock: threading.Lock = field(init=False, repr=False, default_factory=threading.Lock)

    def __post_init__(self) -> None:
        if self.max_requests_per_minute <= 0:
            raise ValueError("max_requests_per_minute must be positive")

    async def acquire(self, timeout: Optional[float] = None) -> None:
        """Wait until a request slot is free and claim it.

        Args:
            timeout: Max seconds to wait for a slot. None means wait indefinitely.

        Raises:
            RateLimitExceeded: If no slot frees up before ``timeout``.
        """

        deadline = time.monotonic() + timeout if timeout is not None else None
        while True:
            wait_for = self._try_claim()
            if wait_for is None:
                return
            if deadline is not None and time.monotonic() + wait_for > deadline:
                raise RateLimitExceeded("Timed out waiting for a Gemini request slot")
            LOGGER.debug("Rate limit reached, waiting %.2fs for a free slot", wait_for)
            await asyncio.sleep(max(wait_for, 0.01))

    def _try_claim(self) -> Optional[float]:
        """Claim a slot and return None, or return the seconds until one frees up."""
        with self._lock:
            now = time.monotonic()
            self._evict(now)
            if len(self._calls) < self.max_requests_per_minute:
                self._calls.append(now)
                return None
            return self._calls[0] + _WINDOW_SECONDS - now

    def _evict(self, now: float) -> None:
        while self._calls and now - self._calls[0] >= _WINDOW_SECONDS:
            self._calls.popleft()

    @property
    def in_window(self) -> int:
        with self._lock:
            self._evict(time.monotonic())
            return len(self._calls)
