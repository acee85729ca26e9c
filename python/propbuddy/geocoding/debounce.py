"""Generation-counter debouncing for autosuggest requests."""
from __future__ import annotations

import asyncio


class Debouncer:
    """Hands out monotonically increasing tokens; only the newest is current.

    Each caller takes a token, waits out the quiet period with ``settle`` and
    proceeds only if no newer token was issued meanwhile. After its own I/O
    the caller checks ``is_current`` again so a response that was overtaken
    by a newer call is dropped instead of delivered.
    """

    def __init__(self, delay_seconds: float) -> None:
        self._delay = delay_seconds
        self._generation = 0

    @property
    def generation(self) -> int:
        return self._generation

    def next_token(self) -> int:
        """Invalidate every outstanding token and return a fresh one."""
        self._generation += 1
        return self._generation

    def is_current(self, token: int) -> bool:
        return token == self._generation

    async def settle(self, token: int) -> bool:
        """Sleep for the debounce delay; return True if *token* survived it."""
        await asyncio.sleep(self._delay)
        return self.is_current(token)
