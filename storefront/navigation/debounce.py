"""Search input debouncing.

Collapses a burst of keystrokes into one search for the latest term.
Each submission takes a new token and invalidates the previous one; a
timer only runs the callback if its token is still the current one.
"""

import asyncio
from collections.abc import Callable

import structlog

logger = structlog.get_logger()


class SearchDebouncer:
    """Cancellable-token debouncer for search input.

    Example usage:
        debouncer = SearchDebouncer(run_search, delay=0.3)
        for term in ("b", "br", "bra", "brake"):
            debouncer.submit(term)
        # run_search("brake") fires once, 300ms after the last keystroke
    """

    def __init__(
        self,
        callback: Callable[[str], None],
        delay: float = 0.3,
    ) -> None:
        """Initialize debouncer.

        Args:
            callback: Called with the latest term once input settles.
            delay: Quiet period in seconds.
        """
        self.callback = callback
        self.delay = delay
        self._token = 0
        self._handle: asyncio.TimerHandle | None = None

    @property
    def token(self) -> int:
        """Current token; older tokens are stale."""
        return self._token

    @property
    def pending(self) -> bool:
        """Check whether a search is scheduled."""
        return self._handle is not None

    def is_current(self, token: int) -> bool:
        """Check whether token belongs to the latest submission."""
        return token == self._token

    def submit(self, term: str) -> int:
        """Schedule a search for term, superseding any scheduled one.

        Must be called from within a running event loop.

        Args:
            term: Latest search input.

        Returns:
            Token of this submission.
        """
        self._token += 1
        token = self._token
        if self._handle is not None:
            self._handle.cancel()
        loop = asyncio.get_running_loop()
        self._handle = loop.call_later(self.delay, self._fire, token, term)
        return token

    def cancel(self) -> None:
        """Drop any scheduled search."""
        self._token += 1
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    def _fire(self, token: int, term: str) -> None:
        if not self.is_current(token):
            logger.debug("Discarding stale search trigger", token=token)
            return
        self._handle = None
        self.callback(term)
