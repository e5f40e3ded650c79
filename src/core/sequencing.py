"""
Request sequencing for async actions whose results update shared state.

Each request takes a token from a monotonically increasing counter. When the
result arrives, it may be applied only if its token is still the latest one
issued; anything older is stale and must be dropped.

Usage:
    sequencer = RequestSequencer()
    token = sequencer.issue()
    result = await do_work()
    if sequencer.is_current(token):
        apply(result)
"""


class RequestSequencer:
    """Issues monotonically increasing request tokens."""

    def __init__(self) -> None:
        self._latest = 0

    @property
    def latest(self) -> int:
        """The most recently issued token (0 before the first request)."""
        return self._latest

    def issue(self) -> int:
        """Issue a token for a new request. Every earlier token becomes stale."""
        self._latest += 1
        return self._latest

    def invalidate(self) -> None:
        """Make every outstanding token stale without starting a request."""
        self._latest += 1

    def is_current(self, token: int) -> bool:
        return token == self._latest
