class SequenceGuard:
    """
    Orders the responses of overlapping polls.

    Each poll takes a token from begin(); before applying its result it asks
    is_current(token), then commit(token). A response whose token is older than
    the last committed one arrived late and must be dropped.
    """

    def __init__(self):
        self._issued = 0
        self._committed = 0

    def begin(self) -> int:
        self._issued += 1
        return self._issued

    def is_current(self, token: int) -> bool:
        return token >= self._committed

    def commit(self, token: int) -> None:
        self._committed = max(self._committed, token)

    def supersede(self) -> None:
        """Invalidate every poll in flight, e.g. after a local write."""
        self.commit(self.begin())
