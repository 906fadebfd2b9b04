"""Cooperative cancellation."""


class CancellationToken:
    """
    Cooperative stop signal passed into an upload run.

    The driver checks it once before each part; a part already in flight
    always completes or fails before the stop takes effect.
    """

    def __init__(self):
        self._cancelled = False

    def cancel(self) -> None:
        """Request the upload to stop before its next part."""
        self._cancelled = True

    @property
    def cancelled(self) -> bool:
        return self._cancelled
