"""
Remote base exceptions.
"""

from .base import StorefrontException


class RemoteCallException(StorefrontException):
    """
    Raised when a call to the remote records API fails.

    status is the HTTP status code, or None when the request never got a
    response (connection error, timeout).
    """

    def __init__(self, status: int | None, body: str, url: str | None = None):
        if status is None:
            message = f"Remote call failed: {body}"
        else:
            message = f"Remote call failed with HTTP {status}: {body}"
        super().__init__(
            message,
            details={'status': status, 'url': url}
        )
        self.status = status
        self.body = body
        self.url = url

    @property
    def is_not_found(self) -> bool:
        return self.status == 404

    @property
    def is_retryable(self) -> bool:
        return self.status is None or self.status == 429 or self.status >= 500
