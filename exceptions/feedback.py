"""
Beta feedback exceptions.
"""

from .base import StorefrontException


class FeedbackSubmitException(StorefrontException):
    """Raised when a feedback record could not be stored."""

    def __init__(self, topic: str, reason: str):
        super().__init__(
            f"Feedback '{topic}' was not submitted: {reason}",
            details={'topic': topic}
        )
        self.topic = topic
        self.reason = reason
