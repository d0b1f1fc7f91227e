"""
Errors - Exception hierarchy shared by all layers
"""

from typing import Optional


class ClassWatchError(Exception):
    """Base class for all checker errors"""


class ConfigError(ClassWatchError):
    """Configuration is missing a required value or has a bad one"""


class NotFoundError(ClassWatchError):
    """A bounded search ran out of time without a single match"""

    def __init__(self, selector: str, timeout_ms: int, last_error: Optional[BaseException] = None):
        self.selector = selector
        self.timeout_ms = timeout_ms
        self.last_error = last_error
        super().__init__(
            f"Timeout waiting for selector in page or frames: {selector} ({timeout_ms} ms)"
        )


class DetectionFailure(ClassWatchError):
    """A required detection step failed, the cycle must abort"""


class TargetNotFoundError(DetectionFailure):
    """The configured class never showed up on the schedule"""


class PersistenceError(ClassWatchError):
    """State file could not be written"""


class NotificationError(ClassWatchError):
    """Notification service rejected or failed to deliver a message"""
