"""
Alert Policy - Decides whether an observed status should notify
"""

import logging
from enum import Enum
from typing import Union

from ..utils.status import AVAILABLE

logger = logging.getLogger(__name__)


class AlertMode(Enum):
    """Alert mode types"""
    ALWAYS = "always"        # Notify on every cycle
    NEVER = "never"          # Never notify
    TEST = "test"            # Notify on every cycle, for checking delivery
    AVAILABLE = "available"  # Notify while the class has room
    ON_CHANGE = "on-change"  # Notify when the status differs from the last run

    @classmethod
    def parse(cls, value: Union[str, "AlertMode", None]) -> "AlertMode":
        """Parse a configured mode, unrecognized values mean AVAILABLE"""
        if isinstance(value, cls):
            return value
        try:
            return cls((value or "").strip().lower())
        except ValueError:
            logger.warning(f"Unknown alert mode {value!r}, using '{cls.AVAILABLE.value}'")
            return cls.AVAILABLE


def should_alert(mode: Union[str, AlertMode], current_status: str, previous_status: str) -> bool:
    """
    Decide whether to notify

    Args:
        mode: Configured alert mode (enum or raw string)
        current_status: Canonical status observed this cycle
        previous_status: Canonical status persisted by the last cycle

    Returns:
        True if a notification should be sent
    """
    mode = AlertMode.parse(mode)

    if mode is AlertMode.NEVER:
        return False
    if mode in (AlertMode.ALWAYS, AlertMode.TEST):
        return True
    if mode is AlertMode.ON_CHANGE:
        return current_status != previous_status
    return current_status == AVAILABLE
