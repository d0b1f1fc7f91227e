"""
Check Runner - One availability check cycle
Extract status, consult the alert policy, notify, persist state
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional

from playwright.async_api import Page

from ..errors import PersistenceError
from ..resources import StatusExtractor, StatusRecord
from ..utils import CheckerConfig, PersistedState, StateStore
from .alert_policy import AlertMode, should_alert
from .notifier import DEFAULT_TITLE

logger = logging.getLogger(__name__)


@dataclass
class CycleResult:
    """What happened during one cycle"""
    record: StatusRecord
    previous_status: str
    notified: bool
    state_saved: bool


def format_message(record: StatusRecord) -> str:
    return f"{record.summary} is {record.raw_status or record.status}."


class CheckRunner:
    """
    Runs detection and alerting for one class

    State is only written after a successful detection (and notification,
    when one is due), so a failed cycle keeps the last known good status.
    """

    def __init__(
        self,
        config: CheckerConfig,
        notifier,
        state_store: Optional[StateStore] = None,
        extractor: Optional[StatusExtractor] = None
    ):
        self.config = config
        self.notifier = notifier
        self.state_store = state_store or StateStore(config.state_file)
        self.extractor = extractor or StatusExtractor(config)
        self.mode = AlertMode.parse(config.alert_mode)

    async def run_cycle(self, page: Page) -> CycleResult:
        """
        Run one check cycle against a logged-in page

        Args:
            page: Schedule page

        Returns:
            CycleResult

        Raises:
            DetectionFailure: Detection failed, nothing was sent or saved
            NotificationError: Delivery failed, state was not saved
        """
        record = await self.extractor.detect_status(page)
        logger.info(f"Status: {record.status} ({record.raw_status}) for {record.summary}")

        state = self.state_store.read()
        notified = should_alert(self.mode, record.status, state.last_status)

        if notified:
            await self.notifier.send(format_message(record), DEFAULT_TITLE)
            logger.info("Notification sent.")
        else:
            logger.info("No notification sent.")

        state_saved = True
        try:
            self.state_store.write(PersistedState(
                last_status=record.status,
                last_checked_at=datetime.now(timezone.utc)
            ))
        except PersistenceError as e:
            logger.error(f"State not saved: {e}")
            state_saved = False

        return CycleResult(
            record=record,
            previous_status=state.last_status,
            notified=notified,
            state_saved=state_saved
        )
