"""
End-to-end cycle tests: fake page -> extractor -> policy -> notifier -> state file.
"""

import json
import tempfile
import unittest
from pathlib import Path
from unittest import mock

from classwatch.errors import NotificationError, PersistenceError, TargetNotFoundError
from classwatch.handlers.check_runner import CheckRunner
from classwatch.utils.state_store import PersistedState, StateStore
from tests.fakes import FakeNotifier
from tests.helpers import CLASS_NAME, class_card, make_config, schedule_page


class TestCheckRunner(unittest.IsolatedAsyncioTestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.state_path = Path(self._tmp.name) / "state.json"

    def tearDown(self) -> None:
        self._tmp.cleanup()

    def _runner(self, mode: str, notifier: FakeNotifier, **overrides) -> CheckRunner:
        config = make_config(alert_mode=mode, state_file=str(self.state_path), **overrides)
        return CheckRunner(config, notifier)

    def _saved(self) -> dict:
        return json.loads(self.state_path.read_text(encoding="utf-8"))

    async def test_full_class_in_available_mode_is_silent(self) -> None:
        StateStore(self.state_path).write(PersistedState(last_status="full"))
        notifier = FakeNotifier()

        result = await self._runner("available", notifier).run_cycle(schedule_page(class_card(full_marker=True)))

        self.assertEqual(result.record.status, "full")
        self.assertEqual(result.record.raw_status, "Full")
        self.assertFalse(result.notified)
        self.assertEqual(notifier.sent, [])
        self.assertEqual(self._saved()["lastStatus"], "full")
        self.assertIn("lastCheckedAt", self._saved())

    async def test_change_from_full_to_available_notifies_once(self) -> None:
        StateStore(self.state_path).write(PersistedState(last_status="full"))
        notifier = FakeNotifier()
        runner = self._runner("on-change", notifier, instructor="Ms. Rose")

        result = await runner.run_cycle(schedule_page(class_card()))

        self.assertTrue(result.notified)
        self.assertEqual(result.previous_status, "full")
        self.assertEqual(len(notifier.sent), 1)
        message, title = notifier.sent[0]
        self.assertIn(f"{CLASS_NAME} (Ms. Rose)", message)
        self.assertIn("Available", message)
        self.assertEqual(title, "Class Availability")
        self.assertEqual(self._saved()["lastStatus"], "available")

    async def test_unchanged_status_in_on_change_mode_is_silent(self) -> None:
        StateStore(self.state_path).write(PersistedState(last_status="available"))
        notifier = FakeNotifier()

        result = await self._runner("on-change", notifier).run_cycle(schedule_page(class_card()))

        self.assertFalse(result.notified)
        self.assertEqual(notifier.sent, [])

    async def test_first_run_compares_against_unknown(self) -> None:
        notifier = FakeNotifier()

        result = await self._runner("on-change", notifier).run_cycle(schedule_page(class_card(full_marker=True)))

        self.assertEqual(result.previous_status, "unknown")
        self.assertTrue(result.notified)

    async def test_detection_failure_leaves_state_untouched(self) -> None:
        StateStore(self.state_path).write(PersistedState(last_status="full"))
        before = self.state_path.read_text(encoding="utf-8")
        notifier = FakeNotifier()

        with self.assertRaises(TargetNotFoundError):
            await self._runner("always", notifier).run_cycle(schedule_page(title=None))

        self.assertEqual(notifier.sent, [])
        self.assertEqual(self.state_path.read_text(encoding="utf-8"), before)

    async def test_notification_failure_leaves_state_untouched(self) -> None:
        notifier = FakeNotifier(error=NotificationError("Pushover error: 500"))

        with self.assertRaises(NotificationError):
            await self._runner("always", notifier).run_cycle(schedule_page(class_card()))

        self.assertFalse(self.state_path.exists())

    async def test_state_write_failure_is_reported_after_notifying(self) -> None:
        notifier = FakeNotifier()
        runner = self._runner("always", notifier)

        with mock.patch.object(runner.state_store, "write", side_effect=PersistenceError("disk full")):
            result = await runner.run_cycle(schedule_page(class_card()))

        self.assertTrue(result.notified)
        self.assertFalse(result.state_saved)
        self.assertEqual(len(notifier.sent), 1)


if __name__ == "__main__":
    unittest.main()
