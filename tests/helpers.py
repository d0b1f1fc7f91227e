"""
Shared builders for schedule pages and configs used across tests.
"""

from classwatch.resources.status_extractor import CONTAINER_XPATH
from classwatch.utils.config import CheckerConfig
from tests.fakes import FakeFrame, FakeLocator, FakePage

CLASS_NAME = "Level 1 Tuesdays 10:00"
ANCHOR = "text=Select tags to filter sessions"


def make_config(**overrides) -> CheckerConfig:
    values = dict(
        username="user@example.com",
        password="secret",
        class_name=CLASS_NAME,
        class_day="Tuesday",
        dry_run=True,
        detection_timeout_ms=60,
        credit_timeout_ms=10,
        popup_timeout_ms=30,
        settle_delay_ms=0,
        poll_interval_ms=5,
    )
    values.update(overrides)
    return CheckerConfig(**values)


def class_card(full_marker: bool = False, texts=None) -> FakeLocator:
    """Class title locator whose nearest container has the given contents."""
    container = FakeLocator(
        1,
        children={".session-tag-full": FakeLocator(1 if full_marker else 0)},
        texts=texts if texts is not None else [CLASS_NAME, "Tuesday 10:00 - 10:45"],
    )
    return FakeLocator(1, children={CONTAINER_XPATH: container})


def schedule_page(title: FakeLocator = None, in_frame: bool = True, **page_kwargs) -> FakePage:
    """Schedule page with the session list rendered inside an iframe (or the page itself)."""
    selectors = {ANCHOR: FakeLocator(1)}
    if title is not None:
        selectors[f"text={CLASS_NAME}"] = title

    if in_frame:
        frame = FakeFrame("https://widget.example.test/sessions", selectors)
        return FakePage(child_frames=[frame], **page_kwargs)
    return FakePage(selectors=selectors, **page_kwargs)
