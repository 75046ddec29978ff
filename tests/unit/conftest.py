from __future__ import annotations

from typing import Any

import pytest

from tagsinput.core.config import settings
from tagsinput.domain.events import (
    INPUT_BLUR,
    INPUT_CHANGE,
    INPUT_FOCUS,
    INVALID_TAG,
    OPTION_CHANGE,
    TAG_ADDED,
    TAG_CLICKED,
    TAG_REMOVED,
)
from tagsinput.services.event_bus import EventBus

ALL_TOPICS = (
    TAG_ADDED,
    INVALID_TAG,
    TAG_REMOVED,
    TAG_CLICKED,
    INPUT_CHANGE,
    INPUT_FOCUS,
    INPUT_BLUR,
    OPTION_CHANGE,
)


# pytest's anyio plugin drives the @pytest.mark.anyio tests
@pytest.fixture(scope="session")
def anyio_backend():
    return "asyncio"


@pytest.fixture(autouse=True)
def isolate_settings():
    """Keep environment-provided settings from leaking into unit tests."""
    orig_defaults_path = settings.OPTION_DEFAULTS_PATH
    orig_log_events = settings.LOG_EVENTS

    settings.OPTION_DEFAULTS_PATH = None
    settings.LOG_EVENTS = False

    yield

    settings.OPTION_DEFAULTS_PATH = orig_defaults_path
    settings.LOG_EVENTS = orig_log_events


class EventRecorder:
    """Collects (topic, payload) pairs published on a bus."""

    def __init__(self, bus: EventBus, topics: tuple[str, ...] = ALL_TOPICS) -> None:
        self.events: list[tuple[str, Any]] = []
        for topic in topics:
            bus.on(topic, lambda payload, topic=topic: self.events.append((topic, payload)))

    def topics(self, *only: str) -> list[str]:
        return [t for t, _ in self.events if not only or t in only]

    def payloads(self, topic: str) -> list[Any]:
        return [p for t, p in self.events if t == topic]


@pytest.fixture
def recorder():
    return EventRecorder
