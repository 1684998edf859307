# Shared fixtures for the chart engine tests.
# Qt runs on the offscreen platform so widget tests work headless; the
# engine-level tests never import Qt.

import os

import pytest

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

from widgetkit.charting import ChartEngine  # noqa: E402
from widgetkit.services import EventBus, SettingsService  # noqa: E402


@pytest.fixture
def bus():
    return EventBus()


@pytest.fixture
def settings():
    return SettingsService()


@pytest.fixture
def recorded(bus):
    """Collect every published chart event as (name, payload)."""
    events = []
    for name in ("dataPointHover", "dataPointSelect", "selectionCleared", "error"):
        bus.subscribe(name, lambda evt: events.append((evt.name, evt.payload)))
    return events


@pytest.fixture
def make_engine(bus, settings):
    def factory(**options):
        options.setdefault("animated", False)
        return ChartEngine(options, event_bus=bus, settings=settings)

    return factory

