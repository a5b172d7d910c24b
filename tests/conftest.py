"""Shared fixtures for tapflow tests."""

from typing import List, Sequence, Tuple

import pytest

from tapflow.contracts import LogEvent
from tapflow.terminal import SimulatedTerminal
from tapflow.ui import IndicatorState


class RecordingPresenter:
    """Presenter that remembers everything it was asked to show."""

    def __init__(self) -> None:
        self.toasts: List[str] = []
        self.indicators: List[IndicatorState] = []
        self.alerts: List[Exception] = []
        self.completions: List[Tuple[LogEvent, ...]] = []

    def show_toast(self, text: str) -> None:
        self.toasts.append(text)

    def set_status_indicator(self, state: IndicatorState) -> None:
        self.indicators.append(state)

    def present_alert(self, error: Exception) -> None:
        self.alerts.append(error)

    def workflow_completed(self, events: Sequence[LogEvent]) -> None:
        self.completions.append(tuple(events))


@pytest.fixture
def presenter() -> RecordingPresenter:
    return RecordingPresenter()


@pytest.fixture
def terminal() -> SimulatedTerminal:
    return SimulatedTerminal(location_id="tml_test")


def summarize(events) -> List[Tuple[str, str]]:
    """Return ``(method, result)`` pairs for compact assertions."""
    return [(event.method.value, event.result.value) for event in events]
