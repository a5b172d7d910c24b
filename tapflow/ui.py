"""Presentation contract used by workflows and the offline coordinator."""

from __future__ import annotations

from enum import Enum
from typing import Protocol, Sequence

import typer

from .contracts import LogEvent, LogResult


class IndicatorState(str, Enum):
    """States of the persistent network status indicator."""

    UNKNOWN = "unknown"
    OFFLINE = "offline"
    ONLINE = "online"

    @property
    def color(self) -> str:
        return {
            IndicatorState.UNKNOWN: "gray",
            IndicatorState.OFFLINE: "red",
            IndicatorState.ONLINE: "green",
        }[self]


class Presenter(Protocol):
    """What the workflow layer needs from a user interface."""

    def show_toast(self, text: str) -> None:
        """Show a transient message. Toasts may stack."""

    def set_status_indicator(self, state: IndicatorState) -> None:
        """Update the persistent network status indicator."""

    def present_alert(self, error: Exception) -> None:
        """Show a blocking alert for an error raised before any SDK call."""

    def workflow_completed(self, events: Sequence[LogEvent]) -> None:
        """A workflow reached its terminal state."""


_RESULT_COLORS = {
    LogResult.PENDING: typer.colors.YELLOW,
    LogResult.SUCCEEDED: typer.colors.GREEN,
    LogResult.ERRORED: typer.colors.RED,
}

_INDICATOR_COLORS = {
    IndicatorState.UNKNOWN: typer.colors.WHITE,
    IndicatorState.OFFLINE: typer.colors.RED,
    IndicatorState.ONLINE: typer.colors.GREEN,
}


class ConsolePresenter:
    """Render toasts, alerts and event logs to the terminal."""

    def __init__(self, show_events: bool = True) -> None:
        self.show_events = show_events
        self.indicator = IndicatorState.UNKNOWN

    def show_toast(self, text: str) -> None:
        for line in text.splitlines():
            typer.secho(f"  > {line}", fg=typer.colors.CYAN)

    def set_status_indicator(self, state: IndicatorState) -> None:
        self.indicator = state
        typer.secho(f"  [network: {state.value}]", fg=_INDICATOR_COLORS[state])

    def present_alert(self, error: Exception) -> None:
        typer.secho(f"Error: {error}", fg=typer.colors.RED, err=True)

    def workflow_completed(self, events: Sequence[LogEvent]) -> None:
        if not self.show_events:
            return
        typer.echo("Event log:")
        for event in events:
            typer.secho(f"  - {event.describe()}", fg=_RESULT_COLORS[event.result])
