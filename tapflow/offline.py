"""Coordinator reacting to offline status and forwarding callbacks."""

from __future__ import annotations

import logging
from typing import Callable, List, Optional

from pydantic import BaseModel, Field

from .constants import MISSING_PAYMENT_ID
from .contracts import NetworkStatus, OfflineStatus, PaymentIntent
from .errors import ForwardingError
from .terminal import BaseTerminal, OfflineDelegate
from .ui import IndicatorState, Presenter

logger = logging.getLogger(__name__)

_INDICATOR_STATES = {
    NetworkStatus.UNKNOWN: IndicatorState.UNKNOWN,
    NetworkStatus.OFFLINE: IndicatorState.OFFLINE,
    NetworkStatus.ONLINE: IndicatorState.ONLINE,
}


class ForwardingCounters(BaseModel):
    """Forwarding results accumulated since the last summary."""

    successful_forward_count: int = Field(default=0, ge=0)
    failed_forward_count: int = Field(default=0, ge=0)

    @property
    def is_empty(self) -> bool:
        return self.successful_forward_count == 0 and self.failed_forward_count == 0

    def reset(self) -> None:
        self.successful_forward_count = 0
        self.failed_forward_count = 0


def _plural(count: int, noun: str) -> str:
    return f"{count} {noun}{'' if count == 1 else 's'}"


def format_forward_summary(counters: ForwardingCounters) -> str:
    """Build the combined summary shown once the offline queue drains."""
    return (
        f"Forwarded {_plural(counters.successful_forward_count, 'payment')}\n"
        f"Failed to forward {_plural(counters.failed_forward_count, 'payment')}"
    )


class OfflineForwardingCoordinator:
    """Tracks forwarding of payments collected while offline.

    One coordinator is created at startup and attached to the terminal for
    the rest of the process. Callbacks are handled locally first and then
    passed to every additional observer in registration order; an observer
    that raises is logged and skipped.
    """

    def __init__(self, terminal: BaseTerminal, presenter: Presenter) -> None:
        self.terminal = terminal
        self.presenter = presenter
        self.counters = ForwardingCounters()
        self._observers: List[OfflineDelegate] = []

    def attach(self) -> "OfflineForwardingCoordinator":
        """Register this coordinator as the terminal's offline delegate."""
        if self.terminal.offline_delegate not in (None, self):
            logger.warning(
                f"Replacing offline delegate {self.terminal.offline_delegate!r}"
            )
        self.terminal.offline_delegate = self
        return self

    def add_observer(self, observer: OfflineDelegate) -> None:
        """Add a secondary observer. Observers cannot be removed."""
        self._observers.append(observer)

    @property
    def observers(self) -> List[OfflineDelegate]:
        return list(self._observers)

    # ------------------------------------------------------------------
    # OfflineDelegate
    def on_offline_status_changed(
        self, terminal: BaseTerminal, status: OfflineStatus
    ) -> None:
        state = _INDICATOR_STATES.get(status.network_status, IndicatorState.UNKNOWN)
        logger.info(
            f"Network status {status.network_status.value}, "
            f"{status.offline_payments_count} payment(s) stored offline"
        )
        self.presenter.set_status_indicator(state)
        self._fan_out(lambda observer: observer.on_offline_status_changed(terminal, status))

    def on_payment_intent_forwarded(
        self,
        terminal: BaseTerminal,
        intent: PaymentIntent,
        error: Optional[ForwardingError],
    ) -> None:
        if error is not None:
            self.counters.failed_forward_count += 1
            payment_id = intent.display_id or MISSING_PAYMENT_ID
            logger.error(f"Failed to forward payment {payment_id}: {error}")
            self.presenter.show_toast(f"Error forwarding payment {payment_id}\n{error}")
        else:
            self.counters.successful_forward_count += 1
            logger.info(f"Forwarded payment {intent.display_id}")

        self._fan_out(
            lambda observer: observer.on_payment_intent_forwarded(terminal, intent, error)
        )

        if self.terminal.offline_status.offline_payments_count == 0:
            self.flush()

    def on_forwarding_error(self, terminal: BaseTerminal, error: ForwardingError) -> None:
        logger.error(f"Forwarding error: {error}")
        self.presenter.show_toast(f"Error forwarding: {error}")
        self._fan_out(lambda observer: observer.on_forwarding_error(terminal, error))

    # ------------------------------------------------------------------
    def flush(self) -> bool:
        """Show the forwarding summary and reset counters.

        Returns ``True`` if a summary was shown.
        """
        if self.counters.is_empty:
            return False
        summary = format_forward_summary(self.counters)
        logger.info(summary.replace("\n", "; "))
        self.presenter.show_toast(summary)
        self.counters.reset()
        return True

    def _fan_out(self, deliver: Callable[[OfflineDelegate], None]) -> None:
        for observer in list(self._observers):
            try:
                deliver(observer)
            except Exception:
                logger.exception(f"Offline observer {observer!r} failed")
