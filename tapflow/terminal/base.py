"""Base terminal interface wrapping the card-reader SDK."""

from __future__ import annotations

import abc
import asyncio
import logging
from typing import Awaitable, List, Optional, Protocol, TypeVar

from ..contracts import (
    OfflineStatus,
    PaymentIntent,
    PaymentIntentParameters,
    Reader,
    SetupIntent,
    SetupIntentParameters,
)
from ..errors import ForwardingError

logger = logging.getLogger(__name__)

T = TypeVar("T")


class OfflineDelegate(Protocol):
    """Receives offline status and forwarding callbacks from a terminal."""

    def on_offline_status_changed(
        self, terminal: "BaseTerminal", status: OfflineStatus
    ) -> None:
        """Network status or offline queue changed."""

    def on_payment_intent_forwarded(
        self,
        terminal: "BaseTerminal",
        intent: PaymentIntent,
        error: Optional[ForwardingError],
    ) -> None:
        """An offline payment was forwarded, successfully or not."""

    def on_forwarding_error(self, terminal: "BaseTerminal", error: ForwardingError) -> None:
        """Forwarding failed for a reason not tied to one payment."""


class Cancelable:
    """Handle for one in-flight SDK operation that can be asked to stop.

    ``cancel()`` is safe to call any number of times; once the operation has
    finished it does nothing.
    """

    def __init__(self, operation: Awaitable[T], name: str = "operation") -> None:
        self.name = name
        self._task: asyncio.Future = asyncio.ensure_future(operation)
        self._requested = False

    @property
    def completed(self) -> bool:
        return self._task.done()

    @property
    def cancel_requested(self) -> bool:
        return self._requested

    def cancel(self) -> bool:
        """Request cancellation. Returns ``True`` if the request was delivered."""
        if self._task.done() or self._requested:
            return False
        self._requested = True
        logger.info(f"Cancel requested for {self.name}")
        return self._task.cancel()

    def __await__(self):
        return self._task.__await__()


class BaseTerminal(metaclass=abc.ABCMeta):
    """Abstract facade over the card-reader SDK.

    All operations are coroutines and complete on the caller's event loop.
    Failures are raised as :class:`~tapflow.errors.SDKOperationError`.
    """

    def __init__(self) -> None:
        self.offline_delegate: Optional[OfflineDelegate] = None
        self.connected_reader: Optional[Reader] = None

    @property
    @abc.abstractmethod
    def offline_status(self) -> OfflineStatus:
        """Current network status and number of payments awaiting forwarding."""
        raise NotImplementedError

    async def discover_readers(self) -> List[Reader]:
        """Return readers available for connection (none by default)."""
        return []

    async def connect_reader(self, reader: Reader) -> Reader:
        """Connect to ``reader``."""
        self.connected_reader = reader
        return reader

    async def disconnect_reader(self) -> None:
        self.connected_reader = None

    @abc.abstractmethod
    async def create_payment_intent(self, params: PaymentIntentParameters) -> PaymentIntent:
        raise NotImplementedError

    @abc.abstractmethod
    async def collect_payment_method(self, intent: PaymentIntent) -> PaymentIntent:
        raise NotImplementedError

    @abc.abstractmethod
    async def confirm_payment_intent(self, intent: PaymentIntent) -> PaymentIntent:
        raise NotImplementedError

    @abc.abstractmethod
    async def cancel_payment_intent(self, intent: PaymentIntent) -> PaymentIntent:
        raise NotImplementedError

    @abc.abstractmethod
    async def create_setup_intent(self, params: SetupIntentParameters) -> SetupIntent:
        raise NotImplementedError

    @abc.abstractmethod
    async def collect_setup_intent_payment_method(
        self, intent: SetupIntent, customer_consent_collected: bool
    ) -> SetupIntent:
        raise NotImplementedError

    @abc.abstractmethod
    async def confirm_setup_intent(self, intent: SetupIntent) -> SetupIntent:
        raise NotImplementedError

    @abc.abstractmethod
    async def cancel_setup_intent(self, intent: SetupIntent) -> SetupIntent:
        raise NotImplementedError
