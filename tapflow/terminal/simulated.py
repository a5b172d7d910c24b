"""Simulated terminal for demos and tests."""

from __future__ import annotations

import asyncio
import itertools
import logging
from collections import defaultdict, deque
from typing import Deque, Dict, List, Optional, Union

from ..contracts import (
    NetworkStatus,
    OfflineDetails,
    OfflineStatus,
    PaymentIntent,
    PaymentIntentParameters,
    PaymentIntentStatus,
    Reader,
    SetupIntent,
    SetupIntentParameters,
    SetupIntentStatus,
)
from ..errors import ErrorCode, ForwardingError, SDKOperationError
from .base import BaseTerminal

logger = logging.getLogger(__name__)

FORWARD = "forward"


class SimulatedTerminal(BaseTerminal):
    """In-process stand-in for the card-reader SDK.

    Every operation succeeds unless a failure has been scripted for it with
    :meth:`fail_next`. While offline, confirmed payments are queued and later
    forwarded through the offline delegate by :meth:`go_online`.
    """

    def __init__(
        self,
        collect_delay: float = 0.0,
        start_offline: bool = False,
        location_id: Optional[str] = None,
    ) -> None:
        super().__init__()
        self.collect_delay = collect_delay
        self.location_id = location_id
        self.calls: List[str] = []
        self._network_status = NetworkStatus.OFFLINE if start_offline else NetworkStatus.ONLINE
        self._offline_queue: Deque[PaymentIntent] = deque()
        self._failures: Dict[str, Deque[SDKOperationError]] = defaultdict(deque)
        self._confirm_statuses: Deque[Union[PaymentIntentStatus, SetupIntentStatus]] = deque()
        self._ids = itertools.count(1)

    @property
    def offline_status(self) -> OfflineStatus:
        return OfflineStatus(
            network_status=self._network_status,
            offline_payments_count=len(self._offline_queue),
        )

    # ------------------------------------------------------------------
    # scripting helpers
    def fail_next(self, operation: str, error: SDKOperationError) -> None:
        """Make the next call to ``operation`` raise ``error``."""
        self._failures[operation].append(error)

    def set_next_confirm_status(
        self, status: Union[PaymentIntentStatus, SetupIntentStatus]
    ) -> None:
        """Override the status returned by the next confirm call."""
        self._confirm_statuses.append(status)

    def _begin(self, operation: str) -> None:
        self.calls.append(operation)
        if self._failures[operation]:
            error = self._failures[operation].popleft()
            logger.debug(f"Simulated {operation} failing with {error.code.value}")
            raise error

    def _next_id(self, prefix: str) -> str:
        return f"{prefix}_sim_{next(self._ids):04d}"

    # ------------------------------------------------------------------
    # readers
    async def discover_readers(self) -> List[Reader]:
        self._begin("discover_readers")
        return [
            Reader(
                serial_number=f"SIM-{index:04d}",
                label=f"Simulated reader {index}",
                location_id=self.location_id,
            )
            for index in (1, 2)
        ]

    async def connect_reader(self, reader: Reader) -> Reader:
        self._begin("connect_reader")
        return await super().connect_reader(reader)

    # ------------------------------------------------------------------
    # payment intents
    async def create_payment_intent(self, params: PaymentIntentParameters) -> PaymentIntent:
        self._begin("create_payment_intent")
        stripe_id = None if self._is_offline else self._next_id("pi")
        return PaymentIntent(
            stripe_id=stripe_id,
            amount=params.amount,
            currency=params.currency,
            capture_method=params.capture_method,
            metadata=dict(params.metadata),
        )

    async def collect_payment_method(self, intent: PaymentIntent) -> PaymentIntent:
        self._begin("collect_payment_method")
        await self._wait_for_card()
        return intent.model_copy(update={"status": PaymentIntentStatus.REQUIRES_CONFIRMATION})

    async def confirm_payment_intent(self, intent: PaymentIntent) -> PaymentIntent:
        self._begin("confirm_payment_intent")
        if self._confirm_statuses:
            status = self._confirm_statuses.popleft()
        elif intent.capture_method == "manual":
            status = PaymentIntentStatus.REQUIRES_CAPTURE
        else:
            status = PaymentIntentStatus.SUCCEEDED

        if not self._is_offline:
            return intent.model_copy(update={"status": status})

        stored = intent.model_copy(
            update={
                "status": status,
                "offline_details": OfflineDetails(stripe_id=self._next_id("pi_offline")),
            }
        )
        self._offline_queue.append(stored)
        logger.info(f"Stored offline payment {stored.display_id}")
        self._notify_status_changed()
        return stored

    async def cancel_payment_intent(self, intent: PaymentIntent) -> PaymentIntent:
        self._begin("cancel_payment_intent")
        return intent.model_copy(update={"status": PaymentIntentStatus.CANCELED})

    # ------------------------------------------------------------------
    # setup intents
    async def create_setup_intent(self, params: SetupIntentParameters) -> SetupIntent:
        self._begin("create_setup_intent")
        return SetupIntent(
            stripe_id=self._next_id("seti"),
            customer=params.customer,
            usage=params.usage,
            metadata=dict(params.metadata),
        )

    async def collect_setup_intent_payment_method(
        self, intent: SetupIntent, customer_consent_collected: bool
    ) -> SetupIntent:
        self._begin("collect_setup_intent_payment_method")
        if not customer_consent_collected:
            raise SDKOperationError(
                "Customer consent is required to save a payment method.",
                code=ErrorCode.INVALID_REQUEST,
                intent=intent,
            )
        await self._wait_for_card()
        return intent.model_copy(update={"status": SetupIntentStatus.REQUIRES_CONFIRMATION})

    async def confirm_setup_intent(self, intent: SetupIntent) -> SetupIntent:
        self._begin("confirm_setup_intent")
        status = (
            self._confirm_statuses.popleft()
            if self._confirm_statuses
            else SetupIntentStatus.SUCCEEDED
        )
        return intent.model_copy(update={"status": status})

    async def cancel_setup_intent(self, intent: SetupIntent) -> SetupIntent:
        self._begin("cancel_setup_intent")
        return intent.model_copy(update={"status": SetupIntentStatus.CANCELED})

    # ------------------------------------------------------------------
    # offline simulation
    @property
    def _is_offline(self) -> bool:
        return self._network_status == NetworkStatus.OFFLINE

    def go_offline(self) -> None:
        """Drop connectivity; subsequent payments are stored for forwarding."""
        self._network_status = NetworkStatus.OFFLINE
        logger.info("Simulated terminal is offline")
        self._notify_status_changed()

    async def go_online(self) -> None:
        """Restore connectivity and forward stored payments one at a time."""
        self._network_status = NetworkStatus.ONLINE
        logger.info(
            f"Simulated terminal is online with {len(self._offline_queue)} stored payment(s)"
        )
        self._notify_status_changed()
        while self._offline_queue:
            await asyncio.sleep(0)
            intent = self._offline_queue.popleft()
            error: Optional[ForwardingError] = None
            if self._failures[FORWARD]:
                failure = self._failures[FORWARD].popleft()
                error = (
                    failure
                    if isinstance(failure, ForwardingError)
                    else ForwardingError(failure.message, code=failure.code, intent=intent)
                )
            else:
                intent = intent.model_copy(update={"stripe_id": self._next_id("pi")})
            if self.offline_delegate is not None:
                self.offline_delegate.on_payment_intent_forwarded(self, intent, error)

    def report_forwarding_error(self, error: ForwardingError) -> None:
        """Emit a forwarding error that is not tied to a single payment."""
        if self.offline_delegate is not None:
            self.offline_delegate.on_forwarding_error(self, error)

    async def _wait_for_card(self) -> None:
        if self.collect_delay:
            await asyncio.sleep(self.collect_delay)

    def _notify_status_changed(self) -> None:
        if self.offline_delegate is not None:
            self.offline_delegate.on_offline_status_changed(self, self.offline_status)
