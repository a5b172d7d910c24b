"""Payment intent workflow: create, collect, confirm or cancel."""

from __future__ import annotations

from typing import Dict, Optional

from ..contracts import (
    LogMethod,
    PaymentIntent,
    PaymentIntentParameters,
    PaymentIntentStatus,
)
from ..events import EventLog
from ..params import PaymentIntentParametersBuilder
from ..terminal import BaseTerminal
from ..ui import Presenter
from .base import IntentWorkflow


class PaymentIntentWorkflow(IntentWorkflow[PaymentIntent, PaymentIntentParameters]):
    """Collect a single card payment on the connected reader."""

    create_method = LogMethod.CREATE_PAYMENT_INTENT
    collect_method = LogMethod.COLLECT_PAYMENT_METHOD
    confirm_method = LogMethod.CONFIRM_PAYMENT_INTENT
    cancel_method = LogMethod.CANCEL_PAYMENT_INTENT
    succeeded_status = PaymentIntentStatus.SUCCEEDED

    def __init__(
        self,
        terminal: BaseTerminal,
        presenter: Presenter,
        amount: int,
        currency: str,
        capture_method: str = "automatic",
        description: Optional[str] = None,
        metadata: Optional[Dict[str, str]] = None,
        events: Optional[EventLog] = None,
    ) -> None:
        super().__init__(terminal, presenter, events=events)
        self.amount = amount
        self.currency = currency
        self.capture_method = capture_method
        self.description = description
        self.metadata = metadata or {}

    def build_parameters(self) -> PaymentIntentParameters:
        return (
            PaymentIntentParametersBuilder(self.amount, self.currency)
            .set_capture_method(self.capture_method)
            .set_description(self.description)
            .set_metadata(self.metadata)
            .build()
        )

    async def create_intent(self, params: PaymentIntentParameters) -> PaymentIntent:
        return await self.terminal.create_payment_intent(params)

    async def collect_payment_method(self, intent: PaymentIntent) -> PaymentIntent:
        return await self.terminal.collect_payment_method(intent)

    async def confirm_intent(self, intent: PaymentIntent) -> PaymentIntent:
        return await self.terminal.confirm_payment_intent(intent)

    async def cancel_intent(self, intent: PaymentIntent) -> PaymentIntent:
        return await self.terminal.cancel_payment_intent(intent)
