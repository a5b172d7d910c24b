"""Setup intent workflow for saving a card without charging it."""

from __future__ import annotations

from typing import Optional

from ..contracts import LogMethod, SetupIntent, SetupIntentParameters, SetupIntentStatus
from ..events import EventLog
from ..params import SetupIntentParametersBuilder
from ..terminal import BaseTerminal
from ..ui import Presenter
from .base import IntentWorkflow


class SetupIntentWorkflow(IntentWorkflow[SetupIntent, SetupIntentParameters]):
    create_method = LogMethod.CREATE_SETUP_INTENT
    collect_method = LogMethod.COLLECT_SETUP_INTENT_PAYMENT_METHOD
    confirm_method = LogMethod.CONFIRM_SETUP_INTENT
    cancel_method = LogMethod.CANCEL_SETUP_INTENT
    succeeded_status = SetupIntentStatus.SUCCEEDED

    def __init__(
        self,
        terminal: BaseTerminal,
        presenter: Presenter,
        customer: Optional[str] = None,
        usage: str = "off_session",
        customer_consent_collected: bool = True,
        events: Optional[EventLog] = None,
    ) -> None:
        super().__init__(terminal, presenter, events=events)
        self.customer = customer
        self.usage = usage
        self.customer_consent_collected = customer_consent_collected

    def build_parameters(self) -> SetupIntentParameters:
        return SetupIntentParametersBuilder(self.customer, self.usage).build()

    async def create_intent(self, params: SetupIntentParameters) -> SetupIntent:
        return await self.terminal.create_setup_intent(params)

    async def collect_payment_method(self, intent: SetupIntent) -> SetupIntent:
        return await self.terminal.collect_setup_intent_payment_method(
            intent, customer_consent_collected=self.customer_consent_collected
        )

    async def confirm_intent(self, intent: SetupIntent) -> SetupIntent:
        return await self.terminal.confirm_setup_intent(intent)

    async def cancel_intent(self, intent: SetupIntent) -> SetupIntent:
        return await self.terminal.cancel_setup_intent(intent)
