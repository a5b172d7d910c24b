"""Linear create, collect, confirm/cancel workflow shared by intent types."""

from __future__ import annotations

import abc
import asyncio
import logging
from enum import Enum
from typing import Awaitable, Callable, Generic, Optional, TypeVar

from ..contracts import ErrorInfo, LogEvent, LogMethod, PaymentIntent, SetupIntent
from ..errors import CancellationError, SDKOperationError, ValidationError
from ..events import EventLog
from ..terminal import BaseTerminal, Cancelable
from ..ui import Presenter

logger = logging.getLogger(__name__)

IntentT = TypeVar("IntentT", PaymentIntent, SetupIntent)
ParamsT = TypeVar("ParamsT")


class WorkflowState(str, Enum):
    IDLE = "idle"
    CREATING = "creating"
    COLLECTING = "collecting"
    CONFIRMING = "confirming"
    CANCELING = "canceling"
    DONE = "done"


class WorkflowOutcome(str, Enum):
    SUCCEEDED = "succeeded"
    FAILED = "failed"
    CANCELED = "canceled"


class IntentWorkflow(Generic[IntentT, ParamsT], metaclass=abc.ABCMeta):
    """Drives one transaction attempt through the terminal.

    Every step appends a ``pending`` event to :attr:`events` before the SDK
    call is issued and replaces it with the finalized event when the call
    returns. SDK failures end the workflow and are recorded in the log rather
    than raised.
    """

    create_method: LogMethod
    collect_method: LogMethod
    confirm_method: LogMethod
    cancel_method: LogMethod
    succeeded_status: Enum

    def __init__(
        self,
        terminal: BaseTerminal,
        presenter: Presenter,
        events: Optional[EventLog] = None,
    ) -> None:
        self.terminal = terminal
        self.presenter = presenter
        self.events = events if events is not None else EventLog()
        self.state = WorkflowState.IDLE
        self.outcome: Optional[WorkflowOutcome] = None
        self.intent: Optional[IntentT] = None
        self._cancelable: Optional[Cancelable] = None

    # ------------------------------------------------------------------
    # hooks implemented per intent type
    @abc.abstractmethod
    def build_parameters(self) -> ParamsT:
        """Return validated create parameters or raise ``ValidationError``."""

    @abc.abstractmethod
    async def create_intent(self, params: ParamsT) -> IntentT:
        ...

    @abc.abstractmethod
    async def collect_payment_method(self, intent: IntentT) -> IntentT:
        ...

    @abc.abstractmethod
    async def confirm_intent(self, intent: IntentT) -> IntentT:
        ...

    @abc.abstractmethod
    async def cancel_intent(self, intent: IntentT) -> IntentT:
        ...

    # ------------------------------------------------------------------
    @property
    def is_done(self) -> bool:
        return self.state == WorkflowState.DONE

    async def run(self) -> WorkflowOutcome:
        """Run the workflow to completion and return its outcome."""
        if self.state != WorkflowState.IDLE:
            raise RuntimeError(f"{type(self).__name__} has already been run")

        try:
            params = self.build_parameters()
        except ValidationError as error:
            logger.warning(f"{type(self).__name__} parameters rejected: {error}")
            self.state = WorkflowState.DONE
            self.outcome = WorkflowOutcome.FAILED
            self.presenter.present_alert(error)
            return self.outcome

        try:
            outcome = await self._run_steps(params)
        except asyncio.CancelledError:
            self._complete(WorkflowOutcome.CANCELED)
            raise
        except Exception:
            self._complete(WorkflowOutcome.FAILED)
            raise
        self._complete(outcome)
        return outcome

    def cancel(self) -> bool:
        """Ask the in-flight collect to stop.

        Returns ``True`` if a cancel request reached an operation. Calling
        this outside of collection, or more than once, has no effect.
        """
        if self._cancelable is None or self.is_done:
            logger.debug(f"No cancelable operation for {type(self).__name__}")
            return False
        return self._cancelable.cancel()

    # ------------------------------------------------------------------
    async def _run_steps(self, params: ParamsT) -> WorkflowOutcome:
        self.state = WorkflowState.CREATING
        try:
            created = await self._call_step(
                self.create_method, lambda: self.create_intent(params)
            )
        except SDKOperationError:
            return WorkflowOutcome.FAILED
        self.intent = created

        self.state = WorkflowState.COLLECTING
        try:
            collected = await self._call_step(
                self.collect_method, lambda: self._start_collect(created)
            )
        except SDKOperationError as error:
            if not error.is_cancellation:
                return WorkflowOutcome.FAILED
            await self._cancel(created)
            return WorkflowOutcome.CANCELED
        finally:
            self._cancelable = None
        self.intent = collected

        self.state = WorkflowState.CONFIRMING
        try:
            confirmed = await self._call_step(
                self.confirm_method,
                lambda: self.confirm_intent(collected),
                accept=lambda intent: intent.status == self.succeeded_status,
            )
        except SDKOperationError:
            return WorkflowOutcome.FAILED
        self.intent = confirmed
        if confirmed.status != self.succeeded_status:
            logger.warning(
                f"{self.confirm_method.value} returned status {confirmed.status.value}"
            )
            return WorkflowOutcome.FAILED
        return WorkflowOutcome.SUCCEEDED

    async def _cancel(self, intent: IntentT) -> None:
        self.state = WorkflowState.CANCELING
        try:
            self.intent = await self._call_step(
                self.cancel_method, lambda: self.cancel_intent(intent)
            )
        except SDKOperationError as error:
            logger.warning(f"{self.cancel_method.value} failed: {error}")

    def _start_collect(self, intent: IntentT) -> Cancelable:
        self._cancelable = Cancelable(
            self.collect_payment_method(intent), name=self.collect_method.value
        )
        return self._cancelable

    async def _call_step(
        self,
        method: LogMethod,
        operation: Callable[[], Awaitable[IntentT]],
        accept: Optional[Callable[[IntentT], bool]] = None,
    ) -> IntentT:
        """Log ``method`` as pending, run ``operation`` and finalize the event."""
        index = self.events.append(LogEvent(method=method))
        logger.info(f"{method.value} started")
        pending = self.events[index]
        awaitable = operation()
        try:
            result = await awaitable
        except SDKOperationError as error:
            self._finish(index, pending.errored(error.to_info()))
            raise
        except asyncio.CancelledError:
            if isinstance(awaitable, Cancelable) and awaitable.cancel_requested:
                error = CancellationError(intent=self.intent)
                self._finish(index, pending.errored(error.to_info()))
                raise error from None
            self._finish(
                index, pending.errored(CancellationError("Workflow was interrupted.").to_info())
            )
            raise
        except Exception as error:
            info = ErrorInfo(
                code="unexpected", message=str(error), error_type=type(error).__name__
            )
            self._finish(index, pending.errored(info))
            raise

        if accept is None or accept(result):
            self._finish(index, pending.succeeded(result))
        else:
            self._finish(index, pending.errored(result))
        return result

    def _finish(self, index: int, event: LogEvent) -> None:
        self.events.update(index, event)
        logger.info(f"{event.method.value} {event.result.value}")

    def _complete(self, outcome: WorkflowOutcome) -> None:
        if self.is_done:
            return
        self.state = WorkflowState.DONE
        self.outcome = outcome
        if self._cancelable is not None:
            self._cancelable.cancel()
            self._cancelable = None
        logger.info(f"{type(self).__name__} finished: {outcome.value}")
        self.presenter.workflow_completed(self.events.snapshot())

