"""Payment intent workflow tests."""

import asyncio

import pytest

from conftest import summarize
from tapflow.contracts import ErrorInfo, LogResult, PaymentIntent, PaymentIntentStatus
from tapflow.errors import CancellationError, ErrorCode, SDKOperationError, ValidationError
from tapflow.workflows import PaymentIntentWorkflow, WorkflowOutcome, WorkflowState


def _workflow(terminal, presenter, **kwargs) -> PaymentIntentWorkflow:
    kwargs.setdefault("amount", 1500)
    kwargs.setdefault("currency", "usd")
    return PaymentIntentWorkflow(terminal, presenter, **kwargs)


@pytest.mark.asyncio
async def test_successful_payment_logs_every_step(terminal, presenter):
    workflow = _workflow(terminal, presenter)

    outcome = await workflow.run()

    assert outcome == WorkflowOutcome.SUCCEEDED
    assert workflow.state == WorkflowState.DONE
    assert summarize(workflow.events) == [
        ("createPaymentIntent", "succeeded"),
        ("collectPaymentMethod", "succeeded"),
        ("confirmPaymentIntent", "succeeded"),
    ]
    confirmed = workflow.events[2].object
    assert isinstance(confirmed, PaymentIntent)
    assert confirmed.status == PaymentIntentStatus.SUCCEEDED
    assert terminal.calls == [
        "create_payment_intent",
        "collect_payment_method",
        "confirm_payment_intent",
    ]
    assert len(presenter.completions) == 1
    assert summarize(presenter.completions[0]) == summarize(workflow.events)


@pytest.mark.asyncio
async def test_create_failure_ends_workflow(terminal, presenter):
    terminal.fail_next(
        "create_payment_intent",
        SDKOperationError("Not connected to a reader.", code=ErrorCode.NOT_CONNECTED),
    )
    workflow = _workflow(terminal, presenter)

    outcome = await workflow.run()

    assert outcome == WorkflowOutcome.FAILED
    assert summarize(workflow.events) == [("createPaymentIntent", "errored")]
    error = workflow.events[0].object
    assert isinstance(error, ErrorInfo)
    assert error.code == "not_connected"
    assert terminal.calls == ["create_payment_intent"]
    assert len(presenter.completions) == 1


@pytest.mark.asyncio
async def test_collect_failure_skips_confirm_and_cancel(terminal, presenter):
    terminal.fail_next(
        "collect_payment_method",
        SDKOperationError("Card read timed out.", code=ErrorCode.TIMEOUT),
    )
    workflow = _workflow(terminal, presenter)

    outcome = await workflow.run()

    assert outcome == WorkflowOutcome.FAILED
    assert summarize(workflow.events) == [
        ("createPaymentIntent", "succeeded"),
        ("collectPaymentMethod", "errored"),
    ]
    assert "confirm_payment_intent" not in terminal.calls
    assert "cancel_payment_intent" not in terminal.calls


@pytest.mark.asyncio
async def test_collect_cancellation_cancels_original_intent(terminal, presenter):
    terminal.fail_next("collect_payment_method", CancellationError())
    workflow = _workflow(terminal, presenter)

    outcome = await workflow.run()

    assert outcome == WorkflowOutcome.CANCELED
    assert summarize(workflow.events) == [
        ("createPaymentIntent", "succeeded"),
        ("collectPaymentMethod", "errored"),
        ("cancelPaymentIntent", "succeeded"),
    ]
    created = workflow.events[0].object
    canceled = workflow.events[2].object
    assert canceled.stripe_id == created.stripe_id
    assert canceled.status == PaymentIntentStatus.CANCELED
    assert workflow.is_done


@pytest.mark.asyncio
async def test_cancel_failure_is_logged_not_raised(terminal, presenter):
    terminal.fail_next("collect_payment_method", CancellationError())
    terminal.fail_next(
        "cancel_payment_intent", SDKOperationError("Network unavailable.", code=ErrorCode.NETWORK)
    )
    workflow = _workflow(terminal, presenter)

    outcome = await workflow.run()

    assert outcome == WorkflowOutcome.CANCELED
    assert summarize(workflow.events)[-1] == ("cancelPaymentIntent", "errored")
    assert len(presenter.completions) == 1


@pytest.mark.asyncio
async def test_confirm_error_is_recorded(terminal, presenter):
    terminal.fail_next(
        "confirm_payment_intent", SDKOperationError("Card declined.", code=ErrorCode.DECLINED)
    )
    workflow = _workflow(terminal, presenter)

    outcome = await workflow.run()

    assert outcome == WorkflowOutcome.FAILED
    assert summarize(workflow.events)[-1] == ("confirmPaymentIntent", "errored")
    assert workflow.events[2].object.code == "declined"


@pytest.mark.asyncio
async def test_confirm_with_unfinished_status_is_errored(terminal, presenter):
    terminal.set_next_confirm_status(PaymentIntentStatus.REQUIRES_CAPTURE)
    workflow = _workflow(terminal, presenter)

    outcome = await workflow.run()

    assert outcome == WorkflowOutcome.FAILED
    confirm_event = workflow.events[2]
    assert confirm_event.result == LogResult.ERRORED
    assert isinstance(confirm_event.object, PaymentIntent)
    assert confirm_event.object.status == PaymentIntentStatus.REQUIRES_CAPTURE


@pytest.mark.asyncio
async def test_user_cancel_during_collect(presenter):
    from tapflow.terminal import SimulatedTerminal

    terminal = SimulatedTerminal(collect_delay=5)
    workflow = _workflow(terminal, presenter)

    task = asyncio.create_task(workflow.run())
    await asyncio.sleep(0.05)
    assert workflow.state == WorkflowState.COLLECTING
    assert workflow.events[1].result == LogResult.PENDING

    assert workflow.cancel() is True
    assert workflow.cancel() is False
    outcome = await task

    assert outcome == WorkflowOutcome.CANCELED
    assert summarize(workflow.events) == [
        ("createPaymentIntent", "succeeded"),
        ("collectPaymentMethod", "errored"),
        ("cancelPaymentIntent", "succeeded"),
    ]
    assert workflow.events[1].object.code == "canceled"
    assert len(presenter.completions) == 1


@pytest.mark.asyncio
async def test_cancel_after_done_has_no_effect(terminal, presenter):
    workflow = _workflow(terminal, presenter)
    await workflow.run()
    before = summarize(workflow.events)

    assert workflow.cancel() is False

    assert summarize(workflow.events) == before
    assert len(presenter.completions) == 1
    assert workflow.outcome == WorkflowOutcome.SUCCEEDED


@pytest.mark.asyncio
async def test_invalid_parameters_alert_without_logging(terminal, presenter):
    workflow = _workflow(terminal, presenter, amount=0)

    outcome = await workflow.run()

    assert outcome == WorkflowOutcome.FAILED
    assert len(workflow.events) == 0
    assert terminal.calls == []
    assert len(presenter.alerts) == 1
    assert isinstance(presenter.alerts[0], ValidationError)
    assert presenter.completions == []


@pytest.mark.asyncio
async def test_workflow_runs_only_once(terminal, presenter):
    workflow = _workflow(terminal, presenter)
    await workflow.run()

    with pytest.raises(RuntimeError):
        await workflow.run()


@pytest.mark.asyncio
async def test_no_event_left_pending_after_any_outcome(presenter):
    from tapflow.terminal import SimulatedTerminal

    failures = [
        ("create_payment_intent", SDKOperationError("boom")),
        ("collect_payment_method", SDKOperationError("boom")),
        ("collect_payment_method", CancellationError()),
        ("confirm_payment_intent", SDKOperationError("boom")),
        (None, None),
    ]
    for operation, error in failures:
        terminal = SimulatedTerminal()
        if operation:
            terminal.fail_next(operation, error)
        workflow = _workflow(terminal, presenter)
        await workflow.run()
        assert workflow.events.pending() == []
        assert len(workflow.events) == len(terminal.calls)


@pytest.mark.asyncio
async def test_unexpected_exception_finishes_workflow(terminal, presenter):
    async def explode(intent):
        raise KeyError("reader")

    workflow = _workflow(terminal, presenter)
    workflow.collect_payment_method = explode

    with pytest.raises(KeyError):
        await workflow.run()

    assert workflow.is_done
    assert workflow.outcome == WorkflowOutcome.FAILED
    assert summarize(workflow.events)[-1] == ("collectPaymentMethod", "errored")
    assert workflow.events[1].object.error_type == "KeyError"
