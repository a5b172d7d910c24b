"""Command line interface for running tapflow workflows."""

from __future__ import annotations

import asyncio
import logging
from typing import Optional

import typer

from tapflow import (
    ConsolePresenter,
    OfflineForwardingCoordinator,
    PaymentIntentWorkflow,
    SetupIntentWorkflow,
    get_terminal,
    load_config,
)
from tapflow.errors import ErrorCode, ForwardingError
from tapflow.terminal import SimulatedTerminal
from tapflow.terminal.simulated import FORWARD
from tapflow.workflows import IntentWorkflow, WorkflowOutcome

app = typer.Typer(help="CLI for tapflow card-reader workflows")


@app.callback()
def main(
    ctx: typer.Context,
    config_path: Optional[str] = typer.Option(
        None, "--config", help="Path to a tapflow YAML config file"
    ),
) -> None:
    """tapflow CLI entry point."""
    config = load_config(config_path)
    ctx.obj = config
    logging.basicConfig(
        level=config.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def _finish(workflow: IntentWorkflow, outcome: WorkflowOutcome, as_json: bool) -> None:
    if as_json:
        typer.echo(workflow.events.to_json())
    color = typer.colors.GREEN if outcome == WorkflowOutcome.SUCCEEDED else typer.colors.RED
    typer.secho(f"Workflow {outcome.value}", fg=color)
    if outcome != WorkflowOutcome.SUCCEEDED:
        raise typer.Exit(code=1)


async def _run_with_cancel(workflow: IntentWorkflow, cancel_after: Optional[float]) -> WorkflowOutcome:
    run = asyncio.ensure_future(workflow.run())
    if cancel_after is not None:
        await asyncio.sleep(cancel_after)
        workflow.cancel()
    return await run


@app.command("payment")
def payment(
    ctx: typer.Context,
    amount: Optional[int] = typer.Option(None, help="Amount in the smallest currency unit"),
    currency: Optional[str] = typer.Option(None, help="Three-letter ISO currency code"),
    capture_method: Optional[str] = typer.Option(None, help="automatic or manual"),
    cancel_after: Optional[float] = typer.Option(
        None, help="Cancel collection after this many seconds"
    ),
    as_json: bool = typer.Option(False, "--json", help="Print the event log as JSON"),
) -> None:
    """
    Collect a payment: create, collect and confirm a payment intent.

    Example:
        tapflow payment --amount 1500 --currency eur
    """
    config = ctx.obj
    terminal = get_terminal(config=config)
    presenter = ConsolePresenter(show_events=not as_json)
    OfflineForwardingCoordinator(terminal, presenter).attach()
    workflow = PaymentIntentWorkflow(
        terminal,
        presenter,
        amount=amount if amount is not None else config.workflow.amount,
        currency=currency or config.workflow.currency,
        capture_method=capture_method or config.workflow.capture_method,
    )
    outcome = asyncio.run(_run_with_cancel(workflow, cancel_after))
    _finish(workflow, outcome, as_json)


@app.command("setup")
def setup(
    ctx: typer.Context,
    customer: Optional[str] = typer.Option(None, help="Customer to attach the card to"),
    consent: Optional[bool] = typer.Option(
        None, "--consent/--no-consent", help="Whether customer consent was collected"
    ),
    cancel_after: Optional[float] = typer.Option(
        None, help="Cancel collection after this many seconds"
    ),
    as_json: bool = typer.Option(False, "--json", help="Print the event log as JSON"),
) -> None:
    """Save a card for later use with a setup intent."""
    config = ctx.obj
    terminal = get_terminal(config=config)
    presenter = ConsolePresenter(show_events=not as_json)
    workflow = SetupIntentWorkflow(
        terminal,
        presenter,
        customer=customer,
        customer_consent_collected=(
            consent if consent is not None else config.workflow.customer_consent_collected
        ),
    )
    outcome = asyncio.run(_run_with_cancel(workflow, cancel_after))
    _finish(workflow, outcome, as_json)


@app.command("readers")
def readers(ctx: typer.Context) -> None:
    """List readers reported by the configured terminal."""
    terminal = get_terminal(config=ctx.obj)
    found = asyncio.run(terminal.discover_readers())
    if not found:
        typer.echo("No readers found")
        return
    for reader in found:
        typer.echo(f"{reader.serial_number}\t{reader.device_type}\t{reader.label or ''}")


@app.command("offline")
def offline(
    ctx: typer.Context,
    payments: int = typer.Option(2, min=1, help="Payments to collect while offline"),
    failures: int = typer.Option(0, min=0, help="Payments whose forwarding fails"),
    amount: Optional[int] = typer.Option(None, help="Amount of each payment"),
) -> None:
    """
    Collect payments while offline, then reconnect and forward them.

    Only supported by the simulated terminal.
    """
    config = ctx.obj
    terminal = get_terminal(config=config)
    if not isinstance(terminal, SimulatedTerminal):
        typer.secho("Offline demo requires the simulated terminal", fg=typer.colors.RED)
        raise typer.Exit(code=1)

    presenter = ConsolePresenter(show_events=False)
    OfflineForwardingCoordinator(terminal, presenter).attach()

    async def _demo() -> None:
        terminal.go_offline()
        for _ in range(payments):
            await PaymentIntentWorkflow(
                terminal,
                presenter,
                amount=amount if amount is not None else config.workflow.amount,
                currency=config.workflow.currency,
            ).run()
        for _ in range(min(failures, payments)):
            terminal.fail_next(
                FORWARD, ForwardingError("The card was declined.", code=ErrorCode.DECLINED)
            )
        await terminal.go_online()

    asyncio.run(_demo())


if __name__ == "__main__":
    app()
