"""Cancel a payment while the reader is waiting for a card."""

import asyncio

from tapflow import ConsolePresenter, PaymentIntentWorkflow, SimulatedTerminal


async def main():
    terminal = SimulatedTerminal(collect_delay=10)
    workflow = PaymentIntentWorkflow(terminal, ConsolePresenter(), amount=800, currency="eur")

    run = asyncio.create_task(workflow.run())
    await asyncio.sleep(0.5)
    print(f"Workflow state before cancel: {workflow.state.value}")
    workflow.cancel()

    outcome = await run
    print(f"Outcome: {outcome.value}")


if __name__ == "__main__":
    asyncio.run(main())
