"""Collect a payment on the simulated terminal and print the event log."""

import asyncio

from tapflow import ConsolePresenter, PaymentIntentWorkflow, get_terminal


async def main():
    terminal = get_terminal("simulated")
    presenter = ConsolePresenter()

    workflow = PaymentIntentWorkflow(terminal, presenter, amount=1500, currency="usd")
    outcome = await workflow.run()

    print(f"Outcome: {outcome.value}")
    print(f"Final intent: {workflow.intent}")


if __name__ == "__main__":
    asyncio.run(main())
