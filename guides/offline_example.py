"""Store payments while offline and forward them when the network returns."""

import asyncio

from tapflow import (
    ConsolePresenter,
    OfflineForwardingCoordinator,
    PaymentIntentWorkflow,
    SimulatedTerminal,
)
from tapflow.errors import ForwardingError
from tapflow.terminal.simulated import FORWARD


class AuditObserver:
    """Additional observer printing every forwarding callback."""

    def on_offline_status_changed(self, terminal, status):
        print(f"[audit] status {status.network_status.value}")

    def on_payment_intent_forwarded(self, terminal, intent, error):
        print(f"[audit] forwarded {intent.display_id}: {'failed' if error else 'ok'}")

    def on_forwarding_error(self, terminal, error):
        print(f"[audit] forwarding error {error}")


async def main():
    terminal = SimulatedTerminal()
    presenter = ConsolePresenter(show_events=False)
    coordinator = OfflineForwardingCoordinator(terminal, presenter).attach()
    coordinator.add_observer(AuditObserver())

    terminal.go_offline()
    for amount in (500, 1200, 300):
        await PaymentIntentWorkflow(terminal, presenter, amount=amount, currency="usd").run()

    terminal.fail_next(FORWARD, ForwardingError("The card was declined."))
    await terminal.go_online()


if __name__ == "__main__":
    asyncio.run(main())
