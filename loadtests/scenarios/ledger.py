"""Ledger domain load test scenarios.

Stateful SequentialTaskSet journeys covering the partner payout path,
wallet payments that the balance cannot cover, and cancellation refunds.
"""

from locust import HttpUser, SequentialTaskSet, between, task

from loadtests.data_generators import deposit_data, order_data, order_total, partner_data, partner_id
from loadtests.helpers.response import extract_error_detail
from loadtests.helpers.state import OrderState, PartnerState


class _PartnerJourney(SequentialTaskSet):
    """Registers a fresh partner on start so journeys never share wallets."""

    def on_start(self):
        self.partner = PartnerState(partner_id=partner_id())
        self.order = OrderState()
        payload = partner_data(self.partner.partner_id)
        self.partner.commission_rate = payload["commission_rate"]
        with self.client.post("/partners", json=payload, catch_response=True, name="POST /partners") as resp:
            if resp.status_code != 201:
                resp.failure(f"Register partner failed: {resp.status_code} - {extract_error_detail(resp)}")
                self.interrupt()

    def _place_order(self):
        payload = order_data(self.partner.partner_id)
        with self.client.post("/orders", json=payload, catch_response=True, name="POST /orders") as resp:
            if resp.status_code == 201:
                self.order = OrderState(order_id=resp.json()["order_id"], total=order_total(payload))
                self.partner.order_ids.append(self.order.order_id)
            else:
                resp.failure(f"Place order failed: {resp.status_code} - {extract_error_detail(resp)}")
                self.interrupt()

    def _deposit(self, amount):
        with self.client.post(
            f"/wallets/{self.partner.partner_id}/deposits",
            json=deposit_data(amount),
            catch_response=True,
            name="POST /wallets/{id}/deposits",
        ) as resp:
            if resp.status_code == 201:
                self.partner.balance = resp.json()["balance"]
            else:
                resp.failure(f"Deposit failed: {resp.status_code} - {extract_error_detail(resp)}")

    def _pay(self, expected=200):
        with self.client.post(
            f"/orders/{self.order.order_id}/pay-with-wallet",
            json={"partner_id": self.partner.partner_id},
            catch_response=True,
            name="POST /orders/{id}/pay-with-wallet",
        ) as resp:
            if resp.status_code == expected:
                if expected == 200:
                    self.partner.balance = resp.json()["balance"]
                    self.order.current_status = "processing"
                resp.success()
            else:
                resp.failure(f"Pay with wallet returned {resp.status_code} - {extract_error_detail(resp)}")


class PartnerPayoutJourney(_PartnerJourney):
    """Deposit -> Place -> Pay -> Ship -> Deliver -> Complete -> Payout -> Stats.

    Generates events: FundsDeposited, OrderPlaced, WalletCharged, OrderPaid,
    OrderShipped, OrderDelivered, OrderCompleted, CommissionCredited, OrderPaidOut.
    """

    @task
    def place_order(self):
        self._place_order()

    @task
    def fund_and_pay(self):
        self._deposit(self.order.total)
        self._pay()

    @task
    def ship(self):
        self.client.post(
            f"/orders/{self.order.order_id}/ship",
            json={"tracking_number": f"LT-{self.order.order_id[:8]}", "carrier": "UPS"},
            name="POST /orders/{id}/ship",
        )

    @task
    def deliver_and_complete(self):
        self.client.post(f"/orders/{self.order.order_id}/deliver", name="POST /orders/{id}/deliver")
        self.client.post(f"/orders/{self.order.order_id}/complete", name="POST /orders/{id}/complete")

    @task
    def payout(self):
        with self.client.post(
            f"/orders/{self.order.order_id}/payout",
            catch_response=True,
            name="POST /orders/{id}/payout",
        ) as resp:
            if resp.status_code == 200:
                self.order.current_status = "paid_out"
            else:
                resp.failure(f"Payout failed: {resp.status_code} - {extract_error_detail(resp)}")

    @task
    def repeated_payout_is_rejected(self):
        with self.client.post(
            f"/orders/{self.order.order_id}/payout",
            catch_response=True,
            name="POST /orders/{id}/payout (repeat)",
        ) as resp:
            if resp.status_code == 409:
                resp.success()
            else:
                resp.failure(f"Repeated payout returned {resp.status_code}, expected 409")

    @task
    def read_dashboard(self):
        self.client.get(f"/partners/{self.partner.partner_id}/stats", name="GET /partners/{id}/stats")
        self.client.get(f"/wallets/{self.partner.partner_id}/transactions", name="GET /wallets/{id}/transactions")

    @task
    def done(self):
        self.interrupt()


class InsufficientFundsJourney(_PartnerJourney):
    """Place an order with an empty wallet; the charge must be rejected with 402."""

    @task
    def place_order(self):
        self._place_order()

    @task
    def pay_without_funds(self):
        self._pay(expected=402)

    @task
    def done(self):
        self.interrupt()


class RefundJourney(_PartnerJourney):
    """Deposit -> Place -> Pay -> Cancel (refund) -> Stats."""

    @task
    def place_and_pay(self):
        self._place_order()
        self._deposit(self.order.total)
        self._pay()

    @task
    def cancel(self):
        with self.client.post(
            f"/orders/{self.order.order_id}/cancel",
            json={"reason": "Customer changed their mind"},
            catch_response=True,
            name="POST /orders/{id}/cancel",
        ) as resp:
            if resp.status_code == 200:
                self.order.current_status = "cancelled"
            else:
                resp.failure(f"Cancel failed: {resp.status_code} - {extract_error_detail(resp)}")

    @task
    def read_wallet(self):
        self.client.get(f"/wallets/{self.partner.partner_id}", name="GET /wallets/{id}")

    @task
    def done(self):
        self.interrupt()


class LedgerUser(HttpUser):
    """Partner activity against the ledger: payouts dominate, failures are rarer."""

    wait_time = between(0.5, 2.0)
    tasks = {
        PartnerPayoutJourney: 6,
        RefundJourney: 2,
        InsufficientFundsJourney: 1,
    }
