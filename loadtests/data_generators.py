"""Faker-based data generators for Locust load test scenarios.

Each generator produces payloads that match the field names of the API's
Pydantic request schemas and pass the domain's validation rules.
"""

import random
import uuid

from faker import Faker

fake = Faker()

CARRIERS = ["FedEx", "UPS", "DHL", "USPS", "Amazon Logistics", "Local Courier"]


# ---------- Ledger Domain ----------


def partner_id() -> str:
    return f"partner-lt-{uuid.uuid4().hex[:10]}"


def partner_data(user_id: str) -> dict:
    """RegisterPartnerRequest payload with a realistic commission rate."""
    company = fake.company()[:200]
    return {
        "user_id": user_id,
        "store_name": f"{company} Auto Parts",
        "contact_email": f"{fake.user_name()[:20]}.{uuid.uuid4().hex[:4]}@{fake.free_email_domain()}",
        "contact_phone": fake.phone_number()[:50],
        "commission_rate": round(random.choice([0.05, 0.08, 0.1, 0.12, 0.15]), 2),
    }


def order_items(count: int | None = None) -> list[dict]:
    parts = ["Brake Pad Set", "Oil Filter", "Spark Plug", "Alternator", "Wiper Blade", "Timing Belt"]
    return [
        {
            "product_id": f"prod-{uuid.uuid4().hex[:8]}",
            "title": random.choice(parts),
            "sku": f"SKU-{random.randint(10000, 99999)}",
            "quantity": random.randint(1, 3),
            "unit_price": round(random.uniform(5.0, 250.0), 2),
        }
        for _ in range(count or random.randint(1, 4))
    ]


def order_data(user_id: str) -> dict:
    return {
        "customer_id": f"cust-lt-{uuid.uuid4().hex[:8]}",
        "partner_id": user_id,
        "items": order_items(),
    }


def order_total(payload: dict) -> float:
    return round(sum(item["quantity"] * item["unit_price"] for item in payload["items"]), 2)


def deposit_data(amount: float) -> dict:
    return {"amount": round(amount, 2), "payment_method": random.choice(["card", "bank_transfer"])}


# ---------- Tracking Domain ----------


def tracking_number() -> str:
    return f"1Z{uuid.uuid4().hex[:16].upper()}"


def tracking_data(order_id: str, user_id: str | None = None) -> dict:
    return {
        "order_id": order_id,
        "tracking_number": tracking_number(),
        "carrier": random.choice(CARRIERS),
        "shipping_method": random.choice(["standard", "express", "overnight"]),
        "partner_id": user_id,
    }


def status_update(status: str) -> dict:
    return {"status": status, "location": f"{fake.city()}, {fake.state_abbr()}"}
