import hashlib
import hmac
import json
import time

import pytest

from superfocus.core.auth import AuthenticatedUser
from superfocus.core.errors import BadRequestError, NotFoundError
from superfocus.services import billing_service

WEBHOOK_SECRET = "whsec_test_secret"


class FakeProfiles:
    def __init__(self, profile=None):
        self.profile = profile
        self.updates = []

    def get_profile(self, user_id, columns="*"):
        return self.profile

    def update_subscription_by_email(self, email, fields):
        self.updates.append((email, fields))


@pytest.fixture
def stripe_env(monkeypatch):
    monkeypatch.setenv("STRIPE_SECRET_KEY", "sk_test_123")
    monkeypatch.setenv("STRIPE_WEBHOOK_SECRET", WEBHOOK_SECRET)


def sign(payload: str, secret: str = WEBHOOK_SECRET) -> str:
    timestamp = int(time.time())
    signature = hmac.new(secret.encode(), f"{timestamp}.{payload}".encode(), hashlib.sha256).hexdigest()
    return f"t={timestamp},v1={signature}"


@pytest.mark.parametrize("stripe_status, expected", [
    ("active", "active"),
    ("trialing", "trialing"),
    ("past_due", "past_due"),
    ("canceled", "canceled"),
    ("unpaid", "canceled"),
    ("incomplete", "free"),
    (None, "free"),
])
def test_map_subscription_status(stripe_status, expected):
    assert billing_service.map_subscription_status(stripe_status) == expected


def test_checkout_completed_activates_subscription(client, stripe_env, monkeypatch):
    profiles = FakeProfiles()
    monkeypatch.setattr(billing_service, "ProfileService", lambda: profiles)
    payload = json.dumps({
        "type": "checkout.session.completed",
        "data": {"object": {"customer_email": "parent@example.com", "subscription": "sub_1"}},
    })

    response = client.post("/api/webhooks/stripe", content=payload, headers={"stripe-signature": sign(payload)})

    assert response.status_code == 200
    assert response.json() == {"received": True}
    email, fields = profiles.updates[0]
    assert email == "parent@example.com"
    assert fields == {"subscription_status": "active", "subscription_id": "sub_1", "subscription_expires_at": None}


def test_webhook_with_bad_signature_is_400(client, stripe_env):
    payload = json.dumps({"type": "checkout.session.completed", "data": {"object": {}}})

    response = client.post(
        "/api/webhooks/stripe",
        content=payload,
        headers={"stripe-signature": sign(payload, secret="whsec_wrong")},
    )

    assert response.status_code == 400
    assert response.json() == {"error": "Invalid signature"}


def test_webhook_without_signature_is_400(client, stripe_env):
    response = client.post("/api/webhooks/stripe", content="{}")

    assert response.status_code == 400
    assert response.json() == {"error": "No signature"}


def test_subscription_update_maps_status(stripe_env, monkeypatch):
    monkeypatch.setattr(billing_service, "_customer_email", lambda customer_id, api_key: "parent@example.com")
    profiles = FakeProfiles()
    payload = json.dumps({
        "type": "customer.subscription.updated",
        "data": {"object": {"id": "sub_2", "customer": "cus_1", "status": "unpaid", "current_period_end": 1700000000}},
    })

    billing_service.handle_webhook(payload.encode(), sign(payload), profiles)

    email, fields = profiles.updates[0]
    assert fields["subscription_status"] == "canceled"
    assert fields["subscription_id"] == "sub_2"
    assert fields["subscription_expires_at"].startswith("2023-11-14T22:13:20")


def test_payment_failed_marks_past_due(stripe_env, monkeypatch):
    monkeypatch.setattr(billing_service, "_customer_email", lambda customer_id, api_key: "parent@example.com")
    profiles = FakeProfiles()
    payload = json.dumps({"type": "invoice.payment_failed", "data": {"object": {"customer": "cus_1"}}})

    billing_service.handle_webhook(payload.encode(), sign(payload), profiles)

    assert profiles.updates == [("parent@example.com", {"subscription_status": "past_due"})]


def test_unhandled_event_is_acknowledged(stripe_env):
    profiles = FakeProfiles()
    payload = json.dumps({"type": "customer.created", "data": {"object": {}}})

    assert billing_service.handle_webhook(payload.encode(), sign(payload), profiles) == {"received": True}
    assert profiles.updates == []


def test_webhook_rejects_missing_signature_directly(stripe_env):
    with pytest.raises(BadRequestError):
        billing_service.handle_webhook(b"{}", None, FakeProfiles())


def test_portal_without_profile_is_404(client, stripe_env, monkeypatch):
    monkeypatch.setattr(billing_service, "ProfileService", lambda: FakeProfiles(profile=None))

    response = client.post("/api/create-portal-session")

    assert response.status_code == 404
    assert response.json() == {"error": "Profile not found"}


def test_checkout_requires_email(stripe_env, monkeypatch):
    monkeypatch.setenv("STRIPE_PRICE_ID", "price_123")

    with pytest.raises(BadRequestError):
        billing_service.create_checkout_session(AuthenticatedUser(id="user-1", email=None))


def test_checkout_without_stripe_config_is_502(client):
    response = client.post("/api/create-checkout-session")

    assert response.status_code == 502


def test_portal_not_found_is_a_not_found_error(stripe_env):
    with pytest.raises(NotFoundError):
        billing_service.create_portal_session(AuthenticatedUser(id="user-1"), FakeProfiles(profile={"email": None}))
