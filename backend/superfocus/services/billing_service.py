"""
Stripe billing: checkout and customer portal sessions, and the webhook that
keeps `profiles.subscription_status` in step with Stripe.
"""
import json
import logging
from datetime import datetime, timezone
from typing import Any, Dict, Optional

import stripe

from superfocus.core.auth import AuthenticatedUser
from superfocus.core.config import (
    get_app_url,
    get_stripe_price_id,
    get_stripe_secret_key,
    get_stripe_webhook_secret,
)
from superfocus.core.errors import BadRequestError, NotFoundError, UpstreamError
from superfocus.models.account import CheckoutSessionResponse, PortalSessionResponse
from .profile_service import ProfileService

logger = logging.getLogger("superfocus.services.billing")

SUBSCRIPTION_STATUS_MAP = {
    "active": "active",
    "trialing": "trialing",
    "past_due": "past_due",
    "canceled": "canceled",
    "unpaid": "canceled",
}


def map_subscription_status(stripe_status: Optional[str]) -> str:
    """Map a Stripe subscription status onto the profile's status; anything unknown is 'free'."""
    return SUBSCRIPTION_STATUS_MAP.get(stripe_status or "", "free")


def _require_secret_key() -> str:
    api_key = get_stripe_secret_key()
    if not api_key:
        raise UpstreamError("Billing is not configured")
    return api_key


def _timestamp_to_iso(value: Optional[int]) -> Optional[str]:
    if not value:
        return None
    return datetime.fromtimestamp(value, tz=timezone.utc).isoformat()


def create_checkout_session(user: AuthenticatedUser) -> CheckoutSessionResponse:
    api_key = _require_secret_key()
    price_id = get_stripe_price_id()
    if not price_id:
        raise UpstreamError("Billing is not configured")
    if not user.email:
        raise BadRequestError("User email not found")

    app_url = get_app_url()
    metadata = {"supabase_user_id": user.id, "user_email": user.email}
    try:
        session = stripe.checkout.Session.create(
            api_key=api_key,
            mode="subscription",
            customer_email=user.email,
            line_items=[{"price": price_id, "quantity": 1}],
            success_url=f"{app_url}/dashboard?success=true",
            cancel_url=f"{app_url}/pricing?canceled=true",
            billing_address_collection="required",
            automatic_tax={"enabled": True},
            client_reference_id=user.id,
            metadata=metadata,
            subscription_data={"metadata": metadata},
        )
    except stripe.StripeError as e:
        logger.error(f"[Billing] ❌ Error creating checkout session for {user.id}: {e}")
        raise UpstreamError("Failed to create checkout session") from e

    logger.info(f"[Billing] 💳 Checkout session {session.id} created for {user.id}")
    return CheckoutSessionResponse(session_id=session.id, url=session.url)


def create_portal_session(user: AuthenticatedUser, profiles: Optional[ProfileService] = None) -> PortalSessionResponse:
    api_key = _require_secret_key()
    profiles = profiles or ProfileService()

    profile = profiles.get_profile(user.id, "email, subscription_id")
    if not profile or not profile.get("email"):
        raise NotFoundError("Profile not found")

    try:
        customers = stripe.Customer.list(api_key=api_key, email=profile["email"], limit=1)
        if not customers.data:
            raise NotFoundError("No Stripe customer found. Please subscribe first.")
        portal_session = stripe.billing_portal.Session.create(
            api_key=api_key,
            customer=customers.data[0].id,
            return_url=f"{get_app_url()}/account",
        )
    except stripe.StripeError as e:
        logger.error(f"[Billing] ❌ Error creating portal session for {user.id}: {e}")
        raise UpstreamError("Failed to create portal session") from e

    return PortalSessionResponse(url=portal_session.url)


def _customer_email(customer_id: Optional[str], api_key: str) -> Optional[str]:
    if not customer_id:
        return None
    try:
        customer = stripe.Customer.retrieve(customer_id, api_key=api_key)
    except stripe.StripeError as e:
        logger.error(f"[Billing] ❌ Could not retrieve customer {customer_id}: {e}")
        raise UpstreamError("Failed to load Stripe customer") from e
    return getattr(customer, "email", None)


def _subscription_update(obj: Dict[str, Any], event_type: str, api_key: str):
    """Return (customer email, profile fields) for a webhook event object."""
    if event_type == "checkout.session.completed":
        email = obj.get("customer_email") or _customer_email(obj.get("customer"), api_key)
        return email, {
            "subscription_status": "active",
            "subscription_id": obj.get("subscription"),
            "subscription_expires_at": None,
        }

    email = _customer_email(obj.get("customer"), api_key)
    if event_type == "customer.subscription.deleted":
        return email, {
            "subscription_status": "canceled",
            "subscription_expires_at": datetime.now(timezone.utc).isoformat(),
        }
    if event_type == "invoice.payment_failed":
        return email, {"subscription_status": "past_due"}

    return email, {
        "subscription_status": map_subscription_status(obj.get("status")),
        "subscription_id": obj.get("id"),
        "subscription_expires_at": _timestamp_to_iso(obj.get("current_period_end")),
    }


HANDLED_EVENTS = {
    "checkout.session.completed",
    "customer.subscription.created",
    "customer.subscription.updated",
    "customer.subscription.deleted",
    "invoice.payment_failed",
}


def handle_webhook(payload: bytes, signature: Optional[str], profiles: Optional[ProfileService] = None) -> Dict[str, Any]:
    """
    Verify a Stripe webhook delivery and apply it to the matching profile.

    Unknown event types are acknowledged and ignored. A delivery whose customer
    has no email is acknowledged too, since retrying it cannot succeed.
    """
    if not signature:
        raise BadRequestError("No signature")

    secret = get_stripe_webhook_secret()
    api_key = _require_secret_key()
    if not secret:
        raise UpstreamError("Billing is not configured")

    try:
        stripe.WebhookSignature.verify_header(payload.decode("utf-8"), signature, secret)
        event = json.loads(payload)
    except (stripe.SignatureVerificationError, ValueError) as e:
        logger.warning(f"[Billing] ⚠️ Webhook signature verification failed: {e}")
        raise BadRequestError("Invalid signature") from e

    event_type = event.get("type")
    logger.info(f"[Billing] 🔔 Webhook received: {event_type}")
    if event_type not in HANDLED_EVENTS:
        return {"received": True}

    email, fields = _subscription_update(event.get("data", {}).get("object", {}), event_type, api_key)
    if not email:
        logger.error(f"[Billing] ❌ No customer email found for {event_type}")
        return {"received": True}

    (profiles or ProfileService()).update_subscription_by_email(email, fields)
    logger.info(f"[Billing] ✅ {email} -> {fields['subscription_status']}")
    return {"received": True}
