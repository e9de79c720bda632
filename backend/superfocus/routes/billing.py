from fastapi import APIRouter, Depends, Request
from fastapi.concurrency import run_in_threadpool

from superfocus.core.auth import AuthenticatedUser, get_current_user
from superfocus.core.rate_limit import rate_limit_checkout
from superfocus.models.account import CheckoutSessionResponse, PortalSessionResponse
from superfocus.services import billing_service

router = APIRouter()


@router.post(
    "/create-checkout-session",
    response_model=CheckoutSessionResponse,
    dependencies=[Depends(rate_limit_checkout)],
)
def create_checkout_session(user: AuthenticatedUser = Depends(get_current_user)):
    """
    Start a Stripe Checkout subscription for the signed-in user.
    """
    return billing_service.create_checkout_session(user)


@router.post(
    "/create-portal-session",
    response_model=PortalSessionResponse,
    dependencies=[Depends(rate_limit_checkout)],
)
def create_portal_session(user: AuthenticatedUser = Depends(get_current_user)):
    """
    Open the Stripe customer portal for the signed-in user's subscription.
    """
    return billing_service.create_portal_session(user)


@router.post("/webhooks/stripe")
async def stripe_webhook(request: Request):
    payload = await request.body()
    signature = request.headers.get("stripe-signature")
    return await run_in_threadpool(billing_service.handle_webhook, payload, signature)
