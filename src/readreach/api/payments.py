"""FastAPI endpoints for checkout and payment records.

Payment completion is only ever taken from the processor: either the signed
webhook, or a lookup of the checkout session by id. A status reported by
the browser is never trusted.
"""

from fastapi import APIRouter, Depends, Header, HTTPException, Request
from protean.utils.globals import current_domain

from readreach.api.schemas import (
    CheckoutRequest,
    CheckoutResponse,
    PaymentResponse,
    PaymentStatusResponse,
    StatusResponse,
)
from readreach.auth.access import AuthContext, require
from readreach.payments.checkout import open_order_checkout
from readreach.payments.completion import complete_payment
from readreach.payments.gateway.port import InvalidWebhookError, UnknownCheckoutError
from readreach.payments.payment import Payment
from readreach.shared.email import same_email
from readreach.utils.logging import get_logger

logger = get_logger(__name__)

router = APIRouter(tags=["payments"])


def _payments(payments) -> list[PaymentResponse]:
    return [PaymentResponse.model_validate(payment) for payment in payments]


@router.get("/all-payments", response_model=list[PaymentResponse])
async def all_payments(ctx: AuthContext = Depends(require("payments:list_all"))) -> list[PaymentResponse]:
    return _payments(current_domain.repository_for(Payment).find_all())


@router.get("/payments", response_model=list[PaymentResponse])
async def my_payments(ctx: AuthContext = Depends(require("payments:list_mine"))) -> list[PaymentResponse]:
    return _payments(current_domain.repository_for(Payment).find_by_email(ctx.user.email))


@router.post("/create-checkout-session", response_model=CheckoutResponse)
async def checkout(
    body: CheckoutRequest,
    request: Request,
    ctx: AuthContext = Depends(require("checkout:create")),
) -> CheckoutResponse:
    url = open_order_checkout(
        gateway=request.app.state.gateway,
        settings=request.app.state.settings,
        order_id=body.order_id,
        email=ctx.user.email,
        order_name=body.order_name,
        price=body.price,
    )
    return CheckoutResponse(url=url)


@router.get("/payment-status/{session_id}", response_model=PaymentStatusResponse)
async def payment_status(
    session_id: str,
    request: Request,
    ctx: AuthContext = Depends(require("checkout:status")),
) -> PaymentStatusResponse:
    """Confirm a checkout against the processor's records and record it."""
    try:
        outcome = request.app.state.gateway.retrieve_checkout(session_id)
    except UnknownCheckoutError as exc:
        raise HTTPException(status_code=404, detail="Checkout session not found") from exc

    if not same_email(outcome.customer_email, ctx.user.email):
        raise HTTPException(status_code=403, detail="Forbidden")

    recorded = False
    if outcome.is_paid:
        recorded = complete_payment(outcome)

    return PaymentStatusResponse(
        session_id=outcome.session_id,
        payment_status=outcome.payment_status,
        transaction_id=outcome.transaction_id,
        order_id=outcome.metadata.get("order_id"),
        recorded=recorded,
    )


@router.post("/payments/webhook", response_model=StatusResponse)
async def payment_webhook(
    request: Request,
    stripe_signature: str = Header(default=""),
) -> StatusResponse:
    """Receive checkout events from the processor."""
    payload = await request.body()
    try:
        event = request.app.state.gateway.parse_webhook(payload, stripe_signature)
    except InvalidWebhookError as exc:
        logger.warning("webhook_rejected", reason=str(exc))
        raise HTTPException(status_code=400, detail="Invalid webhook signature") from exc

    if event.outcome is None or not event.outcome.is_paid:
        logger.info("webhook_ignored", event_id=event.event_id, event_type=event.event_type)
        return StatusResponse(status="ignored")

    recorded = complete_payment(event.outcome)
    return StatusResponse(status="processed" if recorded else "duplicate")
