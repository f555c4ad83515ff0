"""FastAPI endpoints for orders."""

from fastapi import APIRouter, Depends
from protean.utils.globals import current_domain

from readreach.api.schemas import (
    OrderIdResponse,
    OrderResponse,
    OrderStatusRequest,
    PlaceOrderRequest,
    StatusResponse,
)
from readreach.auth.access import AuthContext, require
from readreach.ordering.fulfillment import CancelOrder, UpdateOrderStatus
from readreach.ordering.order import Order
from readreach.ordering.placement import PlaceOrder

RECENT_ORDERS = 5
DASHBOARD_ORDERS = 3

router = APIRouter(tags=["orders"])


def _orders(orders) -> list[OrderResponse]:
    return [OrderResponse.model_validate(order) for order in orders]


@router.get("/all-orders", response_model=list[OrderResponse])
async def all_orders(ctx: AuthContext = Depends(require("orders:list_all"))) -> list[OrderResponse]:
    return _orders(current_domain.repository_for(Order).find_all())


# --- Purchaser views, always scoped to the caller ---


@router.get("/orders", response_model=list[OrderResponse])
async def my_orders(ctx: AuthContext = Depends(require("orders:list_mine"))) -> list[OrderResponse]:
    return _orders(current_domain.repository_for(Order).find_by_purchaser(ctx.user.email))


@router.get("/recent-orders", response_model=list[OrderResponse])
async def recent_orders(ctx: AuthContext = Depends(require("orders:list_mine"))) -> list[OrderResponse]:
    repo = current_domain.repository_for(Order)
    return _orders(repo.find_recent_by_purchaser(ctx.user.email, RECENT_ORDERS))


@router.get("/three-orders", response_model=list[OrderResponse])
async def three_orders(ctx: AuthContext = Depends(require("orders:list_mine"))) -> list[OrderResponse]:
    repo = current_domain.repository_for(Order)
    return _orders(repo.find_recent_by_purchaser(ctx.user.email, DASHBOARD_ORDERS))


@router.get("/delivered-orders", response_model=list[OrderResponse])
async def delivered_orders(ctx: AuthContext = Depends(require("orders:list_mine"))) -> list[OrderResponse]:
    return _orders(current_domain.repository_for(Order).find_delivered_by_purchaser(ctx.user.email))


@router.post("/order", status_code=201, response_model=OrderIdResponse)
async def place_order(
    body: PlaceOrderRequest, ctx: AuthContext = Depends(require("orders:place"))
) -> OrderIdResponse:
    command = PlaceOrder(
        book_id=body.book_id,
        email=ctx.user.email,
        customer_name=body.customer_name or ctx.user.name,
        phone=body.phone,
        address=body.address,
    )
    order_id = current_domain.process(command, asynchronous=False)
    return OrderIdResponse(order_id=order_id)


@router.patch("/order-status/{order_id}", response_model=StatusResponse)
async def cancel_order(order_id: str, ctx: AuthContext = Depends(require("orders:cancel"))) -> StatusResponse:
    current_domain.process(CancelOrder(order_id=order_id), asynchronous=False)
    return StatusResponse(status="cancelled")


# --- Librarian views ---


@router.get("/librarian-orders", response_model=list[OrderResponse])
async def librarian_orders(
    ctx: AuthContext = Depends(require("orders:list_librarian")),
) -> list[OrderResponse]:
    return _orders(current_domain.repository_for(Order).find_by_librarian(ctx.user.email))


@router.patch("/update-order-status/{order_id}", response_model=StatusResponse)
async def update_order_status(
    order_id: str,
    body: OrderStatusRequest,
    ctx: AuthContext = Depends(require("orders:advance")),
) -> StatusResponse:
    current_domain.process(UpdateOrderStatus(order_id=order_id, status=body.status), asynchronous=False)
    return StatusResponse(status=body.status)
