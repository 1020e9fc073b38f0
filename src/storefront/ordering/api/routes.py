"""FastAPI endpoints for checkout, order history and fulfillment."""

import json

from fastapi import APIRouter, Depends, Query
from protean.utils.globals import current_domain

from storefront.admin.dashboard import order_stats
from storefront.identity.api.dependencies import admin_user, current_user
from storefront.identity.user import User
from storefront.ordering.api.schemas import PayOrderRequest, PlaceOrderRequest, UpdateOrderStatusRequest
from storefront.ordering.fulfillment import MarkOrderDelivered, UpdateOrderStatus
from storefront.ordering.payment import MarkOrderPaid
from storefront.ordering.placement import PlaceOrder, place_order
from storefront.ordering.queries import all_orders, find_order, order_for, order_view, orders_of
from storefront.shared.http import ok, paged, paginate

order_router = APIRouter(prefix="/orders", tags=["orders"])

PAGE_SIZE = 20
MY_ORDERS_PAGE_SIZE = 10


# --- Shopper endpoints ---


@order_router.post("", status_code=201)
async def create_order(body: PlaceOrderRequest, user: User = Depends(current_user)):
    """Place an order for the requested lines. Stock and cart change only if every line succeeds."""
    command = PlaceOrder(
        user_id=str(user.id),
        items=json.dumps([line.model_dump() for line in body.items]),
        shipping_address=body.shipping_address.model_dump_json(),
        payment_method=body.payment_method,
        coupon_code=body.coupon_code,
        notes=body.notes,
    )
    order_id = place_order(command)
    return ok(data=order_view(find_order(order_id)), status_code=201, message="Order placed")


@order_router.get("/my-orders")
async def my_orders(
    page: int = Query(1, ge=1),
    limit: int = Query(MY_ORDERS_PAGE_SIZE, ge=1, le=100),
    user: User = Depends(current_user),
):
    window = paginate(orders_of(user.id), page, limit)
    return paged(window._replace(items=[order_view(order) for order in window.items]))


# --- Back-office endpoints ---


@order_router.get("")
async def list_orders(
    page: int = Query(1, ge=1),
    limit: int = Query(PAGE_SIZE, ge=1, le=100),
    status: str | None = None,
    is_paid: bool | None = None,
    is_delivered: bool | None = None,
    _: User = Depends(admin_user),
):
    window = paginate(all_orders(status=status, is_paid=is_paid, is_delivered=is_delivered), page, limit)
    return paged(window._replace(items=[order_view(order) for order in window.items]))


@order_router.get("/stats/overview")
async def stats_overview(_: User = Depends(admin_user)):
    return ok(data=order_stats())


@order_router.put("/{order_id}/deliver")
async def deliver_order(order_id: str, _: User = Depends(admin_user)):
    find_order(order_id)
    current_domain.process(MarkOrderDelivered(order_id=order_id), asynchronous=False)
    return ok(data=order_view(find_order(order_id)), message="Order marked as delivered")


@order_router.put("/{order_id}/status")
async def update_order_status(order_id: str, body: UpdateOrderStatusRequest, _: User = Depends(admin_user)):
    find_order(order_id)
    command = UpdateOrderStatus(
        order_id=order_id,
        status=body.status,
        note=body.note,
        tracking_number=body.tracking_number,
        notes=body.notes,
        refund_reason=body.refund_reason,
        refund_amount=body.refund_amount,
    )
    current_domain.process(command, asynchronous=False)
    return ok(data=order_view(find_order(order_id)), message="Order status updated")


# --- Shared endpoints ---


@order_router.get("/{order_id}")
async def get_order(order_id: str, user: User = Depends(current_user)):
    return ok(data=order_view(order_for(order_id, user)))


@order_router.put("/{order_id}/pay")
async def pay_order(order_id: str, body: PayOrderRequest, user: User = Depends(current_user)):
    find_order(order_id)
    command = MarkOrderPaid(
        order_id=order_id,
        user_id=str(user.id),
        payment_id=body.id,
        status=body.status,
        update_time=body.update_time,
        email_address=body.email_address,
    )
    current_domain.process(command, asynchronous=False)
    return ok(data=order_view(find_order(order_id)), message="Order paid")
