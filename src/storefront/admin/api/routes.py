"""FastAPI endpoints for the back office. Every route requires an administrator."""

import json

from fastapi import APIRouter, Depends, Query
from protean.utils.globals import current_domain

from storefront.admin.api.schemas import BulkUpdateRequest, ProductStatusRequest, UpdateUserRequest
from storefront.admin.dashboard import dashboard_stats
from storefront.catalogue.browsing import admin_products, product_view
from storefront.catalogue.details import load_product
from storefront.catalogue.status import BulkUpdateProducts, SetProductStatus
from storefront.identity.administration import DeleteUser, UpdateUserAccount
from storefront.identity.api.dependencies import admin_user
from storefront.identity.queries import find_user, search_customers, user_view
from storefront.identity.user import User
from storefront.ordering.queries import order_view, orders_of
from storefront.shared.http import ok, paged, paginate

admin_router = APIRouter(prefix="/admin", tags=["admin"], dependencies=[Depends(admin_user)])

PAGE_SIZE = 20
USER_RECENT_ORDERS = 10


@admin_router.get("/dashboard")
async def dashboard():
    return ok(data=dashboard_stats())


# --- Users ---


@admin_router.get("/users")
async def list_users(
    page: int = Query(1, ge=1),
    limit: int = Query(PAGE_SIZE, ge=1, le=100),
    search: str | None = None,
):
    window = paginate(search_customers(search), page, limit)
    return paged(window._replace(items=[user_view(user) for user in window.items]))


@admin_router.get("/users/{user_id}")
async def get_user(user_id: str):
    user = find_user(user_id)
    orders = orders_of(user.id)[:USER_RECENT_ORDERS]
    return ok(data={"user": user_view(user), "orders": [order_view(order) for order in orders]})


@admin_router.put("/users/{user_id}")
async def update_user(user_id: str, body: UpdateUserRequest, actor: User = Depends(admin_user)):
    find_user(user_id)
    command = UpdateUserAccount(
        actor_id=str(actor.id),
        user_id=user_id,
        name=body.name,
        email=body.email,
        phone=body.phone,
        role=body.role,
        is_active=body.is_active,
        is_verified=body.is_verified,
    )
    current_domain.process(command, asynchronous=False)
    return ok(data=user_view(find_user(user_id)))


@admin_router.delete("/users/{user_id}")
async def delete_user(user_id: str, actor: User = Depends(admin_user)):
    find_user(user_id)
    current_domain.process(DeleteUser(actor_id=str(actor.id), user_id=user_id), asynchronous=False)
    return ok(message="User deleted")


# --- Products ---


@admin_router.get("/products")
async def list_products(
    page: int = Query(1, ge=1),
    limit: int = Query(PAGE_SIZE, ge=1, le=100),
    search: str | None = None,
    category: str | None = None,
    is_active: bool | None = None,
    low_stock: bool = False,
):
    products = admin_products(search=search, category=category, is_active=is_active, low_stock=low_stock)
    window = paginate(products, page, limit)
    return paged(window._replace(items=[product_view(p, with_reviews=False) for p in window.items]))


@admin_router.put("/products/bulk-update")
async def bulk_update_products(body: BulkUpdateRequest):
    command = BulkUpdateProducts(product_ids=json.dumps(body.product_ids), updates=json.dumps(body.updates))
    result = current_domain.process(command, asynchronous=False)
    return ok(data=result, message=f"{result['modified']} products updated")


@admin_router.put("/products/{product_id}/status")
async def set_product_status(product_id: str, body: ProductStatusRequest):
    command = SetProductStatus(product_id=product_id, is_active=body.is_active, is_featured=body.is_featured)
    current_domain.process(command, asynchronous=False)
    return ok(data=product_view(load_product(product_id), with_reviews=False))
