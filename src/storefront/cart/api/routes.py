"""FastAPI endpoints for the signed-in shopper's cart.

Every endpoint answers with the refreshed cart.
"""

from fastapi import APIRouter, Depends
from protean.utils.globals import current_domain

from storefront.cart.api.schemas import AddToCartRequest, UpdateCartItemRequest
from storefront.cart.items import AddToCart, ClearCart, RemoveFromCart, UpdateCartItem
from storefront.cart.view import cart_view
from storefront.identity.api.dependencies import current_user
from storefront.identity.user import User
from storefront.shared.http import ok

cart_router = APIRouter(prefix="/cart", tags=["cart"])


@cart_router.get("")
async def get_cart(user: User = Depends(current_user)):
    return ok(data=cart_view(user.id))


@cart_router.post("/add")
async def add_to_cart(body: AddToCartRequest, user: User = Depends(current_user)):
    command = AddToCart(user_id=str(user.id), product_id=body.product_id, quantity=body.quantity)
    current_domain.process(command, asynchronous=False)
    return ok(data=cart_view(user.id), message="Item added to cart")


@cart_router.put("/{product_id}")
async def update_cart_item(product_id: str, body: UpdateCartItemRequest, user: User = Depends(current_user)):
    command = UpdateCartItem(user_id=str(user.id), product_id=product_id, quantity=body.quantity)
    current_domain.process(command, asynchronous=False)
    return ok(data=cart_view(user.id), message="Cart updated")


@cart_router.delete("/{product_id}")
async def remove_from_cart(product_id: str, user: User = Depends(current_user)):
    current_domain.process(RemoveFromCart(user_id=str(user.id), product_id=product_id), asynchronous=False)
    return ok(data=cart_view(user.id), message="Item removed from cart")


@cart_router.delete("")
async def clear_cart(user: User = Depends(current_user)):
    current_domain.process(ClearCart(user_id=str(user.id)), asynchronous=False)
    return ok(data=cart_view(user.id), message="Cart cleared")
