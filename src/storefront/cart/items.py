"""Cart item management: commands and handler.

Cart lines live on the User aggregate. Every change re-reads the product so
that the stock check uses the quantity on hand right now.
"""

from protean import handle
from protean.fields import Identifier, Integer
from protean.utils.globals import current_domain

from storefront.catalogue.browsing import active_product
from storefront.domain import storefront
from storefront.identity.user import User

_UNAVAILABLE = "Product not found or not available"


@storefront.command(part_of="User")
class AddToCart:
    user_id: Identifier(required=True)
    product_id: Identifier(required=True)
    quantity: Integer(required=True, min_value=1, default=1)


@storefront.command(part_of="User")
class UpdateCartItem:
    user_id: Identifier(required=True)
    product_id: Identifier(required=True)
    quantity: Integer(required=True, min_value=1)


@storefront.command(part_of="User")
class RemoveFromCart:
    user_id: Identifier(required=True)
    product_id: Identifier(required=True)


@storefront.command(part_of="User")
class ClearCart:
    user_id: Identifier(required=True)


@storefront.command_handler(part_of=User)
class CartItemsHandler:
    @handle(AddToCart)
    def add_to_cart(self, command):
        repo = current_domain.repository_for(User)
        user = repo.get(command.user_id)
        product = active_product(command.product_id, message=_UNAVAILABLE)

        user.add_to_cart(str(product.id), command.quantity, in_stock=product.stock)
        repo.add(user)

    @handle(UpdateCartItem)
    def update_cart_item(self, command):
        repo = current_domain.repository_for(User)
        user = repo.get(command.user_id)
        product = active_product(command.product_id, message=_UNAVAILABLE)

        user.set_cart_quantity(str(product.id), command.quantity, in_stock=product.stock)
        repo.add(user)

    @handle(RemoveFromCart)
    def remove_from_cart(self, command):
        repo = current_domain.repository_for(User)
        user = repo.get(command.user_id)
        user.remove_from_cart(command.product_id)
        repo.add(user)

    @handle(ClearCart)
    def clear_cart(self, command):
        repo = current_domain.repository_for(User)
        user = repo.get(command.user_id)
        user.clear_cart()
        repo.add(user)
