"""The shopper-facing cart: live product data joined onto the stored lines."""

from protean.utils.globals import current_domain

from storefront.catalogue.product import Product
from storefront.identity.user import User


def cart_view(user_id) -> dict:
    """Build the cart for ``user_id``.

    Lines whose product was deleted or hidden are left out; ``item_count`` and
    ``cart_total`` are derived from what remains and never stored.
    """
    user = current_domain.repository_for(User).get(user_id)
    products = {
        str(product.id): product
        for product in current_domain.repository_for(Product).with_ids(line.product_id for line in user.cart_items)
        if product.is_active
    }

    items = []
    for line in user.cart_items:
        product = products.get(str(line.product_id))
        if product is None:
            continue
        items.append(
            {
                "product": {
                    "id": str(product.id),
                    "name": product.name,
                    "price": product.price,
                    "image": product.primary_image,
                    "stock": product.stock,
                },
                "quantity": line.quantity,
                "subtotal": round(product.price * line.quantity, 2),
            }
        )

    return {
        "items": items,
        "item_count": sum(item["quantity"] for item in items),
        "cart_total": round(sum(item["subtotal"] for item in items), 2),
    }
