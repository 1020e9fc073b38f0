"""Domain events for the Product aggregate."""

from protean.fields import Boolean, DateTime, Float, Identifier, Integer, String

from storefront.domain import storefront


@storefront.event(part_of="Product")
class ProductCreated:
    """A new product was added to the catalog."""

    __version__ = 1

    product_id: Identifier(required=True)
    name: String(required=True)
    category: String(required=True)
    price: Float(required=True)
    stock: Integer(required=True)
    created_at: DateTime(required=True)


@storefront.event(part_of="Product")
class ProductDetailsUpdated:
    """A product's descriptive fields, price or stock were edited."""

    __version__ = 1

    product_id: Identifier(required=True)
    name: String(required=True)
    price: Float(required=True)
    category: String(required=True)
    stock: Integer(required=True)


@storefront.event(part_of="Product")
class ProductImageAdded:
    __version__ = 1

    product_id: Identifier(required=True)
    image_id: Identifier(required=True)
    url: String(required=True)


@storefront.event(part_of="Product")
class ProductStatusChanged:
    """A product was shown, hidden, featured or unfeatured."""

    __version__ = 1

    product_id: Identifier(required=True)
    is_active: Boolean(required=True)
    is_featured: Boolean(required=True)


@storefront.event(part_of="Product")
class StockWithdrawn:
    """Units left the shelf because an order was placed."""

    __version__ = 1

    product_id: Identifier(required=True)
    quantity: Integer(required=True)
    remaining: Integer(required=True)
    order_number: String()


@storefront.event(part_of="Product")
class LowStockReached:
    """Stock fell to the low-stock threshold or below."""

    __version__ = 1

    product_id: Identifier(required=True)
    name: String(required=True)
    remaining: Integer(required=True)


@storefront.event(part_of="Product")
class ReviewAdded:
    __version__ = 1

    product_id: Identifier(required=True)
    review_id: Identifier(required=True)
    user_id: Identifier(required=True)
    rating: Integer(required=True)
    average_rating: Float(required=True)


@storefront.event(part_of="Product")
class ReviewRemoved:
    __version__ = 1

    product_id: Identifier(required=True)
    review_id: Identifier(required=True)
    average_rating: Float(required=True)
