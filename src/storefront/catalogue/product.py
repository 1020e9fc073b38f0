"""Product aggregate root with ProductImage and Review entities."""

from datetime import UTC, datetime

from protean import atomic_change, invariant
from protean.exceptions import ValidationError
from protean.fields import Boolean, DateTime, Float, HasMany, Identifier, Integer, String, Text

from storefront.catalogue.events import (
    LowStockReached,
    ProductCreated,
    ProductDetailsUpdated,
    ProductImageAdded,
    ProductStatusChanged,
    ReviewAdded,
    ReviewRemoved,
    StockWithdrawn,
)
from storefront.domain import storefront
from storefront.shared.errors import Conflict, Forbidden, InsufficientStock, NotFound

LOW_STOCK_THRESHOLD = 10
DEFAULT_IMAGE = "/images/default-product.png"

# Fields an administrator may overwrite directly
EDITABLE_FIELDS = ("name", "description", "price", "original_price", "category", "brand", "stock")
BULK_EDITABLE_FIELDS = ("price", "original_price", "category", "brand", "stock", "is_active", "is_featured")


def _utcnow():
    return datetime.now(UTC)


def average_rating(ratings) -> float:
    ratings = list(ratings)
    if not ratings:
        return 0.0
    return round(sum(ratings) / len(ratings), 2)


@storefront.entity(part_of="Product")
class ProductImage:
    url: String(required=True, max_length=500)
    public_id: String(max_length=255)


@storefront.entity(part_of="Product")
class Review:
    """A shopper's rating and comment. One per user per product."""

    user_id: Identifier(required=True)
    name: String(required=True, max_length=50)
    rating: Integer(required=True, min_value=1, max_value=5)
    comment: Text(required=True)
    created_at: DateTime(default=_utcnow)


@storefront.aggregate
class Product:
    """A purchasable catalog item.

    ``stock`` never drops below zero and ``sold`` only grows; both move together
    in ``withdraw_stock``. ``rating`` and ``num_reviews`` are derived from the
    embedded reviews and recomputed whenever the review list changes.
    """

    name: String(required=True, max_length=200)
    description: Text(required=True)
    price: Float(required=True, min_value=0.0)
    original_price: Float(min_value=0.0)
    category: String(required=True, max_length=100)
    brand: String(max_length=100)
    stock: Integer(required=True, min_value=0, default=0)
    sold: Integer(min_value=0, default=0)
    images: HasMany(ProductImage)
    reviews: HasMany(Review)
    rating: Float(min_value=0.0, max_value=5.0, default=0.0)
    num_reviews: Integer(min_value=0, default=0)
    is_active: Boolean(default=True)
    is_featured: Boolean(default=False)
    created_at: DateTime(default=_utcnow)
    updated_at: DateTime(default=_utcnow)

    @invariant.post
    def rating_summarises_reviews(self):
        if self.num_reviews != len(self.reviews):
            raise ValidationError({"num_reviews": ["Review count is out of date"]})
        if self.rating != average_rating(review.rating for review in self.reviews):
            raise ValidationError({"rating": ["Rating is out of date"]})

    @property
    def primary_image(self) -> str:
        return self.images[0].url if self.images else DEFAULT_IMAGE

    @property
    def is_low_on_stock(self) -> bool:
        return 0 < self.stock <= LOW_STOCK_THRESHOLD

    @classmethod
    def create(
        cls,
        name,
        description,
        price,
        category,
        stock=0,
        brand=None,
        original_price=None,
        is_featured=False,
        images=None,
    ):
        now = _utcnow()
        product = cls(
            name=name,
            description=description,
            price=price,
            original_price=original_price,
            category=category,
            brand=brand,
            stock=stock,
            is_featured=is_featured,
            created_at=now,
            updated_at=now,
        )
        for image in images or []:
            product.add_images(ProductImage(url=image["url"], public_id=image.get("public_id")))

        product.raise_(
            ProductCreated(
                product_id=product.id,
                name=name,
                category=category,
                price=price,
                stock=stock,
                created_at=now,
            )
        )
        return product

    def update_details(self, **changes):
        unknown = set(changes) - set(EDITABLE_FIELDS)
        if unknown:
            raise ValidationError({field: ["Field cannot be updated"] for field in sorted(unknown)})

        for field, value in changes.items():
            if value is not None:
                setattr(self, field, value)
        self.updated_at = _utcnow()

        self.raise_(
            ProductDetailsUpdated(
                product_id=self.id,
                name=self.name,
                price=self.price,
                category=self.category,
                stock=self.stock,
            )
        )

    def add_image(self, url, public_id=None):
        image = ProductImage(url=url, public_id=public_id)
        self.add_images(image)
        self.updated_at = _utcnow()

        self.raise_(ProductImageAdded(product_id=self.id, image_id=image.id, url=url))
        return image

    def set_status(self, is_active=None, is_featured=None):
        if is_active is not None:
            self.is_active = is_active
        if is_featured is not None:
            self.is_featured = is_featured
        self.updated_at = _utcnow()

        self.raise_(
            ProductStatusChanged(
                product_id=self.id,
                is_active=self.is_active,
                is_featured=self.is_featured,
            )
        )

    # -------------------------------------------------------------------
    # Stock
    # -------------------------------------------------------------------
    def ensure_available(self, quantity):
        """Reject ``quantity`` if it exceeds stock on hand, without changing anything."""
        if quantity > self.stock:
            raise InsufficientStock(
                f"Insufficient stock for {self.name}. Available: {self.stock}",
                product_id=self.id,
                available=self.stock,
            )

    def withdraw_stock(self, quantity, order_number=None):
        """Take ``quantity`` units out of stock and count them as sold."""
        self.ensure_available(quantity)

        self.stock -= quantity
        self.sold += quantity
        self.updated_at = _utcnow()

        self.raise_(
            StockWithdrawn(
                product_id=self.id,
                quantity=quantity,
                remaining=self.stock,
                order_number=order_number,
            )
        )
        if self.stock <= LOW_STOCK_THRESHOLD:
            self.raise_(LowStockReached(product_id=self.id, name=self.name, remaining=self.stock))

    # -------------------------------------------------------------------
    # Reviews
    # -------------------------------------------------------------------
    def review_by(self, user_id):
        return next((review for review in self.reviews if str(review.user_id) == str(user_id)), None)

    def add_review(self, user_id, name, rating, comment):
        if self.review_by(user_id) is not None:
            raise Conflict("Product already reviewed")

        review = Review(user_id=str(user_id), name=name, rating=rating, comment=comment, created_at=_utcnow())
        with atomic_change(self):
            self.add_reviews(review)
            self._summarise_reviews()

        self.raise_(
            ReviewAdded(
                product_id=self.id,
                review_id=review.id,
                user_id=str(user_id),
                rating=rating,
                average_rating=self.rating,
            )
        )
        return review

    def remove_review(self, review_id, user_id, is_admin=False):
        review = next((r for r in self.reviews if str(r.id) == str(review_id)), None)
        if review is None:
            raise NotFound("Review not found")
        if str(review.user_id) != str(user_id) and not is_admin:
            raise Forbidden("Not authorized to delete this review")

        with atomic_change(self):
            self.remove_reviews(review)
            self._summarise_reviews()

        self.raise_(
            ReviewRemoved(
                product_id=self.id,
                review_id=review.id,
                average_rating=self.rating,
            )
        )

    def _summarise_reviews(self):
        self.num_reviews = len(self.reviews)
        self.rating = average_rating(review.rating for review in self.reviews)
        self.updated_at = _utcnow()
