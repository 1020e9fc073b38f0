"""Product reviews: commands and handler.

Reviews are embedded in the product, so uniqueness per user and the rating
summary are both enforced by the Product aggregate itself.
"""

import structlog
from protean import handle
from protean.fields import Boolean, Identifier, Integer, String, Text
from protean.utils.globals import current_domain

from storefront.catalogue.details import load_product
from storefront.catalogue.product import Product
from storefront.domain import storefront

logger = structlog.get_logger(__name__)


@storefront.command(part_of="Product")
class AddReview:
    product_id: Identifier(required=True)
    user_id: Identifier(required=True)
    name: String(required=True, max_length=50)
    rating: Integer(required=True, min_value=1, max_value=5)
    comment: Text(required=True)


@storefront.command(part_of="Product")
class DeleteReview:
    product_id: Identifier(required=True)
    review_id: Identifier(required=True)
    user_id: Identifier(required=True)
    is_admin: Boolean(default=False)


@storefront.command_handler(part_of=Product)
class ProductReviewsHandler:
    @handle(AddReview)
    def add_review(self, command):
        product = load_product(command.product_id)
        review = product.add_review(
            user_id=command.user_id,
            name=command.name,
            rating=command.rating,
            comment=command.comment,
        )
        current_domain.repository_for(Product).add(product)

        logger.info(
            "Review added",
            product_id=str(product.id),
            rating=command.rating,
            average_rating=product.rating,
        )
        return str(review.id)

    @handle(DeleteReview)
    def delete_review(self, command):
        product = load_product(command.product_id)
        product.remove_review(command.review_id, user_id=command.user_id, is_admin=command.is_admin)
        current_domain.repository_for(Product).add(product)
