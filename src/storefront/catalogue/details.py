"""Product maintenance: update and delete commands with their handler."""

import structlog
from protean import handle
from protean.exceptions import ObjectNotFoundError
from protean.fields import Float, Identifier, Integer, String, Text
from protean.utils.globals import current_domain

from storefront.catalogue.product import Product
from storefront.domain import storefront
from storefront.shared.errors import NotFound

logger = structlog.get_logger(__name__)


@storefront.command(part_of="Product")
class UpdateProduct:
    product_id: Identifier(required=True)
    name: String(max_length=200)
    description: Text()
    price: Float(min_value=0.0)
    original_price: Float(min_value=0.0)
    category: String(max_length=100)
    brand: String(max_length=100)
    stock: Integer(min_value=0)


@storefront.command(part_of="Product")
class DeleteProduct:
    product_id: Identifier(required=True)


def load_product(product_id) -> Product:
    try:
        return current_domain.repository_for(Product).get(product_id)
    except ObjectNotFoundError:
        raise NotFound("Product not found") from None


@storefront.command_handler(part_of=Product)
class ProductDetailsHandler:
    @handle(UpdateProduct)
    def update_product(self, command):
        product = load_product(command.product_id)
        product.update_details(
            name=command.name,
            description=command.description,
            price=command.price,
            original_price=command.original_price,
            category=command.category,
            brand=command.brand,
            stock=command.stock,
        )
        current_domain.repository_for(Product).add(product)
        return str(product.id)

    @handle(DeleteProduct)
    def delete_product(self, command):
        product = load_product(command.product_id)
        # Reviews are embedded and go with the product
        current_domain.repository_for(Product)._dao.delete(product)
        logger.info("Product deleted", product_id=str(command.product_id))
