"""Product creation: command and handler."""

import json

import structlog
from protean import handle
from protean.fields import Boolean, Float, Integer, String, Text
from protean.utils.globals import current_domain

from storefront.catalogue.product import Product
from storefront.domain import storefront

logger = structlog.get_logger(__name__)


@storefront.command(part_of="Product")
class CreateProduct:
    name: String(required=True, max_length=200)
    description: Text(required=True)
    price: Float(required=True, min_value=0.0)
    original_price: Float(min_value=0.0)
    category: String(required=True, max_length=100)
    brand: String(max_length=100)
    stock: Integer(min_value=0, default=0)
    is_featured: Boolean(default=False)
    images: Text()  # JSON array of {url, public_id}


@storefront.command_handler(part_of=Product)
class CreateProductHandler:
    @handle(CreateProduct)
    def create_product(self, command):
        product = Product.create(
            name=command.name,
            description=command.description,
            price=command.price,
            original_price=command.original_price,
            category=command.category,
            brand=command.brand,
            stock=command.stock,
            is_featured=command.is_featured,
            images=json.loads(command.images) if command.images else None,
        )
        current_domain.repository_for(Product).add(product)

        logger.info("Product created", product_id=str(product.id), category=product.category)
        return str(product.id)
