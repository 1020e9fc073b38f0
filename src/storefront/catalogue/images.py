"""Image registration: command and handler.

Files are uploaded elsewhere; the catalog only records the resulting URL.
"""

from protean import handle
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from storefront.catalogue.details import load_product
from storefront.catalogue.product import Product
from storefront.domain import storefront


@storefront.command(part_of="Product")
class AddProductImage:
    product_id: Identifier(required=True)
    url: String(required=True, max_length=500)
    public_id: String(max_length=255)


@storefront.command_handler(part_of=Product)
class ProductImagesHandler:
    @handle(AddProductImage)
    def add_image(self, command):
        product = load_product(command.product_id)
        image = product.add_image(url=command.url, public_id=command.public_id)
        current_domain.repository_for(Product).add(product)
        return str(image.id)
