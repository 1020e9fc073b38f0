"""Visibility and featuring: single and bulk commands with their handler."""

import json

import structlog
from protean import handle
from protean.exceptions import ValidationError
from protean.fields import Boolean, Identifier, Text
from protean.utils.globals import current_domain

from storefront.catalogue.details import load_product
from storefront.catalogue.product import BULK_EDITABLE_FIELDS, Product
from storefront.domain import storefront

logger = structlog.get_logger(__name__)


@storefront.command(part_of="Product")
class SetProductStatus:
    product_id: Identifier(required=True)
    is_active: Boolean()
    is_featured: Boolean()


@storefront.command(part_of="Product")
class BulkUpdateProducts:
    product_ids: Text(required=True)  # JSON array of product ids
    updates: Text(required=True)  # JSON object of field -> value


@storefront.command_handler(part_of=Product)
class ProductStatusHandler:
    @handle(SetProductStatus)
    def set_status(self, command):
        product = load_product(command.product_id)
        product.set_status(is_active=command.is_active, is_featured=command.is_featured)
        current_domain.repository_for(Product).add(product)
        return str(product.id)

    @handle(BulkUpdateProducts)
    def bulk_update(self, command):
        product_ids = json.loads(command.product_ids)
        updates = json.loads(command.updates)
        if not product_ids:
            raise ValidationError({"product_ids": ["Please provide product IDs"]})
        unknown = set(updates) - set(BULK_EDITABLE_FIELDS)
        if unknown:
            raise ValidationError({"updates": [f"Cannot bulk update: {', '.join(sorted(unknown))}"]})

        details = {k: v for k, v in updates.items() if k not in ("is_active", "is_featured")}
        repo = current_domain.repository_for(Product)
        matched = modified = 0
        for product in repo.with_ids(product_ids):
            matched += 1
            if any(getattr(product, field) != value for field, value in updates.items()):
                modified += 1
            if details:
                product.update_details(**details)
            if "is_active" in updates or "is_featured" in updates:
                product.set_status(is_active=updates.get("is_active"), is_featured=updates.get("is_featured"))
            repo.add(product)

        logger.info("Products bulk updated", matched=matched, modified=modified, fields=sorted(updates))
        return {"matched": matched, "modified": modified}
