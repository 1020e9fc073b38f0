"""Repository for the Product aggregate."""

from storefront.catalogue.product import Product
from storefront.domain import storefront


@storefront.repository(part_of=Product)
class ProductRepository:
    # ``limit(None)`` lifts the per-query default of 100 records
    def everything(self) -> list[Product]:
        return self._dao.query.limit(None).all().items

    def active(self) -> list[Product]:
        return self._dao.query.filter(is_active=True).limit(None).all().items

    def with_ids(self, product_ids) -> list[Product]:
        wanted = list({str(product_id) for product_id in product_ids})
        if not wanted:
            return []
        return self._dao.query.filter(id__in=wanted).limit(None).all().items
