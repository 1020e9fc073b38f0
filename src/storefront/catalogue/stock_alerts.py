"""Reacts to stock movements on products."""

import structlog
from protean.utils.mixins import handle

from storefront.catalogue.events import LowStockReached
from storefront.catalogue.product import Product
from storefront.domain import storefront

logger = structlog.get_logger(__name__)


@storefront.event_handler(part_of=Product)
class StockAlertsHandler:
    @handle(LowStockReached)
    def on_low_stock(self, event: LowStockReached) -> None:
        """Flag products that need restocking."""
        if event.remaining == 0:
            logger.warning("Product sold out", product_id=str(event.product_id), name=event.name)
        else:
            logger.warning(
                "Product running low on stock",
                product_id=str(event.product_id),
                name=event.name,
                remaining=event.remaining,
            )
