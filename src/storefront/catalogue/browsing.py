"""Read side of the catalog: listing, search, lookups and serialization.

Filtering and ordering happen in Python over repository results so that the
same code runs on every Protean provider.
"""

from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.utils.globals import current_domain

from storefront.catalogue.product import LOW_STOCK_THRESHOLD, Product
from storefront.shared.errors import NotFound

SORTABLE_FIELDS = ("name", "price", "rating", "num_reviews", "sold", "stock", "created_at", "updated_at")
DEFAULT_SORT = "-created_at"
TOP_RATED_COUNT = 8
FEATURED_COUNT = 12


def _repo():
    return current_domain.repository_for(Product)


def _newest_first(products):
    return sorted(products, key=lambda product: product.created_at, reverse=True)


def sort_products(products, sort: str | None = None):
    """Order by a comma separated list of fields, ``-`` prefix for descending."""
    keys = [key.strip() for key in (sort or DEFAULT_SORT).split(",") if key.strip()]
    ordered = list(products)
    # Stable sorts applied from the least to the most significant key
    for key in reversed(keys):
        field = key.lstrip("-")
        if field not in SORTABLE_FIELDS:
            raise ValidationError({"sort": [f"Cannot sort by '{field}'"]})
        ordered.sort(key=lambda product, f=field: getattr(product, f), reverse=key.startswith("-"))
    return ordered


def active_product(product_id, message: str = "Product not found") -> Product:
    """Load a product that shoppers are allowed to see."""
    try:
        product = _repo().get(product_id)
    except ObjectNotFoundError:
        raise NotFound(message) from None
    if not product.is_active:
        raise NotFound(message)
    return product


def list_products(
    category=None,
    brand=None,
    is_featured=None,
    min_price=None,
    max_price=None,
    sort=None,
):
    products = [
        product
        for product in _repo().active()
        if (category is None or product.category == category)
        and (brand is None or product.brand == brand)
        and (is_featured is None or product.is_featured == is_featured)
        and (min_price is None or product.price >= min_price)
        and (max_price is None or product.price <= max_price)
    ]
    return sort_products(products, sort)


def _relevance(product, terms) -> int:
    weighted = (
        (product.name, 3),
        (product.brand, 2),
        (product.category, 2),
        (product.description, 1),
    )
    return sum(weight for term in terms for text, weight in weighted if text and term in text.lower())


def search_products(q=None, category=None, min_price=None, max_price=None, rating=None):
    """Case-insensitive text search, best matches first."""
    terms = [term for term in (q or "").lower().split() if term]
    candidates = list_products(category=category, min_price=min_price, max_price=max_price)
    if rating is not None:
        candidates = [product for product in candidates if product.rating >= rating]
    if not terms:
        return candidates

    scored = [(product, _relevance(product, terms)) for product in candidates]
    return [product for product, score in sorted(scored, key=lambda pair: pair[1], reverse=True) if score > 0]


def top_rated(limit: int = TOP_RATED_COUNT):
    ranked = sorted(_newest_first(_repo().active()), key=lambda product: product.rating, reverse=True)
    return ranked[:limit]


def featured(limit: int = FEATURED_COUNT):
    return _newest_first(product for product in _repo().active() if product.is_featured)[:limit]


def in_category(category: str):
    return _newest_first(product for product in _repo().active() if product.category == category)


def admin_products(search=None, category=None, is_active=None, low_stock=False):
    """Every product, hidden ones included, for the back-office listing."""
    needle = (search or "").lower()
    products = [
        product
        for product in _repo().everything()
        if (not needle or needle in product.name.lower() or needle in (product.description or "").lower())
        and (category is None or product.category == category)
        and (is_active is None or product.is_active == is_active)
        and (not low_stock or product.stock <= LOW_STOCK_THRESHOLD)
    ]
    return _newest_first(products)


# ---------------------------------------------------------------------------
# Serialization
# ---------------------------------------------------------------------------
def review_view(review) -> dict:
    return {
        "id": str(review.id),
        "user_id": str(review.user_id),
        "name": review.name,
        "rating": review.rating,
        "comment": review.comment,
        "created_at": review.created_at,
    }


def product_view(product: Product, with_reviews: bool = True) -> dict:
    view = {
        "id": str(product.id),
        "name": product.name,
        "description": product.description,
        "price": product.price,
        "original_price": product.original_price,
        "category": product.category,
        "brand": product.brand,
        "stock": product.stock,
        "sold": product.sold,
        "images": [{"id": str(image.id), "url": image.url, "public_id": image.public_id} for image in product.images],
        "rating": product.rating,
        "num_reviews": product.num_reviews,
        "is_active": product.is_active,
        "is_featured": product.is_featured,
        "created_at": product.created_at,
        "updated_at": product.updated_at,
    }
    if with_reviews:
        view["reviews"] = [review_view(review) for review in product.reviews]
    return view
