"""FastAPI endpoints for the catalog and its reviews."""

import json

from fastapi import APIRouter, Depends, Query
from protean.utils.globals import current_domain

from storefront.catalogue.api.schemas import (
    AddProductImageRequest,
    AddReviewRequest,
    CreateProductRequest,
    UpdateProductRequest,
)
from storefront.catalogue.browsing import (
    active_product,
    featured,
    in_category,
    list_products,
    product_view,
    review_view,
    search_products,
    top_rated,
)
from storefront.catalogue.creation import CreateProduct
from storefront.catalogue.details import DeleteProduct, UpdateProduct, load_product
from storefront.catalogue.images import AddProductImage
from storefront.catalogue.reviews import AddReview, DeleteReview
from storefront.identity.api.dependencies import admin_user, current_user
from storefront.identity.user import User
from storefront.shared.http import ok, paged, paginate

product_router = APIRouter(prefix="/products", tags=["products"])

PAGE_SIZE = 12


def _listing(products, page: int, limit: int):
    window = paginate(products, page, limit)
    return paged(window._replace(items=[product_view(p, with_reviews=False) for p in window.items]))


# --- Shopper endpoints ---
# Fixed paths are declared before /{product_id} so they are not read as ids.


@product_router.get("")
async def browse_products(
    page: int = Query(1, ge=1),
    limit: int = Query(PAGE_SIZE, ge=1, le=100),
    category: str | None = None,
    brand: str | None = None,
    is_featured: bool | None = None,
    min_price: float | None = Query(None, ge=0),
    max_price: float | None = Query(None, ge=0),
    sort: str | None = None,
):
    products = list_products(
        category=category,
        brand=brand,
        is_featured=is_featured,
        min_price=min_price,
        max_price=max_price,
        sort=sort,
    )
    return _listing(products, page, limit)


@product_router.get("/search")
async def search(
    q: str | None = None,
    category: str | None = None,
    min_price: float | None = Query(None, ge=0),
    max_price: float | None = Query(None, ge=0),
    rating: float | None = Query(None, ge=0, le=5),
    page: int = Query(1, ge=1),
    limit: int = Query(PAGE_SIZE, ge=1, le=100),
):
    products = search_products(q=q, category=category, min_price=min_price, max_price=max_price, rating=rating)
    return _listing(products, page, limit)


@product_router.get("/top")
async def top_products():
    products = top_rated()
    return ok(data=[product_view(p, with_reviews=False) for p in products], count=len(products))


@product_router.get("/featured")
async def featured_products():
    products = featured()
    return ok(data=[product_view(p, with_reviews=False) for p in products], count=len(products))


@product_router.get("/category/{category}")
async def category_products(
    category: str,
    page: int = Query(1, ge=1),
    limit: int = Query(PAGE_SIZE, ge=1, le=100),
):
    return _listing(in_category(category), page, limit)


@product_router.get("/{product_id}")
async def get_product(product_id: str):
    return ok(data=product_view(active_product(product_id)))


@product_router.get("/{product_id}/reviews")
async def get_reviews(product_id: str):
    product = active_product(product_id)
    reviews = sorted(product.reviews, key=lambda review: review.created_at, reverse=True)
    return ok(data=[review_view(review) for review in reviews], count=len(reviews))


@product_router.post("/{product_id}/reviews", status_code=201)
async def add_review(product_id: str, body: AddReviewRequest, user: User = Depends(current_user)):
    active_product(product_id)
    review_id = current_domain.process(
        AddReview(
            product_id=product_id,
            user_id=str(user.id),
            name=user.name,
            rating=body.rating,
            comment=body.comment,
        ),
        asynchronous=False,
    )
    review = next(r for r in load_product(product_id).reviews if str(r.id) == review_id)
    return ok(data=review_view(review), status_code=201, message="Review added")


@product_router.delete("/{product_id}/reviews/{review_id}")
async def delete_review(product_id: str, review_id: str, user: User = Depends(current_user)):
    current_domain.process(
        DeleteReview(product_id=product_id, review_id=review_id, user_id=str(user.id), is_admin=user.is_admin),
        asynchronous=False,
    )
    return ok(message="Review deleted")


# --- Back-office endpoints ---


@product_router.post("", status_code=201)
async def create_product(body: CreateProductRequest, _: User = Depends(admin_user)):
    command = CreateProduct(
        name=body.name,
        description=body.description,
        price=body.price,
        original_price=body.original_price,
        category=body.category,
        brand=body.brand,
        stock=body.stock,
        is_featured=body.is_featured,
        images=json.dumps([image.model_dump() for image in body.images]),
    )
    product_id = current_domain.process(command, asynchronous=False)
    return ok(data=product_view(load_product(product_id)), status_code=201)


@product_router.put("/{product_id}")
async def update_product(product_id: str, body: UpdateProductRequest, _: User = Depends(admin_user)):
    command = UpdateProduct(
        product_id=product_id,
        name=body.name,
        description=body.description,
        price=body.price,
        original_price=body.original_price,
        category=body.category,
        brand=body.brand,
        stock=body.stock,
    )
    current_domain.process(command, asynchronous=False)
    return ok(data=product_view(load_product(product_id)))


@product_router.delete("/{product_id}")
async def delete_product(product_id: str, _: User = Depends(admin_user)):
    current_domain.process(DeleteProduct(product_id=product_id), asynchronous=False)
    return ok(message="Product deleted")


@product_router.post("/{product_id}/images", status_code=201)
async def add_product_image(product_id: str, body: AddProductImageRequest, _: User = Depends(admin_user)):
    current_domain.process(
        AddProductImage(product_id=product_id, url=body.url, public_id=body.public_id),
        asynchronous=False,
    )
    return ok(data=product_view(load_product(product_id), with_reviews=False), status_code=201)
