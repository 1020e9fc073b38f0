"""Tests for reviews embedded in the Product aggregate."""

import pytest

from storefront.catalogue.events import ReviewAdded, ReviewRemoved
from storefront.catalogue.product import Product
from storefront.shared.errors import Conflict, Forbidden, NotFound


@pytest.fixture()
def product():
    product = Product.create(
        name="Ceramic Pour-Over Set",
        description="Dripper and carafe",
        price=42.0,
        category="Home & Kitchen",
        stock=8,
    )
    product._events.clear()
    return product


class TestAddReview:
    def test_first_review_sets_summary(self, product):
        review = product.add_review(user_id="user-1", name="Aziz", rating=4, comment="Nice glaze")

        assert review.rating == 4
        assert product.num_reviews == 1
        assert product.rating == 4.0
        assert isinstance(product._events[-1], ReviewAdded)

    def test_average_over_reviews(self, product):
        product.add_review(user_id="user-1", name="Aziz", rating=5, comment="Great")
        product.add_review(user_id="user-2", name="Kamola", rating=2, comment="Chipped")
        assert product.num_reviews == 2
        assert product.rating == 3.5

    def test_one_review_per_user(self, product):
        product.add_review(user_id="user-1", name="Aziz", rating=5, comment="Great")
        with pytest.raises(Conflict) as exc:
            product.add_review(user_id="user-1", name="Aziz", rating=1, comment="Changed my mind")
        assert exc.value.message == "Product already reviewed"
        assert product.num_reviews == 1
        assert product.rating == 5.0

    def test_review_by(self, product):
        product.add_review(user_id="user-1", name="Aziz", rating=5, comment="Great")
        assert product.review_by("user-1").comment == "Great"
        assert product.review_by("user-2") is None


class TestRemoveReview:
    def test_author_removes_last_review(self, product):
        review = product.add_review(user_id="user-1", name="Aziz", rating=5, comment="Great")

        product.remove_review(review.id, user_id="user-1")

        assert product.num_reviews == 0
        assert product.rating == 0.0
        assert isinstance(product._events[-1], ReviewRemoved)

    def test_summary_recomputed_after_removal(self, product):
        product.add_review(user_id="user-1", name="Aziz", rating=5, comment="Great")
        review = product.add_review(user_id="user-2", name="Kamola", rating=1, comment="Bad")

        product.remove_review(review.id, user_id="user-2")

        assert product.num_reviews == 1
        assert product.rating == 5.0

    def test_admin_may_remove_any_review(self, product):
        review = product.add_review(user_id="user-1", name="Aziz", rating=5, comment="Great")
        product.remove_review(review.id, user_id="admin-1", is_admin=True)
        assert product.num_reviews == 0

    def test_others_may_not(self, product):
        review = product.add_review(user_id="user-1", name="Aziz", rating=5, comment="Great")
        with pytest.raises(Forbidden) as exc:
            product.remove_review(review.id, user_id="user-2")
        assert exc.value.message == "Not authorized to delete this review"

    def test_unknown_review(self, product):
        with pytest.raises(NotFound) as exc:
            product.remove_review("missing", user_id="user-1")
        assert exc.value.message == "Review not found"
