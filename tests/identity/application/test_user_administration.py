"""Application tests for back-office user management."""

import pytest
from protean import current_domain
from protean.exceptions import ObjectNotFoundError

from storefront.identity.administration import DeleteUser, UpdateUserAccount
from storefront.identity.queries import search_customers
from storefront.identity.user import User
from storefront.shared.errors import Conflict, Forbidden


@pytest.fixture()
def admin(make_user):
    return make_user(name="Store Admin", email="admin@example.com", role="admin")


class TestUpdateUserAccount:
    def test_deactivate_shopper(self, admin, make_user):
        shopper = make_user(email="aziz@example.com")

        current_domain.process(
            UpdateUserAccount(actor_id=str(admin.id), user_id=str(shopper.id), is_active=False, is_verified=True),
            asynchronous=False,
        )

        stored = current_domain.repository_for(User).get(shopper.id)
        assert stored.is_active is False
        assert stored.is_verified is True

    def test_promote_shopper(self, admin, make_user):
        shopper = make_user(email="aziz@example.com")
        current_domain.process(
            UpdateUserAccount(actor_id=str(admin.id), user_id=str(shopper.id), role="admin"),
            asynchronous=False,
        )
        assert current_domain.repository_for(User).get(shopper.id).is_admin

    def test_other_admins_are_off_limits(self, admin, make_user):
        other = make_user(email="other-admin@example.com", role="admin")
        with pytest.raises(Forbidden) as exc:
            current_domain.process(
                UpdateUserAccount(actor_id=str(admin.id), user_id=str(other.id), name="Renamed"),
                asynchronous=False,
            )
        assert exc.value.message == "Cannot update other admin users"

    def test_email_in_use(self, admin, make_user):
        shopper = make_user(email="aziz@example.com")
        with pytest.raises(Conflict):
            current_domain.process(
                UpdateUserAccount(actor_id=str(admin.id), user_id=str(shopper.id), email="admin@example.com"),
                asynchronous=False,
            )


class TestDeleteUser:
    def test_delete_shopper(self, admin, make_user):
        shopper = make_user(email="aziz@example.com")

        current_domain.process(DeleteUser(actor_id=str(admin.id), user_id=str(shopper.id)), asynchronous=False)

        with pytest.raises(ObjectNotFoundError):
            current_domain.repository_for(User).get(shopper.id)

    def test_admins_cannot_be_deleted(self, admin, make_user):
        other = make_user(email="other-admin@example.com", role="admin")
        with pytest.raises(Forbidden) as exc:
            current_domain.process(DeleteUser(actor_id=str(admin.id), user_id=str(other.id)), asynchronous=False)
        assert exc.value.message == "Cannot delete admin users"


class TestSearchCustomers:
    def test_only_shoppers_newest_first(self, admin, make_user):
        first = make_user(name="Aziz Rahimov", email="aziz@example.com")
        second = make_user(name="Kamola Yusupova", email="kamola@example.com")

        customers = search_customers()

        assert [c.id for c in customers] == [second.id, first.id]

    def test_matches_name_or_email(self, make_user):
        make_user(name="Aziz Rahimov", email="aziz@example.com")
        make_user(name="Kamola Yusupova", email="k.yusupova@mail.uz")

        assert [c.name for c in search_customers("rahim")] == ["Aziz Rahimov"]
        assert [c.name for c in search_customers("MAIL.UZ")] == ["Kamola Yusupova"]
