# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Tests for role_service."""

import uuid

import pytest

from dealerdesk.database import atomic
from dealerdesk.exceptions import (
    ConflictError,
    ForbiddenError,
    NotFoundError,
    ValidationError,
)
from dealerdesk.models import Permission, Role, User
from dealerdesk.rbac.actions import Action
from dealerdesk.rbac.roles import ADMIN_ROLE_NAME, SUPER_ADMIN_ROLE_NAME
from dealerdesk.schemas.rbac import RoleUpdateSchema
from dealerdesk.services import permission_service, role_service


def test_onboarded_corporation_has_admin_role(db_session, dealer):
    role = role_service.get_system_role(db_session, dealer.id)

    assert role.name == ADMIN_ROLE_NAME
    assert role.is_system is True
    assert "Bilhallen AB" in role.description


def test_system_corporation_has_super_admin_role(db_session, system_corporation):
    role = role_service.get_system_role(db_session, system_corporation.id)

    assert role.name == SUPER_ADMIN_ROLE_NAME


def test_create_system_admin_role_is_idempotent(db_session, dealer):
    first = role_service.get_system_role(db_session, dealer.id)

    again = role_service.create_system_admin_role(db_session, dealer.id, "Bilhallen AB")

    assert again.id == first.id
    assert (
        db_session.query(Role)
        .filter(Role.corporation_id == dealer.id, Role.is_system.is_(True))
        .count()
        == 1
    )


def test_second_system_role_rejected(db_session, dealer):
    with pytest.raises(ConflictError):
        with atomic(db_session):
            db_session.add(
                Role(corporation_id=dealer.id, name="Shadow Admin", is_system=True)
            )
            db_session.flush()


def test_create_custom_role(db_session, dealer):
    role = role_service.create_custom_role(db_session, dealer.id, "Workshop")

    assert role.is_system is False
    assert role.corporation_id == dealer.id
    assert len(role.permissions) == 4


def test_create_custom_role_duplicate_name(db_session, dealer, sales_role):
    with pytest.raises(ConflictError):
        role_service.create_custom_role(db_session, dealer.id, "Sales")


def test_same_role_name_in_other_corporation(db_session, system_corporation, sales_role):
    role = role_service.create_custom_role(db_session, system_corporation.id, "Sales")

    assert role.corporation_id == system_corporation.id


def test_get_role_scoped_to_corporation(db_session, system_corporation, sales_role):
    with pytest.raises(NotFoundError, match="Role not found"):
        role_service.get_role(db_session, sales_role.id, corp_id=system_corporation.id)


def test_list_roles_newest_first(db_session, dealer, sales_role):
    roles = role_service.list_roles(db_session, dealer.id)

    assert [r["name"] for r in roles] == ["Sales", ADMIN_ROLE_NAME]
    assert roles[0]["permissions_count"] == 4


def test_update_custom_role(db_session, sales_role):
    role = role_service.update_role(
        db_session,
        sales_role.id,
        RoleUpdateSchema(name="Car Sales", description="Sells cars"),
    )

    assert role.name == "Car Sales"
    assert role.description == "Sells cars"


def test_update_role_to_existing_name(db_session, dealer, sales_role):
    with pytest.raises(ConflictError):
        role_service.update_role(
            db_session, sales_role.id, RoleUpdateSchema(name=ADMIN_ROLE_NAME)
        )


def test_system_role_cannot_be_updated(db_session, dealer_admin_role):
    with pytest.raises(ForbiddenError, match="cannot be modified"):
        role_service.update_role(
            db_session, dealer_admin_role.id, RoleUpdateSchema(name="Boss")
        )


def test_system_role_cannot_be_deleted(db_session, dealer_admin_role):
    with pytest.raises(ForbiddenError, match="cannot be deleted"):
        role_service.delete_role(db_session, dealer_admin_role.id)

    assert db_session.get(Role, dealer_admin_role.id) is not None


def test_delete_role_removes_permissions(db_session, sales_role):
    role_id = sales_role.id

    role_service.delete_role(db_session, role_id)

    assert db_session.get(Role, role_id) is None
    assert db_session.query(Permission).filter(Permission.role_id == role_id).count() == 0


def test_delete_role_leaves_users_without_role(db_session, sales_user, sales_role):
    role_id = sales_role.id

    role_service.delete_role(db_session, role_id)

    user = db_session.get(User, sales_user.id)
    assert user.role_id is None
    assert not permission_service.check(
        db_session, user.role_id, "VEHICLES", Action.READ
    )


def _lose_the_race(monkeypatch):
    """Make the first system role lookup miss, as if another request was first."""
    real_get_system_role = role_service.get_system_role
    calls = []

    def get_system_role(db, corp_id):
        calls.append(corp_id)
        if len(calls) == 1:
            return None
        return real_get_system_role(db, corp_id)

    monkeypatch.setattr(role_service, "get_system_role", get_system_role)
    return calls


def test_create_system_admin_role_returns_concurrently_created_role(
    db_session, dealer, dealer_admin_role, monkeypatch
):
    admin_role_id = dealer_admin_role.id
    calls = _lose_the_race(monkeypatch)

    role = role_service.create_system_admin_role(db_session, dealer.id, "Bilhallen AB")

    assert len(calls) == 2
    assert role.id == admin_role_id
    assert (
        db_session.query(Role)
        .filter(Role.corporation_id == dealer.id, Role.is_system.is_(True))
        .count()
        == 1
    )


def test_concurrent_system_role_keeps_outer_transaction_usable(
    db_session, dealer, dealer_admin_role, monkeypatch
):
    admin_role_id = dealer_admin_role.id
    _lose_the_race(monkeypatch)

    with atomic(db_session):
        role = role_service.create_system_admin_role(
            db_session, dealer.id, "Bilhallen AB"
        )
        workshop = role_service.create_custom_role(db_session, dealer.id, "Workshop")

    assert role.id == admin_role_id
    assert db_session.get(Role, workshop.id) is not None


class TestAssignRoleToUser:
    def test_assign_role(self, db_session, dealer, sales_role):
        admin = db_session.query(User).filter(User.email == "admin@bilhallen.se").one()

        user = role_service.assign_role_to_user(db_session, admin.id, sales_role.id)

        assert user.role_id == sales_role.id
        db_session.expire_all()
        assert db_session.get(User, admin.id).role_id == sales_role.id

    def test_clear_role(self, db_session, sales_user):
        user = role_service.assign_role_to_user(db_session, sales_user.id, None)

        assert user.role_id is None
        assert not permission_service.check(
            db_session, user.role_id, "VEHICLES", Action.READ
        )

    def test_role_of_other_corporation_rejected(
        self, db_session, system_corporation, sales_user, sales_role
    ):
        super_admin_role = role_service.get_system_role(
            db_session, system_corporation.id
        )

        with pytest.raises(ValidationError, match="Invalid role ID"):
            role_service.assign_role_to_user(
                db_session, sales_user.id, super_admin_role.id
            )

        db_session.expire_all()
        assert db_session.get(User, sales_user.id).role_id == sales_role.id

    def test_unknown_role_rejected(self, db_session, sales_user):
        with pytest.raises(ValidationError):
            role_service.assign_role_to_user(db_session, sales_user.id, uuid.uuid4())

    def test_user_outside_corporation_not_found(
        self, db_session, system_corporation, sales_user, sales_role
    ):
        with pytest.raises(NotFoundError, match="User not found"):
            role_service.assign_role_to_user(
                db_session,
                sales_user.id,
                sales_role.id,
                corp_id=system_corporation.id,
            )

    def test_unknown_user(self, db_session, sales_role):
        with pytest.raises(NotFoundError):
            role_service.assign_role_to_user(db_session, uuid.uuid4(), sales_role.id)
