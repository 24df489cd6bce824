# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Integration tests for role and permission API endpoints."""

from dealerdesk.models import Role, User
from dealerdesk.rbac import resources

SALES_ROUTE = "/dashboard/agreements/sales"


class TestUserPermissionsEndpoint:
    """Tests for GET /api/v1/rbac/user-permissions endpoint."""

    def test_requires_authentication(self, client):
        response = client.get("/api/v1/rbac/user-permissions")
        assert response.status_code == 401

    def test_invalid_session(self, client, dealer):
        client.cookies.set("session", "not-a-session")
        response = client.get("/api/v1/rbac/user-permissions")
        assert response.status_code == 401
        assert response.json()["detail"] == "Invalid or expired session"

    def test_dealer_admin(self, dealer_admin_client):
        response = dealer_admin_client.get("/api/v1/rbac/user-permissions")
        assert response.status_code == 200
        data = response.json()
        assert data["role"]["name"] == "Admin"
        assert list(data["resources"]) == [
            resources.ROLES,
            resources.CUSTOMERS,
            resources.VEHICLES,
            resources.AGREEMENTS,
        ]
        assert data["resources"][resources.VEHICLES]["permissions"]["can_update"]

    def test_super_admin_sees_private_resources(self, super_admin_client):
        response = super_admin_client.get("/api/v1/rbac/user-permissions")
        assert response.status_code == 200
        assert resources.CORPORATIONS in response.json()["resources"]


class TestResourcesEndpoint:
    """Tests for GET /api/v1/rbac/resources endpoint."""

    def test_lists_public_resources(self, dealer_admin_client):
        response = dealer_admin_client.get("/api/v1/rbac/resources")
        assert response.status_code == 200
        ids = [r["id"] for r in response.json()]
        assert resources.CORPORATIONS not in ids
        assert ids[0] == resources.DASHBOARD

    def test_subresources_included(self, dealer_admin_client):
        response = dealer_admin_client.get("/api/v1/rbac/resources")
        agreements = next(
            r for r in response.json() if r["id"] == resources.AGREEMENTS
        )
        assert agreements["has_subresources"] is True
        assert agreements["subresources"][0]["route"] == SALES_ROUTE


class TestRolesEndpoints:
    """Tests for /api/v1/rbac/roles endpoints."""

    def test_requires_authentication(self, client):
        response = client.get("/api/v1/rbac/roles")
        assert response.status_code == 401

    def test_denied_without_roles_permission(self, sales_client):
        response = sales_client.get("/api/v1/rbac/roles")
        assert response.status_code == 403
        assert (
            response.json()["detail"]
            == "You don't have permission to read this resource"
        )

    def test_list_roles(self, dealer_admin_client, sales_role):
        response = dealer_admin_client.get("/api/v1/rbac/roles")
        assert response.status_code == 200
        names = {role["name"] for role in response.json()}
        assert names == {"Admin", "Sales"}

    def test_create_role(self, dealer_admin_client):
        response = dealer_admin_client.post(
            "/api/v1/rbac/roles",
            json={"name": "Workshop", "description": "Service staff"},
        )
        assert response.status_code == 201
        data = response.json()
        assert data["is_system"] is False
        assert data["permissions_count"] == 4
        assert not any(
            entry["permissions"]["can_read"] for entry in data["permissions"]
        )

    def test_create_duplicate_role(self, dealer_admin_client, sales_role):
        response = dealer_admin_client.post(
            "/api/v1/rbac/roles", json={"name": "Sales"}
        )
        assert response.status_code == 409

    def test_create_role_validation(self, dealer_admin_client):
        response = dealer_admin_client.post("/api/v1/rbac/roles", json={"name": ""})
        assert response.status_code == 422

    def test_update_role(self, dealer_admin_client, sales_role):
        response = dealer_admin_client.put(
            f"/api/v1/rbac/roles/{sales_role.id}", json={"name": "Car Sales"}
        )
        assert response.status_code == 200
        assert response.json()["name"] == "Car Sales"

    def test_system_role_cannot_be_updated(
        self, dealer_admin_client, dealer_admin_role
    ):
        response = dealer_admin_client.put(
            f"/api/v1/rbac/roles/{dealer_admin_role.id}", json={"name": "Boss"}
        )
        assert response.status_code == 403
        assert response.json()["detail"] == "System roles cannot be modified"

    def test_system_role_cannot_be_deleted(
        self, dealer_admin_client, dealer_admin_role
    ):
        response = dealer_admin_client.delete(
            f"/api/v1/rbac/roles/{dealer_admin_role.id}"
        )
        assert response.status_code == 403

    def test_delete_role(self, dealer_admin_client, db_session, sales_role):
        role_id = sales_role.id

        response = dealer_admin_client.delete(f"/api/v1/rbac/roles/{role_id}")

        assert response.status_code == 204
        assert db_session.get(Role, role_id) is None

    def test_role_of_other_corporation_not_found(
        self, super_admin_client, sales_role
    ):
        response = super_admin_client.put(
            f"/api/v1/rbac/roles/{sales_role.id}", json={"name": "Hijacked"}
        )
        assert response.status_code == 404
        assert response.json()["detail"] == "Role not found"


class TestRolePermissionsEndpoint:
    """Tests for PUT /api/v1/rbac/roles/{role_id}/permissions endpoint."""

    def test_replace_permissions(self, dealer_admin_client, sales_role):
        response = dealer_admin_client.put(
            f"/api/v1/rbac/roles/{sales_role.id}/permissions",
            json={
                "permissions": [
                    {
                        "resource_id": resources.AGREEMENTS,
                        "can_read": True,
                        "subresources": [
                            {"route": SALES_ROUTE, "can_read": True, "can_create": True}
                        ],
                    },
                    {"resource_id": resources.VEHICLES, "can_read": True},
                ]
            },
        )
        assert response.status_code == 200
        data = response.json()
        assert [entry["resource_id"] for entry in data] == [
            resources.ROLES,
            resources.CUSTOMERS,
            resources.VEHICLES,
            resources.AGREEMENTS,
        ]
        agreements = data[-1]
        sales = next(s for s in agreements["subresources"] if s["route"] == SALES_ROUTE)
        assert sales["permissions"]["can_create"] is True

    def test_granted_permission_opens_gate(
        self, dealer_admin_client, make_session, sales_role, sales_user
    ):
        response = dealer_admin_client.put(
            f"/api/v1/rbac/roles/{sales_role.id}/permissions",
            json={"permissions": [{"resource_id": resources.ROLES, "can_read": True}]},
        )
        assert response.status_code == 200

        # Continue as the sales user
        token = make_session(sales_user.id)
        dealer_admin_client.cookies.set("session", token)

        assert dealer_admin_client.get("/api/v1/rbac/roles").status_code == 200
        response = dealer_admin_client.post("/api/v1/rbac/roles", json={"name": "Intern"})
        assert response.status_code == 403

    def test_system_role_permissions_locked(
        self, dealer_admin_client, dealer_admin_role
    ):
        response = dealer_admin_client.put(
            f"/api/v1/rbac/roles/{dealer_admin_role.id}/permissions",
            json={"permissions": [{"resource_id": resources.VEHICLES}]},
        )
        assert response.status_code == 403
        assert response.json()["detail"] == "Cannot modify system role permissions"

    def test_resource_outside_entitlement(self, dealer_admin_client, sales_role):
        response = dealer_admin_client.put(
            f"/api/v1/rbac/roles/{sales_role.id}/permissions",
            json={"permissions": [{"resource_id": resources.INVOICES, "can_read": True}]},
        )
        assert response.status_code == 403

    def test_unknown_resource(self, dealer_admin_client, sales_role):
        response = dealer_admin_client.put(
            f"/api/v1/rbac/roles/{sales_role.id}/permissions",
            json={"permissions": [{"resource_id": "SPACESHIPS"}]},
        )
        assert response.status_code == 422
        assert "SPACESHIPS" in response.json()["detail"]


class TestUserRoleEndpoint:
    """Tests for PUT /api/v1/rbac/users/{user_id}/role endpoint."""

    def test_assign_custom_role(self, dealer_admin_client, db_session, dealer, sales_role):
        admin = db_session.query(User).filter(User.email == "admin@bilhallen.se").one()

        response = dealer_admin_client.put(
            f"/api/v1/rbac/users/{admin.id}/role",
            json={"role_id": str(sales_role.id)},
        )

        assert response.status_code == 200
        data = response.json()
        assert data["email"] == "admin@bilhallen.se"
        assert data["role_id"] == str(sales_role.id)

    def test_clear_role(self, dealer_admin_client, sales_user):
        response = dealer_admin_client.put(
            f"/api/v1/rbac/users/{sales_user.id}/role", json={"role_id": None}
        )

        assert response.status_code == 200
        assert response.json()["role_id"] is None

    def test_role_of_other_corporation_rejected(
        self, dealer_admin_client, db_session, system_corporation, sales_user
    ):
        foreign_role = (
            db_session.query(Role)
            .filter(Role.corporation_id == system_corporation.id)
            .first()
        )

        response = dealer_admin_client.put(
            f"/api/v1/rbac/users/{sales_user.id}/role",
            json={"role_id": str(foreign_role.id)},
        )

        assert response.status_code == 422

    def test_user_of_other_corporation_not_found(
        self, dealer_admin_client, db_session, system_corporation, sales_role
    ):
        super_admin = (
            db_session.query(User)
            .filter(User.corporation_id == system_corporation.id)
            .first()
        )

        response = dealer_admin_client.put(
            f"/api/v1/rbac/users/{super_admin.id}/role",
            json={"role_id": str(sales_role.id)},
        )

        assert response.status_code == 404
        assert response.json()["detail"] == "User not found"

    def test_requires_roles_update_permission(self, sales_client, sales_user):
        response = sales_client.put(
            f"/api/v1/rbac/users/{sales_user.id}/role", json={"role_id": None}
        )

        assert response.status_code == 403
