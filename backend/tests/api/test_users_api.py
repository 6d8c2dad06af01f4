"""API tests for user management."""
from sqlalchemy import select

from app.models.audit_log import AuditLog

NEW_USER = {"email": "New@Acme.com", "password": "Passw0rd1", "fullName": "New Person"}


class TestAddUser:
    def test_tenant_admin_adds_user(self, client, auth_headers, tenant_admin, sample_tenant):
        response = client.post("/api/users", json=NEW_USER, headers=auth_headers(tenant_admin))

        assert response.status_code == 201
        data = response.json()["data"]
        assert data["email"] == "new@acme.com"
        assert data["role"] == "user"
        assert data["tenantId"] == str(sample_tenant.id)
        assert "hashedPassword" not in data

    def test_member_cannot_add(self, client, auth_headers, member):
        response = client.post("/api/users", json=NEW_USER, headers=auth_headers(member))
        assert response.status_code == 403

    def test_super_admin_cannot_add(self, client, auth_headers, super_admin):
        response = client.post("/api/users", json=NEW_USER, headers=auth_headers(super_admin))
        assert response.status_code == 403

    def test_cannot_create_super_admin(self, client, auth_headers, tenant_admin):
        response = client.post(
            "/api/users", json={**NEW_USER, "role": "super_admin"}, headers=auth_headers(tenant_admin)
        )
        assert response.status_code == 400

    def test_duplicate_email_in_tenant(self, client, auth_headers, tenant_admin, member):
        response = client.post(
            "/api/users", json={**NEW_USER, "email": "MEMBER@acme.com"}, headers=auth_headers(tenant_admin)
        )
        assert response.status_code == 409
        assert response.json()["message"] == "User with this email already exists in this tenant"

    def test_weak_password(self, client, auth_headers, tenant_admin):
        response = client.post(
            "/api/users", json={**NEW_USER, "password": "short"}, headers=auth_headers(tenant_admin)
        )
        assert response.status_code == 400
        assert response.json()["errors"][0]["field"] == "password"

    def test_user_quota(self, client, auth_headers, make_tenant, make_user):
        tenant = make_tenant("tiny", max_users=2)
        admin = make_user(tenant, email="admin@tiny.com", role="tenant_admin")
        headers = auth_headers(admin)

        assert client.post("/api/users", json=NEW_USER, headers=headers).status_code == 201
        response = client.post("/api/users", json={**NEW_USER, "email": "third@tiny.com"}, headers=headers)
        assert response.status_code == 409
        assert response.json()["message"] == (
            "User limit reached. Maximum 2 users allowed for your subscription plan"
        )


class TestListUsers:
    def test_filters(self, client, auth_headers, tenant_admin, member):
        headers = auth_headers(member)
        admins = client.get("/api/users?role=tenant_admin", headers=headers).json()["data"]
        assert [u["id"] for u in admins] == [str(tenant_admin.id)]

        found = client.get("/api/users?search=member", headers=headers).json()
        assert found["pagination"]["total"] == 1

    def test_inactive_filter(self, client, auth_headers, tenant_admin, make_user, sample_tenant):
        make_user(sample_tenant, email="gone@acme.com", is_active=False)
        data = client.get("/api/users?isActive=false", headers=auth_headers(tenant_admin)).json()["data"]
        assert [u["email"] for u in data] == ["gone@acme.com"]


class TestUpdateUser:
    def test_update_own_profile(self, client, auth_headers, member):
        response = client.put(
            f"/api/users/{member.id}", json={"fullName": "Renamed Member"}, headers=auth_headers(member)
        )
        assert response.status_code == 200
        assert response.json()["data"]["fullName"] == "Renamed Member"

    def test_new_password_works_for_login(self, client, auth_headers, member):
        client.put(f"/api/users/{member.id}", json={"password": "N3wPassword"}, headers=auth_headers(member))
        response = client.post(
            "/api/auth/login",
            json={"email": "member@acme.com", "password": "N3wPassword", "tenantSubdomain": "acme"},
        )
        assert response.status_code == 200

    def test_member_cannot_edit_others(self, client, auth_headers, member, tenant_admin):
        response = client.put(
            f"/api/users/{tenant_admin.id}", json={"fullName": "Hacked"}, headers=auth_headers(member)
        )
        assert response.status_code == 403

    def test_member_cannot_change_own_role(self, client, auth_headers, member):
        response = client.put(
            f"/api/users/{member.id}", json={"role": "tenant_admin"}, headers=auth_headers(member)
        )
        assert response.status_code == 403

    def test_admin_changes_access(self, client, auth_headers, tenant_admin, member):
        response = client.put(
            f"/api/users/{member.id}",
            json={"role": "tenant_admin", "isActive": False},
            headers=auth_headers(tenant_admin),
        )
        data = response.json()["data"]
        assert response.status_code == 200
        assert data["role"] == "tenant_admin"
        assert data["isActive"] is False

    def test_admin_cannot_demote_self(self, client, auth_headers, tenant_admin):
        response = client.put(
            f"/api/users/{tenant_admin.id}", json={"role": "user"}, headers=auth_headers(tenant_admin)
        )
        assert response.status_code == 403
        assert response.json()["message"] == "You cannot change your own role or active status"

    def test_empty_update(self, client, auth_headers, member):
        response = client.put(f"/api/users/{member.id}", json={}, headers=auth_headers(member))
        assert response.status_code == 400


class TestDeleteUser:
    def test_admin_deletes_member(self, client, db_session, auth_headers, tenant_admin, member):
        member_id = member.id
        response = client.delete(f"/api/users/{member_id}", headers=auth_headers(tenant_admin))

        assert response.status_code == 200
        assert response.json()["message"] == "User deleted successfully"
        assert client.get(f"/api/users/{member_id}", headers=auth_headers(tenant_admin)).status_code == 404
        db_session.expire_all()
        audit = db_session.scalars(select(AuditLog)).one()
        assert audit.action == "DELETE_USER"
        assert audit.entity_id == str(member_id)

    def test_cannot_delete_self(self, client, auth_headers, tenant_admin):
        response = client.delete(f"/api/users/{tenant_admin.id}", headers=auth_headers(tenant_admin))
        assert response.status_code == 403
        assert response.json()["message"] == "You cannot delete your own account"

    def test_member_cannot_delete(self, client, auth_headers, tenant_admin, member):
        response = client.delete(f"/api/users/{tenant_admin.id}", headers=auth_headers(member))
        assert response.status_code == 403

    def test_super_admin_deletes_across_tenants(self, client, auth_headers, super_admin, member):
        response = client.delete(f"/api/users/{member.id}", headers=auth_headers(super_admin))
        assert response.status_code == 200

    def test_super_admin_is_protected(self, client, auth_headers, make_user, super_admin):
        other_root = make_user(None, email="root2@system.com", role="super_admin")
        response = client.delete(f"/api/users/{other_root.id}", headers=auth_headers(super_admin))
        assert response.status_code == 403
