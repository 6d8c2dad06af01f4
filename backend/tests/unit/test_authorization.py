"""Tests for the role authorization guard."""
import uuid

import pytest

from app.exceptions import ForbiddenError
from app.models.user import UserRole
from app.services.authorization import Action, Resource, authorize, is_allowed
from app.services.principal import Principal

TENANT_A = uuid.uuid4()
TENANT_B = uuid.uuid4()


def make_principal(role, tenant_id=TENANT_A):
    return Principal(
        id=uuid.uuid4(),
        email=f"{role.value}@example.com",
        full_name="Someone",
        role=role,
        tenant_id=None if role == UserRole.SUPER_ADMIN else tenant_id,
    )


@pytest.fixture
def user():
    return make_principal(UserRole.USER)


@pytest.fixture
def admin():
    return make_principal(UserRole.TENANT_ADMIN)


@pytest.fixture
def root():
    return make_principal(UserRole.SUPER_ADMIN)


class TestProjectRules:
    """Ownership only binds plain users."""

    def test_user_can_update_own_project(self, user):
        resource = Resource(tenant_id=TENANT_A, owner_id=user.id)
        authorize(user, Action.UPDATE_PROJECT, resource)
        authorize(user, Action.DELETE_PROJECT, resource)

    def test_user_cannot_update_someone_elses_project(self, user):
        resource = Resource(tenant_id=TENANT_A, owner_id=uuid.uuid4())
        with pytest.raises(ForbiddenError):
            authorize(user, Action.UPDATE_PROJECT, resource)
        with pytest.raises(ForbiddenError):
            authorize(user, Action.DELETE_PROJECT, resource)

    def test_user_cannot_update_orphaned_project(self, user):
        assert not is_allowed(user, Action.UPDATE_PROJECT, Resource(tenant_id=TENANT_A, owner_id=None))

    def test_tenant_admin_bypasses_ownership(self, admin):
        resource = Resource(tenant_id=TENANT_A, owner_id=uuid.uuid4())
        assert is_allowed(admin, Action.UPDATE_PROJECT, resource)
        assert is_allowed(admin, Action.DELETE_PROJECT, resource)

    def test_tenant_admin_limited_to_own_tenant(self, admin):
        resource = Resource(tenant_id=TENANT_B, owner_id=admin.id)
        assert not is_allowed(admin, Action.UPDATE_PROJECT, resource)

    def test_super_admin_any_tenant(self, root):
        resource = Resource(tenant_id=TENANT_B, owner_id=uuid.uuid4())
        assert is_allowed(root, Action.DELETE_PROJECT, resource)
        assert is_allowed(root, Action.CREATE_PROJECT, Resource(tenant_id=TENANT_B))

    @pytest.mark.parametrize("role", list(UserRole))
    def test_everyone_can_create_project_in_scope(self, role):
        principal = make_principal(role)
        assert is_allowed(principal, Action.CREATE_PROJECT)


class TestTaskRules:
    @pytest.mark.parametrize("action", [Action.CREATE_TASK, Action.UPDATE_TASK, Action.DELETE_TASK])
    def test_any_member_in_own_tenant(self, user, action):
        assert is_allowed(user, action, Resource(tenant_id=TENANT_A))
        assert not is_allowed(user, action, Resource(tenant_id=TENANT_B))

    def test_super_admin_any_task(self, root):
        assert is_allowed(root, Action.DELETE_TASK, Resource(tenant_id=TENANT_B))


class TestUserManagement:
    def test_only_tenant_admin_adds_users(self, user, admin, root):
        assert is_allowed(admin, Action.ADD_USER)
        assert not is_allowed(user, Action.ADD_USER)
        assert not is_allowed(root, Action.ADD_USER)

    def test_profile_is_self_only(self, user, admin, root):
        for principal in (user, admin, root):
            own = Resource(tenant_id=principal.tenant_id, user_id=principal.id)
            other = Resource(tenant_id=principal.tenant_id, user_id=uuid.uuid4())
            assert is_allowed(principal, Action.UPDATE_PROFILE, own)
            assert not is_allowed(principal, Action.UPDATE_PROFILE, other)

    def test_access_changes_by_tenant_admin_only(self, user, admin, root):
        target = Resource(tenant_id=TENANT_A, user_id=uuid.uuid4(), role="user")
        assert is_allowed(admin, Action.UPDATE_USER_ACCESS, target)
        assert not is_allowed(user, Action.UPDATE_USER_ACCESS, target)
        assert not is_allowed(root, Action.UPDATE_USER_ACCESS, target)

    def test_tenant_admin_cannot_demote_self(self, admin):
        own = Resource(tenant_id=TENANT_A, user_id=admin.id, role="tenant_admin")
        with pytest.raises(ForbiddenError, match="own role"):
            authorize(admin, Action.UPDATE_USER_ACCESS, own)

    def test_delete_user(self, user, admin, root):
        target = Resource(tenant_id=TENANT_A, user_id=uuid.uuid4(), role="user")
        assert is_allowed(admin, Action.DELETE_USER, target)
        assert is_allowed(root, Action.DELETE_USER, target)
        assert not is_allowed(user, Action.DELETE_USER, target)
        assert not is_allowed(admin, Action.DELETE_USER, Resource(tenant_id=TENANT_B, user_id=uuid.uuid4()))

    def test_nobody_deletes_themselves(self, admin, root):
        with pytest.raises(ForbiddenError, match="your own account"):
            authorize(admin, Action.DELETE_USER, Resource(tenant_id=TENANT_A, user_id=admin.id))
        with pytest.raises(ForbiddenError):
            authorize(root, Action.DELETE_USER, Resource(tenant_id=None, user_id=root.id, role="super_admin"))

    def test_super_admin_targets_are_protected(self, root):
        other_root = Resource(tenant_id=None, user_id=uuid.uuid4(), role="super_admin")
        assert not is_allowed(root, Action.DELETE_USER, other_root)


class TestTenantRules:
    def test_tenant_name(self, user, admin, root):
        assert is_allowed(admin, Action.UPDATE_TENANT_NAME, Resource(tenant_id=TENANT_A))
        assert not is_allowed(admin, Action.UPDATE_TENANT_NAME, Resource(tenant_id=TENANT_B))
        assert not is_allowed(user, Action.UPDATE_TENANT_NAME, Resource(tenant_id=TENANT_A))
        assert is_allowed(root, Action.UPDATE_TENANT_NAME, Resource(tenant_id=TENANT_B))

    @pytest.mark.parametrize("action", [
        Action.VIEW_TENANT_SUBSCRIPTION,
        Action.UPDATE_TENANT_SUBSCRIPTION,
        Action.UPDATE_TENANT_STATUS,
        Action.VIEW_SYSTEM_STATS,
        Action.LIST_ALL_TENANTS,
        Action.LIST_ALL_USERS,
    ])
    def test_super_admin_only(self, user, admin, root, action):
        assert is_allowed(root, action)
        assert not is_allowed(admin, action)
        assert not is_allowed(user, action)
        with pytest.raises(ForbiddenError):
            authorize(admin, action)
