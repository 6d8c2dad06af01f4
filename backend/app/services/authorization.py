"""Role authorization guard.

``authorize`` is the single source of truth for what each role may do.
Anything not granted below is denied.
"""
import logging
import uuid
from dataclasses import dataclass
from enum import Enum

from app.exceptions import ForbiddenError
from app.models.user import UserRole
from app.services.principal import Principal

logger = logging.getLogger(__name__)


class Action(str, Enum):
    CREATE_PROJECT = "create_project"
    VIEW_PROJECT = "view_project"
    UPDATE_PROJECT = "update_project"
    DELETE_PROJECT = "delete_project"
    CREATE_TASK = "create_task"
    VIEW_TASK = "view_task"
    UPDATE_TASK = "update_task"
    DELETE_TASK = "delete_task"
    ADD_USER = "add_user"
    VIEW_USER = "view_user"
    UPDATE_PROFILE = "update_profile"
    UPDATE_USER_ACCESS = "update_user_access"
    DELETE_USER = "delete_user"
    VIEW_TENANT = "view_tenant"
    UPDATE_TENANT_NAME = "update_tenant_name"
    VIEW_TENANT_SUBSCRIPTION = "view_tenant_subscription"
    UPDATE_TENANT_SUBSCRIPTION = "update_tenant_subscription"
    UPDATE_TENANT_STATUS = "update_tenant_status"
    VIEW_SYSTEM_STATS = "view_system_stats"
    LIST_ALL_TENANTS = "list_all_tenants"
    LIST_ALL_USERS = "list_all_users"
    LIST_ALL_PROJECTS = "list_all_projects"
    LIST_ALL_TASKS = "list_all_tasks"


_MEMBER_ACTIONS = frozenset({
    Action.CREATE_PROJECT,
    Action.VIEW_PROJECT,
    Action.UPDATE_PROJECT,
    Action.DELETE_PROJECT,
    Action.CREATE_TASK,
    Action.VIEW_TASK,
    Action.UPDATE_TASK,
    Action.DELETE_TASK,
    Action.VIEW_USER,
    Action.UPDATE_PROFILE,
    Action.VIEW_TENANT,
})

ROLE_PERMISSIONS: dict[UserRole, frozenset[Action]] = {
    UserRole.USER: _MEMBER_ACTIONS,
    UserRole.TENANT_ADMIN: _MEMBER_ACTIONS | {
        Action.ADD_USER,
        Action.UPDATE_USER_ACCESS,
        Action.DELETE_USER,
        Action.UPDATE_TENANT_NAME,
    },
    # No ADD_USER / UPDATE_USER_ACCESS: user management inside a tenant
    # belongs to that tenant's admins.
    UserRole.SUPER_ADMIN: _MEMBER_ACTIONS | {
        Action.DELETE_USER,
        Action.UPDATE_TENANT_NAME,
        Action.VIEW_TENANT_SUBSCRIPTION,
        Action.UPDATE_TENANT_SUBSCRIPTION,
        Action.UPDATE_TENANT_STATUS,
        Action.VIEW_SYSTEM_STATS,
        Action.LIST_ALL_TENANTS,
        Action.LIST_ALL_USERS,
        Action.LIST_ALL_PROJECTS,
        Action.LIST_ALL_TASKS,
    },
}

_OWNED_ACTIONS = frozenset({Action.UPDATE_PROJECT, Action.DELETE_PROJECT})
_USER_TARGET_ACTIONS = frozenset({Action.UPDATE_USER_ACCESS, Action.DELETE_USER})


@dataclass(frozen=True)
class Resource:
    """What an action is applied to.

    ``owner_id`` is the creator for projects. ``user_id`` and ``role``
    describe the target of user-management actions.
    """

    tenant_id: uuid.UUID | None = None
    owner_id: uuid.UUID | None = None
    user_id: uuid.UUID | None = None
    role: str | None = None


def is_allowed(principal: Principal, action: Action, resource: Resource | None = None) -> bool:
    if action not in ROLE_PERMISSIONS.get(principal.role, frozenset()):
        return False
    if resource is None:
        return True

    if not principal.is_super_admin and resource.tenant_id != principal.tenant_id:
        return False

    if action in _OWNED_ACTIONS and principal.role == UserRole.USER:
        return resource.owner_id is not None and resource.owner_id == principal.id

    if action == Action.UPDATE_PROFILE:
        return resource.user_id == principal.id

    if action in _USER_TARGET_ACTIONS:
        if resource.user_id == principal.id:
            return False
        if resource.role == UserRole.SUPER_ADMIN.value:
            return False

    return True


def authorize(principal: Principal, action: Action, resource: Resource | None = None) -> None:
    """Raise ``ForbiddenError`` unless ``principal`` may perform ``action``.

    Without a resource only the role-level grant is checked.
    """
    if not is_allowed(principal, action, resource):
        logger.info(f"Denied {action.value} for user {principal.id} ({principal.role.value})")
        raise ForbiddenError(_denial_message(principal, action, resource))


def _denial_message(principal: Principal, action: Action, resource: Resource | None) -> str:
    if resource is not None and resource.user_id == principal.id and action in _USER_TARGET_ACTIONS:
        if action == Action.DELETE_USER:
            return "You cannot delete your own account"
        return "You cannot change your own role or active status"
    if action in _OWNED_ACTIONS:
        return "Only the project creator or a tenant administrator can modify this project"
    if action == Action.UPDATE_PROFILE:
        return "Users can only update their own profile"
    return "You do not have permission to perform this action"
