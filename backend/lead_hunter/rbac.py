"""Role-based access control: the single permission resolver.

Every capability decision in the codebase goes through ``can``. Call sites
never compare roles themselves.
"""

from enum import Enum
from typing import Dict, Union
import logging

from lead_hunter.exceptions import ForbiddenError
from lead_hunter.models import User

logger = logging.getLogger(__name__)


class Role(str, Enum):
    """User roles. ADMIN and SUPER_ADMIN override every granular flag."""
    SUPER_ADMIN = "SUPER_ADMIN"
    ADMIN = "ADMIN"
    SELLER = "SELLER"
    USER = "USER"


class Capability(str, Enum):
    """Granular permission flags carried by an access group."""
    # Leads
    SEARCH_LEADS = "canSearchLeads"
    VIEW_ALL_LEADS = "canViewAllLeads"
    VIEW_OWN_LEADS = "canViewOwnLeads"
    MANAGE_LEADS = "canManageLeads"
    ASSIGN_LEADS = "canAssignLeads"
    IMPORT_LEADS = "canImportLeads"
    EXPORT_LEADS = "canExportLeads"

    # CRM board
    VIEW_CRM = "canViewCRM"
    MOVE_CARDS = "canMoveCards"
    MANAGE_STAGES = "canManageStages"

    # Modules
    VIEW_DASHBOARD = "canViewDashboard"
    VIEW_COSTS = "canViewCosts"

    # Chat
    VIEW_CHAT = "canViewChat"
    SEND_MESSAGE = "canSendMessage"
    DELETE_MESSAGES = "canDeleteMessages"
    VIEW_ALL_CHATS = "canViewAllChats"
    MANAGE_CONNECTIONS = "canManageConnections"

    # Administration
    MANAGE_USERS = "canManageUsers"
    MANAGE_GROUPS = "canManageGroups"
    MANAGE_FOLDERS = "canManageFolders"
    VIEW_SYSTEM_LOGS = "canViewSystemLogs"
    MANAGE_SETTINGS = "canManageSettings"
    MANAGE_INTEGRATIONS = "canManageIntegrations"

    # Personal & monitoring
    VIEW_PERSONAL = "canViewPersonal"
    MANAGE_TASKS = "canManageTasks"
    MANAGE_GOALS = "canManageGoals"
    VIEW_MONITORING = "canViewMonitoring"
    USE_OWN_WHATSAPP = "canUseOwnWhatsApp"

    @property
    def attribute(self) -> str:
        """Column name of this flag on the Permission model."""
        return f"can_{self.name.lower()}"


OVERRIDE_ROLES = {Role.SUPER_ADMIN.value, Role.ADMIN.value}


def _role_value(user: User) -> str:
    role = user.role
    return role.value if isinstance(role, Role) else role


def has_role_override(user: User) -> bool:
    """True for ADMIN and SUPER_ADMIN users."""
    return _role_value(user) in OVERRIDE_ROLES


def can(user: User, capability: Union[Capability, str]) -> bool:
    """
    Decide whether ``user`` holds ``capability``.

    1. ADMIN / SUPER_ADMIN: always True.
    2. User in an access group: the group's flag (unset counts as False).
    3. User without a group: False.

    Raises ValueError for a capability name outside the flag set.
    """
    capability = Capability(capability)

    if has_role_override(user):
        return True

    group = user.access_group
    if group is None:
        return False

    permissions = group.permissions
    if permissions is None:
        logger.error(
            f"Access group {group.id} ({group.name}) has no permission bundle; "
            f"denying {capability.value} for {user.email}"
        )
        return False

    return bool(getattr(permissions, capability.attribute, False))


def can_view_all_leads(user: User) -> bool:
    """Shared check for the visibility filter and reassignment screens."""
    return can(user, Capability.VIEW_ALL_LEADS)


def effective_permissions(user: User) -> Dict[str, bool]:
    """Every flag resolved for ``user``, keyed by its camelCase name."""
    return {capability.value: can(user, capability) for capability in Capability}


def check_capability(user: User, capability: Union[Capability, str]):
    """Raise ForbiddenError if user doesn't hold the capability."""
    capability = Capability(capability)
    if not can(user, capability):
        logger.warning(
            f"Permission denied: {user.email} (role: {_role_value(user)}) "
            f"attempted {capability.value}"
        )
        raise ForbiddenError(
            f"Permission denied. Required permission: {capability.value}",
            capability=capability.value,
        )
