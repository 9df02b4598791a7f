# backend/lead_hunter/services/access_group_service.py
"""
Access group management.

A group is always written together with its Permission row, so the
"one bundle per group" invariant holds for everything created here.
Mutations require canManageGroups (ADMIN / SUPER_ADMIN override).
"""

from typing import Dict, List, Optional, Union
import logging

from sqlalchemy.orm import Session

from lead_hunter.exceptions import ConflictError, NotFoundError
from lead_hunter.models import AccessGroup, Permission, User
from lead_hunter.rbac import Capability, check_capability
from lead_hunter.schemas import AccessGroupRead, PermissionFlags
from lead_hunter.services.identity_store import IdentityStore

logger = logging.getLogger(__name__)


# Stock groups created by the seed script
DEFAULT_GROUPS: Dict[str, Dict] = {
    "Administradores": {
        "description": "Grupo com acesso total ao sistema",
        "permissions": {
            "canSearchLeads": True,
            "canViewAllLeads": True,
            "canViewOwnLeads": True,
            "canManageLeads": True,
            "canAssignLeads": True,
            "canViewCRM": True,
            "canViewDashboard": True,
            "canViewCosts": True,
            "canViewChat": True,
            "canManageUsers": True,
            "canManageGroups": True,
            "canManageFolders": True,
        },
    },
    "Supervisores": {
        "description": "Supervisores podem ver todos os leads e atribuir",
        "permissions": {
            "canSearchLeads": True,
            "canViewAllLeads": True,
            "canViewOwnLeads": True,
            "canManageLeads": True,
            "canAssignLeads": True,
            "canViewCRM": True,
            "canViewDashboard": True,
            "canViewChat": True,
            "canManageFolders": True,
        },
    },
    "Vendedores": {
        "description": "Grupo de vendedores com acesso básico",
        "permissions": {
            "canViewOwnLeads": True,
            "canViewCRM": True,
            "canViewDashboard": True,
            "canViewChat": True,
        },
    },
}


PermissionInput = Union[PermissionFlags, Dict[str, bool], None]


def _as_flags(permissions: PermissionInput) -> PermissionFlags:
    if permissions is None:
        return PermissionFlags()
    if isinstance(permissions, PermissionFlags):
        return permissions
    return PermissionFlags.model_validate(permissions)


def to_read_model(group: AccessGroup) -> AccessGroupRead:
    """Group with flags keyed by camelCase name (all False without a bundle)."""
    bundle = group.permissions
    flags = {
        capability.value: bool(getattr(bundle, capability.attribute, False)) if bundle else False
        for capability in Capability
    }
    return AccessGroupRead(
        id=group.id,
        name=group.name,
        description=group.description,
        permissions=flags,
        user_ids=[user.id for user in group.users],
        created_at=group.created_at,
    )


class AccessGroupService:
    """CRUD for access groups, their permission bundles and memberships"""

    def __init__(self, db: Session):
        self.db = db
        self.identity = IdentityStore(db)

    # ========================================================================
    # READS
    # ========================================================================

    def list_groups(self) -> List[AccessGroup]:
        return self.db.query(AccessGroup).order_by(AccessGroup.created_at.asc(), AccessGroup.name.asc()).all()

    def get_group(self, group_id: str) -> AccessGroup:
        group = self.db.get(AccessGroup, group_id)
        if group is None:
            raise NotFoundError(f"Access group {group_id} not found")
        return group

    def find_by_name(self, name: str) -> Optional[AccessGroup]:
        return self.db.query(AccessGroup).filter(AccessGroup.name == name).first()

    # ========================================================================
    # GROUP CRUD
    # ========================================================================

    def create_group(
        self,
        acting_user: User,
        name: str,
        description: Optional[str] = None,
        permissions: PermissionInput = None,
    ) -> AccessGroup:
        """Create a group and its permission bundle in one commit."""
        check_capability(acting_user, Capability.MANAGE_GROUPS)
        if not name:
            raise ValueError("Name is required")
        flags = _as_flags(permissions)

        if self.find_by_name(name) is not None:
            raise ConflictError(f"Group with name '{name}' already exists")

        group = self._insert_group(name, description, flags)
        self._commit()
        logger.info(f"Access group created: {group.name} by {acting_user.email}")
        return group

    def update_group(
        self,
        acting_user: User,
        group_id: str,
        name: Optional[str] = None,
        description: Optional[str] = None,
    ) -> AccessGroup:
        check_capability(acting_user, Capability.MANAGE_GROUPS)
        group = self.get_group(group_id)

        if name and name != group.name:
            if self.find_by_name(name) is not None:
                raise ConflictError(f"Group with name '{name}' already exists")
            group.name = name
        if description is not None:
            group.description = description

        self._commit()
        return group

    def delete_group(self, acting_user: User, group_id: str):
        """Detach every member, then delete the group and its bundle."""
        check_capability(acting_user, Capability.MANAGE_GROUPS)
        group = self.get_group(group_id)
        group_name = group.name

        members = list(group.users)
        for member in members:
            member.access_group = None
        self.db.delete(group)
        self._commit()
        logger.info(
            f"Access group deleted: {group_name} ({len(members)} member(s) detached) "
            f"by {acting_user.email}"
        )

    def update_permissions(
        self,
        acting_user: User,
        group_id: str,
        permissions: PermissionInput,
    ) -> Permission:
        """
        Overwrite the flags given in ``permissions``; omitted flags keep their value.
        A legacy group without a bundle gets one.
        """
        check_capability(acting_user, Capability.MANAGE_GROUPS)
        group = self.get_group(group_id)
        flags = _as_flags(permissions)

        bundle = group.permissions
        if bundle is None:
            logger.warning(f"Access group {group.id} had no permission bundle; creating one")
            bundle = Permission(access_group_id=group.id, **flags.column_values())
            group.permissions = bundle
        else:
            for column, value in flags.column_values(only_set=True).items():
                setattr(bundle, column, value)

        self._commit()
        return bundle

    # ========================================================================
    # MEMBERSHIP
    # ========================================================================

    def add_user(self, acting_user: User, group_id: str, user_id: str) -> User:
        check_capability(acting_user, Capability.MANAGE_GROUPS)
        group = self.get_group(group_id)
        user = self.identity.get_user(user_id)

        user.access_group = group
        self._commit()
        return user

    def remove_user(self, acting_user: User, group_id: str, user_id: str) -> User:
        check_capability(acting_user, Capability.MANAGE_GROUPS)
        group = self.get_group(group_id)
        user = self.identity.get_user(user_id)
        if user.access_group_id != group.id:
            raise NotFoundError(f"User {user_id} is not a member of group {group_id}")

        user.access_group = None
        self._commit()
        return user

    # ========================================================================
    # HELPERS
    # ========================================================================

    def _insert_group(self, name: str, description: Optional[str], flags: PermissionFlags) -> AccessGroup:
        group = AccessGroup(name=name, description=description)
        group.permissions = Permission(**flags.column_values())
        self.db.add(group)
        self.db.flush()
        return group

    def _commit(self):
        try:
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise


def seed_default_groups(db: Session) -> List[AccessGroup]:
    """Create the stock access groups that do not exist yet. Idempotent."""
    service = AccessGroupService(db)
    groups = []
    for name, definition in DEFAULT_GROUPS.items():
        group = service.find_by_name(name)
        if group is None:
            group = service._insert_group(
                name,
                definition["description"],
                PermissionFlags.model_validate(definition["permissions"]),
            )
            logger.info(f"Seeded access group: {name}")
        groups.append(group)
    service._commit()
    return groups
