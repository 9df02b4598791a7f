"""
Pydantic schemas for access groups and their permission bundles.
Field names match the Permission columns; aliases are the camelCase flag
names used by the frontend.
"""

from pydantic import BaseModel, ConfigDict, Field
from typing import Dict, List, Optional
from datetime import datetime


class PermissionFlags(BaseModel):
    """Permission bundle input. Unknown flag names are rejected."""
    model_config = ConfigDict(populate_by_name=True, extra="forbid")

    # Leads
    can_search_leads: bool = Field(False, alias="canSearchLeads")
    can_view_all_leads: bool = Field(False, alias="canViewAllLeads")
    can_view_own_leads: bool = Field(False, alias="canViewOwnLeads")
    can_manage_leads: bool = Field(False, alias="canManageLeads")
    can_assign_leads: bool = Field(False, alias="canAssignLeads")
    can_import_leads: bool = Field(False, alias="canImportLeads")
    can_export_leads: bool = Field(False, alias="canExportLeads")

    # CRM board
    can_view_crm: bool = Field(False, alias="canViewCRM")
    can_move_cards: bool = Field(False, alias="canMoveCards")
    can_manage_stages: bool = Field(False, alias="canManageStages")

    # Modules
    can_view_dashboard: bool = Field(False, alias="canViewDashboard")
    can_view_costs: bool = Field(False, alias="canViewCosts")

    # Chat
    can_view_chat: bool = Field(False, alias="canViewChat")
    can_send_message: bool = Field(False, alias="canSendMessage")
    can_delete_messages: bool = Field(False, alias="canDeleteMessages")
    can_view_all_chats: bool = Field(False, alias="canViewAllChats")
    can_manage_connections: bool = Field(False, alias="canManageConnections")

    # Administration
    can_manage_users: bool = Field(False, alias="canManageUsers")
    can_manage_groups: bool = Field(False, alias="canManageGroups")
    can_manage_folders: bool = Field(False, alias="canManageFolders")
    can_view_system_logs: bool = Field(False, alias="canViewSystemLogs")
    can_manage_settings: bool = Field(False, alias="canManageSettings")
    can_manage_integrations: bool = Field(False, alias="canManageIntegrations")

    # Personal & monitoring
    can_view_personal: bool = Field(False, alias="canViewPersonal")
    can_manage_tasks: bool = Field(False, alias="canManageTasks")
    can_manage_goals: bool = Field(False, alias="canManageGoals")
    can_view_monitoring: bool = Field(False, alias="canViewMonitoring")
    can_use_own_whatsapp: bool = Field(False, alias="canUseOwnWhatsApp")

    def column_values(self, only_set: bool = False) -> Dict[str, bool]:
        """Values keyed by Permission column name."""
        return self.model_dump(exclude_unset=only_set)


class AccessGroupRead(BaseModel):
    """Access group with its resolved flags and member ids."""
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    description: Optional[str] = None
    permissions: Dict[str, bool]
    user_ids: List[str] = []
    created_at: Optional[datetime] = None
