"""Lead ownership services."""

from lead_hunter.services.identity_store import IdentityStore
from lead_hunter.services.lead_store import LeadStore
from lead_hunter.services.lead_visibility import can_view_lead, visible_leads, visible_leads_query
from lead_hunter.services.assignment_service import AssignmentService
from lead_hunter.services.access_group_service import AccessGroupService, seed_default_groups

__all__ = [
    "IdentityStore",
    "LeadStore",
    "can_view_lead",
    "visible_leads",
    "visible_leads_query",
    "AssignmentService",
    "AccessGroupService",
    "seed_default_groups",
]
