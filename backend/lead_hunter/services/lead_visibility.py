# backend/lead_hunter/services/lead_visibility.py
"""
Lead visibility filter.

Every read path that lists leads goes through this module:
- ADMIN / SUPER_ADMIN or canViewAllLeads -> all leads
- canViewOwnLeads -> leads where the user is responsible
- otherwise -> nothing
"""

from typing import Iterable, List, Optional

from sqlalchemy.orm import Query

from lead_hunter.models import Lead, User
from lead_hunter.rbac import Capability, can, can_view_all_leads


def can_view_lead(user: User, lead: Lead) -> bool:
    """Single-lead form of the visibility rule."""
    if can_view_all_leads(user):
        return True
    if can(user, Capability.VIEW_OWN_LEADS):
        return lead.responsible_id == user.id
    return False


def visible_leads(user: User, leads: Iterable[Lead]) -> List[Lead]:
    """Subset of ``leads`` the user may see, input order preserved."""
    if can_view_all_leads(user):
        return list(leads)
    if can(user, Capability.VIEW_OWN_LEADS):
        return [lead for lead in leads if lead.responsible_id == user.id]
    return []


def visible_leads_query(user: User, query: Query) -> Optional[Query]:
    """
    Apply the visibility rule to a Lead query.
    Returns None when the user may see no leads at all.
    """
    if can_view_all_leads(user):
        return query
    if can(user, Capability.VIEW_OWN_LEADS):
        return query.filter(Lead.responsible_id == user.id)
    return None
