"""Pydantic schemas for service inputs and read models."""

from lead_hunter.schemas.lead import LeadStatus
from lead_hunter.schemas.access_group import PermissionFlags, AccessGroupRead
from lead_hunter.schemas.assignment import (
    UserSummary,
    SellerSummary,
    AssignmentHistoryEntry,
    AssignmentFailure,
    BatchAssignmentResult,
)

__all__ = [
    "LeadStatus",
    "PermissionFlags",
    "AccessGroupRead",
    "UserSummary",
    "SellerSummary",
    "AssignmentHistoryEntry",
    "AssignmentFailure",
    "BatchAssignmentResult",
]
