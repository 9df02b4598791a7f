"""Read models returned by the assignment service."""

from pydantic import BaseModel, ConfigDict
from typing import Any, List, Optional
from datetime import datetime


class UserSummary(BaseModel):
    """Minimal user projection (id, name, email)."""
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    email: str


class SellerSummary(UserSummary):
    """User that can receive leads, with its current workload."""
    role: str
    lead_count: int = 0


class AssignmentHistoryEntry(BaseModel):
    """One assignment history row with the users it references."""
    model_config = ConfigDict(from_attributes=True)

    id: int
    company_id: str
    previous_user_id: Optional[str] = None
    new_user_id: Optional[str] = None
    assigned_by_id: str
    created_at: datetime

    previous_user: Optional[UserSummary] = None
    new_user: Optional[UserSummary] = None
    assigned_by: Optional[UserSummary] = None


class AssignmentFailure(BaseModel):
    """A lead id that could not be assigned in a bulk operation."""
    lead_id: str
    error: str
    message: str


class BatchAssignmentResult:
    """Outcome of a bulk assignment. Failed items never roll back succeeded ones."""

    def __init__(
        self,
        succeeded: List[Any] = None,
        failed: List[AssignmentFailure] = None,
    ):
        self.succeeded = succeeded or []
        self.failed = failed or []

    @property
    def is_partial_failure(self) -> bool:
        return bool(self.succeeded) and bool(self.failed)

    @property
    def failed_ids(self) -> List[str]:
        return [failure.lead_id for failure in self.failed]

    def to_dict(self):
        return {
            "succeeded": [lead.id for lead in self.succeeded],
            "failed": [failure.model_dump() for failure in self.failed],
        }
