# backend/lead_hunter/services/assignment_service.py
"""
Assignment Service - the only writer of Lead.responsible_id

Every ownership change:
1. Checks canAssignLeads (role override applies)
2. Locks and loads the lead
3. Validates the new responsible user
4. Updates responsible_id (and status when given)
5. Appends a LeadAssignmentHistory row
Steps 4 and 5 are committed together or rolled back together.
"""

from typing import Dict, Iterable, List, Optional, Union
import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from lead_hunter.exceptions import (
    DATABASE_ERROR,
    InvalidStatusError,
    LeadHunterError,
)
from lead_hunter.models import Lead, LeadAssignmentHistory, User
from lead_hunter.rbac import Capability, check_capability
from lead_hunter.schemas import (
    AssignmentFailure,
    AssignmentHistoryEntry,
    BatchAssignmentResult,
    LeadStatus,
    SellerSummary,
    UserSummary,
)
from lead_hunter.services.identity_store import IdentityStore
from lead_hunter.services.lead_store import LeadStore

logger = logging.getLogger(__name__)


class AssignmentService:
    """Assigns leads to sellers and keeps the assignment history"""

    def __init__(self, db: Session):
        self.db = db
        self.leads = LeadStore(db)
        self.identity = IdentityStore(db)

    # ========================================================================
    # WRITES
    # ========================================================================

    def assign(
        self,
        acting_user: User,
        lead_id: str,
        new_responsible_id: Optional[str],
        new_status: Optional[Union[LeadStatus, str]] = None,
    ) -> Lead:
        """Make new_responsible_id (or nobody) responsible for the lead."""
        check_capability(acting_user, Capability.ASSIGN_LEADS)
        status = self._validate_status(new_status)

        try:
            lead = self.leads.get_by_id(lead_id, for_update=True)
            previous_user_id = lead.responsible_id

            self.leads.set_responsible(lead.id, new_responsible_id)
            if status is not None:
                lead.status = status.value

            self.db.add(LeadAssignmentHistory(
                company_id=lead.id,
                previous_user_id=previous_user_id,
                new_user_id=new_responsible_id,
                assigned_by_id=acting_user.id,
            ))
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        logger.info(
            f"Lead {lead.id} assigned: {previous_user_id} -> {new_responsible_id} "
            f"by {acting_user.email}"
        )
        return lead

    def unassign(self, acting_user: User, lead_id: str) -> Lead:
        """Remove the responsible user. Still writes a history row (new_user_id NULL)."""
        return self.assign(acting_user, lead_id, None)

    def assign_many(
        self,
        acting_user: User,
        lead_ids: Iterable[str],
        new_responsible_id: Optional[str],
        new_status: Optional[Union[LeadStatus, str]] = None,
    ) -> BatchAssignmentResult:
        """
        Assign each lead in its own transaction.
        A failing id (domain or database error) is reported in ``failed``
        without undoing the others.
        """
        check_capability(acting_user, Capability.ASSIGN_LEADS)
        self._validate_status(new_status)

        result = BatchAssignmentResult()
        seen = set()
        for lead_id in lead_ids:
            if lead_id in seen:
                continue
            seen.add(lead_id)
            try:
                lead = self.assign(acting_user, lead_id, new_responsible_id, new_status)
                result.succeeded.append(lead)
            except LeadHunterError as e:
                logger.warning(f"Bulk assign skipped lead {lead_id}: {e.message}")
                result.failed.append(
                    AssignmentFailure(lead_id=lead_id, error=e.kind, message=e.message)
                )
            except SQLAlchemyError as e:
                # assign() already rolled back; later ids still run
                logger.error(f"Bulk assign failed for lead {lead_id}: {e}")
                result.failed.append(
                    AssignmentFailure(lead_id=lead_id, error=DATABASE_ERROR, message=str(e))
                )

        logger.info(
            f"Bulk assign by {acting_user.email}: {len(result.succeeded)} succeeded, "
            f"{len(result.failed)} failed"
        )
        return result

    # ========================================================================
    # READS
    # ========================================================================

    def my_leads(self, user: User) -> List[Lead]:
        """Leads the user is responsible for. No capability required."""
        return self.leads.list_by_responsible(user.id)

    def leads_by_user(self, acting_user: User, user_id: str) -> List[Lead]:
        check_capability(acting_user, Capability.VIEW_ALL_LEADS)
        return self.leads.list_by_responsible(user_id)

    def unassigned_leads(self, acting_user: User) -> List[Lead]:
        check_capability(acting_user, Capability.ASSIGN_LEADS)
        return self.leads.list_unassigned()

    def sellers(self) -> List[SellerSummary]:
        return self.identity.list_sellers()

    def get_history(self, lead_id: str) -> List[AssignmentHistoryEntry]:
        """Assignment history of a lead, newest first, with user summaries."""
        self.leads.get_by_id(lead_id)

        rows = (
            self.db.query(LeadAssignmentHistory)
            .filter(LeadAssignmentHistory.company_id == lead_id)
            .order_by(LeadAssignmentHistory.created_at.desc(), LeadAssignmentHistory.id.desc())
            .all()
        )

        user_ids = set()
        for row in rows:
            user_ids.update({row.previous_user_id, row.new_user_id, row.assigned_by_id})
        user_ids.discard(None)
        users = self._user_summaries(user_ids)

        entries = []
        for row in rows:
            entry = AssignmentHistoryEntry.model_validate(row)
            entry.previous_user = users.get(row.previous_user_id)
            entry.new_user = users.get(row.new_user_id)
            entry.assigned_by = users.get(row.assigned_by_id)
            entries.append(entry)
        return entries

    def find_drifted_leads(self) -> List[Lead]:
        """
        Leads whose responsible_id disagrees with their newest history row.
        A lead with no history is consistent only while unassigned.
        Reports only; nothing is repaired.
        """
        latest: Dict[str, Optional[str]] = {}
        # Row lock on the lead makes id order match commit order per lead
        rows = (
            self.db.query(LeadAssignmentHistory)
            .order_by(LeadAssignmentHistory.id.asc())
            .all()
        )
        for row in rows:
            latest[row.company_id] = row.new_user_id

        drifted = []
        for lead in self.leads.list_all():
            if lead.id in latest:
                if latest[lead.id] != lead.responsible_id:
                    drifted.append(lead)
            elif lead.responsible_id is not None:
                drifted.append(lead)

        if drifted:
            logger.warning(f"{len(drifted)} lead(s) drifted from their assignment history")
        return drifted

    # ========================================================================
    # HELPERS
    # ========================================================================

    @staticmethod
    def _validate_status(new_status: Optional[Union[LeadStatus, str]]) -> Optional[LeadStatus]:
        if new_status is None:
            return None
        try:
            return LeadStatus(new_status)
        except ValueError:
            raise InvalidStatusError(
                f"Invalid status '{new_status}'. Allowed: "
                f"{', '.join(s.value for s in LeadStatus)}"
            )

    def _user_summaries(self, user_ids) -> Dict[str, UserSummary]:
        if not user_ids:
            return {}
        users = self.db.query(User).filter(User.id.in_(user_ids)).all()
        return {user.id: UserSummary.model_validate(user) for user in users}
