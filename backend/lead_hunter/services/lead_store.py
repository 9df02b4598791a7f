# backend/lead_hunter/services/lead_store.py
"""
Lead ownership store.

Persistence only: no authorization and no history. The store flushes its
writes and leaves commit / rollback to the caller that owns the
transaction (AssignmentService).
"""

from typing import Dict, List, Optional
import logging

from sqlalchemy import func
from sqlalchemy.orm import Session

from lead_hunter.exceptions import InvalidReferenceError, NotFoundError
from lead_hunter.models import Lead, User
from lead_hunter.services.lead_visibility import visible_leads_query

logger = logging.getLogger(__name__)


class LeadStore:
    """Reads and ownership writes for Lead rows"""

    def __init__(self, db: Session):
        self.db = db

    # ========================================================================
    # READS
    # ========================================================================

    def get_by_id(self, lead_id: str, for_update: bool = False) -> Lead:
        """
        Load a lead or raise NotFoundError.
        With for_update the row is locked until the transaction ends
        (no-op on SQLite).
        """
        query = self.db.query(Lead).filter(Lead.id == lead_id)
        if for_update:
            query = query.with_for_update()
        lead = query.first()
        if lead is None:
            raise NotFoundError(f"Lead {lead_id} not found")
        return lead

    def list_all(self, status: Optional[str] = None) -> List[Lead]:
        query = self.db.query(Lead)
        if status:
            query = query.filter(Lead.status == status)
        return query.order_by(Lead.created_at.desc(), Lead.name.asc()).all()

    def list_visible(self, user: User, status: Optional[str] = None) -> List[Lead]:
        """Leads the user may list, newest first."""
        query = self.db.query(Lead)
        if status:
            query = query.filter(Lead.status == status)
        query = visible_leads_query(user, query)
        if query is None:
            return []
        return query.order_by(Lead.created_at.desc(), Lead.name.asc()).all()

    def list_by_responsible(self, user_id: Optional[str]) -> List[Lead]:
        """Leads owned by user_id; None lists unassigned leads."""
        query = self.db.query(Lead)
        if user_id is None:
            query = query.filter(Lead.responsible_id.is_(None))
        else:
            query = query.filter(Lead.responsible_id == user_id)
        return query.order_by(Lead.created_at.desc(), Lead.name.asc()).all()

    def list_unassigned(self) -> List[Lead]:
        return self.list_by_responsible(None)

    def count_by_responsible(self) -> Dict[Optional[str], int]:
        """Lead count per responsible user id; unassigned leads count under None."""
        rows = (
            self.db.query(Lead.responsible_id, func.count(Lead.id))
            .group_by(Lead.responsible_id)
            .all()
        )
        return {responsible_id: count for responsible_id, count in rows}

    def count_by_status(self) -> Dict[str, int]:
        """Lead count per raw status value, legacy values included."""
        rows = (
            self.db.query(Lead.status, func.count(Lead.id))
            .group_by(Lead.status)
            .all()
        )
        return {status: count for status, count in rows}

    # ========================================================================
    # WRITES
    # ========================================================================

    def set_responsible(self, lead_id: str, user_id: Optional[str]) -> Lead:
        """Point the lead at a new responsible user (or None). Flushes, never commits."""
        lead = self.get_by_id(lead_id)
        if user_id is not None and self.db.get(User, user_id) is None:
            logger.warning(f"Lead {lead_id}: responsible user {user_id} does not exist")
            raise InvalidReferenceError(f"User {user_id} does not exist")

        lead.responsible_id = user_id
        self.db.flush()
        return lead
