# backend/lead_hunter/models.py
"""
SQLAlchemy ORM models for the lead ownership core.

NOTES:
1. Lead.status and Lead.stage_id are plain strings with no constraint or
   foreign key: legacy rows carry free-text statuses and orphaned stage ids.
2. LeadAssignmentHistory is append-only. Nothing in the codebase updates or
   deletes its rows.
3. Every AccessGroup owns exactly one Permission row.
"""

from sqlalchemy import (
    Column, String, Boolean, Integer, Text, DateTime, Float, ForeignKey, Index
)
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from lead_hunter.database import Base
from datetime import datetime
import uuid


def _new_id() -> str:
    return str(uuid.uuid4())


# ============================================================================
# IDENTITY & ACCESS MODELS
# ============================================================================

class AccessGroup(Base):
    """Named bundle of granular permissions shared by several users."""
    __tablename__ = "access_groups"

    id = Column(String(36), primary_key=True, default=_new_id)
    name = Column(String(255), nullable=False, unique=True)
    description = Column(Text)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    permissions = relationship(
        "Permission",
        uselist=False,
        back_populates="access_group",
        cascade="all, delete-orphan",
    )
    users = relationship("User", back_populates="access_group")

    def __repr__(self):
        return f"<AccessGroup(id={self.id}, name='{self.name}')>"


class Permission(Base):
    """Capability flags of one access group. All flags default to False."""
    __tablename__ = "permissions"

    id = Column(String(36), primary_key=True, default=_new_id)
    access_group_id = Column(
        String(36), ForeignKey("access_groups.id", ondelete="CASCADE"),
        nullable=False, unique=True
    )

    # ========================================================================
    # LEADS
    # ========================================================================
    can_search_leads = Column(Boolean, nullable=False, default=False)
    can_view_all_leads = Column(Boolean, nullable=False, default=False)
    can_view_own_leads = Column(Boolean, nullable=False, default=False)
    can_manage_leads = Column(Boolean, nullable=False, default=False)
    can_assign_leads = Column(Boolean, nullable=False, default=False)
    can_import_leads = Column(Boolean, nullable=False, default=False)
    can_export_leads = Column(Boolean, nullable=False, default=False)

    # ========================================================================
    # CRM BOARD
    # ========================================================================
    can_view_crm = Column(Boolean, nullable=False, default=False)
    can_move_cards = Column(Boolean, nullable=False, default=False)
    can_manage_stages = Column(Boolean, nullable=False, default=False)

    # ========================================================================
    # MODULES
    # ========================================================================
    can_view_dashboard = Column(Boolean, nullable=False, default=False)
    can_view_costs = Column(Boolean, nullable=False, default=False)

    # ========================================================================
    # CHAT
    # ========================================================================
    can_view_chat = Column(Boolean, nullable=False, default=False)
    can_send_message = Column(Boolean, nullable=False, default=False)
    can_delete_messages = Column(Boolean, nullable=False, default=False)
    can_view_all_chats = Column(Boolean, nullable=False, default=False)
    can_manage_connections = Column(Boolean, nullable=False, default=False)

    # ========================================================================
    # ADMINISTRATION
    # ========================================================================
    can_manage_users = Column(Boolean, nullable=False, default=False)
    can_manage_groups = Column(Boolean, nullable=False, default=False)
    can_manage_folders = Column(Boolean, nullable=False, default=False)
    can_view_system_logs = Column(Boolean, nullable=False, default=False)
    can_manage_settings = Column(Boolean, nullable=False, default=False)
    can_manage_integrations = Column(Boolean, nullable=False, default=False)

    # ========================================================================
    # PERSONAL & MONITORING
    # ========================================================================
    can_view_personal = Column(Boolean, nullable=False, default=False)
    can_manage_tasks = Column(Boolean, nullable=False, default=False)
    can_manage_goals = Column(Boolean, nullable=False, default=False)
    can_view_monitoring = Column(Boolean, nullable=False, default=False)
    can_use_own_whatsapp = Column(Boolean, nullable=False, default=False)

    access_group = relationship("AccessGroup", back_populates="permissions")


class User(Base):
    """CRM user. Passwords and sessions live in the API layer."""
    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=_new_id)
    name = Column(String(255), nullable=False)
    email = Column(String(255), nullable=False, unique=True, index=True)
    role = Column(String(50), nullable=False, default="USER")
    access_group_id = Column(
        String(36), ForeignKey("access_groups.id", ondelete="SET NULL"),
        nullable=True, index=True
    )
    is_active = Column(Boolean, default=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    access_group = relationship("AccessGroup", back_populates="users")

    def __repr__(self):
        return f"<User(id={self.id}, email='{self.email}', role='{self.role}')>"


# ============================================================================
# LEAD MODELS
# ============================================================================

class Lead(Base):
    """
    Prospective business (a "company") tracked through the sales pipeline.
    responsible_id is the current owner and is only written by the
    assignment service.
    """
    __tablename__ = "companies"

    id = Column(String(36), primary_key=True, default=_new_id)
    name = Column(String(255), nullable=False)

    # ========================================================================
    # PIPELINE POSITION
    # ========================================================================
    status = Column(String(50), nullable=False, default="TRIAGE", index=True)
    stage_id = Column(String(36), nullable=True, index=True)

    # ========================================================================
    # OWNERSHIP & GROUPING
    # ========================================================================
    responsible_id = Column(
        String(36), ForeignKey("users.id"), nullable=True, index=True
    )
    folder_id = Column(String(36), nullable=True)

    # ========================================================================
    # DESCRIPTIVE FIELDS
    # ========================================================================
    google_place_id = Column(String(255), unique=True)
    phone = Column(String(50))
    address = Column(String(500))
    website = Column(String(500))
    latitude = Column(Float)
    longitude = Column(Float)
    tags = Column(Text)  # comma separated

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    responsible = relationship("User", foreign_keys=[responsible_id])

    def __repr__(self):
        return f"<Lead(id={self.id}, name='{self.name}', responsible_id={self.responsible_id})>"


# The original schema calls leads "companies"
Company = Lead


class LeadAssignmentHistory(Base):
    """Append-only log row written for every assignment and unassignment."""
    __tablename__ = "lead_assignment_history"

    id = Column(Integer, primary_key=True, autoincrement=True)
    company_id = Column(String(36), ForeignKey("companies.id"), nullable=False)
    previous_user_id = Column(String(36), ForeignKey("users.id"), nullable=True)
    new_user_id = Column(String(36), ForeignKey("users.id"), nullable=True)  # NULL = unassigned
    assigned_by_id = Column(String(36), ForeignKey("users.id"), nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    __table_args__ = (
        Index('idx_assignment_company_created', 'company_id', 'created_at'),
        Index('idx_assignment_new_user', 'new_user_id'),
    )

    def __repr__(self):
        return (
            f"<LeadAssignmentHistory(company_id={self.company_id}, "
            f"new_user_id={self.new_user_id}, assigned_by_id={self.assigned_by_id})>"
        )
