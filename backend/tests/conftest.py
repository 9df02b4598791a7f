# tests/conftest.py
"""Shared fixtures: in-memory SQLite database + model factories"""

import pytest
from uuid import uuid4

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from lead_hunter.database import Base
from lead_hunter.models import AccessGroup, Lead, LeadAssignmentHistory, Permission, User


@pytest.fixture
def test_engine():
    """Fresh in-memory database per test"""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def db_session(test_engine):
    """Session configured like SessionLocal"""
    Session = sessionmaker(
        bind=test_engine,
        expire_on_commit=False,
        autoflush=False,
    )
    session = Session()
    yield session
    session.close()


# ============================================================================
# FACTORIES
# ============================================================================

@pytest.fixture
def make_group(db_session):
    """Create an access group with the given Permission column flags"""
    def _make(name=None, **flags):
        group = AccessGroup(name=name or f"group-{uuid4().hex[:8]}", description="test group")
        group.permissions = Permission(**flags)
        db_session.add(group)
        db_session.commit()
        return group
    return _make


@pytest.fixture
def make_user(db_session):
    def _make(name="User", role="SELLER", group=None, email=None):
        user = User(
            name=name,
            email=email or f"{name.lower().replace(' ', '.')}-{uuid4().hex[:6]}@leadhunter.test",
            role=role,
            access_group=group,
        )
        db_session.add(user)
        db_session.commit()
        return user
    return _make


@pytest.fixture
def make_lead(db_session):
    def _make(name="Lead", responsible=None, status="TRIAGE", stage_id=None):
        lead = Lead(
            name=name,
            status=status,
            stage_id=stage_id,
            responsible_id=responsible.id if responsible else None,
            phone="+55 11 5555-0100",
            address="Rua Teste, 100",
        )
        db_session.add(lead)
        db_session.commit()
        return lead
    return _make


@pytest.fixture
def history_rows(db_session):
    """History rows of a lead, oldest first"""
    def _rows(lead_id):
        return (
            db_session.query(LeadAssignmentHistory)
            .filter(LeadAssignmentHistory.company_id == lead_id)
            .order_by(LeadAssignmentHistory.id.asc())
            .all()
        )
    return _rows


# ============================================================================
# COMMON ACTORS
# ============================================================================

@pytest.fixture
def seller_group(make_group):
    """Vendedores: own leads only"""
    return make_group(
        name="Vendedores",
        can_view_own_leads=True,
        can_view_crm=True,
        can_view_dashboard=True,
    )


@pytest.fixture
def supervisor_group(make_group):
    """Supervisores: all leads + assignment"""
    return make_group(
        name="Supervisores",
        can_view_all_leads=True,
        can_view_own_leads=True,
        can_assign_leads=True,
    )


@pytest.fixture
def admin(make_user):
    return make_user(name="Admin", role="ADMIN")


@pytest.fixture
def seller_one(make_user, seller_group):
    return make_user(name="Seller One", role="SELLER", group=seller_group)


@pytest.fixture
def seller_two(make_user, seller_group):
    return make_user(name="Seller Two", role="SELLER", group=seller_group)


def pytest_configure(config):
    config.addinivalue_line("markers", "unit: resolver tests on in-memory objects, no database")
    config.addinivalue_line("markers", "integration: tests that run against a SQLAlchemy session")
