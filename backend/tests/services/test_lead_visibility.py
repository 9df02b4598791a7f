# tests/services/test_lead_visibility.py
"""Tests for the lead visibility filter (in-memory and database paths)"""

import pytest

from lead_hunter.services.lead_store import LeadStore
from lead_hunter.services.lead_visibility import can_view_lead, visible_leads

pytestmark = pytest.mark.integration


@pytest.fixture
def pipeline(make_lead, seller_one, seller_two):
    """L1, L3 owned by seller one; L2 by seller two; L4 unassigned"""
    return [
        make_lead(name="L1", responsible=seller_one),
        make_lead(name="L2", responsible=seller_two),
        make_lead(name="L3", responsible=seller_one),
        make_lead(name="L4"),
    ]


class TestVisibleLeads:

    def test_seller_sees_only_own_leads(self, pipeline, seller_one):
        result = visible_leads(seller_one, pipeline)
        assert [lead.name for lead in result] == ["L1", "L3"]

    def test_admin_sees_everything(self, pipeline, admin):
        assert visible_leads(admin, pipeline) == pipeline

    def test_super_admin_without_group_sees_everything(self, pipeline, make_user):
        root = make_user(name="Root", role="SUPER_ADMIN")
        assert visible_leads(root, pipeline) == pipeline

    def test_view_all_flag_sees_everything(self, pipeline, make_user, supervisor_group):
        supervisor = make_user(name="Supervisor", group=supervisor_group)
        assert visible_leads(supervisor, pipeline) == pipeline

    def test_no_flags_sees_nothing(self, pipeline, make_user, make_group):
        viewer = make_user(name="Viewer", group=make_group(can_view_dashboard=True))
        assert visible_leads(viewer, pipeline) == []

    def test_no_group_sees_nothing(self, pipeline, make_user):
        loner = make_user(name="Loner", role="SELLER")
        assert visible_leads(loner, pipeline) == []

    def test_legacy_status_passes_through(self, make_lead, seller_one):
        legacy = make_lead(name="Old", responsible=seller_one, status="Em negociação", stage_id="gone")
        assert visible_leads(seller_one, [legacy]) == [legacy]

    def test_can_view_lead(self, pipeline, seller_one, admin):
        l1, l2 = pipeline[0], pipeline[1]
        assert can_view_lead(seller_one, l1) is True
        assert can_view_lead(seller_one, l2) is False
        assert can_view_lead(admin, l2) is True


class TestListVisible:

    def test_seller_query(self, db_session, pipeline, seller_one):
        result = LeadStore(db_session).list_visible(seller_one)
        assert sorted(lead.name for lead in result) == ["L1", "L3"]

    def test_admin_query_with_status(self, db_session, pipeline, admin, make_lead):
        make_lead(name="L5", status="ACTIVE")
        result = LeadStore(db_session).list_visible(admin, status="ACTIVE")
        assert [lead.name for lead in result] == ["L5"]

    def test_query_for_user_without_rights(self, db_session, pipeline, make_user):
        loner = make_user(name="Loner", role="USER")
        assert LeadStore(db_session).list_visible(loner) == []
