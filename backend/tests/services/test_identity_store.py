# tests/services/test_identity_store.py
"""Tests for IdentityStore lookups"""

import pytest
from sqlalchemy import inspect

from lead_hunter.database import init_db
from lead_hunter.exceptions import NotFoundError
from lead_hunter.services.identity_store import IdentityStore

pytestmark = pytest.mark.integration


@pytest.fixture
def store(db_session):
    return IdentityStore(db_session)


def test_get_user(store, seller_one):
    assert store.get_user(seller_one.id) is seller_one
    assert store.exists(seller_one.id) is True


def test_get_missing_user(store):
    with pytest.raises(NotFoundError):
        store.get_user("nobody")
    assert store.find_user("nobody") is None
    assert store.find_user(None) is None


def test_get_by_email(store, make_user):
    user = make_user(name="Deborah", email="deborah@leadhunter.test")
    assert store.get_by_email("deborah@leadhunter.test") is user
    assert store.get_by_email("unknown@leadhunter.test") is None


def test_sellers_exclude_plain_users(store, make_user, seller_one):
    make_user(name="Visitor", role="USER")
    assert [seller.id for seller in store.list_sellers()] == [seller_one.id]


def test_sellers_exclude_inactive_users(store, db_session, seller_one, seller_two):
    seller_two.is_active = False
    db_session.commit()

    assert [seller.id for seller in store.list_sellers()] == [seller_one.id]


def test_init_db_is_idempotent(test_engine):
    init_db(bind=test_engine)
    tables = set(inspect(test_engine).get_table_names())
    assert {"users", "access_groups", "permissions", "companies", "lead_assignment_history"} <= tables
