# backend/lead_hunter/services/identity_store.py
"""Read access to users and their roles."""

from typing import List, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from lead_hunter.config import settings
from lead_hunter.exceptions import NotFoundError
from lead_hunter.models import Lead, User
from lead_hunter.schemas import SellerSummary


class IdentityStore:
    """Looks up users. Role and group edits belong to the admin screens."""

    def __init__(self, db: Session):
        self.db = db

    def find_user(self, user_id: Optional[str]) -> Optional[User]:
        if user_id is None:
            return None
        return self.db.get(User, user_id)

    def get_user(self, user_id: str) -> User:
        """Return the user or raise NotFoundError."""
        user = self.find_user(user_id)
        if user is None:
            raise NotFoundError(f"User {user_id} not found")
        return user

    def get_by_email(self, email: str) -> Optional[User]:
        return self.db.query(User).filter(User.email == email).first()

    def exists(self, user_id: str) -> bool:
        return self.find_user(user_id) is not None

    def list_sellers(self) -> List[SellerSummary]:
        """Active users that may receive leads, ordered by name, with lead counts."""
        lead_counts = (
            self.db.query(Lead.responsible_id, func.count(Lead.id))
            .filter(Lead.responsible_id.isnot(None))
            .group_by(Lead.responsible_id)
            .all()
        )
        counts = dict(lead_counts)

        users = (
            self.db.query(User)
            .filter(User.role.in_(settings.SELLER_ROLES))
            .filter(User.is_active.is_(True))
            .order_by(User.name.asc())
            .all()
        )

        return [
            SellerSummary(
                id=user.id,
                name=user.name,
                email=user.email,
                role=user.role,
                lead_count=counts.get(user.id, 0),
            )
            for user in users
        ]
