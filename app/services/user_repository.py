# app/services/user_repository.py
from typing import Optional
from sqlalchemy.orm import Session

from app.models.user import User


class UserRepository:
    """Read-only user lookups used by the token verifier."""

    def __init__(self, db: Session):
        self.db = db

    def get_by_phone(self, phone) -> Optional[User]:
        return (
            self.db.query(User)
            .filter(User.phone == str(phone))
            .order_by(User.id.desc())
            .first()
        )
