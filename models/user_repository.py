"""
User repository: the only place that queries or writes the users table.

replace_refresh_token() is the single write the token core performs. It is
one UPDATE statement touching only the refresh_token column, optionally
guarded by the value the caller expects to still be stored, so two
concurrent rotations of the same token cannot both succeed.
"""
from __future__ import annotations

from typing import Optional

from sqlalchemy import or_, update

from models.user import User

# Sentinel: overwrite the stored refresh token whatever it currently is
ANY = object()


def _norm(value: Optional[str]) -> Optional[str]:
    if not isinstance(value, str):
        return None
    value = value.strip().lower()
    return value or None


class UserRepository:
    def __init__(self, storage):
        self.storage = storage

    @property
    def session(self):
        return self.storage.get_session()

    def find_by_id(self, user_id: str) -> Optional[User]:
        if not user_id:
            return None
        return self.storage.get(User, user_id)

    def find_by_username_or_email(self, username: Optional[str] = None,
                                  email: Optional[str] = None) -> Optional[User]:
        username, email = _norm(username), _norm(email)
        filters = []
        if username:
            filters.append(User.username == username)
        if email:
            filters.append(User.email == email)
        if not filters:
            return None
        return self.session.query(User).filter(or_(*filters)).first()

    def exists(self, username: Optional[str] = None, email: Optional[str] = None) -> bool:
        return self.find_by_username_or_email(username=username, email=email) is not None

    def add(self, user: User) -> User:
        self.storage.new(user)
        self.storage.save()
        return user

    def save(self, user: User) -> User:
        """Persist pending changes on an already tracked user."""
        self.storage.new(user)
        self.storage.save()
        return user

    def replace_refresh_token(self, user_id: str, new_token: Optional[str], expected=ANY) -> bool:
        """
        Set refresh_token for one user without loading or re-validating the
        rest of the record.

        When `expected` is given the write only happens if the stored value
        still equals it (None matches a cleared slot). Returns False when no
        row was updated.
        """
        stmt = update(User).where(User.id == user_id)
        if expected is not ANY:
            if expected is None:
                stmt = stmt.where(User.refresh_token.is_(None))
            else:
                stmt = stmt.where(User.refresh_token == expected)
        stmt = stmt.values(refresh_token=new_token).execution_options(synchronize_session=False)

        result = self.session.execute(stmt)
        self.storage.save()
        updated = result.rowcount == 1
        if updated:
            # bring an instance already loaded in this session in step with the row
            self.session.get(User, user_id, populate_existing=True)
        return updated
