"""User data access layer."""

from datetime import UTC, datetime

from sqlmodel import Session, select

from src.user_sync.entities.core.user.entity import User
from src.user_sync.entities.core.user.table import UserTable

UPDATABLE_FIELDS = frozenset({"username", "phone_number", "profile_image_url"})


class UserNotFoundError(LookupError):
    """Raised when no user exists for an external user id."""

    def __init__(self, external_user_id: str):
        super().__init__(f"No user with external id {external_user_id!r}")
        self.external_user_id = external_user_id


class UserRepository:
    """Data-access layer for mirrored users.

    The repository flushes but never commits; the caller owns the transaction.
    """

    def __init__(self, session: Session) -> None:
        self._session = session

    def _get_row_by_external_id(self, external_user_id: str) -> UserTable | None:
        statement = select(UserTable).where(
            UserTable.external_user_id == external_user_id
        )
        return self._session.exec(statement).first()

    def create(self, user: User) -> User:
        row = UserTable.model_validate(user, from_attributes=True)
        self._session.add(row)
        self._session.flush()
        self._session.refresh(row)
        return User.model_validate(row, from_attributes=True)

    def get(self, user_id: str) -> User | None:
        row = self._session.get(UserTable, user_id)
        if row is None:
            return None
        return User.model_validate(row, from_attributes=True)

    def get_by_external_id(self, external_user_id: str) -> User | None:
        row = self._get_row_by_external_id(external_user_id)
        if row is None:
            return None
        return User.model_validate(row, from_attributes=True)

    def list_all(self, limit: int = 100, offset: int = 0) -> list[User]:
        statement = (
            select(UserTable)
            .order_by(UserTable.created_at)
            .offset(offset)
            .limit(limit)
        )
        rows = self._session.exec(statement).all()
        return [User.model_validate(row, from_attributes=True) for row in rows]

    def update_by_external_id(
        self, external_user_id: str, /, **fields: str
    ) -> User:
        unknown = set(fields) - UPDATABLE_FIELDS
        if unknown:
            raise ValueError(f"Cannot update user fields: {sorted(unknown)}")

        row = self._get_row_by_external_id(external_user_id)
        if row is None:
            raise UserNotFoundError(external_user_id)

        for name, value in fields.items():
            setattr(row, name, value)
        row.updated_at = datetime.now(UTC)

        self._session.add(row)
        self._session.flush()
        self._session.refresh(row)
        return User.model_validate(row, from_attributes=True)

    def delete_by_external_id(self, external_user_id: str) -> None:
        row = self._get_row_by_external_id(external_user_id)
        if row is None:
            raise UserNotFoundError(external_user_id)

        self._session.delete(row)
        self._session.flush()
