from loguru import logger
from sqlmodel import Session

from src.user_sync.core.models.webhook_event import (
    ClerkUserData,
    SyncOutcome,
    UserEventType,
    WebhookEvent,
)
from src.user_sync.entities.core.user.entity import User
from src.user_sync.entities.core.user.repository import UserRepository


class UserSyncService:
    """Mirror identity-provider user lifecycle events into the local user table."""

    def __init__(self, db_session: Session):
        self._user_repo = UserRepository(db_session)
        self._db_session = db_session

    def handle_event(self, event: WebhookEvent) -> SyncOutcome:
        """Apply a verified webhook event to the user table.

        Args:
            event: Verified webhook envelope

        Returns:
            What happened to the user table

        Raises:
            pydantic.ValidationError: If a user event carries no usable ``data``
            UserNotFoundError: If an update or delete targets an unknown user
        """
        event_type = event.user_event_type
        if event_type is None:
            logger.warning("Unhandled event type: {}", event.type)
            return SyncOutcome.IGNORED

        data = ClerkUserData.model_validate(event.data)

        if event_type is UserEventType.CREATED:
            self.create_user(data)
            return SyncOutcome.CREATED
        if event_type is UserEventType.UPDATED:
            self.update_user(data)
            return SyncOutcome.UPDATED

        self.delete_user(data.id)
        return SyncOutcome.DELETED

    def create_user(self, data: ClerkUserData) -> User:
        try:
            user = self._user_repo.create(
                User(external_user_id=data.id, **data.profile_fields)
            )
            self._db_session.commit()
        except Exception as e:
            logger.error(f"Error creating user {data.id}: {e}")
            self._db_session.rollback()
            raise

        logger.info("Created user {} for external id {}", user.id, data.id)
        return user

    def update_user(self, data: ClerkUserData) -> User:
        try:
            user = self._user_repo.update_by_external_id(data.id, **data.profile_fields)
            self._db_session.commit()
        except Exception as e:
            logger.error(f"Error updating user {data.id}: {e}")
            self._db_session.rollback()
            raise

        logger.info("Updated user {} for external id {}", user.id, data.id)
        return user

    def delete_user(self, external_user_id: str) -> None:
        try:
            self._user_repo.delete_by_external_id(external_user_id)
            self._db_session.commit()
        except Exception as e:
            logger.error(f"Error deleting user {external_user_id}: {e}")
            self._db_session.rollback()
            raise

        logger.info("Deleted user for external id {}", external_user_id)
