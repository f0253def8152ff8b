"""FastAPI dependency implementations."""

from __future__ import annotations

from collections.abc import Iterator

from fastapi import Depends, HTTPException, Request
from loguru import logger
from sqlmodel import Session

from src.user_sync.api.http.app_data import ApplicationDependencies
from src.user_sync.core.services import (
    DbSessionService,
    UserSyncService,
    WebhookConfigurationError,
    WebhookVerificationService,
)
from src.user_sync.runtime.config.config_data import ClerkWebhookConfig
from src.user_sync.runtime.context import get_config


def get_database_service(request: Request) -> DbSessionService:
    """Get the shared database service instance."""
    app_deps: ApplicationDependencies = request.app.state.app_dependencies
    return app_deps.database_service


def get_db_session(
    database_service: DbSessionService = Depends(get_database_service),
) -> Iterator[Session]:
    """Yield a request-scoped database session."""
    session = database_service.get_session()
    try:
        yield session
    finally:
        session.close()


def get_clerk_webhook_config() -> ClerkWebhookConfig:
    """Get the Clerk webhook settings from the current configuration.

    Read per request so a secret provisioned after startup is picked up.
    """
    return get_config().webhooks.clerk


def get_webhook_verification_service(
    webhook_config: ClerkWebhookConfig = Depends(get_clerk_webhook_config),
) -> WebhookVerificationService:
    """Build the Svix verifier, failing closed when no usable secret is set."""
    try:
        return WebhookVerificationService(webhook_config.signing_secret)
    except WebhookConfigurationError as e:
        logger.error(
            "{}. Please add CLERK_WEBHOOK_SECRET from the Clerk dashboard to the "
            "environment or .env file",
            e,
        )
        raise HTTPException(status_code=500, detail="Internal Server Error") from e


def get_user_sync_service(
    db_session: Session = Depends(get_db_session),
) -> UserSyncService:
    """Get the User Sync service instance."""
    return UserSyncService(db_session)


async def get_raw_body(request: Request) -> bytes:
    """Read the request body exactly as received, for signature checks."""
    return await request.body()
