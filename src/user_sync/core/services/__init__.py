"""Core services exports."""

# Database Service
from .database.db_manage import DbManageService
from .database.db_session import DbSessionService

# User Services
from .user.user_sync import UserSyncService

# Webhook Services
from .webhooks.verification import (
    MissingWebhookHeadersError,
    WebhookConfigurationError,
    WebhookSignatureError,
    WebhookVerificationService,
    extract_svix_headers,
)

__all__ = [
    # Database Service
    "DbManageService",
    "DbSessionService",
    # User Services
    "UserSyncService",
    # Webhook Services
    "MissingWebhookHeadersError",
    "WebhookConfigurationError",
    "WebhookSignatureError",
    "WebhookVerificationService",
    "extract_svix_headers",
]
