"""Webhook payload models."""

from .webhook_event import (
    ClerkUserData,
    PhoneNumber,
    SyncOutcome,
    UserEventType,
    WebhookEvent,
)

__all__ = [
    "ClerkUserData",
    "PhoneNumber",
    "SyncOutcome",
    "UserEventType",
    "WebhookEvent",
]
