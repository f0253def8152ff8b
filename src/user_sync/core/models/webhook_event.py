"""Clerk webhook payload models."""

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


class UserEventType(str, Enum):
    """User lifecycle events mirrored into the local user table."""

    CREATED = "user.created"
    UPDATED = "user.updated"
    DELETED = "user.deleted"


class SyncOutcome(str, Enum):
    """What a webhook event did to the local user table."""

    CREATED = "created"
    UPDATED = "updated"
    DELETED = "deleted"
    IGNORED = "ignored"


class WebhookEvent(BaseModel):
    """Envelope of a verified Clerk webhook delivery.

    Parsing never fails: an envelope without a usable ``type`` is simply an
    event this service does not handle.
    """

    model_config = ConfigDict(extra="ignore")

    type: str | None = Field(default=None, description="Event type, e.g. user.created")
    data: dict[str, Any] = Field(default_factory=dict, description="Event payload")
    object: str | None = Field(default=None, description="Envelope object kind")

    @field_validator("type", "object", mode="before")
    @classmethod
    def _non_string_is_none(cls, value: Any) -> Any:
        return value if isinstance(value, str) else None

    @field_validator("data", mode="before")
    @classmethod
    def _non_object_data_is_empty(cls, value: Any) -> Any:
        return value if isinstance(value, dict) else {}

    @classmethod
    def from_payload(cls, payload: Any) -> "WebhookEvent":
        """Build an event from any decoded JSON value."""
        return cls.model_validate(payload if isinstance(payload, dict) else {})

    @property
    def user_event_type(self) -> UserEventType | None:
        """The event type as a UserEventType, or None for anything else."""
        if self.type is None:
            return None
        try:
            return UserEventType(self.type)
        except ValueError:
            return None


class PhoneNumber(BaseModel):
    """One entry of ``data.phone_numbers``."""

    model_config = ConfigDict(extra="ignore")

    phone_number: str | None = None


class ClerkUserData(BaseModel):
    """The ``data`` object of a ``user.*`` event.

    Only ``id`` is required: deletion payloads carry little more than the id,
    and Clerk sends null for unset profile attributes.
    """

    model_config = ConfigDict(extra="ignore")

    id: str = Field(min_length=1, description="Clerk user id")
    username: str | None = None
    phone_numbers: list[PhoneNumber] = Field(default_factory=list)
    image_url: str | None = None

    @field_validator("phone_numbers", mode="before")
    @classmethod
    def _null_phone_numbers_is_empty(cls, value: Any) -> Any:
        return [] if value is None else value

    @property
    def primary_phone_number(self) -> str:
        if not self.phone_numbers:
            return ""
        return self.phone_numbers[0].phone_number or ""

    @property
    def profile_fields(self) -> dict[str, str]:
        """Local user attributes, with "" for anything the provider left out."""
        return {
            "username": self.username or "",
            "phone_number": self.primary_phone_number,
            "profile_image_url": self.image_url or "",
        }
