"""User domain entity."""

from typing import Any

from pydantic import Field

from src.user_sync.entities.core._base import Entity


class User(Entity):
    """A user mirrored from the identity provider.

    The provider owns the lifecycle; this record is only ever created,
    updated or deleted in response to its webhook events. All attributes are
    opaque strings taken from the payload, with ``""`` standing in for values
    the provider did not send.
    """

    external_user_id: str = Field(
        description="Identifier assigned by the identity provider"
    )
    username: str = Field(default="", description="Provider username")
    phone_number: str = Field(default="", description="Primary phone number")
    profile_image_url: str = Field(default="", description="Profile image URL")

    def __eq__(self, other: Any) -> bool:
        """Compare users by business attributes, ignoring timestamps."""
        if not isinstance(other, User):
            return False

        return (
            self.id == other.id
            and self.external_user_id == other.external_user_id
            and self.username == other.username
            and self.phone_number == other.phone_number
            and self.profile_image_url == other.profile_image_url
        )

    def __hash__(self) -> int:
        """Hash based on business attributes, ignoring timestamps."""
        return hash((
            self.id,
            self.external_user_id,
            self.username,
            self.phone_number,
            self.profile_image_url,
        ))
