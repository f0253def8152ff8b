"""User database table model."""

from sqlalchemy import Column, String, UniqueConstraint
from sqlmodel import Field

from src.user_sync.entities.core._base import EntityTable


class UserTable(EntityTable, table=True):
    """Database persistence model for mirrored users.

    The external user id is the join key with the identity provider and is
    unique across the table.
    """

    __table_args__ = (
        UniqueConstraint("external_user_id", name="uq_user_external_user_id"),
    )

    external_user_id: str = Field(
        sa_column=Column(String(255), nullable=False, index=True)
    )
    username: str = Field(default="", sa_column=Column(String(255), nullable=False))
    phone_number: str = Field(default="", sa_column=Column(String(64), nullable=False))
    profile_image_url: str = Field(
        default="", sa_column=Column(String(2048), nullable=False)
    )
