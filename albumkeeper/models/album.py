"""Album models."""

import secrets
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Optional

from sqlmodel import Field, Relationship, SQLModel

if TYPE_CHECKING:
    from albumkeeper.models.asset import Asset
    from albumkeeper.models.shared_link import SharedLink
    from albumkeeper.models.user import User


class AlbumAsset(SQLModel, table=True):
    __tablename__ = "albums_assets"

    album_id: str = Field(foreign_key="albums.id", primary_key=True, ondelete="CASCADE")
    asset_id: str = Field(
        foreign_key="assets.id", primary_key=True, index=True, ondelete="CASCADE"
    )


class AlbumSharedUser(SQLModel, table=True):
    __tablename__ = "albums_shared_users"

    album_id: str = Field(foreign_key="albums.id", primary_key=True, ondelete="CASCADE")
    user_id: str = Field(
        foreign_key="users.id", primary_key=True, index=True, ondelete="CASCADE"
    )


class Album(SQLModel, table=True):
    __tablename__ = "albums"

    id: str = Field(default_factory=lambda: f"alb_{secrets.token_hex(4)}", primary_key=True)
    owner_id: str = Field(foreign_key="users.id", index=True, ondelete="CASCADE")
    album_name: str = Field(default="Untitled Album")
    description: str = Field(default="")
    # Weak reference: not guaranteed to be a member, see ThumbnailMaintainer
    album_thumbnail_asset_id: Optional[str] = Field(
        default=None, foreign_key="assets.id", ondelete="SET NULL"
    )
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    owner: Optional["User"] = Relationship()
    shared_users: list["User"] = Relationship(link_model=AlbumSharedUser)
    shared_links: list["SharedLink"] = Relationship(
        sa_relationship_kwargs={"cascade": "all, delete-orphan"}
    )
    assets: list["Asset"] = Relationship(
        link_model=AlbumAsset,
        sa_relationship_kwargs={"order_by": "Asset.file_created_at.desc()"},
    )
