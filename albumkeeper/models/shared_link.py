"""Shared link model."""

import secrets
from datetime import datetime, timezone
from typing import Optional

from sqlmodel import Field, SQLModel


class SharedLink(SQLModel, table=True):
    __tablename__ = "shared_links"

    id: str = Field(default_factory=lambda: f"shl_{secrets.token_hex(4)}", primary_key=True)
    user_id: str = Field(foreign_key="users.id", index=True, ondelete="CASCADE")
    album_id: Optional[str] = Field(
        default=None, foreign_key="albums.id", index=True, ondelete="CASCADE"
    )
    key: str = Field(default_factory=lambda: secrets.token_urlsafe(16), unique=True)
    description: Optional[str] = None
    expires_at: Optional[datetime] = None
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
