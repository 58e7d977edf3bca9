"""Asset model."""

import secrets
from datetime import datetime, timezone
from typing import Optional

from sqlmodel import Field, SQLModel


class Asset(SQLModel, table=True):
    __tablename__ = "assets"

    id: str = Field(default_factory=lambda: f"ast_{secrets.token_hex(4)}", primary_key=True)
    owner_id: str = Field(foreign_key="users.id", index=True, ondelete="CASCADE")
    original_file_name: str = Field(default="")
    type: str = Field(default="IMAGE")  # 'IMAGE' | 'VIDEO'
    file_created_at: datetime = Field(index=True)  # capture time
    file_modified_at: Optional[datetime] = None
    is_favorite: bool = Field(default=False)
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
