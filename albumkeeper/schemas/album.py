"""Album repository inputs and maintenance responses."""

from typing import Optional

from pydantic import BaseModel


class AlbumInfoOptions(BaseModel):
    with_assets: bool = False


class AlbumAssetCount(BaseModel):
    album_id: str
    asset_count: int


class AlbumCreate(BaseModel):
    owner_id: str
    album_name: str = "Untitled Album"
    description: str = ""
    album_thumbnail_asset_id: Optional[str] = None
    asset_ids: list[str] = []
    shared_user_ids: list[str] = []


class AlbumUpdate(BaseModel):
    album_name: Optional[str] = None
    description: Optional[str] = None
    album_thumbnail_asset_id: Optional[str] = None


class InconsistentAlbumsResponse(BaseModel):
    album_ids: list[str]
    count: int
    missing: list[str]  # has assets, no thumbnail
    stale: list[str]  # thumbnail not among the album's assets


class ThumbnailPlanResponse(BaseModel):
    corrections: dict[str, Optional[str]]  # album id -> new thumbnail


class ReconcileResponse(BaseModel):
    updated: Optional[int]  # None when the store cannot tell
