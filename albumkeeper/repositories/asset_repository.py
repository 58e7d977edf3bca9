"""Asset lookups used by album thumbnail selection."""

from typing import Optional

from sqlmodel import Session, col, select

from albumkeeper.models.album import Album, AlbumAsset
from albumkeeper.models.asset import Asset
from albumkeeper.repositories.base import store_errors

# Newest capture first; ties go to the lowest asset id so the pick is stable
NEWEST_FIRST = (col(Asset.file_created_at).desc(), col(Asset.id).asc())


def newest_member_subquery():
    """Scalar subquery picking the newest asset of the enclosing `albums` row."""
    return (
        select(AlbumAsset.asset_id)
        .join(Asset, col(Asset.id) == col(AlbumAsset.asset_id))
        .where(col(AlbumAsset.album_id) == col(Album.id))
        .order_by(*NEWEST_FIRST)
        .limit(1)
        .correlate(Album)
        .scalar_subquery()
    )


class AssetRepository:
    def __init__(self, session: Session):
        self.session = session

    def get_by_id(self, asset_id: str) -> Optional[Asset]:
        return self.session.get(Asset, asset_id)

    def most_recent_member_asset(self, album_id: str) -> Optional[str]:
        with store_errors(self.session, "look up the newest album asset"):
            return self.session.exec(
                select(AlbumAsset.asset_id)
                .join(Asset, col(Asset.id) == col(AlbumAsset.asset_id))
                .where(AlbumAsset.album_id == album_id)
                .order_by(*NEWEST_FIRST)
                .limit(1)
            ).first()
