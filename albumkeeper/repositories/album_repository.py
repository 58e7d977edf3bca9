"""Album data access: lookups, sharing queries and thumbnail consistency."""

import logging
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import and_, bindparam, delete, or_, update
from sqlalchemy.orm import noload, selectinload
from sqlmodel import Session, col, func, select

from albumkeeper.models.album import Album, AlbumAsset, AlbumSharedUser
from albumkeeper.models.asset import Asset
from albumkeeper.models.shared_link import SharedLink
from albumkeeper.models.user import User
from albumkeeper.repositories.asset_repository import newest_member_subquery
from albumkeeper.repositories.base import store_errors
from albumkeeper.schemas.album import (
    AlbumAssetCount,
    AlbumCreate,
    AlbumInfoOptions,
    AlbumUpdate,
)

logger = logging.getLogger(__name__)


def _album_has_assets():
    return (
        select(AlbumAsset.album_id)
        .where(col(AlbumAsset.album_id) == col(Album.id))
        .correlate(Album)
        .exists()
    )


def _album_contains_thumbnail():
    return (
        select(AlbumAsset.album_id)
        .where(
            col(AlbumAsset.album_id) == col(Album.id),
            col(AlbumAsset.asset_id) == col(Album.album_thumbnail_asset_id),
        )
        .correlate(Album)
        .exists()
    )


def missing_thumbnail_condition():
    """No thumbnail although the album has assets."""
    return and_(col(Album.album_thumbnail_asset_id).is_(None), _album_has_assets())


def stale_thumbnail_condition():
    """Thumbnail set but not (or no longer) one of the album's assets."""
    return and_(
        col(Album.album_thumbnail_asset_id).is_not(None), ~_album_contains_thumbnail()
    )


def invalid_thumbnail_condition():
    return or_(missing_thumbnail_condition(), stale_thumbnail_condition())


class AlbumRepository:
    def __init__(self, session: Session):
        self.session = session

    # --- Lookups ---

    def get_by_id(
        self, album_id: str, options: Optional[AlbumInfoOptions] = None
    ) -> Optional[Album]:
        """Get an album with owner, shared users and links.

        Assets (newest first) are only loaded with `options.with_assets`.
        """
        options = options or AlbumInfoOptions()
        assets_loader = (
            selectinload(Album.assets) if options.with_assets else noload(Album.assets)
        )
        return self.session.exec(
            select(Album)
            .where(Album.id == album_id)
            .options(
                selectinload(Album.owner),
                selectinload(Album.shared_users),
                selectinload(Album.shared_links),
                assets_loader,
            )
        ).first()

    def get_by_ids(self, ids: list[str]) -> list[Album]:
        if not ids:
            return []
        return list(self.session.exec(
            select(Album)
            .where(col(Album.id).in_(ids))
            .options(selectinload(Album.owner), selectinload(Album.shared_users))
        ).all())

    def get_by_asset_id(self, owner_id: str, asset_id: str) -> list[Album]:
        """Albums containing the asset that the user owns or has been shared."""
        return list(self.session.exec(
            select(Album)
            .where(
                Album.assets.any(col(Asset.id) == asset_id),
                or_(
                    col(Album.owner_id) == owner_id,
                    Album.shared_users.any(col(User.id) == owner_id),
                ),
            )
            .options(selectinload(Album.owner), selectinload(Album.shared_users))
            .order_by(col(Album.created_at).desc())
        ).all())

    def get_asset_count_for_ids(self, ids: list[str]) -> list[AlbumAssetCount]:
        # An empty IN () is invalid on some databases
        if not ids:
            return []

        rows = self.session.exec(
            select(Album.id, func.count(col(AlbumAsset.asset_id)))
            .outerjoin(AlbumAsset, col(AlbumAsset.album_id) == col(Album.id))
            .where(col(Album.id).in_(ids))
            .group_by(Album.id)
        ).all()
        return [
            AlbumAssetCount(album_id=album_id, asset_count=int(count))
            for album_id, count in rows
        ]

    def get_owned(self, owner_id: str) -> list[Album]:
        return self._list_with_sharing(col(Album.owner_id) == owner_id)

    def get_shared(self, owner_id: str) -> list[Album]:
        """Get albums shared with and shared by the user."""
        return self._list_with_sharing(
            or_(
                Album.shared_users.any(col(User.id) == owner_id),
                Album.shared_links.any(col(SharedLink.user_id) == owner_id),
                and_(col(Album.owner_id) == owner_id, Album.shared_users.any()),
            )
        )

    def get_not_shared(self, owner_id: str) -> list[Album]:
        """Get albums of the user that are not shared in any way."""
        return self._list_with_sharing(
            col(Album.owner_id) == owner_id,
            ~Album.shared_users.any(),
            ~Album.shared_links.any(),
        )

    def get_all(self) -> list[Album]:
        return list(self.session.exec(
            select(Album).options(selectinload(Album.owner))
        ).all())

    def has_asset(self, album_id: str, asset_id: str) -> bool:
        return self.session.exec(
            select(AlbumAsset).where(
                AlbumAsset.album_id == album_id,
                AlbumAsset.asset_id == asset_id,
            )
        ).first() is not None

    def _list_with_sharing(self, *conditions) -> list[Album]:
        return list(self.session.exec(
            select(Album)
            .where(*conditions)
            .options(
                selectinload(Album.owner),
                selectinload(Album.shared_users),
                selectinload(Album.shared_links),
            )
            .order_by(col(Album.created_at).desc())
        ).all())

    # --- Writes ---

    def create(self, album_in: AlbumCreate) -> Album:
        album = Album(**album_in.model_dump(exclude={"asset_ids", "shared_user_ids"}))
        if album_in.asset_ids:
            album.assets = list(self.session.exec(
                select(Asset).where(col(Asset.id).in_(album_in.asset_ids))
            ).all())
        if album_in.shared_user_ids:
            album.shared_users = list(self.session.exec(
                select(User).where(col(User.id).in_(album_in.shared_user_ids))
            ).all())
        return self._save(album)

    def update(self, album: Album, album_in: AlbumUpdate) -> Album:
        for key, value in album_in.model_dump(exclude_unset=True).items():
            setattr(album, key, value)
        album.updated_at = datetime.now(timezone.utc)
        return self._save(album)

    def delete(self, album: Album) -> None:
        self.session.delete(album)
        self.session.commit()

    def delete_all(self, user_id: str) -> None:
        """Delete every album owned by the user, with memberships and shares."""
        owned = select(Album.id).where(Album.owner_id == user_id)
        self.session.execute(delete(AlbumAsset).where(col(AlbumAsset.album_id).in_(owned)))
        self.session.execute(
            delete(AlbumSharedUser).where(col(AlbumSharedUser.album_id).in_(owned))
        )
        self.session.execute(delete(SharedLink).where(col(SharedLink.album_id).in_(owned)))
        self.session.execute(delete(Album).where(col(Album.owner_id) == user_id))
        self.session.commit()

    def remove_asset(self, asset_id: str) -> None:
        """Remove the asset from every album. Thumbnails are left to reconciliation."""
        self.session.execute(delete(AlbumAsset).where(col(AlbumAsset.asset_id) == asset_id))
        self.session.commit()

    def _save(self, album: Album) -> Album:
        self.session.add(album)
        self.session.commit()
        return self.session.exec(
            select(Album)
            .where(Album.id == album.id)
            .options(
                selectinload(Album.owner),
                selectinload(Album.shared_users),
                selectinload(Album.shared_links),
                selectinload(Album.assets),
            )
            .execution_options(populate_existing=True)
        ).one()

    # --- Thumbnail consistency ---

    def list_albums_missing_thumbnail_with_members(self) -> list[str]:
        return self._album_ids_where(missing_thumbnail_condition(), "list albums without thumbnail")

    def list_albums_with_stale_thumbnail(self) -> list[str]:
        return self._album_ids_where(stale_thumbnail_condition(), "list stale album thumbnails")

    def get_invalid_thumbnail(self) -> list[str]:
        """Album ids whose thumbnail is invalid:

        - thumbnail references an asset outside the album
        - empty album still has a thumbnail set
        - album has assets but no thumbnail
        """
        return self._album_ids_where(invalid_thumbnail_condition(), "list invalid album thumbnails")

    def set_thumbnail(self, album_id: str, asset_id: Optional[str]) -> None:
        self.set_thumbnails({album_id: asset_id})

    def set_thumbnails(self, assignments: dict[str, Optional[str]]) -> None:
        """Assign thumbnails to many albums in one executemany UPDATE.

        Album ids that no longer exist match no row and are skipped; an
        asset id that doesn't exist fails the whole batch.
        """
        if not assignments:
            return
        albums = Album.__table__  # type: ignore[attr-defined]
        statement = (
            update(albums)
            .where(albums.c.id == bindparam("target_id"))
            .values(album_thumbnail_asset_id=bindparam("thumbnail_id"))
        )
        with store_errors(self.session, "set album thumbnails"):
            self.session.execute(
                statement,
                [
                    {"target_id": album_id, "thumbnail_id": asset_id}
                    for album_id, asset_id in assignments.items()
                ],
            )
            self.session.commit()

    def update_thumbnails(self) -> Optional[int]:
        """Make sure every album thumbnail is valid, in a single UPDATE:

        - clear thumbnails of albums without assets
        - replace thumbnails pointing outside the album
        - set a thumbnail when none is set and the album has assets

        The new thumbnail is the album's newest asset (NULL for empty albums).
        Returns the number of updated albums, or None when the driver can't tell.
        """
        statement = (
            update(Album)
            .where(invalid_thumbnail_condition())
            .values(album_thumbnail_asset_id=newest_member_subquery())
            .execution_options(synchronize_session=False)
        )
        with store_errors(self.session, "update album thumbnails"):
            result = self.session.execute(statement)
            self.session.commit()

        affected = result.rowcount
        if affected is None or affected < 0:
            return None
        return affected

    def _album_ids_where(self, condition, action: str) -> list[str]:
        with store_errors(self.session, action):
            return list(self.session.exec(
                select(Album.id).where(condition).order_by(Album.id)
            ).all())
