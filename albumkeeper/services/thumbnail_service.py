"""Album thumbnail consistency: detection, dry-run planning, reconciliation.

Every album must either have no thumbnail (empty album) or a thumbnail that
is one of its own assets. Membership changes elsewhere may break this; a
reconciliation pass restores it with one set-based update. The pass is
idempotent, so overlapping or repeated runs are safe.
"""

import logging
from typing import Optional

from sqlmodel import Session

from albumkeeper.config import settings
from albumkeeper.errors import InvariantViolationPersisted
from albumkeeper.repositories.album_repository import AlbumRepository
from albumkeeper.repositories.asset_repository import AssetRepository
from albumkeeper.repositories.base import AlbumStore, AssetStore

logger = logging.getLogger(__name__)


class ThumbnailMaintainer:
    """Finds and fixes albums whose thumbnail is missing or stale."""

    def __init__(self, album_store: AlbumStore, asset_store: AssetStore, verify: bool = True):
        self.album_store = album_store
        self.asset_store = asset_store
        self.verify = verify

    @classmethod
    def for_session(cls, session: Session, verify: Optional[bool] = None) -> "ThumbnailMaintainer":
        if verify is None:
            verify = settings.thumbnail_verify_after_reconcile
        return cls(AlbumRepository(session), AssetRepository(session), verify=verify)

    def find_inconsistent_albums(self) -> set[str]:
        return set(self.album_store.get_invalid_thumbnail())

    def describe_inconsistencies(self) -> dict[str, list[str]]:
        """Inconsistent albums split by kind: 'missing' and 'stale'."""
        return {
            "missing": self.album_store.list_albums_missing_thumbnail_with_members(),
            "stale": self.album_store.list_albums_with_stale_thumbnail(),
        }

    def plan_corrections(self) -> dict[str, Optional[str]]:
        """Thumbnail each inconsistent album would get, without writing anything."""
        return {
            album_id: self.asset_store.most_recent_member_asset(album_id)
            for album_id in sorted(self.find_inconsistent_albums())
        }

    def reconcile_thumbnails(self) -> Optional[int]:
        """Fix all invalid album thumbnails in one bulk update.

        Returns the number of albums changed, or None if the store could not
        report it. Raises StoreUnavailable if the store can't be reached and
        InvariantViolationPersisted if verification still finds bad albums.
        """
        updated = self.album_store.update_thumbnails()
        if updated is None:
            logger.info("Album thumbnails reconciled (updated count unknown)")
        elif updated:
            logger.info("Updated thumbnails of %d album(s)", updated)
        else:
            logger.debug("All album thumbnails already consistent")

        if self.verify:
            remaining = self.find_inconsistent_albums()
            if remaining:
                logger.error(
                    "Thumbnail invariant still violated for %d album(s) after reconcile: %s",
                    len(remaining),
                    ", ".join(sorted(remaining)),
                )
                raise InvariantViolationPersisted(remaining)

        return updated
