"""Store contracts used by thumbnail maintenance, and store error mapping."""

import logging
from contextlib import contextmanager
from typing import Optional, Protocol

from sqlalchemy.exc import InterfaceError, OperationalError, SQLAlchemyError
from sqlalchemy.exc import TimeoutError as PoolTimeoutError
from sqlmodel import Session

from albumkeeper.errors import StoreUnavailable

logger = logging.getLogger(__name__)

# Raised by SQLAlchemy when the database cannot be reached, is locked past
# the busy timeout, or the pool runs dry.
UNAVAILABLE_ERRORS = (OperationalError, InterfaceError, PoolTimeoutError)


class AlbumStore(Protocol):
    def list_albums_missing_thumbnail_with_members(self) -> list[str]:
        """Albums with no thumbnail that contain at least one asset."""

    def list_albums_with_stale_thumbnail(self) -> list[str]:
        """Albums whose thumbnail is set but is not one of their assets."""

    def get_invalid_thumbnail(self) -> list[str]:
        """Union of the two lists above, in a single query."""

    def set_thumbnail(self, album_id: str, asset_id: Optional[str]) -> None:
        ...

    def set_thumbnails(self, assignments: dict[str, Optional[str]]) -> None:
        """Bulk assignment; ids of albums that no longer exist are skipped."""

    def update_thumbnails(self) -> Optional[int]:
        """Bulk-correct every invalid thumbnail.

        Returns the number of updated albums, or None when unknown.
        """


class AssetStore(Protocol):
    def most_recent_member_asset(self, album_id: str) -> Optional[str]:
        """Newest asset of the album by file_created_at, None if empty."""


def _rollback(session: Session):
    try:
        session.rollback()
    except SQLAlchemyError as rollback_error:
        logger.warning("Rollback after store failure also failed: %s", rollback_error)


@contextmanager
def store_errors(session: Session, action: str):
    """Roll back on any database error.

    Connection-level failures become StoreUnavailable; anything else
    (integrity errors, bugs) is re-raised as is.
    """
    try:
        yield
    except UNAVAILABLE_ERRORS as e:
        logger.warning("Store unavailable while trying to %s: %s", action, e)
        _rollback(session)
        raise StoreUnavailable(f"Could not {action}: {e}") from e
    except SQLAlchemyError as e:
        logger.error("Failed to %s: %s", action, e)
        _rollback(session)
        raise
