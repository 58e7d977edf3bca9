"""Domain errors raised by the album store and thumbnail maintenance."""


class AlbumKeeperError(Exception):
    """Base class for AlbumKeeper errors."""


class StoreUnavailable(AlbumKeeperError):
    """The backing database could not be reached or timed out.

    Nothing was written. Reconciliation is idempotent, so the caller may
    simply run it again later.
    """


class InvariantViolationPersisted(AlbumKeeperError):
    """Albums still have an invalid thumbnail after reconciliation."""

    def __init__(self, album_ids):
        self.album_ids = sorted(album_ids)
        super().__init__(
            f"{len(self.album_ids)} album(s) still have an invalid thumbnail: "
            + ", ".join(self.album_ids)
        )
