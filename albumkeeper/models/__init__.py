"""AlbumKeeper Database Models."""

from albumkeeper.models.user import User
from albumkeeper.models.asset import Asset
from albumkeeper.models.album import Album, AlbumAsset, AlbumSharedUser
from albumkeeper.models.shared_link import SharedLink

__all__ = [
    "User",
    "Asset",
    "Album",
    "AlbumAsset",
    "AlbumSharedUser",
    "SharedLink",
]
