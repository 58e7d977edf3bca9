"""Shared fixtures: in-memory database and small data builders."""

import os
import tempfile
from datetime import datetime

# Setup environment for testing
os.environ["ALBUMKEEPER_DATA_DIR"] = tempfile.mkdtemp()
os.environ["ALBUMKEEPER_DB_PATH"] = os.path.join(os.environ["ALBUMKEEPER_DATA_DIR"], "test.db")
os.environ["ALBUMKEEPER_THUMBNAIL_RECONCILE_INTERVAL_SECONDS"] = "0"

import pytest
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel

from albumkeeper.database import build_engine
from albumkeeper.models import Album, AlbumAsset, AlbumSharedUser, Asset, SharedLink, User


@pytest.fixture
def engine():
    test_engine = build_engine("sqlite://", poolclass=StaticPool)
    SQLModel.metadata.create_all(test_engine)
    yield test_engine
    test_engine.dispose()


@pytest.fixture
def session(engine):
    with Session(engine) as session:
        yield session


@pytest.fixture
def make_user(session):
    def _make(email: str, user_id: str | None = None) -> str:
        user = User(email=email, name=email.split("@")[0])
        if user_id:
            user.id = user_id
        session.add(user)
        session.commit()
        return user.id
    return _make


@pytest.fixture
def owner(make_user):
    return make_user("owner@example.com", user_id="usr_owner")


@pytest.fixture
def make_asset(session, owner):
    def _make(asset_id: str, file_created_at: datetime) -> str:
        session.add(Asset(id=asset_id, owner_id=owner, file_created_at=file_created_at))
        session.commit()
        return asset_id
    return _make


@pytest.fixture
def make_album(session, owner):
    def _make(
        album_id: str,
        asset_ids=(),
        thumbnail: str | None = None,
        owner_id: str | None = None,
        created_at: datetime | None = None,
        shared_with=(),
        link_users=(),
    ) -> str:
        album = Album(
            id=album_id,
            owner_id=owner_id or owner,
            album_name=album_id,
            album_thumbnail_asset_id=thumbnail,
        )
        if created_at:
            album.created_at = created_at
        session.add(album)
        session.flush()
        for asset_id in asset_ids:
            session.add(AlbumAsset(album_id=album_id, asset_id=asset_id))
        for user_id in shared_with:
            session.add(AlbumSharedUser(album_id=album_id, user_id=user_id))
        for user_id in link_users:
            session.add(SharedLink(user_id=user_id, album_id=album_id))
        session.commit()
        return album_id
    return _make


@pytest.fixture
def thumbnail_of(session):
    def _get(album_id: str) -> str | None:
        session.expire_all()
        return session.get(Album, album_id).album_thumbnail_asset_id
    return _get
