"""Album thumbnail maintenance endpoints."""

from fastapi import APIRouter, Depends, HTTPException, status
from sqlmodel import Session

from albumkeeper.database import get_session
from albumkeeper.errors import InvariantViolationPersisted, StoreUnavailable
from albumkeeper.schemas.album import (
    InconsistentAlbumsResponse,
    ReconcileResponse,
    ThumbnailPlanResponse,
)
from albumkeeper.services.maintenance_worker import thumbnail_worker
from albumkeeper.services.thumbnail_service import ThumbnailMaintainer

router = APIRouter(prefix="/maintenance", tags=["maintenance"])


def _store_unavailable(e: StoreUnavailable) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        detail=str(e),
    )


@router.get("/thumbnails/inconsistent", response_model=InconsistentAlbumsResponse)
def list_inconsistent_albums(session: Session = Depends(get_session)):
    """List albums whose thumbnail is missing or points outside the album."""
    maintainer = ThumbnailMaintainer.for_session(session)
    try:
        by_kind = maintainer.describe_inconsistencies()
    except StoreUnavailable as e:
        raise _store_unavailable(e)
    album_ids = sorted(set(by_kind["missing"]) | set(by_kind["stale"]))
    return InconsistentAlbumsResponse(
        album_ids=album_ids,
        count=len(album_ids),
        missing=by_kind["missing"],
        stale=by_kind["stale"],
    )


@router.get("/thumbnails/plan", response_model=ThumbnailPlanResponse)
def plan_thumbnail_corrections(session: Session = Depends(get_session)):
    """Dry run: the thumbnail each inconsistent album would get."""
    maintainer = ThumbnailMaintainer.for_session(session)
    try:
        corrections = maintainer.plan_corrections()
    except StoreUnavailable as e:
        raise _store_unavailable(e)
    return ThumbnailPlanResponse(corrections=corrections)


@router.post("/thumbnails/reconcile", response_model=ReconcileResponse)
def reconcile_thumbnails(session: Session = Depends(get_session)):
    """Fix every invalid album thumbnail now."""
    maintainer = ThumbnailMaintainer.for_session(session)
    try:
        updated = maintainer.reconcile_thumbnails()
    except StoreUnavailable as e:
        raise _store_unavailable(e)
    except InvariantViolationPersisted as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={"message": "Thumbnail invariant still violated", "album_ids": e.album_ids},
        )
    return ReconcileResponse(updated=updated)


@router.get("/status")
def maintenance_status():
    """State of the periodic thumbnail maintenance worker."""
    return {
        "running": thumbnail_worker.running,
        "last_run_at": (
            thumbnail_worker.last_run_at.isoformat() if thumbnail_worker.last_run_at else None
        ),
        "last_updated": thumbnail_worker.last_updated,
        "last_error": thumbnail_worker.last_error,
    }
