"""Background worker that periodically reconciles album thumbnails.

Runs as a daemon thread; each pass opens its own session.
"""

import logging
import threading
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy.engine import Engine
from sqlmodel import Session

from albumkeeper.config import settings
from albumkeeper.database import engine as default_engine
from albumkeeper.errors import AlbumKeeperError
from albumkeeper.services.thumbnail_service import ThumbnailMaintainer

logger = logging.getLogger(__name__)


class ThumbnailMaintenanceWorker:
    """Runs thumbnail reconciliation every `interval_seconds`."""

    def __init__(
        self,
        interval_seconds: Optional[int] = None,
        run_on_start: Optional[bool] = None,
        engine: Optional[Engine] = None,
    ):
        self._interval = (
            settings.thumbnail_reconcile_interval_seconds
            if interval_seconds is None else interval_seconds
        )
        self._run_on_start = (
            settings.thumbnail_reconcile_on_startup if run_on_start is None else run_on_start
        )
        self._engine = engine or default_engine
        self._thread: threading.Thread | None = None
        self._stop_event = threading.Event()

        self.last_run_at: datetime | None = None
        self.last_updated: int | None = None
        self.last_error: str | None = None

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> bool:
        """Start the worker thread. Returns False when maintenance is disabled."""
        if self._interval <= 0:
            logger.info("Thumbnail maintenance disabled (interval=%s)", self._interval)
            return False
        if self.running:
            return True

        self._stop_event.clear()
        self._thread = threading.Thread(
            target=self._run, daemon=True, name="thumbnail-maintenance"
        )
        self._thread.start()
        logger.info("Thumbnail maintenance started, every %d seconds", self._interval)
        return True

    def stop(self):
        """Stop the worker thread."""
        self._stop_event.set()
        if self._thread and self._thread.is_alive():
            self._thread.join(timeout=5)
        logger.info("Thumbnail maintenance stopped")

    def run_once(self) -> Optional[int]:
        """Run one reconciliation pass; errors propagate to the caller."""
        with Session(self._engine) as session:
            return ThumbnailMaintainer.for_session(session).reconcile_thumbnails()

    def _run(self):
        """Main worker loop."""
        if self._run_on_start:
            self._run_pass()
        while not self._stop_event.wait(self._interval):
            self._run_pass()

    def _run_pass(self):
        self.last_run_at = datetime.now(timezone.utc)
        try:
            self.last_updated = self.run_once()
            self.last_error = None
        except AlbumKeeperError as e:
            self.last_error = str(e)
            logger.error("Thumbnail maintenance pass failed: %s", e)
        except Exception as e:
            self.last_error = str(e)
            logger.exception("Unexpected error in thumbnail maintenance: %s", e)


# Singleton worker instance
thumbnail_worker = ThumbnailMaintenanceWorker()
