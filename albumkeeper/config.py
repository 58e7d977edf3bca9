"""AlbumKeeper Server Configuration."""

from pathlib import Path
from typing import Optional

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # Server
    server_name: str = "AlbumKeeper"
    host: str = "0.0.0.0"
    port: int = 8080
    debug: bool = False
    log_level: str = "INFO"

    # Paths
    data_dir: Path = Path.home() / "albumkeeper" / "data"

    # Database
    db_path: Path = Path.home() / "albumkeeper" / "data" / "albumkeeper.db"
    database_url: Optional[str] = None  # overrides db_path, e.g. postgresql://...
    db_timeout_seconds: float = 5.0

    # Thumbnail maintenance
    thumbnail_reconcile_interval_seconds: int = 3600  # 0 = disabled
    thumbnail_reconcile_on_startup: bool = True
    thumbnail_verify_after_reconcile: bool = True

    model_config = {"env_prefix": "ALBUMKEEPER_"}

    @property
    def sqlalchemy_url(self) -> str:
        return self.database_url or f"sqlite:///{self.db_path}"

    def ensure_dirs(self) -> None:
        """Create all required directories."""
        for d in [self.data_dir, self.db_path.parent]:
            d.mkdir(parents=True, exist_ok=True)


settings = Settings()
settings.ensure_dirs()
