from pathlib import Path
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    data_dir: Path = Path.home() / "JobBoard"
    # "sql" keeps documents in a local SQLite file, "sanity" talks to the hosted CMS.
    store_backend: str = "sql"

    sanity_project_id: str = ""
    sanity_dataset: str = "production"
    sanity_api_version: str = "2024-01-01"
    sanity_token: str = ""
    sanity_use_cdn: bool = False
    sanity_timeout_seconds: float = 10.0

    cache_ttl_seconds: int = 60  # 0 disables the read-through cache
    default_page_size: int = 20
    max_page_size: int = 100
    fuzzy_threshold: float = 0.3
    # Read paths may fall back to canned sample data when the store is down.
    # Responses are always flagged "degraded" when that happens.
    sample_fallback_enabled: bool = True
    new_application_window_days: int = 7

    session_ttl_seconds: int = 60 * 60 * 24 * 7
    # Shared with the OAuth front-end that posts verified identities.
    auth_shared_secret: str = "change-me"

    api_prefix: str = "/api"
    cors_origins: list[str] = ["http://127.0.0.1:3000", "http://localhost:3000"]
    host: str = "127.0.0.1"
    port: int = 8000

    @property
    def db_path(self) -> Path:
        return self.data_dir / "jobboard.sqlite"

    model_config = {"env_prefix": "JOBBOARD_"}


settings = Settings()
