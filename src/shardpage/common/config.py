"""Application configuration via environment variables."""

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # Cluster state
    cluster_state_path: str = ""  # JSON snapshot re-read on every request; empty = no source

    # _list/shards paging
    list_shards_default_page_size: int = 5000
    list_shards_max_page_size: int = 50000

    # App
    log_level: str = "INFO"
    cors_origins: list[str] = ["http://localhost:5173"]

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}

    def validate_page_sizes(self) -> None:
        """Raise if the configured page-size bounds are inconsistent."""
        if self.list_shards_default_page_size < 1:
            raise ValueError("LIST_SHARDS_DEFAULT_PAGE_SIZE must be at least 1.")
        if self.list_shards_default_page_size > self.list_shards_max_page_size:
            raise ValueError(
                "LIST_SHARDS_DEFAULT_PAGE_SIZE must not exceed LIST_SHARDS_MAX_PAGE_SIZE."
            )


settings = Settings()
