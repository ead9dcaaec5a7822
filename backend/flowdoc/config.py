"""Application Configuration: environment-driven settings via pydantic-settings.

Invariants:
    - get_settings() is cached (lru_cache): single instance per process
    - export_filename_template contains {page_number} and no other placeholder

Design Decisions:
    - pydantic-settings over raw os.environ: validation, type coercion, .env file support
    - Defaults provided for every setting: works out-of-the-box in development
"""

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from functools import lru_cache


class Settings(BaseSettings):
    """Application settings from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False)

    # Decision trees
    max_nodes_per_graph: int = 500
    export_filename_template: str = "decision-tree-page-{page_number}.json"

    @field_validator("export_filename_template")
    @classmethod
    def require_page_placeholder(cls, v: str) -> str:
        if "{page_number}" not in v:
            raise ValueError("export_filename_template must contain {page_number}")
        try:
            v.format(page_number=1)
        except (AttributeError, IndexError, KeyError, ValueError) as e:
            raise ValueError(
                f"export_filename_template may only use {{page_number}}: {e!r}",
            ) from e
        return v

    # Documents
    max_pages_per_document: int = 2000

    # API
    cors_origins: list[str] = ["http://localhost:5173"]

    # Observability
    log_level: str = "INFO"
    log_format: str = "json"


@lru_cache
def get_settings() -> Settings:
    return Settings()
