from __future__ import annotations

from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class AppSettings(BaseSettings):
    """
    Global application-level configuration.

    Single source of truth for:
    - environment selection
    - logging behavior
    - limits applied to searches served over HTTP
    """

    model_config = SettingsConfigDict(
        env_prefix="BTSEARCH_",
        env_file=".env",
        extra="ignore",
    )

    # ---- Environment -------------------------------------------------

    env: Literal["local", "staging", "prod"] = "local"

    # ---- Logging -----------------------------------------------------

    log_level: str = "INFO"

    # ---- Search sessions ---------------------------------------------

    max_page_size: int = Field(
        default=1000,
        ge=1,
        description="Maximum number of solutions returned by a single paging call",
    )

    page_time_budget_seconds: float = Field(
        default=2.0,
        gt=0,
        description="Deadline after which a paging call pauses the search",
    )

    max_problem_size: int = Field(
        default=64,
        ge=1,
        description="Largest problem size accepted when creating a search session",
    )


# Singleton settings object
settings = AppSettings()
