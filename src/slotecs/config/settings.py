"""Configuration settings using Pydantic Settings.

Provides typed configuration with environment variable support.

Usage:
    from slotecs.config import EngineSettings

    # Load from environment variables (SLOTECS_*)
    settings = EngineSettings()

    # Or override with explicit values
    settings = EngineSettings(max_workers=8)
    world = World.from_settings(settings)
"""

from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from slotecs.scheduling.models import DEFAULT_CHUNK_SIZE


class EngineSettings(BaseSettings):  # type: ignore[misc]
    """Configuration for the system scheduler.

    Attributes:
        max_workers: Worker threads for per-entity steps during run().
            1 keeps run() fully sequential.
        chunk_size: Entities per worker task when stepping in parallel.

    Environment Variables:
        SLOTECS_MAX_WORKERS
        SLOTECS_CHUNK_SIZE
    """

    model_config = SettingsConfigDict(
        env_prefix="SLOTECS_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    max_workers: int = Field(default=1, ge=1)
    chunk_size: int = Field(default=DEFAULT_CHUNK_SIZE, ge=1)
