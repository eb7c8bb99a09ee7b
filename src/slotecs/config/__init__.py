"""Configuration module using Pydantic Settings.

Usage:
    from slotecs.config import EngineSettings

    settings = EngineSettings(max_workers=4, chunk_size=32)
"""

from slotecs.config.settings import EngineSettings

__all__ = [
    "EngineSettings",
]
