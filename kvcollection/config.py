# Copyright (c) 2023-2025, HaiyangLi <quantocean.li at gmail dot com>
# SPDX-License-Identifier: Apache-2.0

from typing import Any, ClassVar, Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

__all__ = (
    "CollectionSettings",
    "settings",
)


class CollectionSettings(BaseSettings, frozen=True):
    """Collection settings with environment variable support."""

    model_config = SettingsConfigDict(
        env_file=(".env", ".env.local"),
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    KVCOLLECTION_DIAGNOSTIC_SINK: Literal["null", "logging", "memory"] = Field(
        "null",
        description="Sink a collection reports to when none is injected",
    )
    KVCOLLECTION_LOG_CATEGORY: str = Field(
        "COLLECTION",
        description="Category attached to every diagnostic",
    )
    KVCOLLECTION_LOGGER_NAME: str = Field(
        "kvcollection.diagnostics",
        description="Base logger name used by the logging sink",
    )

    # Class variable to store the singleton instance
    _instance: ClassVar[Any] = None


# Create a singleton instance
settings = CollectionSettings()
CollectionSettings._instance = settings
