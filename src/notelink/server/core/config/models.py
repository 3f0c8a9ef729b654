from __future__ import annotations

import logging
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

logger = logging.getLogger(__name__)


class LoggingConfigModel(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    enabled: bool = False
    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "WARNING"
    path: str | None = None
    max_bytes: int = 10 * 1024 * 1024
    backup_count: int = 5

    @field_validator("level", mode="before")
    @classmethod
    def _upper_level(cls, value: object) -> object:
        if isinstance(value, str):
            return value.upper()
        return value


class DocsConfigModel(BaseModel):
    """Settings for the generated API documentation and its host application."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    title: str = "API Documentation"
    description: str = ""
    version: str = "1.0.0"
    host: str = "localhost:8080"
    base_path: str = ""
    docs_path: str = "/api-docs"
    docs_ui: Literal["scalar", "swagger"] = "scalar"
    logging: LoggingConfigModel = Field(default_factory=LoggingConfigModel)

    @field_validator("base_path")
    @classmethod
    def _normalize_base_path(cls, value: str) -> str:
        value = value.strip()
        if not value or value == "/":
            return ""
        if not value.startswith("/"):
            value = "/" + value
        return value.rstrip("/")

    @field_validator("docs_path")
    @classmethod
    def _normalize_docs_path(cls, value: str) -> str:
        value = value.strip()
        if not value.startswith("/"):
            value = "/" + value
        if len(value) > 1:
            value = value.rstrip("/")
        if value == "/":
            raise ValueError("docs_path cannot be the site root")
        return value

    @property
    def server_url(self) -> str:
        return f"http://{self.host}{self.base_path}"

    @property
    def openapi_path(self) -> str:
        return f"{self.docs_path}/openapi.json"
