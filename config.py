# config.py - WebAC settings with loud failures

from __future__ import annotations

from functools import lru_cache
from typing import List

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from core.webac.paths import DEFAULT_REPOSITORY_PREFIXES


class Settings(BaseSettings):
    # URI prefixes under which store paths are published, comma separated
    WEBAC_REPOSITORY_PREFIXES: str = Field(
        ",".join(DEFAULT_REPOSITORY_PREFIXES),
        description="Comma-separated repository URI prefixes",
    )

    # Role map cache
    WEBAC_CACHE_ENABLED: bool = Field(False, description="Cache resolved role maps by path")
    WEBAC_CACHE_TTL_SECONDS: float = Field(60.0, description="Role map cache TTL in seconds")

    # Auditing
    WEBAC_AUDIT_DENIALS: bool = Field(True, description="Emit audit log entries for denials")

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=True, extra="ignore")

    @field_validator("WEBAC_REPOSITORY_PREFIXES")
    @classmethod
    def _prefixes_not_empty(cls, v: str) -> str:
        if not [p for p in v.split(",") if p.strip()]:
            raise ValueError("WEBAC_REPOSITORY_PREFIXES must name at least one prefix")
        return v

    @field_validator("WEBAC_CACHE_TTL_SECONDS")
    @classmethod
    def _ttl_positive(cls, v: float) -> float:
        if v <= 0:
            raise ValueError(f"WEBAC_CACHE_TTL_SECONDS must be positive, got: {v}")
        return v

    @property
    def repository_prefixes(self) -> List[str]:
        return [p.strip() for p in self.WEBAC_REPOSITORY_PREFIXES.split(",") if p.strip()]


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
