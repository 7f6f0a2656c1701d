# vme/common/settings.py
from __future__ import annotations

import os
from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


def _to_bool(v: str | bool | int | None, default: bool = False) -> bool:
    if isinstance(v, bool):
        return v
    if v is None:
        return default
    s = str(v).strip().lower()
    return s in {"1", "true", "yes", "y", "on"}


class FFProbeConfig(BaseModel):
    bin: str = "ffprobe"
    timeout_sec: Optional[int] = Field(None, ge=1, description="None blocks until ffprobe exits")
    log_level: str = "error"  # quiet|panic|fatal|error|warning|info|verbose|debug|trace


class S3Defaults(BaseModel):
    region: str = "us-east-1"
    endpoint: Optional[str] = None  # MinIO or other S3-compatible services
    use_ssl: bool = True

    @field_validator("use_ssl", mode="before")
    @classmethod
    def _boolify(cls, v):
        return _to_bool(v, default=True)


class Settings(BaseSettings):
    # -------- App / Env --------
    app_name: str = "vme"
    log_level: str = "WARNING"

    # -------- Presentation / export --------
    color: bool = True
    output_dir: Optional[Path] = None  # None -> current working directory

    # -------- Sub-configs --------
    ffprobe: FFProbeConfig = FFProbeConfig()
    s3: S3Defaults = S3Defaults()

    # -------- Secrets (env only: VME_S3_ACCESS_KEY / VME_S3_SECRET_KEY) --------
    s3_access_key: Optional[SecretStr] = None
    s3_secret_key: Optional[SecretStr] = None

    model_config = SettingsConfigDict(
        env_prefix="VME_",
        env_nested_delimiter="__",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator("color", mode="before")
    @classmethod
    def _boolify(cls, v):
        return _to_bool(v, default=True)

    @property
    def use_color(self) -> bool:
        # https://no-color.org
        return self.color and not os.environ.get("NO_COLOR")


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """
    Global settings accessor (cached). Use this everywhere you need config:
        from vme.common.settings import get_settings
        cfg = get_settings()
    """
    return Settings()
