from __future__ import annotations

from pathlib import Path
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Central configuration for output paths & extraction limits.
    """

    model_config = SettingsConfigDict(
        env_prefix="PRECATORIOS_",
        extra="ignore",
    )

    project_root: Path = Field(
        default_factory=lambda: Path(__file__).resolve().parents[1]
    )

    output_dir: Path = Field(default=Path("artifacts"))

    default_filter: Literal["filter1", "filter2"] = "filter1"
    progress_interval: int = Field(default=100, ge=1)
    excerpt_max_chars: int = Field(default=1000, ge=1)
    attorneys_max_chars: int = Field(default=200, ge=1)
    top_n: int = Field(default=50, ge=1)
    log_level: str = "INFO"

    @field_validator("output_dir", mode="before")
    @classmethod
    def _coerce_path(cls, v):
        # Accept strings from env and coerce; allow Path passthrough.
        if isinstance(v, str):
            s = v.strip()
            return Path(s or "artifacts").expanduser()
        if isinstance(v, Path):
            return v.expanduser()
        return v

    @field_validator("log_level", mode="after")
    @classmethod
    def _upper_level(cls, v: str) -> str:
        return v.strip().upper() or "INFO"

    def model_post_init(self, __context) -> None:
        # Resolve relative paths against project_root
        if not self.output_dir.is_absolute():
            self.output_dir = (self.project_root / self.output_dir).resolve()

    def ensure_output_dir(self) -> Path:
        self.output_dir.mkdir(parents=True, exist_ok=True)
        return self.output_dir


# Lazy singleton
_settings: Settings | None = None


def get_settings() -> Settings:
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings
