from __future__ import annotations

from pathlib import Path
from typing import Optional

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator

from .errors import ConfigError

CONFIG_NAMES = ("audio-sort.yaml", "audio-sort.yml")


class OrganizerSettings(BaseModel):
    track_extension: str = ".mp3"
    cleanup_empty_dirs: bool = False

    @field_validator("track_extension")
    @classmethod
    def _require_dot(cls, value: str) -> str:
        if not value.startswith(".") or len(value) < 2:
            raise ValueError("track_extension must look like '.mp3'")
        return value


class HashingSettings(BaseModel):
    chunk_size: int = Field(default=1024 * 1024, gt=0)


class Settings(BaseModel):
    organizer: OrganizerSettings = OrganizerSettings()
    hashing: HashingSettings = HashingSettings()

    @classmethod
    def load(cls, path: Path) -> "Settings":
        try:
            with path.open("r", encoding="utf-8") as fh:
                raw = yaml.safe_load(fh)
        except FileNotFoundError as exc:
            raise ConfigError(f"config file not found: {path}") from exc
        except yaml.YAMLError as exc:
            raise ConfigError(f"invalid YAML in {path}: {exc}") from exc
        try:
            return cls.model_validate(raw or {})
        except ValidationError as exc:
            raise ConfigError(f"invalid settings in {path}: {exc}") from exc


def find_config(explicit_path: Optional[Path]) -> Optional[Path]:
    if explicit_path:
        return explicit_path
    cwd = Path.cwd()
    for name in CONFIG_NAMES:
        candidate = cwd / name
        if candidate.exists():
            return candidate
    return None


def load_settings(explicit_path: Optional[Path]) -> Settings:
    path = find_config(explicit_path)
    if path is None:
        return Settings()
    return Settings.load(path)
