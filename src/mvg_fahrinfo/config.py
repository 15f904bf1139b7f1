from __future__ import annotations

import os
from enum import Enum
from pathlib import Path
from typing import Optional

import yaml
from pydantic import BaseModel, Field, field_validator

DEFAULT_CONFIG = Path.home() / ".mvg.conf"


class ColorOption(str, Enum):
    TRUECOLOR = "TrueColor"
    ANSI = "Ansi"
    NO = "No"


def default_color_option() -> ColorOption:
    colorterm = os.environ.get("COLORTERM", "")
    if "truecolor" in colorterm or "24bit" in colorterm:
        return ColorOption.TRUECOLOR
    return ColorOption.ANSI


class Settings(BaseModel):
    color_option: ColorOption = Field(default_factory=default_color_option)
    default_station: Optional[str] = None
    log_level: str = "WARNING"
    timeout_seconds: float = Field(default=20.0, gt=0)

    @field_validator("color_option", mode="before")
    @classmethod
    def _yaml_no(cls, v):
        # YAML 1.1 reads a bare `No` as false
        if v is False:
            return ColorOption.NO
        return v

    @field_validator("log_level")
    @classmethod
    def _upper(cls, v: str) -> str:
        return v.upper()


def _load_yaml(path: Optional[Path]) -> dict:
    if path is None:
        # the default file is optional
        if not DEFAULT_CONFIG.exists():
            return {}
        path = DEFAULT_CONFIG
    elif not Path(path).exists():
        raise FileNotFoundError(f"Config file not found: {path}")
    with Path(path).open("r", encoding="utf-8") as f:
        raw = yaml.safe_load(f) or {}
    if not isinstance(raw, dict):
        raise ValueError("Config root must be a mapping")
    return raw


def _env_override(config: dict) -> dict:
    # Environment variables take precedence; prefix MVG_
    # Supported:
    # MVG_COLOR_OPTION, MVG_DEFAULT_STATION, MVG_LOG_LEVEL, MVG_TIMEOUT_SECONDS
    out = dict(config)
    color = os.environ.get("MVG_COLOR_OPTION")
    if color:
        out["color_option"] = color
    station = os.environ.get("MVG_DEFAULT_STATION")
    if station:
        out["default_station"] = station
    log = os.environ.get("MVG_LOG_LEVEL")
    if log:
        out["log_level"] = log
    timeout = os.environ.get("MVG_TIMEOUT_SECONDS")
    if timeout:
        out["timeout_seconds"] = timeout
    return out


def load_settings(config_path: Optional[Path] = None) -> Settings:
    base = _load_yaml(config_path)
    merged = _env_override(base)
    return Settings(**merged)
