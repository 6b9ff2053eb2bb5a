"""Centralised configuration models leveraging Pydantic."""

from __future__ import annotations

import logging
import os
import re
from pathlib import Path

from pydantic import BaseModel, Field, field_validator

PLACEHOLDER_PATTERN = re.compile(r"\{\{([A-Z0-9_]+)\}\}")

TOKENIZERS = ("lines", "words")
DEFAULT_LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def _is_placeholder(value: object) -> bool:
    return isinstance(value, str) and PLACEHOLDER_PATTERN.fullmatch(value.strip()) is not None


def _as_path(value: str | Path) -> Path:
    return value if isinstance(value, Path) else Path(value).expanduser()


def _resolve_int(value: object, placeholder: str, default: int) -> int:
    if value is None or _is_placeholder(value):
        return default
    if isinstance(value, bool):
        raise TypeError(f"{placeholder} must resolve to an integer value")
    if isinstance(value, (int, str)):
        return int(value)
    raise TypeError(f"{placeholder} must resolve to an integer value")


def _resolve_string(value: object, placeholder: str, default: str | None = None) -> str:
    if value is None or _is_placeholder(value):
        if default is not None:
            return default
        raise ValueError(f"{placeholder} must be replaced with a concrete value")
    return str(value)


class CounterSettings(BaseModel):
    kilobytes: int = Field(default=32)
    tokenizer: str = Field(default="lines")

    @field_validator("kilobytes", mode="before")
    def _v_kilobytes(cls, v: object) -> int:
        value = _resolve_int(v, "{{LPC_KILOBYTES}}", 32)
        if value <= 0:
            raise ValueError("{{LPC_KILOBYTES}} must be a positive integer")
        return value

    @field_validator("tokenizer", mode="before")
    def _v_tokenizer(cls, v: object) -> str:
        value = _resolve_string(v, "{{LPC_TOKENIZER}}", "lines").lower()
        if value not in TOKENIZERS:
            raise ValueError("{{LPC_TOKENIZER}} must be one of 'lines', 'words'")
        return value


class StorageSettings(BaseModel):
    data_dir: Path = Field(default=Path("./data"))
    experiment_id: str = Field(default="baseline")

    @field_validator("data_dir", mode="before")
    def _v_data_dir(cls, v: object) -> Path:
        value = _resolve_string(v, "{{DATA_DIR}}", "./data")
        return _as_path(value)

    @field_validator("experiment_id", mode="before")
    def _v_experiment(cls, v: object) -> str:
        return _resolve_string(v, "{{EXPERIMENT_ID}}", "baseline")


class LogSettings(BaseModel):
    level: str = Field(default="WARNING")
    format: str = Field(default=DEFAULT_LOG_FORMAT)

    @field_validator("level", mode="before")
    def _v_level(cls, v: object) -> str:
        value = _resolve_string(v, "{{LOG_LEVEL}}", "WARNING").upper()
        if not isinstance(logging.getLevelName(value), int):
            raise ValueError("{{LOG_LEVEL}} must be a standard logging level name")
        return value

    @field_validator("format", mode="before")
    def _v_format(cls, v: object) -> str:
        return _resolve_string(v, "{{LOG_FORMAT}}", DEFAULT_LOG_FORMAT)

    def apply(self) -> None:
        logging.basicConfig(level=self.level, format=self.format, force=True)


class AppConfig(BaseModel):
    counter: CounterSettings = Field(default_factory=CounterSettings)
    storage: StorageSettings = Field(default_factory=StorageSettings)
    log: LogSettings = Field(default_factory=LogSettings)

    @classmethod
    def from_env(cls) -> AppConfig:
        env = os.environ
        counter_kwargs = {
            "kilobytes": env.get("LPC_KILOBYTES"),
            "tokenizer": env.get("LPC_TOKENIZER"),
        }
        storage_kwargs = {
            "data_dir": env.get("DATA_DIR"),
            "experiment_id": env.get("EXPERIMENT_ID"),
        }
        log_kwargs = {
            "level": env.get("LOG_LEVEL"),
            "format": env.get("LOG_FORMAT"),
        }
        payload: dict[str, object] = {}
        if any(value is not None for value in counter_kwargs.values()):
            payload["counter"] = {k: v for k, v in counter_kwargs.items() if v is not None}
        if any(value is not None for value in storage_kwargs.values()):
            payload["storage"] = {k: v for k, v in storage_kwargs.items() if v is not None}
        if any(value is not None for value in log_kwargs.values()):
            payload["log"] = {k: v for k, v in log_kwargs.items() if v is not None}
        return cls(**payload)
