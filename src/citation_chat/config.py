"""Configuration loader for Citation Chat."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Optional

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, Field, ValidationError

from citation_chat.domain.errors import ConfigError


class AppConfig(BaseModel):
    name: str = Field(default="citation-chat")
    environment: str = Field(default="development")


class LoggingConfig(BaseModel):
    level: str = Field(default="INFO")


class AnsweringConfig(BaseModel):
    url: str = Field(default="http://localhost:3000/api/v1/prediction/chatflow-id")
    api_key: str = Field(default="")
    timeout_s: int = Field(default=60)


class SuggestionsConfig(BaseModel):
    enabled: bool = Field(default=False)
    url: str = Field(default="")
    api_key: str = Field(default="")
    timeout_s: int = Field(default=30)


class ChatConfig(BaseModel):
    title_max_chars: int = Field(default=30)
    panel_follows_active_chat: bool = Field(default=False)
    max_workers: int = Field(default=4)


class AuthConfig(BaseModel):
    required: bool = Field(default=True)


class Settings(BaseModel):
    app: AppConfig = Field(default_factory=AppConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    answering: AnsweringConfig = Field(default_factory=AnsweringConfig)
    suggestions: SuggestionsConfig = Field(default_factory=SuggestionsConfig)
    chat: ChatConfig = Field(default_factory=ChatConfig)
    auth: AuthConfig = Field(default_factory=AuthConfig)


DEFAULT_CONFIG_PATH = Path("config/default.yaml")

_BOOL_KEYS = {"enabled", "panel_follows_active_chat", "required"}
_INT_KEYS = {"timeout_s", "title_max_chars", "max_workers"}


def _load_yaml(path: Path) -> dict:
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")
    with path.open("r", encoding="utf-8") as f:
        return yaml.safe_load(f) or {}


def _apply_env_overrides(data: dict) -> dict:
    overrides = {
        ("app", "environment"): os.getenv("APP_ENV"),
        ("logging", "level"): os.getenv("LOG_LEVEL"),
        ("answering", "url"): os.getenv("ANSWERING_URL"),
        ("answering", "api_key"): os.getenv("ANSWERING_API_KEY"),
        ("answering", "timeout_s"): os.getenv("ANSWERING_TIMEOUT_S"),
        ("suggestions", "enabled"): os.getenv("SUGGESTIONS_ENABLED"),
        ("suggestions", "url"): os.getenv("SUGGESTIONS_URL"),
        ("suggestions", "api_key"): os.getenv("SUGGESTIONS_API_KEY"),
        ("suggestions", "timeout_s"): os.getenv("SUGGESTIONS_TIMEOUT_S"),
        ("chat", "title_max_chars"): os.getenv("CHAT_TITLE_MAX_CHARS"),
        ("chat", "panel_follows_active_chat"): os.getenv("CHAT_PANEL_FOLLOWS_ACTIVE_CHAT"),
        ("chat", "max_workers"): os.getenv("CHAT_MAX_WORKERS"),
        ("auth", "required"): os.getenv("AUTH_REQUIRED"),
    }
    for (section, key), value in overrides.items():
        if value is None:
            continue
        if section not in data or data[section] is None:
            data[section] = {}
        if key in _BOOL_KEYS:
            data[section][key] = str(value).strip().lower() in {"1", "true", "yes", "on"}
            continue
        if key in _INT_KEYS:
            try:
                data[section][key] = int(value)
                continue
            except ValueError:
                # keep original so validation reports it
                pass
        data[section][key] = value
    return data


def load_config(path: Optional[Path] = None) -> Settings:
    """Load configuration from YAML and environment variables."""
    load_dotenv()
    config_path = path or DEFAULT_CONFIG_PATH
    raw = _load_yaml(config_path)
    merged = _apply_env_overrides(raw)
    try:
        return Settings(**merged)
    except ValidationError as exc:
        raise ConfigError(f"Invalid configuration in {config_path}: {exc}") from exc


__all__ = [
    "Settings",
    "AppConfig",
    "LoggingConfig",
    "AnsweringConfig",
    "SuggestionsConfig",
    "ChatConfig",
    "AuthConfig",
    "load_config",
]
