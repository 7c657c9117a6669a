# txtai_thinking/settings.py
import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)

PLACEHOLDER = "TXTAI_TEXT"

DEFAULT_TEMPLATE = (
    "<txtai_box>\n"
    "The following text is from a search on this subject.\n"
    f"{PLACEHOLDER}\n"
    "This is the end of the reference material.\n"
    "</txtai_box>"
)


class Settings(BaseSettings):
    # core
    APP_NAME: str = Field(default="txtai Thinking")
    ENV: str = Field(default=os.getenv("APP_ENV", "dev"))
    DEBUG: bool = Field(default=True)
    LOG_LEVEL: str = Field(default="INFO")

    # where the user-editable ThinkingSettings live
    SETTINGS_PATH: str = Field(default="data/txtai_thinking.yaml")

    # host generation backend: "echo" or "ollama"
    MODEL_BACKEND: str = Field(default="echo")
    OLLAMA_HOST: str = Field(default="http://localhost:11434")
    OLLAMA_MODEL: str = Field(default="mistral:7b-instruct")
    SYSTEM_PROMPT: str = Field(default="You are a helpful assistant.")
    # optional YAML with generator defaults (system_prompt, temperature, max_tokens)
    GENERATOR_CONFIG: Optional[str] = Field(default=None)

    model_config = SettingsConfigDict(
        env_file=".env.dev",
        extra="ignore",
    )

    @property
    def app_name(self) -> str:
        return self.APP_NAME


class ThinkingSettings(BaseModel):
    """User-editable augmentation settings, persisted by the host."""
    enabled: bool = False
    api_url: str = "http://localhost:8000/api/search"
    query_messages: int = Field(default=2, ge=0)
    score_threshold: float = Field(default=0.25, ge=0.0, le=1.0)
    chunk_boundary: str = ""
    template: str = DEFAULT_TEMPLATE
    request_timeout: float = Field(default=30.0, gt=0)


class SettingsStore:
    """
    YAML-backed store for ThinkingSettings.
    Loaded lazily on first access; keys missing from the file take their defaults.
    """

    def __init__(self, path: Optional[str] = None):
        self.path = Path(path) if path else None
        self._settings: Optional[ThinkingSettings] = None

    def _read_file(self) -> Dict[str, Any]:
        if self.path is None or not self.path.exists():
            return {}
        with open(self.path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
        if not isinstance(data, dict):
            logger.warning("txtai Thinking: ignoring malformed settings file %s", self.path)
            return {}
        return data

    def load(self) -> ThinkingSettings:
        if self._settings is None:
            data = self._read_file()
            known = {k: v for k, v in data.items() if k in ThinkingSettings.model_fields}
            self._settings = ThinkingSettings(**known)
        return self._settings

    def save(self) -> None:
        if self.path is None:
            return
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.path, "w", encoding="utf-8") as f:
            yaml.safe_dump(self.load().model_dump(), f, sort_keys=False, allow_unicode=True)

    def update(self, patch: Dict[str, Any]) -> ThinkingSettings:
        """Validate a partial patch against the current settings, then persist it."""
        merged = {**self.load().model_dump(), **patch}
        self._settings = ThinkingSettings(**merged)
        self.save()
        logger.info("txtai Thinking: settings updated (%s)", ", ".join(sorted(patch)) or "no changes")
        return self._settings


settings = Settings()
