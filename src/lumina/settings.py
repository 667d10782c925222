from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Literal

import yaml
from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .adapters.analysis.gemini import DEFAULT_ANALYSIS_INSTRUCTION
from .gallery.workflows import DEFAULT_PROMPT_TEMPLATE, DEFAULT_SUBJECT_KEYWORDS

PROJECT_ROOT = Path(__file__).resolve().parents[2]


class GallerySettings(BaseModel):
    model_config = ConfigDict(extra="ignore")

    storage_slot: str = "lumina_photos"
    persist_limit: int = Field(default=20, ge=1, le=500)

    @field_validator("storage_slot")
    @classmethod
    def validate_storage_slot(cls, value: str) -> str:
        text = value.strip()
        if not text:
            raise ValueError("gallery.storage_slot must not be empty")
        return text


class StorageSettings(BaseModel):
    model_config = ConfigDict(extra="ignore")

    max_bytes: int = Field(default=5 * 1024 * 1024, ge=1024)


class AnalysisSettings(BaseModel):
    model_config = ConfigDict(extra="ignore")

    model: str = "gemini-2.5-flash"
    instruction: str = DEFAULT_ANALYSIS_INSTRUCTION

    @field_validator("model", "instruction")
    @classmethod
    def validate_non_empty_text(cls, value: str) -> str:
        text = value.strip()
        if not text:
            raise ValueError("analysis.model and analysis.instruction must not be empty")
        return text


class GenerationSettings(BaseModel):
    model_config = ConfigDict(extra="ignore")

    model: str = "gemini-2.5-flash-image"
    default_mime_type: str = "image/jpeg"
    subject_keywords: list[str] = Field(default_factory=lambda: list(DEFAULT_SUBJECT_KEYWORDS))
    prompt_template: str = DEFAULT_PROMPT_TEMPLATE

    @field_validator("default_mime_type")
    @classmethod
    def validate_mime_type(cls, value: str) -> str:
        text = value.strip().lower()
        if not text.startswith("image/"):
            raise ValueError("generation.default_mime_type must be an image/* media type")
        return text

    @field_validator("subject_keywords")
    @classmethod
    def validate_subject_keywords(cls, values: list[str]) -> list[str]:
        keywords = [value.strip().lower() for value in values if value.strip()]
        return list(dict.fromkeys(keywords))

    @field_validator("prompt_template")
    @classmethod
    def validate_prompt_template(cls, value: str) -> str:
        if "{prompt}" not in value:
            raise ValueError("generation.prompt_template must contain a {prompt} placeholder")
        try:
            value.format(prompt="")
        except (IndexError, KeyError, ValueError) as exc:
            raise ValueError("generation.prompt_template may only use the {prompt} placeholder") from exc
        return value


class ServerSettings(BaseModel):
    model_config = ConfigDict(extra="ignore")

    host: str = "127.0.0.1"
    port: int = Field(default=8000, ge=1, le=65535)


class LuminaYamlSettings(BaseModel):
    model_config = ConfigDict(extra="ignore")

    gallery: GallerySettings = Field(default_factory=GallerySettings)
    storage: StorageSettings = Field(default_factory=StorageSettings)
    analysis: AnalysisSettings = Field(default_factory=AnalysisSettings)
    generation: GenerationSettings = Field(default_factory=GenerationSettings)
    server: ServerSettings = Field(default_factory=ServerSettings)


class EnvSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    lumina_env: Literal["dev", "test", "prod"] = "dev"
    lumina_config_path: Path = Path("config/lumina.yaml")
    lumina_db_path: Path = Path("data/lumina.db")
    lumina_log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    gemini_api_key: str | None = Field(
        default=None,
        validation_alias=AliasChoices("gemini_api_key", "api_key"),
    )

    @field_validator("lumina_log_level", mode="before")
    @classmethod
    def normalize_log_level(cls, value: object) -> object:
        if isinstance(value, str):
            return value.strip().upper()
        return value

    @field_validator("gemini_api_key")
    @classmethod
    def validate_api_key(cls, value: str | None) -> str | None:
        if value is None:
            return None
        text = value.strip()
        return text or None


class AppSettings(BaseModel):
    env: EnvSettings
    yaml: LuminaYamlSettings
    project_root: Path
    config_path: Path
    db_path: Path

    @property
    def ai_configured(self) -> bool:
        return self.env.gemini_api_key is not None


def _resolve_project_path(path: Path) -> Path:
    if path.is_absolute():
        return path
    return (PROJECT_ROOT / path).resolve()


def _load_yaml_settings(path: Path) -> LuminaYamlSettings:
    if not path.exists():
        raise FileNotFoundError(f"Lumina config file not found: {path}")

    raw_config = yaml.safe_load(path.read_text(encoding="utf-8"))
    if raw_config is None:
        raw_config = {}
    if not isinstance(raw_config, dict):
        raise ValueError("Lumina config must be a YAML mapping/object at the top level")
    return LuminaYamlSettings.model_validate(raw_config)


@lru_cache(maxsize=1)
def load_settings() -> AppSettings:
    env = EnvSettings()
    config_path = _resolve_project_path(env.lumina_config_path)
    db_path = _resolve_project_path(env.lumina_db_path)
    yaml_settings = _load_yaml_settings(config_path)
    return AppSettings(
        env=env,
        yaml=yaml_settings,
        project_root=PROJECT_ROOT,
        config_path=config_path,
        db_path=db_path,
    )
