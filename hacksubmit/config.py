"""Configuration loading for hacksubmit (.hacksubmit.yml)."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Sequence

import yaml

CONFIG_FILENAME = ".hacksubmit.yml"

ENV_OPENAI_API_KEY = "OPENAI_API_KEY"
ENV_GITHUB_TOKEN = "GITHUB_TOKEN"
ENV_LLM_MODEL = "HACKSUBMIT_LLM_MODEL"
ENV_IMAGE_MODEL = "HACKSUBMIT_IMAGE_MODEL"


class ConfigError(RuntimeError):
    """Raised when the configuration file cannot be parsed."""


@dataclass
class LLMConfig:
    """Text-generation settings."""

    model: str = "gpt-4o"
    temperature: Optional[float] = None
    max_tokens: Optional[int] = None
    base_url: Optional[str] = None
    api_key: Optional[str] = None
    request_timeout: Optional[float] = 120.0


@dataclass
class ImageConfig:
    """Image generation settings. Disabled unless explicitly turned on."""

    enabled: bool = False
    model: str = "dall-e-2"
    size: str = "1024x1024"
    screenshot_count: int = 2
    max_attempts: int = 5
    output_dir: Optional[Path] = None


@dataclass
class FormConfig:
    """Browser settings for the submission form."""

    event_path: str = "/events/bangkok/project"
    headless: bool = False
    pause: bool = True
    processing_timeout: float = 180.0
    category: str = "Infrastructure"
    emoji: str = "🚀"
    tech_stack: List[str] = field(default_factory=list)
    video_path: Optional[Path] = None


@dataclass
class PipelineConfig:
    """Toggles that select which pipeline variant runs."""

    structured_output: bool = True
    video_script: bool = False
    cleanup_on_failure: bool = False


@dataclass
class HackSubmitConfig:
    """Represents the settings defined in .hacksubmit.yml plus environment secrets."""

    root: Path
    llm: LLMConfig = field(default_factory=LLMConfig)
    images: ImageConfig = field(default_factory=ImageConfig)
    form: FormConfig = field(default_factory=FormConfig)
    pipeline: PipelineConfig = field(default_factory=PipelineConfig)
    github_token: Optional[str] = None

    @property
    def asset_dir(self) -> Path:
        """Directory that holds generated or pre-staged images and the video script."""
        return self.images.output_dir or self.root / "assets"


def load_config(
    config_path: Path, environ: Mapping[str, str] | None = None
) -> HackSubmitConfig:
    """Load configuration from disk and fill secrets from the environment."""
    config_file = _resolve_config_path(config_path)
    root = config_file.parent.resolve()
    env = os.environ if environ is None else environ

    if not config_file.exists():
        config = HackSubmitConfig(root=root)
        _apply_environment(config, env)
        return config

    data = _read_config(config_file)
    if not isinstance(data, dict):
        raise ConfigError(f"{CONFIG_FILENAME} must contain a mapping at the root")

    llm = LLMConfig()
    llm_data = _as_dict(data.get("llm"))
    if llm_data:
        llm.model = _as_str(llm_data.get("model")) or llm.model
        llm.temperature = _as_float(llm_data.get("temperature"))
        llm.max_tokens = _as_int(llm_data.get("max_tokens"))
        llm.base_url = _as_str(llm_data.get("base_url"))
        llm.api_key = _as_str(llm_data.get("api_key"))
        timeout = _as_float(llm_data.get("request_timeout"))
        if timeout is not None:
            llm.request_timeout = timeout

    images = ImageConfig()
    image_data = _as_dict(data.get("images"))
    if image_data:
        enabled = _as_bool(image_data.get("enabled"))
        images.enabled = enabled if enabled is not None else images.enabled
        images.model = _as_str(image_data.get("model")) or images.model
        images.size = _as_str(image_data.get("size")) or images.size
        count = _as_int(image_data.get("screenshot_count"))
        if count is not None:
            if count < 0:
                raise ConfigError("images.screenshot_count must not be negative")
            images.screenshot_count = count
        attempts = _as_int(image_data.get("max_attempts"))
        if attempts is not None:
            if attempts < 1:
                raise ConfigError("images.max_attempts must be at least 1")
            images.max_attempts = attempts
        output_dir = _as_str(image_data.get("output_dir"))
        images.output_dir = root / output_dir if output_dir else None

    form = FormConfig()
    form_data = _as_dict(data.get("form"))
    if form_data:
        form.event_path = _as_str(form_data.get("event_path")) or form.event_path
        for flag in ("headless", "pause"):
            value = _as_bool(form_data.get(flag))
            if value is not None:
                setattr(form, flag, value)
        timeout = _as_float(form_data.get("processing_timeout"))
        if timeout is not None:
            form.processing_timeout = timeout
        form.category = _as_str(form_data.get("category")) or form.category
        form.emoji = _as_str(form_data.get("emoji")) or form.emoji
        form.tech_stack = _as_str_list(form_data.get("tech_stack"))
        video = _as_str(form_data.get("video_path"))
        form.video_path = root / video if video else None

    pipeline = PipelineConfig()
    pipeline_data = _as_dict(data.get("pipeline"))
    if pipeline_data:
        for flag in ("structured_output", "video_script", "cleanup_on_failure"):
            value = _as_bool(pipeline_data.get(flag))
            if value is not None:
                setattr(pipeline, flag, value)

    config = HackSubmitConfig(
        root=root,
        llm=llm,
        images=images,
        form=form,
        pipeline=pipeline,
        github_token=_as_str(data.get("github_token")),
    )
    _apply_environment(config, env)
    return config


def _apply_environment(config: HackSubmitConfig, env: Mapping[str, str]) -> None:
    if not config.llm.api_key:
        config.llm.api_key = env.get(ENV_OPENAI_API_KEY) or None
    if not config.github_token:
        config.github_token = env.get(ENV_GITHUB_TOKEN) or None
    if env.get(ENV_LLM_MODEL):
        config.llm.model = env[ENV_LLM_MODEL]
    if env.get(ENV_IMAGE_MODEL):
        config.images.model = env[ENV_IMAGE_MODEL]


def _resolve_config_path(config_path: Path) -> Path:
    config_path = config_path.expanduser()
    if config_path.is_dir():
        return (config_path / CONFIG_FILENAME).resolve()
    return config_path.resolve()


def _read_config(path: Path) -> Dict[str, Any]:
    text = path.read_text(encoding="utf-8")
    if not text.strip():
        return {}
    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc
    return loaded or {}


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _as_str(value: Any) -> Optional[str]:
    if isinstance(value, bool):
        return None
    return str(value) if isinstance(value, (str, int, float)) else None


def _as_float(value: Any) -> Optional[float]:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        try:
            return float(value)
        except ValueError:
            return None
    return None


def _as_int(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            return int(value)
        except ValueError:
            return None
    return None


def _as_bool(value: Any) -> Optional[bool]:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in {"true", "yes", "1", "on"}:
            return True
        if lowered in {"false", "no", "0", "off"}:
            return False
    return None


def _as_str_list(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if isinstance(value, Sequence):
        return [str(item) for item in value if isinstance(item, (str, int, float))]
    return []


__all__ = [
    "CONFIG_FILENAME",
    "ConfigError",
    "FormConfig",
    "HackSubmitConfig",
    "ImageConfig",
    "LLMConfig",
    "PipelineConfig",
    "load_config",
]
