"""Application configuration loaded from config.toml and environment variables."""

import os
import tomllib
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, ValidationError, model_validator

from distiller.domain.models import ChannelConfig, ChannelKind, TeamsIcon
from distiller.exceptions import ConfigurationError

DEFAULT_CONFIG_PATH = Path("config.toml")

DEFAULT_PROMPT_TEMPLATE = (
    "Summarize the following transcript into one or more clear and readable "
    "paragraphs. At the end of your summary, give a bullet point list of the key "
    "action items, to-do's, and followup activities. Answer in the same language "
    "as the provided transcript:"
)


class AwsConfig(BaseModel, frozen=True):
    """AWS resource configuration."""

    s3_bucket_name: str | None = None


class ModelConfig(BaseModel, frozen=True):
    """Bedrock model configuration."""

    model_id: str = Field(min_length=1)
    max_tokens: int = Field(default=2000, gt=0)
    temperature: float = 1.0
    top_p: float = 0.999
    top_k: int = 40


class PromptConfig(BaseModel, frozen=True):
    """Summarization prompt configuration."""

    template: str = DEFAULT_PROMPT_TEMPLATE


class AnthropicConfig(BaseModel, frozen=True):
    """Settings required by Anthropic models served through Bedrock."""

    anthropic_version: str = "bedrock-2023-05-31"
    system: str = ""
    beta: str | None = None


class ChannelsConfig(BaseModel, frozen=True):
    """Webhook channels for one notification platform.

    The legacy ``webhook_endpoint`` form is folded into ``webhooks`` as a
    single entry, so consumers only ever see a list.
    """

    webhooks: list[ChannelConfig] = []

    @model_validator(mode="before")
    @classmethod
    def _normalize_legacy_endpoint(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        data = dict(data)
        legacy = data.pop("webhook_endpoint", None)
        webhooks = data.get("webhooks")
        if webhooks is None:
            data["webhooks"] = (
                [{"name": "Webhook 1", "endpoint": legacy}] if legacy else []
            )
        else:
            data["webhooks"] = [
                {"name": f"Webhook {index + 1}", **hook}
                if isinstance(hook, dict) and "name" not in hook
                else hook
                for index, hook in enumerate(webhooks)
            ]
        return data


class TeamsConfig(ChannelsConfig, frozen=True):
    """Teams webhook channels plus card settings."""

    icon: TeamsIcon = TeamsIcon()


class TranscribeConfig(BaseModel, frozen=True):
    """Transcription job polling configuration."""

    poll_interval_seconds: float = Field(default=3.0, gt=0)
    max_wait_seconds: float = Field(default=1800.0, gt=0)
    poll_retry_attempts: int = Field(default=5, ge=1)


class HttpConfig(BaseModel, frozen=True):
    """Outbound HTTP configuration."""

    timeout_seconds: float = Field(default=30.0, gt=0)


class AppConfig(BaseModel, frozen=True):
    """Root application configuration."""

    aws: AwsConfig = AwsConfig()
    model: ModelConfig
    prompt: PromptConfig = PromptConfig()
    anthropic: AnthropicConfig | None = None
    slack: ChannelsConfig = ChannelsConfig()
    teams: TeamsConfig = TeamsConfig()
    transcribe: TranscribeConfig = TranscribeConfig()
    http: HttpConfig = HttpConfig()

    def channels_for(self, kind: ChannelKind) -> list[ChannelConfig]:
        """Returns the configured channels for a notification platform."""
        if kind is ChannelKind.TEAMS:
            return list(self.teams.webhooks)
        return list(self.slack.webhooks)


def _apply_env_overrides(data: dict[str, Any]) -> dict[str, Any]:
    bucket = os.getenv("DISTILL_S3_BUCKET")
    if bucket:
        data.setdefault("aws", {})["s3_bucket_name"] = bucket
    model_id = os.getenv("DISTILL_MODEL_ID")
    if model_id:
        data.setdefault("model", {})["model_id"] = model_id
    return data


def load_config(path: str | Path = DEFAULT_CONFIG_PATH) -> AppConfig:
    """Loads configuration from a TOML file, applying environment overrides.

    Raises:
        ConfigurationError: If the file is missing, unparsable or invalid.
    """
    path = Path(path)
    try:
        with path.open("rb") as handle:
            data = tomllib.load(handle)
    except FileNotFoundError as e:
        raise ConfigurationError(
            f"Failed to load {path}. Make sure it exists in the current directory.",
            e,
        ) from e
    except tomllib.TOMLDecodeError as e:
        raise ConfigurationError(f"{path} is not valid TOML ({e})", e) from e

    data = _apply_env_overrides(data)
    if "model" not in data:
        raise ConfigurationError("missing [model] section with a model_id")

    try:
        return AppConfig.model_validate(data)
    except ValidationError as e:
        problems = "; ".join(
            f"{'.'.join(str(part) for part in err['loc'])}: {err['msg']}"
            for err in e.errors()
        )
        raise ConfigurationError(problems, e) from e
