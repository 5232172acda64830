"""Application settings loaded from environment variables."""

import os

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

REPLICATE_KEY_PREFIX = "REPLICATE_"
_NON_MODEL_KEYS = {"REPLICATE_API_KEY", "REPLICATE_API_URL"}


def _env_file() -> str | None:
    if os.getenv("PYTEST_CURRENT_TEST"):
        return None
    return ".env"


class Settings(BaseSettings):
    """Belaynish configuration. All values come from environment variables.

    An empty string means "not configured": adapters whose required values
    are empty are skipped by the resolver.
    """

    # Telegram
    telegram_token: str = Field(default="")

    # Memory
    redis_url: str = Field(default="")
    upstash_redis_rest_url: str = Field(default="")
    upstash_redis_rest_token: str = Field(default="")
    memory_ttl_seconds: int = Field(default=10800)
    memory_cache_size: int = Field(default=10000)

    # Hugging Face
    hf_space_url: str = Field(default="")
    hf_url: str = Field(default="")
    hf_model: str = Field(default="")
    huggingface_api_key: str = Field(default="")
    model: str = Field(default="")
    model_llama2: str = Field(default="")
    model_mistral: str = Field(default="")
    model_flan_t5: str = Field(default="")
    model_falcon: str = Field(default="")
    model_gpt2: str = Field(default="")
    model_bloom: str = Field(default="")

    # Replicate
    replicate_api_key: str = Field(default="")
    replicate_api_url: str = Field(default="https://api.replicate.com/v1")
    replicate_chat_model_llama2: str = Field(default="")
    replicate_chat_model_mistral: str = Field(default="")
    replicate_chat_model_gpt5: str = Field(default="")
    replicate_chat_model_gpt4: str = Field(default="")
    replicate_chat_model_gpt35: str = Field(default="")
    replicate_image_model: str = Field(default="")
    replicate_upscale_model: str = Field(default="")
    replicate_video_caption_model: str = Field(default="")
    replicate_video_captioned_model: str = Field(default="")
    replicate_3d_model: str = Field(default="")
    replicate_tts_model: str = Field(default="")

    # Runway
    runway_api_key: str = Field(default="")
    runway_url_text_to_image: str = Field(default="")
    runway_model_text_to_image: str = Field(default="")
    runway_url_text_to_video: str = Field(default="")
    runway_model_text_to_video: str = Field(default="")
    runway_url_image_to_video: str = Field(default="")
    runway_model_image_to_video: str = Field(default="")
    runway_url_video_to_video: str = Field(default="")
    runway_model_video_to_video: str = Field(default="")
    runway_url_video_upscale: str = Field(default="")
    runway_model_video_upscale: str = Field(default="")
    runway_url_character_performance: str = Field(default="")
    runway_model_character_performance: str = Field(default="")

    # ElevenLabs
    elevenlabs_api_key: str = Field(default="")
    elevenlabs_voice_id: str = Field(default="")
    elevenlabs_api_url: str = Field(default="https://api.elevenlabs.io/v1")

    # Logging
    log_level: str = Field(default="INFO")

    model_config = SettingsConfigDict(
        env_file=_env_file(),
        env_file_encoding="utf-8",
        extra="allow",
        protected_namespaces=(),
    )

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings,
        env_settings,
        dotenv_settings,
        file_secret_settings,
    ):
        if os.getenv("PYTEST_CURRENT_TEST"):
            return (init_settings,)
        return (init_settings, env_settings, dotenv_settings, file_secret_settings)

    def get_redis_url(self) -> str:
        """Durable store target: REDIS_URL wins over the Upstash URL."""
        return self.redis_url or self.upstash_redis_rest_url

    def hf_model_url(self, model_key: str) -> str:
        """Inference API URL for a chat model key, falling back to the default model."""
        specific = getattr(self, f"model_{model_key}", "") if model_key else ""
        return specific or self.hf_url or self.hf_model or self.model

    def replicate_chat_model(self, model_key: str) -> str:
        """Replicate chat model version for a key; unmapped keys use GPT5."""
        if model_key in ("llama2", "mistral"):
            return getattr(self, f"replicate_chat_model_{model_key}")
        return self.replicate_chat_model_gpt5

    def lookup(self, name: str) -> str:
        """Resolve a REPLICATE_* configuration name to its value.

        Known settings fields are checked first, then undeclared REPLICATE_*
        entries loaded from .env, then the raw environment.
        Names outside the REPLICATE_ prefix resolve to "" so credentials
        can never be forwarded as a model id.
        """
        upper = name.strip().upper()
        if not upper.startswith(REPLICATE_KEY_PREFIX) or upper in _NON_MODEL_KEYS:
            return ""
        field = upper.lower()
        if field in type(self).model_fields:
            value = getattr(self, field)
            if value:
                return str(value)
        extra = (self.model_extra or {}).get(field)
        if extra:
            return str(extra)
        return os.getenv(upper, "")


settings = Settings()
