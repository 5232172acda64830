"""Tests for Settings configuration model."""

from src.config import Settings


class TestGetRedisUrl:
    def test_redis_url_wins(self):
        s = Settings(redis_url="redis://local:6379", upstash_redis_rest_url="rediss://up")
        assert s.get_redis_url() == "redis://local:6379"

    def test_falls_back_to_upstash(self):
        s = Settings(upstash_redis_rest_url="rediss://up")
        assert s.get_redis_url() == "rediss://up"

    def test_empty_when_unconfigured(self):
        assert Settings().get_redis_url() == ""


class TestHfModelUrl:
    def test_model_specific_url(self):
        s = Settings(hf_url="https://hf/default", model_falcon="https://hf/falcon")
        assert s.hf_model_url("falcon") == "https://hf/falcon"

    def test_unset_model_uses_default(self):
        s = Settings(hf_url="https://hf/default")
        assert s.hf_model_url("bloom") == "https://hf/default"

    def test_default_chain(self):
        assert Settings(model="https://hf/m").hf_model_url("gpt2") == "https://hf/m"
        assert Settings(hf_model="https://hf/hm", model="x").hf_model_url("") == "https://hf/hm"


class TestReplicateChatModel:
    def test_mapped_keys(self):
        s = Settings(replicate_chat_model_llama2="l2", replicate_chat_model_mistral="mi")
        assert s.replicate_chat_model("llama2") == "l2"
        assert s.replicate_chat_model("mistral") == "mi"

    def test_other_keys_use_gpt5(self):
        s = Settings(replicate_chat_model_gpt5="g5")
        assert s.replicate_chat_model("falcon") == "g5"
        assert s.replicate_chat_model("") == "g5"


class TestLookup:
    def test_known_field(self):
        s = Settings(replicate_image_model="flux-v1")
        assert s.lookup("REPLICATE_IMAGE_MODEL") == "flux-v1"

    def test_case_insensitive(self):
        s = Settings(replicate_image_model="flux-v1")
        assert s.lookup("replicate_image_model") == "flux-v1"

    def test_falls_back_to_environment(self, monkeypatch):
        monkeypatch.setenv("REPLICATE_CHAT_MODEL_CUSTOM", "custom")
        assert Settings().lookup("REPLICATE_CHAT_MODEL_CUSTOM") == "custom"

    def test_missing_is_empty(self):
        assert Settings().lookup("REPLICATE_NOTHING_HERE") == ""

    def test_credentials_never_resolve(self, monkeypatch):
        monkeypatch.setenv("TELEGRAM_TOKEN", "secret")
        s = Settings(replicate_api_key="r8_secret")
        assert s.lookup("TELEGRAM_TOKEN") == ""
        assert s.lookup("REPLICATE_API_KEY") == ""
        assert s.lookup("REPLICATE_API_URL") == ""


class TestDefaults:
    def test_memory_ttl_is_three_hours(self):
        assert Settings().memory_ttl_seconds == 10800

    def test_default_api_urls(self):
        s = Settings()
        assert s.replicate_api_url == "https://api.replicate.com/v1"
        assert s.elevenlabs_api_url == "https://api.elevenlabs.io/v1"

    def test_providers_unconfigured(self):
        s = Settings()
        assert s.telegram_token == ""
        assert s.huggingface_api_key == ""
        assert s.runway_api_key == ""


class TestExtraValues:
    def test_unknown_value_is_kept_as_extra(self):
        s = Settings(**{"replicate_custom_model": "owner/model:abc"})
        assert s.model_extra == {"replicate_custom_model": "owner/model:abc"}

    def test_lookup_reads_undeclared_names_from_env_file(self, monkeypatch, tmp_path):
        # Settings only reads .env outside of a running test.
        monkeypatch.delenv("PYTEST_CURRENT_TEST")
        monkeypatch.delenv("REPLICATE_CUSTOM_MODEL", raising=False)
        monkeypatch.delenv("REPLICATE_IMAGE_MODEL", raising=False)
        env_file = tmp_path / ".env"
        env_file.write_text(
            "REPLICATE_CUSTOM_MODEL=owner/model:abc\nREPLICATE_IMAGE_MODEL=img:1\n"
        )

        s = Settings(_env_file=env_file)

        assert s.lookup("REPLICATE_IMAGE_MODEL") == "img:1"
        assert s.lookup("REPLICATE_CUSTOM_MODEL") == "owner/model:abc"
        assert s.lookup("replicate_custom_model") == "owner/model:abc"

    def test_extra_credentials_never_resolve(self):
        s = Settings(**{"openai_api_key": "sk-secret"})
        assert s.lookup("OPENAI_API_KEY") == ""
