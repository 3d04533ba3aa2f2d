import pytest
from pydantic import ValidationError

from config.app_settings import Settings


def test_settings_carry_only_used_fields() -> None:
    assert "ENVIRONMENT" not in Settings.model_fields
    assert "SITE_NAME" not in Settings.model_fields
    assert {"IMAGE_STORE_BACKEND", "IMAGE_STORE_DIR", "PREFERENCES_FILE"} <= set(Settings.model_fields)


def test_backend_is_normalized(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("IMAGE_STORE_BACKEND", " FILE ")
    assert Settings().IMAGE_STORE_BACKEND == "file"


def test_unknown_backend_is_rejected(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("IMAGE_STORE_BACKEND", "s3")
    with pytest.raises(ValidationError):
        Settings()


def test_prefix_and_url_are_normalized(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("CACHE_PREFIX", "coach:")
    monkeypatch.setenv("LLM_API_URL", "http://localhost:8080/v1")

    configured = Settings()

    assert configured.CACHE_PREFIX == "coach"
    assert configured.LLM_API_URL == "http://localhost:8080/v1/"


def test_api_key_falls_back_to_provider_variable(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("LLM_API_KEY", raising=False)
    monkeypatch.setenv("GEMINI_API_KEY", "gemini-key")

    assert Settings().LLM_API_KEY == "gemini-key"
