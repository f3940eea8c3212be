import pytest

from namer.config import Settings, sanitize_env_value, selected_tlds


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("  key  ", "key"),
        ('"key"', "key"),
        ("'key'", "key"),
        ("\ufeffkey", "key"),
        ("", ""),
        (None, None),
    ],
)
def test_sanitize_env_value(raw, expected):
    assert sanitize_env_value(raw) == expected


def test_api_key_is_sanitized():
    settings = Settings(MISTRAL_API_KEY=" 'secret' ")
    assert settings.mistral_api_key == "secret"
    assert settings.has_api_key


def test_blank_api_key_is_missing():
    settings = Settings(MISTRAL_API_KEY='""')
    assert settings.mistral_api_key is None
    assert not settings.has_api_key


def test_model_and_base_url_are_sanitized():
    settings = Settings(MISTRAL_MODEL=' "mistral-large-latest" ', MISTRAL_BASE_URL="https://api.test/v1 ")
    assert settings.mistral_model == "mistral-large-latest"
    assert settings.mistral_base_url == "https://api.test/v1"


def test_selected_tlds_parses_list():
    settings = Settings(DEFAULT_TLDS="com, .IO,,.com, ai")
    assert selected_tlds(settings) == [".com", ".io", ".ai"]


def test_selected_tlds_falls_back_when_empty():
    assert selected_tlds(Settings(DEFAULT_TLDS=" , ")) == [".com", ".io", ".ai"]
