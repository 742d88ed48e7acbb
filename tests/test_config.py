"""
Tests for configuration loading
"""

import pytest

from config import Config, ConfigError


def test_required_values_and_defaults(base_env):
    config = Config(base_env)

    assert config.TELEGRAM_BOT_TOKEN == "123:ABC"
    assert config.OPENAI_API_KEY == "sk-test"
    assert config.AUTH_PIN == "1234"
    assert config.LOG_LEVEL == "INFO"
    assert config.SPEECH_PROVIDER == "openai"
    assert config.TRANSCODE_BITRATE == "320k"
    assert config.POLL_TIMEOUT == 60
    assert config.STRUCTURED_LOGGING is False


@pytest.mark.parametrize("missing", ["TELEGRAM_BOT_TOKEN", "OPENAI_API_KEY", "AUTH_PIN"])
def test_missing_required_value_is_fatal(base_env, missing):
    env = dict(base_env)
    del env[missing]

    with pytest.raises(ConfigError, match=missing):
        Config(env)


def test_legacy_aliases(base_env):
    env = dict(base_env)
    env["BOT_TOKEN"] = env.pop("TELEGRAM_BOT_TOKEN")
    env["PIN"] = env.pop("AUTH_PIN")

    config = Config(env)

    assert config.TELEGRAM_BOT_TOKEN == "123:ABC"
    assert config.AUTH_PIN == "1234"


def test_unknown_provider_is_rejected(base_env):
    with pytest.raises(ConfigError):
        Config({**base_env, "SPEECH_PROVIDER": "whisper.cpp"})


def test_optional_overrides(base_env):
    config = Config({
        **base_env,
        "LOG_LEVEL": "debug",
        "SPEECH_PROVIDER": "Groq",
        "SUMMARY_MODEL": "llama-3.1-8b-instant",
        "STRUCTURED_LOGGING": "true",
        "MAX_FILE_SIZE_MB": "10",
    })

    assert config.LOG_LEVEL == "debug"
    assert config.SPEECH_PROVIDER == "groq"
    assert config.SUMMARY_MODEL == "llama-3.1-8b-instant"
    assert config.TRANSCRIPTION_MODEL is None
    assert config.STRUCTURED_LOGGING is True
    assert config.MAX_FILE_SIZE_MB == 10


def test_str_hides_secrets(base_env):
    env = {**base_env, "OPENAI_API_KEY": "sk-live-secret", "AUTH_PIN": "pin-secret"}
    text = str(Config(env))
    assert "sk-live-secret" not in text
    assert "123:ABC" not in text
    assert "pin-secret" not in text


@pytest.mark.parametrize("key", ["MAX_FILE_SIZE_MB", "POLL_TIMEOUT", "HTTP_TIMEOUT", "TEMP_FILE_RETENTION_HOURS"])
def test_non_numeric_value_is_a_config_error(base_env, key):
    with pytest.raises(ConfigError, match=key):
        Config({**base_env, key: "twenty"})


def test_temp_file_retention_default(base_env):
    assert Config(base_env).TEMP_FILE_RETENTION_HOURS == 1.0
