import pytest

from src.functions.news_summarization.core.config import (
    AppConfig,
    LLMConfig,
    ServiceConfig,
    SummarizationConfig,
    load_config,
)
from src.shared.utils.config_validator import (
    ConfigurationError,
    validate_bool_env,
    validate_choice_env,
    validate_float_env,
    validate_int_env,
    validate_list_env,
)

CONFIG_VARS = [
    "GEMINI_API_KEY",
    "GOOGLE_API_KEY",
    "AI_MODEL",
    "AI_MAX_TOKENS",
    "AI_TEMPERATURE",
    "AI_REQUEST_TIMEOUT",
    "AI_REQUESTS_PER_MINUTE",
    "AI_MAX_RETRIES",
    "AI_MIN_CONTENT_LENGTH",
    "AI_MAX_INPUT_LENGTH",
    "AI_RETRY_DELAY",
    "MAX_ARTICLES",
    "APP_ENV",
    "APP_NAME",
    "APP_VERSION",
    "PORT",
    "HOST",
    "ALLOWED_ORIGINS",
    "REQUIRE_API_KEY",
    "API_KEY",
    "SHOW_ERROR_DETAILS",
    "MAX_PAYLOAD_SIZE",
    "RATE_LIMIT_WINDOW_MS",
    "RATE_LIMIT_MAX",
]


@pytest.fixture
def clean_env(monkeypatch, tmp_path):
    for name in CONFIG_VARS:
        monkeypatch.delenv(name, raising=False)
    return str(tmp_path / "missing.env")


def test_defaults(clean_env):
    config = load_config(clean_env)

    assert config.llm.api_key is None
    assert config.llm.model == "gemini-1.5-flash"
    assert config.llm.max_output_tokens == 5000
    assert config.llm.temperature == pytest.approx(0.7)
    assert config.summarization.max_retries == 3
    assert config.summarization.min_content_length == 50
    assert config.summarization.max_input_length == 8000
    assert config.summarization.retry_delay_seconds == pytest.approx(1.0)
    assert config.service.max_articles == 50
    assert config.service.allowed_origins == ["*"]
    assert config.service.require_api_key is False
    assert config.service.show_error_details is True


def test_environment_overrides(clean_env, monkeypatch):
    monkeypatch.setenv("GEMINI_API_KEY", "gem-key")
    monkeypatch.setenv("AI_MODEL", "gemini-1.5-pro")
    monkeypatch.setenv("AI_TEMPERATURE", "0.2")
    monkeypatch.setenv("AI_MAX_RETRIES", "5")
    monkeypatch.setenv("AI_RETRY_DELAY", "250")
    monkeypatch.setenv("MAX_ARTICLES", "10")
    monkeypatch.setenv("ALLOWED_ORIGINS", "https://a.example, https://b.example")
    monkeypatch.setenv("PORT", "3000")

    config = load_config(clean_env)

    assert config.llm.require_api_key() == "gem-key"
    assert config.llm.model == "gemini-1.5-pro"
    assert config.llm.temperature == pytest.approx(0.2)
    assert config.summarization.max_retries == 5
    assert config.summarization.retry_delay_seconds == pytest.approx(0.25)
    assert config.service.max_articles == 10
    assert config.service.allowed_origins == ["https://a.example", "https://b.example"]
    assert config.service.port == 3000


def test_production_requires_api_key(clean_env, monkeypatch):
    monkeypatch.setenv("APP_ENV", "production")

    with pytest.raises(ValueError, match="API_KEY"):
        load_config(clean_env)


def test_production_with_api_key_hides_error_details(clean_env, monkeypatch):
    monkeypatch.setenv("APP_ENV", "Production")
    monkeypatch.setenv("API_KEY", "client-key")

    config = load_config(clean_env)

    assert config.service.environment == "production"
    assert config.service.is_production
    assert config.service.require_api_key is True
    assert config.service.show_error_details is False


def test_invalid_values_are_rejected(clean_env, monkeypatch):
    monkeypatch.setenv("AI_MAX_TOKENS", "lots")

    with pytest.raises(ConfigurationError, match="AI_MAX_TOKENS"):
        load_config(clean_env)


def test_out_of_range_temperature_is_rejected(clean_env, monkeypatch):
    monkeypatch.setenv("AI_TEMPERATURE", "3.5")

    with pytest.raises(ConfigurationError, match="exceeds maximum"):
        load_config(clean_env)


def test_unknown_environment_is_rejected(clean_env, monkeypatch):
    monkeypatch.setenv("APP_ENV", "qa")

    with pytest.raises(ConfigurationError, match="Allowed values"):
        load_config(clean_env)


def test_require_api_key_without_gemini_key():
    with pytest.raises(ValueError, match="GEMINI_API_KEY"):
        LLMConfig(api_key="  ").require_api_key()


def test_dataclass_validation():
    with pytest.raises(ValueError):
        LLMConfig(temperature=-1).validate()
    with pytest.raises(ValueError):
        SummarizationConfig(max_input_length=0).validate()
    with pytest.raises(ValueError):
        ServiceConfig(environment="qa").validate()
    AppConfig().validate()


def test_validators(monkeypatch):
    monkeypatch.setenv("INT_VAR", "7")
    monkeypatch.setenv("FLOAT_VAR", "1.5")
    monkeypatch.setenv("BOOL_VAR", "yes")
    monkeypatch.setenv("CHOICE_VAR", "Staging")
    monkeypatch.delenv("UNSET_VAR", raising=False)

    assert validate_int_env("INT_VAR", min_value=1, max_value=10) == 7
    assert validate_float_env("FLOAT_VAR") == pytest.approx(1.5)
    assert validate_bool_env("BOOL_VAR") is True
    assert validate_bool_env("UNSET_VAR", default=True) is True
    assert validate_choice_env("CHOICE_VAR", ["staging", "production"]) == "staging"
    with pytest.raises(ConfigurationError, match="below minimum"):
        validate_int_env("INT_VAR", min_value=8)
    with pytest.raises(ConfigurationError, match="Missing required integer environment variable: UNSET_VAR"):
        validate_int_env("UNSET_VAR")
    with pytest.raises(ConfigurationError, match="Missing required environment variable: UNSET_VAR"):
        validate_choice_env("UNSET_VAR", ["a"])


def test_list_validator(monkeypatch):
    monkeypatch.setenv("LIST_VAR", " https://a.example ,, https://b.example ")
    monkeypatch.setenv("EMPTY_LIST_VAR", " , ")
    monkeypatch.delenv("UNSET_VAR", raising=False)

    assert validate_list_env("LIST_VAR") == ["https://a.example", "https://b.example"]
    assert validate_list_env("UNSET_VAR", default=["*"]) == ["*"]
    with pytest.raises(ConfigurationError):
        validate_list_env("EMPTY_LIST_VAR")


def test_invalid_boolean(monkeypatch):
    monkeypatch.setenv("BOOL_VAR", "maybe")

    with pytest.raises(ConfigurationError):
        validate_bool_env("BOOL_VAR")


@pytest.mark.parametrize(
    "environment, expected_max",
    [("development", 1000), ("test", 100), ("staging", 200), ("production", 100)],
)
def test_rate_limit_defaults_follow_environment(clean_env, monkeypatch, environment, expected_max):
    monkeypatch.setenv("APP_ENV", environment)
    monkeypatch.setenv("API_KEY", "client-key")

    config = load_config(clean_env)

    assert config.service.rate_limit_window_ms == 15 * 60 * 1000
    assert config.service.rate_limit_max == expected_max
    assert config.service.rate_limit == f"{expected_max} per 900 second"


def test_rate_limit_overrides(clean_env, monkeypatch):
    monkeypatch.setenv("RATE_LIMIT_WINDOW_MS", "1500")
    monkeypatch.setenv("RATE_LIMIT_MAX", "7")

    config = load_config(clean_env)

    assert config.service.rate_limit == "7 per 2 second"
    with pytest.raises(ValueError):
        ServiceConfig(rate_limit_max=0).validate()
