from __future__ import annotations

import pytest

from cadence_code_generator.config import EngineConfig, EnhancerConfig, RetryConfig, load_engine_config


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ("OPENAI_API_KEY", "API_KEY", "CADENCE_MODEL"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setattr("cadence_code_generator.config.load_dotenv", lambda: False)


def test_load_engine_config_given_no_file_when_loaded_then_defaults_are_used() -> None:
    config = load_engine_config()

    assert config == EngineConfig()
    assert config.retry.max_attempts == 4
    assert config.retry.strict_from_attempt == 3
    assert config.enhancer.base_temperature == 0.7


def test_load_engine_config_given_yaml_file_when_loaded_then_sections_override_defaults(tmp_path) -> None:
    # Given
    path = tmp_path / "engine.yaml"
    path.write_text(
        "debug: true\n"
        "validator:\n  allow_warnings: true\n"
        "retry:\n  max_attempts: 2\n  deadline_seconds: 30\n  unknown_key: 1\n"
        "generator:\n  model: gpt-4o-mini\n",
        encoding="utf-8",
    )

    # When
    config = load_engine_config(path)

    # Then
    assert config.debug is True
    assert config.validator.allow_warnings is True
    assert config.retry.max_attempts == 2
    assert config.retry.deadline_seconds == 30
    assert config.generator.model == "gpt-4o-mini"
    assert config.enhancer.decay_factor == 0.7


def test_load_engine_config_given_environment_when_loaded_then_key_and_model_are_applied(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    # Given
    monkeypatch.setenv("API_KEY", "fallback-key")
    monkeypatch.setenv("CADENCE_MODEL", "gpt-4.1")

    # When
    config = load_engine_config()

    # Then
    assert config.generator.api_key == "fallback-key"
    assert config.generator.model == "gpt-4.1"


def test_load_engine_config_given_both_keys_when_loaded_then_openai_key_wins(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("OPENAI_API_KEY", "primary-key")
    monkeypatch.setenv("API_KEY", "fallback-key")

    assert load_engine_config().generator.api_key == "primary-key"


def test_load_engine_config_given_missing_file_when_loaded_then_file_not_found_is_raised(tmp_path) -> None:
    with pytest.raises(FileNotFoundError):
        load_engine_config(tmp_path / "missing.yaml")


def test_retry_config_given_zero_attempts_when_built_then_value_error_is_raised() -> None:
    with pytest.raises(ValueError):
        RetryConfig(max_attempts=0)


@pytest.mark.parametrize(
    "values",
    [
        {"decay_factor": 1.2},
        {"decay_factor": 0},
        {"strict_factor": 1.5},
        {"temperature_floor": -0.1},
    ],
)
def test_enhancer_config_given_out_of_range_values_when_built_then_value_error_is_raised(values) -> None:
    with pytest.raises(ValueError):
        EnhancerConfig(**values)


def test_load_engine_config_given_rising_decay_in_yaml_when_loaded_then_value_error_is_raised(tmp_path) -> None:
    path = tmp_path / "engine.yaml"
    path.write_text("enhancer:\n  decay_factor: 1.2\n", encoding="utf-8")

    with pytest.raises(ValueError):
        load_engine_config(path)
