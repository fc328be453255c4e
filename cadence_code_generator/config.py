"""
Engine Configuration
====================

One dataclass per component, bundled in EngineConfig. Values can be
overridden from a YAML file (same layout as the dataclasses):

    validator:
      allow_warnings: false
    enhancer:
      base_temperature: 0.7
    retry:
      max_attempts: 4
      deadline_seconds: 120
    generator:
      model: gpt-4o

and from the environment (.env supported through python-dotenv):
OPENAI_API_KEY / API_KEY and CADENCE_MODEL.
"""

import os
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Optional, Union

import yaml
from dotenv import load_dotenv


@dataclass
class ValidatorConfig:
    allow_warnings: bool = False
    critical_penalty: int = 15
    warning_penalty: int = 5


@dataclass
class EnhancerConfig:
    base_temperature: float = 0.7
    decay_factor: float = 0.7
    temperature_floor: float = 0.1
    strict_factor: float = 0.5

    def __post_init__(self):
        if not 0 < self.decay_factor <= 1:
            raise ValueError("decay_factor must be in (0, 1]")
        if not 0 < self.strict_factor <= 1:
            raise ValueError("strict_factor must be in (0, 1]")
        if self.temperature_floor < 0:
            raise ValueError("temperature_floor must be non-negative")


@dataclass
class RetryConfig:
    max_attempts: int = 4
    strict_from_attempt: int = 3
    deadline_seconds: Optional[float] = None

    def __post_init__(self):
        if self.max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        if self.strict_from_attempt < 1:
            raise ValueError("strict_from_attempt must be at least 1")


@dataclass
class GeneratorConfig:
    model: str = "gpt-4o"
    timeout: int = 60
    api_key: Optional[str] = None


@dataclass
class EngineConfig:
    validator: ValidatorConfig = field(default_factory=ValidatorConfig)
    enhancer: EnhancerConfig = field(default_factory=EnhancerConfig)
    retry: RetryConfig = field(default_factory=RetryConfig)
    generator: GeneratorConfig = field(default_factory=GeneratorConfig)
    debug: bool = False


def _build(section_cls, values: Optional[dict]):
    """Instantiate a config dataclass, ignoring unknown keys."""
    values = values or {}
    known = {f.name for f in fields(section_cls)}
    return section_cls(**{k: v for k, v in values.items() if k in known})


def load_engine_config(path: Optional[Union[str, Path]] = None) -> EngineConfig:
    """
    Load engine configuration

    Args:
        path: Optional YAML file. Without it the defaults are used.

    Returns:
        EngineConfig with environment overrides applied
    """
    load_dotenv()

    raw = {}
    if path is not None:
        config_path = Path(path)
        if not config_path.exists():
            raise FileNotFoundError(f"Config file not found: {config_path}")
        with open(config_path, "r", encoding="utf8") as f:
            raw = yaml.safe_load(f) or {}

    config = EngineConfig(
        validator=_build(ValidatorConfig, raw.get("validator")),
        enhancer=_build(EnhancerConfig, raw.get("enhancer")),
        retry=_build(RetryConfig, raw.get("retry")),
        generator=_build(GeneratorConfig, raw.get("generator")),
        debug=bool(raw.get("debug", False)),
    )

    env_model = os.getenv("CADENCE_MODEL")
    if env_model:
        config.generator.model = env_model
    if not config.generator.api_key:
        config.generator.api_key = os.getenv("OPENAI_API_KEY") or os.getenv("API_KEY")

    return config
