"""Configuration management for the home repair tool server."""

import os
import yaml
from dataclasses import dataclass

from .errors import ConfigError


@dataclass
class BedrockConfig:
    """AWS Bedrock configuration."""
    model_id: str
    timeout: int


@dataclass
class GenerationConfig:
    """Sampling settings for one kind of model call."""
    temperature: float
    max_tokens: int


@dataclass
class GenerationSettings:
    """Per-tool generation settings."""
    diagnosis: GenerationConfig
    materials: GenerationConfig
    plan: GenerationConfig


@dataclass
class LimitsConfig:
    """Input and output size limits."""
    max_photos: int
    min_description: int
    max_description: int
    max_input_chars: int
    max_items_per_category: int
    max_upload_mb: int


@dataclass
class ResourcesConfig:
    """UI widget resources handed to the host application."""
    client_dist_dir: str
    diagnosis_uri: str
    steps_uri: str


@dataclass
class LoggingConfig:
    """Logging configuration."""
    level: str
    format: str
    file: str


@dataclass
class Config:
    """Main configuration class."""
    aws_region: str
    bedrock: BedrockConfig
    generation: GenerationSettings
    limits: LimitsConfig
    resources: ResourcesConfig
    logging: LoggingConfig

    @classmethod
    def load(cls, config_path: str = "config.yaml") -> "Config":
        """
        Load configuration from file and environment variables.

        Environment variables override config file values:
        - AWS_REGION
        - BEDROCK_MODEL_ID
        - BEDROCK_TIMEOUT
        - CLIENT_DIST_DIR
        - LOG_LEVEL

        Args:
            config_path: Path to YAML configuration file

        Returns:
            Config instance with loaded settings

        Raises:
            ConfigError: If the file is missing or a value is absent/ill-typed
        """
        if not os.path.exists(config_path):
            raise ConfigError.missing(config_path)

        with open(config_path, 'r') as f:
            config_data = yaml.safe_load(f) or {}

        try:
            aws_region = os.getenv("AWS_REGION", config_data["aws"]["region"])

            bedrock_config = BedrockConfig(
                model_id=os.getenv("BEDROCK_MODEL_ID", config_data["aws"]["bedrock"]["model_id"]),
                timeout=int(os.getenv("BEDROCK_TIMEOUT", config_data["aws"]["bedrock"]["timeout"]))
            )

            generation = config_data["generation"]
            generation_settings = GenerationSettings(
                diagnosis=_generation(generation["diagnosis"]),
                materials=_generation(generation["materials"]),
                plan=_generation(generation["plan"])
            )

            limits = config_data["limits"]
            limits_config = LimitsConfig(
                max_photos=int(limits["max_photos"]),
                min_description=int(limits["min_description"]),
                max_description=int(limits["max_description"]),
                max_input_chars=int(limits["max_input_chars"]),
                max_items_per_category=int(limits["max_items_per_category"]),
                max_upload_mb=int(limits["max_upload_mb"])
            )

            resources_config = ResourcesConfig(
                client_dist_dir=os.getenv("CLIENT_DIST_DIR", config_data["resources"]["client_dist_dir"]),
                diagnosis_uri=config_data["resources"]["diagnosis_uri"],
                steps_uri=config_data["resources"]["steps_uri"]
            )

            logging_config = LoggingConfig(
                level=os.getenv("LOG_LEVEL", config_data["logging"]["level"]),
                format=config_data["logging"]["format"],
                file=config_data["logging"].get("file") or ""
            )
        except KeyError as e:
            raise ConfigError.invalid(str(e.args[0]), e)
        except (TypeError, ValueError) as e:
            raise ConfigError.invalid(config_path, e)

        return cls(
            aws_region=aws_region,
            bedrock=bedrock_config,
            generation=generation_settings,
            limits=limits_config,
            resources=resources_config,
            logging=logging_config,
        )


def _generation(section: dict) -> GenerationConfig:
    return GenerationConfig(
        temperature=float(section["temperature"]),
        max_tokens=int(section["max_tokens"])
    )
