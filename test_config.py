"""Tests for configuration loading."""

import pytest
import yaml

from conftest import CONFIG_PATH
from homefix.utils.config import Config
from homefix.utils.errors import ConfigError, ErrorType

OVERRIDES = ("AWS_REGION", "BEDROCK_MODEL_ID", "BEDROCK_TIMEOUT", "LOG_LEVEL", "CLIENT_DIST_DIR")


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in OVERRIDES:
        monkeypatch.delenv(name, raising=False)


def _write(tmp_path, data):
    path = tmp_path / "config.yaml"
    path.write_text(yaml.safe_dump(data))
    return str(path)


def test_load_repository_config():
    config = Config.load(str(CONFIG_PATH))

    assert config.aws_region == "us-east-1"
    assert config.bedrock.model_id == "amazon.nova-pro-v1:0"
    assert config.generation.diagnosis.temperature == 0.3
    assert config.generation.diagnosis.max_tokens == 1000
    assert config.generation.plan.temperature == 0.4
    assert config.limits.max_photos == 5
    assert config.limits.max_items_per_category == 10
    assert config.resources.diagnosis_uri == "ui://home-repair/diagnosis/v1.html"
    assert config.logging.file == ""


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("AWS_REGION", "eu-west-1")
    monkeypatch.setenv("BEDROCK_MODEL_ID", "other-model")
    monkeypatch.setenv("BEDROCK_TIMEOUT", "45")
    monkeypatch.setenv("LOG_LEVEL", "DEBUG")
    monkeypatch.setenv("CLIENT_DIST_DIR", "/srv/widgets")

    config = Config.load(str(CONFIG_PATH))

    assert config.aws_region == "eu-west-1"
    assert config.bedrock.model_id == "other-model"
    assert config.bedrock.timeout == 45
    assert config.logging.level == "DEBUG"
    assert config.resources.client_dist_dir == "/srv/widgets"


def test_missing_file(tmp_path):
    with pytest.raises(ConfigError) as exc_info:
        Config.load(str(tmp_path / "nope.yaml"))

    assert exc_info.value.error_type == ErrorType.CONFIG_MISSING


def test_missing_section(tmp_path):
    data = yaml.safe_load(CONFIG_PATH.read_text())
    del data["limits"]

    with pytest.raises(ConfigError) as exc_info:
        Config.load(_write(tmp_path, data))

    assert exc_info.value.error_type == ErrorType.CONFIG_INVALID
    assert "limits" in exc_info.value.context.message


def test_ill_typed_value(tmp_path):
    data = yaml.safe_load(CONFIG_PATH.read_text())
    data["limits"]["max_photos"] = "five"

    with pytest.raises(ConfigError) as exc_info:
        Config.load(_write(tmp_path, data))

    assert exc_info.value.error_type == ErrorType.CONFIG_INVALID
