"""Shared fixtures for the tool server tests."""

import base64
import dataclasses
from pathlib import Path
from unittest.mock import AsyncMock

import pytest

from homefix.bootstrap import build_application
from homefix.utils.bedrock_client import BedrockClient
from homefix.utils.config import Config

CONFIG_PATH = Path(__file__).parent / "config.yaml"

PNG_BYTES = b'\x89PNG\r\n\x1a\n' + b'\x00\x00\x00\rIHDR' + b'\x00' * 8
JPEG_BYTES = b'\xff\xd8\xff\xe0' + b'\x00\x10JFIF' + b'\x00' * 8
WEBP_BYTES = b'RIFF\x24\x00\x00\x00WEBPVP8 ' + b'\x00' * 8

PNG_B64 = base64.b64encode(PNG_BYTES).decode("ascii")
JPEG_B64 = base64.b64encode(JPEG_BYTES).decode("ascii")


@pytest.fixture
def mock_bedrock():
    """Model client double; tests set converse.return_value or side_effect."""
    client = AsyncMock(spec=BedrockClient)
    client.describe.return_value = {"region": "us-east-1", "model_id": "test-model"}
    return client


@pytest.fixture
def config(tmp_path):
    """Configuration from config.yaml with the widget bundles under tmp_path."""
    loaded = Config.load(str(CONFIG_PATH))
    resources = dataclasses.replace(loaded.resources, client_dist_dir=str(tmp_path / "dist"))
    return dataclasses.replace(loaded, resources=resources)


@pytest.fixture
def application(config, mock_bedrock):
    return build_application(config=config, bedrock_client=mock_bedrock, configure_logging=False)
