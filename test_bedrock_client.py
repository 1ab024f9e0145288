"""Tests for the Bedrock client wrapper and upstream error mapping."""

from unittest.mock import MagicMock, patch

import pytest
from botocore.exceptions import ClientError, EndpointConnectionError

from conftest import JPEG_BYTES, PNG_BYTES
from homefix.models.photo import Photo
from homefix.utils.bedrock_client import BedrockClient
from homefix.utils.errors import ErrorType, UpstreamCallError


def _client_error(code, message="boom"):
    return ClientError({"Error": {"Code": code, "Message": message}}, "Converse")


@pytest.fixture
def runtime():
    with patch("homefix.utils.bedrock_client.boto3.client") as factory:
        runtime = MagicMock()
        factory.return_value = runtime
        yield runtime


@pytest.fixture
def client(runtime, monkeypatch):
    monkeypatch.delenv("AWS_BEARER_TOKEN_BEDROCK", raising=False)
    monkeypatch.delenv("BEDROCK_API_KEY", raising=False)
    return BedrockClient(region="us-west-2", model_id="test-model", timeout=30)


@pytest.mark.asyncio
async def test_converse_sends_images_then_text(client, runtime):
    runtime.converse.return_value = {
        "output": {"message": {"content": [{"text": "Leaky faucet"}, {"text": "Low risk"}]}},
        "stopReason": "end_turn",
        "usage": {"inputTokens": 10, "outputTokens": 5},
    }
    photos = [Photo(data=JPEG_BYTES, mime_type="image/jpeg"), Photo(data=PNG_BYTES, mime_type="image/png")]

    reply = await client.converse("system text", "user text", images=photos, temperature=0.3, max_tokens=500)

    assert reply == "Leaky faucet\nLow risk"
    params = runtime.converse.call_args.kwargs
    assert params["modelId"] == "test-model"
    assert params["system"] == [{"text": "system text"}]
    assert params["inferenceConfig"] == {"temperature": 0.3, "maxTokens": 500}
    content = params["messages"][0]["content"]
    assert content[0] == {"image": {"format": "jpeg", "source": {"bytes": JPEG_BYTES}}}
    assert content[1]["image"]["format"] == "png"
    assert content[2] == {"text": "user text"}


@pytest.mark.asyncio
async def test_converse_without_system_prompt_or_text_blocks(client, runtime):
    runtime.converse.return_value = {"output": {"message": {"content": [{"image": {}}]}}}

    reply = await client.converse("", "hello")

    assert reply == ""
    assert "system" not in runtime.converse.call_args.kwargs


@pytest.mark.asyncio
@pytest.mark.parametrize("code,expected", [
    ("ThrottlingException", ErrorType.UPSTREAM_RATE_LIMIT),
    ("AccessDeniedException", ErrorType.UPSTREAM_AUTH_ERROR),
    ("ModelTimeoutException", ErrorType.UPSTREAM_TIMEOUT),
    ("ValidationException", ErrorType.UPSTREAM_INVALID_REQUEST),
    ("ModelErrorException", ErrorType.UPSTREAM_MODEL_ERROR),
    ("InternalServerException", ErrorType.UPSTREAM_SERVICE_ERROR),
    ("SomethingNew", ErrorType.UPSTREAM_SERVICE_ERROR),
])
async def test_client_errors_are_mapped_and_not_retried(client, runtime, code, expected):
    runtime.converse.side_effect = _client_error(code)

    with pytest.raises(UpstreamCallError) as exc_info:
        await client.converse("system", "text", operation="diagnosis")

    assert exc_info.value.error_type == expected
    assert exc_info.value.context.details == {"error_code": code, "operation": "diagnosis"}
    assert "during diagnosis" in exc_info.value.context.message
    assert runtime.converse.call_count == 1


@pytest.mark.asyncio
async def test_transport_failure_is_unreachable(client, runtime):
    runtime.converse.side_effect = EndpointConnectionError(endpoint_url="https://bedrock.example")

    with pytest.raises(UpstreamCallError) as exc_info:
        await client.converse("system", "text")

    assert exc_info.value.error_type == ErrorType.UPSTREAM_UNREACHABLE


def test_retries_are_disabled():
    with patch("homefix.utils.bedrock_client.boto3.client") as factory:
        BedrockClient(region="us-east-1", model_id="m", timeout=15)

    config = factory.call_args.kwargs["config"]
    assert config.retries == {"max_attempts": 0}
    assert config.read_timeout == 15
    assert factory.call_args.args == ("bedrock-runtime",)


def test_describe(client):
    assert client.describe() == {"region": "us-west-2", "model_id": "test-model"}
