"""AWS Bedrock client wrapper for the vision-language model calls."""

import asyncio
import logging
import os
from typing import Dict, List, Any, Sequence

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError
from dotenv import load_dotenv

from ..models.photo import Photo
from .errors import UpstreamCallError

# Ensure environment variables are loaded
load_dotenv()

logger = logging.getLogger(__name__)


class BedrockClient:
    """
    Wrapper for AWS Bedrock Runtime client.

    Sends one Converse request per call: an optional system instruction and a
    single user turn made of image blocks followed by a text block. There is
    no retry; a failed call fails the tool invocation that issued it.
    """

    def __init__(
        self,
        region: str = "us-east-1",
        model_id: str = "amazon.nova-pro-v1:0",
        timeout: int = 120
    ):
        """
        Initialize Bedrock client.

        Args:
            region: AWS region for Bedrock service
            model_id: Vision-capable model ID used for every call
            timeout: Connect/read timeout in seconds
        """
        self.region = region
        self.model_id = model_id

        # API key auth (bearer token) when present, IAM credentials otherwise
        bearer_token = os.getenv("AWS_BEARER_TOKEN_BEDROCK") or os.getenv("BEDROCK_API_KEY")
        self._using_bearer_token = bool(bearer_token)
        if self._using_bearer_token and not os.getenv("AWS_BEARER_TOKEN_BEDROCK"):
            os.environ["AWS_BEARER_TOKEN_BEDROCK"] = bearer_token.strip()

        config_kwargs: Dict[str, Any] = {
            "region_name": region,
            "connect_timeout": timeout,
            "read_timeout": timeout,
            "retries": {"max_attempts": 0},  # Failures surface to the caller
        }
        if self._using_bearer_token:
            config_kwargs["signature_version"] = "bearer"

        self.runtime = boto3.client("bedrock-runtime", config=Config(**config_kwargs))

        logger.info(
            f"Initialized BedrockClient: region={region}, model={model_id}, "
            f"auth={'api-key' if self._using_bearer_token else 'iam'}"
        )

    async def converse(
        self,
        system_prompt: str,
        text: str,
        images: Sequence[Photo] = (),
        temperature: float = 0.0,
        max_tokens: int = 1000,
        operation: str = "converse"
    ) -> str:
        """
        Invoke the model via Converse API and return its text reply.

        Args:
            system_prompt: System instruction for the model
            text: User message text
            images: Normalized photos attached to the user message
            temperature: Sampling temperature
            max_tokens: Maximum tokens to generate
            operation: Name of the calling operation, used in errors

        Returns:
            The reply's text blocks joined by newlines ("" if none)

        Raises:
            UpstreamCallError: If the model is unreachable, rate-limited or erroring
        """
        content: List[Dict[str, Any]] = [
            {
                "image": {
                    "format": photo.format,
                    "source": {"bytes": photo.data}  # boto3 handles encoding
                }
            }
            for photo in images
        ]
        content.append({"text": text})

        params: Dict[str, Any] = {
            "modelId": self.model_id,
            "messages": [{"role": "user", "content": content}],
            "inferenceConfig": {
                "temperature": temperature,
                "maxTokens": max_tokens
            }
        }
        if system_prompt:
            params["system"] = [{"text": system_prompt}]

        logger.debug(f"Invoking {self.model_id} for {operation} with {len(images)} image(s)")

        try:
            response = await asyncio.to_thread(self.runtime.converse, **params)
        except ClientError as e:
            error_code = e.response.get("Error", {}).get("Code", "Unknown")
            logger.error(f"Bedrock API error during {operation}: code={error_code}")
            raise UpstreamCallError.from_client_error(error=e, operation=operation)
        except BotoCoreError as e:
            logger.error(f"Bedrock unreachable during {operation}: {str(e)}")
            raise UpstreamCallError.unreachable(error=e, operation=operation)

        logger.info(
            f"Bedrock {operation} successful: "
            f"stop_reason={response.get('stopReason')}, "
            f"usage={response.get('usage')}"
        )

        return self._extract_text(response)

    @staticmethod
    def _extract_text(response: Dict[str, Any]) -> str:
        """
        Pull the text blocks out of a Converse API response.

        Args:
            response: Raw response from Converse API

        Returns:
            Joined text content
        """
        message = response.get("output", {}).get("message", {})
        text_parts = [
            block["text"]
            for block in message.get("content", [])
            if isinstance(block, dict) and "text" in block
        ]
        return "\n".join(text_parts)

    def describe(self) -> Dict[str, str]:
        """Connection summary for health checks."""
        return {"region": self.region, "model_id": self.model_id}
