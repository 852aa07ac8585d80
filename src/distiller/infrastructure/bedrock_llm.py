"""Amazon Bedrock LLM service implementation."""

import json
import logging
from typing import Any

from botocore.exceptions import BotoCoreError, ClientError

from distiller.exceptions import SummarizationError
from distiller.infrastructure.interfaces import LLMService

logger = logging.getLogger(__name__)


class BedrockLLMService(LLMService):
    """LLM service implementation using the Anthropic Messages API on Bedrock."""

    def __init__(
        self,
        client: Any,
        model_id: str,
        prompt_template: str,
        inference_params: dict[str, Any],
        anthropic_params: dict[str, Any] | None = None,
    ):
        self._client = client
        self._model_id = model_id
        self._prompt_template = prompt_template
        self._inference_params = inference_params
        self._anthropic_params = anthropic_params or {}

    def build_body(self, transcript: str) -> dict[str, Any]:
        """Builds the request body for a summarization call."""
        prompt = f"{self._prompt_template}\n\n{transcript}"
        body: dict[str, Any] = {
            "messages": [
                {"role": "user", "content": [{"type": "text", "text": prompt}]}
            ],
            **self._inference_params,
        }
        if self._anthropic_params.get("anthropic_version"):
            body["anthropic_version"] = self._anthropic_params["anthropic_version"]
        if self._anthropic_params.get("system"):
            body["system"] = self._anthropic_params["system"]
        if self._anthropic_params.get("beta"):
            body["anthropic_beta"] = [self._anthropic_params["beta"]]
        return body

    def summarize(self, transcript: str) -> str:
        """
        Summarizes a transcript with the configured Bedrock model.

        Args:
            transcript: The transcript text to summarize.

        Returns:
            The summary text.

        Raises:
            SummarizationError: If the Bedrock call fails or returns no text.
        """
        try:
            response = self._client.invoke_model(
                modelId=self._model_id,
                body=json.dumps(self.build_body(transcript)),
                contentType="application/json",
                accept="application/json",
            )
            payload = json.loads(response["body"].read())
        except (BotoCoreError, ClientError) as e:
            logger.exception("Bedrock invoke_model failed", extra={"model_id": self._model_id})
            raise SummarizationError(f"Bedrock summarization failed: {e}", cause=e) from e
        except ValueError as e:
            raise SummarizationError("Bedrock returned a non-JSON response", cause=e) from e

        text = self._extract_text(payload)
        logger.info(
            "Summary generated",
            extra={"model_id": self._model_id, "characters": len(text)},
        )
        return text

    @staticmethod
    def _extract_text(payload: Any) -> str:
        content = payload.get("content") if isinstance(payload, dict) else None
        if not isinstance(content, list) or not content:
            raise SummarizationError("Bedrock response has no content")
        text = content[0].get("text") if isinstance(content[0], dict) else None
        if not isinstance(text, str) or not text.strip():
            raise SummarizationError("Bedrock returned an empty summary")
        return text.replace("\\n", "\n")
