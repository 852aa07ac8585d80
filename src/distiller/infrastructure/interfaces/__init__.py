"""Infrastructure interface exports."""

from .llm_service import LLMService
from .storage import StorageClient
from .transcription_service import TranscriptionService
from .webhook_client import WebhookClient

__all__ = ["LLMService", "StorageClient", "TranscriptionService", "WebhookClient"]
