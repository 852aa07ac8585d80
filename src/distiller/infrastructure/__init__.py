"""Infrastructure layer exports."""

from .bedrock_llm import BedrockLLMService
from .s3_storage import S3StorageClient
from .transcribe_service import AWSTranscribeService
from .webhook_client import HttpxWebhookClient

__all__ = [
    "AWSTranscribeService",
    "BedrockLLMService",
    "HttpxWebhookClient",
    "S3StorageClient",
]
