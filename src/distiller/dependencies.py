"""Dependency injection configuration for the distill CLI."""

import logging
from collections.abc import Callable, Iterator
from contextlib import contextmanager

import boto3
import httpx
from botocore.config import Config

from distiller.config import AppConfig
from distiller.domain import (
    ChannelKind,
    NotificationDispatcher,
    ProgressReporter,
    TranscriptionJob,
)
from distiller.handlers import OutputHandler, PipelineHandler
from distiller.infrastructure import (
    AWSTranscribeService,
    BedrockLLMService,
    HttpxWebhookClient,
    S3StorageClient,
)
from distiller.infrastructure.s3_storage import DEFAULT_REGION

logger = logging.getLogger(__name__)

_S3_CLIENT_CONFIG = Config(
    signature_version="s3v4",
    connect_timeout=10,
    read_timeout=300,
    retries={"max_attempts": 5, "mode": "standard"},
)
_BEDROCK_CLIENT_CONFIG = Config(
    read_timeout=300,
    retries={"max_attempts": 3, "mode": "standard"},
)


def _inference_params(config: AppConfig) -> dict:
    model = config.model
    return {
        "max_tokens": model.max_tokens,
        "temperature": model.temperature,
        "top_p": model.top_p,
        "top_k": model.top_k,
    }


def _anthropic_params(config: AppConfig) -> dict | None:
    if config.anthropic is None:
        return None
    return config.anthropic.model_dump()


def _job_factory(
    session: boto3.session.Session,
    http_client: httpx.Client,
    reporter: ProgressReporter,
    config: AppConfig,
) -> Callable[[str], TranscriptionJob]:
    """Transcribe has to run in the bucket's region, so clients are built per run."""

    def build(region: str) -> TranscriptionJob:
        service = AWSTranscribeService(
            session.client("transcribe", region_name=region), http_client
        )
        return TranscriptionJob(
            service,
            reporter,
            poll_interval_seconds=config.transcribe.poll_interval_seconds,
            max_wait_seconds=config.transcribe.max_wait_seconds,
            poll_retry_attempts=config.transcribe.poll_retry_attempts,
        )

    return build


@contextmanager
def pipeline_session(
    config: AppConfig,
    reporter: ProgressReporter,
    parallel: bool = False,
    choose_bucket: Callable[[list[str]], str] | None = None,
) -> Iterator[PipelineHandler]:
    """Builds a PipelineHandler wired to AWS and webhook clients.

    The shared HTTP client is closed when the context exits.
    """
    session = boto3.session.Session()
    default_region = session.region_name or DEFAULT_REGION
    logger.info("AWS session created", extra={"region": default_region})

    # S3 storage
    storage = S3StorageClient(
        session.client("s3", region_name=default_region, config=_S3_CLIENT_CONFIG),
        lambda region: session.client("s3", region_name=region, config=_S3_CLIENT_CONFIG),
    )

    # Bedrock LLM
    llm = BedrockLLMService(
        session.client(
            "bedrock-runtime", region_name=default_region, config=_BEDROCK_CLIENT_CONFIG
        ),
        config.model.model_id,
        config.prompt.template,
        _inference_params(config),
        _anthropic_params(config),
    )

    with httpx.Client(timeout=config.http.timeout_seconds) as http_client:
        # Webhook delivery
        dispatcher = NotificationDispatcher(
            HttpxWebhookClient(http_client),
            reporter,
            teams_icon=config.teams.icon,
            parallel=parallel,
        )
        output_handler = OutputHandler(
            dispatcher,
            reporter,
            {kind: config.channels_for(kind) for kind in ChannelKind},
        )

        # Service composition
        yield PipelineHandler(
            storage,
            _job_factory(session, http_client, reporter, config),
            llm,
            output_handler,
            dispatcher,
            reporter,
            configured_bucket=config.aws.s3_bucket_name,
            choose_bucket=choose_bucket,
        )
