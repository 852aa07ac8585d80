"""Amazon Transcribe implementation of the TranscriptionService interface."""

import logging
from typing import Any

import httpx
from botocore.exceptions import BotoCoreError, ClientError, HTTPClientError
from botocore.exceptions import ConnectionError as BotoConnectionError

from distiller.domain.models import JobStatus, TranscriptionJobHandle
from distiller.exceptions import (
    TranscriptExtractionError,
    TranscriptionError,
    TransientServiceError,
)
from distiller.infrastructure.interfaces import TranscriptionService

logger = logging.getLogger(__name__)

_RETRYABLE_CODES = {
    "Throttling",
    "ThrottlingException",
    "LimitExceededException",
    "InternalFailureException",
    "ServiceUnavailableException",
    "RequestTimeout",
}


def _client_error_message(error: ClientError) -> str:
    details = error.response.get("Error", {})
    return details.get("Message") or details.get("Code") or str(error)


def _is_retryable(error: ClientError) -> bool:
    code = error.response.get("Error", {}).get("Code", "")
    status = error.response.get("ResponseMetadata", {}).get("HTTPStatusCode", 0)
    return code in _RETRYABLE_CODES or status >= 500


class AWSTranscribeService(TranscriptionService):
    """Runs batch transcription jobs on Amazon Transcribe."""

    def __init__(self, client: Any, http_client: httpx.Client):
        self._client = client
        self._http = http_client

    def start_job(
        self,
        job_name: str,
        media_uri: str,
        language_code: str,
        media_format: str | None = None,
    ) -> TranscriptionJobHandle:
        params: dict[str, Any] = {
            "TranscriptionJobName": job_name,
            "LanguageCode": language_code,
            "Media": {"MediaFileUri": media_uri},
        }
        if media_format:
            params["MediaFormat"] = media_format

        try:
            response = self._client.start_transcription_job(**params)
        except ClientError as e:
            logger.exception(
                "Transcription job rejected",
                extra={"job_name": job_name, "language_code": language_code},
            )
            raise TranscriptionError(job_name, _client_error_message(e), e) from e
        except BotoCoreError as e:
            logger.exception("Transcription job submission failed", extra={"job_name": job_name})
            raise TranscriptionError(job_name, str(e), e) from e

        handle = self._to_handle(response["TranscriptionJob"])
        logger.info(
            "Transcription job submitted",
            extra={"job_name": job_name, "media_uri": media_uri, "status": handle.status},
        )
        return handle

    def get_job(self, job_name: str) -> TranscriptionJobHandle:
        try:
            response = self._client.get_transcription_job(TranscriptionJobName=job_name)
        except (BotoConnectionError, HTTPClientError) as e:
            logger.warning("Transcription poll interrupted", extra={"job_name": job_name})
            raise TransientServiceError("get_transcription_job", e) from e
        except ClientError as e:
            if _is_retryable(e):
                logger.warning(
                    "Transcription poll throttled or unavailable",
                    extra={"job_name": job_name, "error": _client_error_message(e)},
                )
                raise TransientServiceError("get_transcription_job", e) from e
            logger.exception("Transcription poll failed", extra={"job_name": job_name})
            raise TranscriptionError(job_name, _client_error_message(e), e) from e

        return self._to_handle(response["TranscriptionJob"])

    def fetch_transcript(self, transcript_uri: str) -> str:
        try:
            response = self._http.get(transcript_uri)
            response.raise_for_status()
            document = response.json()
        except httpx.HTTPError as e:
            logger.exception("Transcript download failed")
            raise TranscriptExtractionError(
                transcript_uri, f"download failed ({e})", e
            ) from e
        except ValueError as e:
            raise TranscriptExtractionError(
                transcript_uri, "result document is not JSON", e
            ) from e

        text = self._extract_text(transcript_uri, document)
        logger.info("Transcript fetched", extra={"characters": len(text)})
        return text

    @staticmethod
    def _extract_text(location: str, document: Any) -> str:
        results = document.get("results") if isinstance(document, dict) else None
        transcripts = results.get("transcripts") if isinstance(results, dict) else None
        if not isinstance(transcripts, list) or not transcripts:
            raise TranscriptExtractionError(location, "missing results.transcripts")

        parts = []
        for entry in transcripts:
            text = entry.get("transcript") if isinstance(entry, dict) else None
            if not isinstance(text, str):
                raise TranscriptExtractionError(location, "transcript entry has no text")
            parts.append(text)

        joined = " ".join(part.strip() for part in parts if part.strip())
        if not joined:
            raise TranscriptExtractionError(location, "transcript is empty")
        return joined

    @staticmethod
    def _to_handle(job: dict[str, Any]) -> TranscriptionJobHandle:
        job_name = job["TranscriptionJobName"]
        status = JobStatus(job["TranscriptionJobStatus"])
        transcript_uri = None
        failure_reason = None
        if status is JobStatus.COMPLETED:
            transcript_uri = job.get("Transcript", {}).get("TranscriptFileUri")
            if not transcript_uri:
                raise TranscriptExtractionError(
                    job_name, "job completed without a transcript location"
                )
        elif status is JobStatus.FAILED:
            failure_reason = job.get("FailureReason") or "Unknown failure"
        return TranscriptionJobHandle(
            job_name=job_name,
            status=status,
            transcript_uri=transcript_uri,
            failure_reason=failure_reason,
        )
