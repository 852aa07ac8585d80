"""Lifecycle of a single asynchronous transcription job."""

import logging
import time
from collections.abc import Callable

from tenacity import (
    RetryCallState,
    Retrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from distiller.domain.models import Artifact, JobStatus, TranscriptionJobHandle
from distiller.domain.progress import ProgressReporter
from distiller.exceptions import (
    TranscriptionError,
    TranscriptionTimeoutError,
    TransientServiceError,
)
from distiller.infrastructure.interfaces.transcription_service import TranscriptionService

logger = logging.getLogger(__name__)


class TranscriptionJob:
    """
    Submits a transcription job, polls it to a terminal state and returns
    the transcript text.

    The handle is only ever replaced by what the service reports. A poll that
    fails transiently is retried with exponential backoff against the same
    job; the job is never resubmitted. Polling stops with
    TranscriptionTimeoutError once ``max_wait_seconds`` have elapsed.
    """

    def __init__(
        self,
        service: TranscriptionService,
        reporter: ProgressReporter,
        poll_interval_seconds: float = 3.0,
        max_wait_seconds: float = 1800.0,
        poll_retry_attempts: int = 5,
        sleep: Callable[[float], None] = time.sleep,
        clock: Callable[[], float] = time.monotonic,
    ):
        self._service = service
        self._reporter = reporter
        self._poll_interval = poll_interval_seconds
        self._max_wait = max_wait_seconds
        self._poll_retry_attempts = poll_retry_attempts
        self._sleep = sleep
        self._clock = clock
        self._handle: TranscriptionJobHandle | None = None

    @property
    def handle(self) -> TranscriptionJobHandle | None:
        return self._handle

    def run(
        self,
        artifact: Artifact,
        language_code: str,
        job_name: str,
        media_format: str | None = None,
    ) -> str:
        """
        Transcribes an uploaded artifact.

        Raises:
            TranscriptionError: If the job is rejected, fails, or cannot be polled.
            TranscriptionTimeoutError: If the job outlives the polling ceiling.
            TranscriptExtractionError: If the finished transcript is unreadable.
        """
        self._handle = self._service.start_job(
            job_name, artifact.uri, language_code, media_format
        )
        self._poll()
        return self._extract()

    def _poll(self) -> None:
        started = self._clock()
        while not self._handle.status.is_terminal:
            elapsed = self._clock() - started
            if elapsed >= self._max_wait:
                logger.error(
                    "Transcription job timed out",
                    extra={"job_name": self._handle.job_name, "elapsed": elapsed},
                )
                raise TranscriptionTimeoutError(self._handle.job_name, elapsed)

            self._reporter.update(f"Transcribing audio... ({self._handle.status.value})")
            self._sleep(self._poll_interval)
            self._handle = self._read_status(self._handle.job_name)

        logger.info(
            "Transcription job finished",
            extra={"job_name": self._handle.job_name, "status": self._handle.status.value},
        )

    def _read_status(self, job_name: str) -> TranscriptionJobHandle:
        retrying = Retrying(
            retry=retry_if_exception_type(TransientServiceError),
            stop=stop_after_attempt(self._poll_retry_attempts),
            wait=wait_exponential(multiplier=1, min=1, max=30),
            sleep=self._sleep,
            before_sleep=self._log_retry,
            reraise=True,
        )
        try:
            return retrying(self._service.get_job, job_name)
        except TransientServiceError as e:
            raise TranscriptionError(
                job_name,
                f"status polling failed {self._poll_retry_attempts} times in a row",
                e,
            ) from e

    def _extract(self) -> str:
        handle = self._handle
        if handle.status is JobStatus.FAILED:
            logger.error(
                "Transcription job failed",
                extra={"job_name": handle.job_name, "reason": handle.failure_reason},
            )
            raise TranscriptionError(handle.job_name, handle.failure_reason)

        self._reporter.update("Fetching transcript...")
        return self._service.fetch_transcript(handle.transcript_uri)

    @staticmethod
    def _log_retry(retry_state: RetryCallState) -> None:
        logger.warning(
            "Retrying transcription status poll",
            extra={"attempt": retry_state.attempt_number},
        )
