"""Abstract interface for asynchronous transcription operations."""

from abc import ABC, abstractmethod

from distiller.domain.models import TranscriptionJobHandle


class TranscriptionService(ABC):
    """Abstract base class for speech-to-text job backends."""

    @abstractmethod
    def start_job(
        self,
        job_name: str,
        media_uri: str,
        language_code: str,
        media_format: str | None = None,
    ) -> TranscriptionJobHandle:
        """
        Submits a transcription job for an uploaded object.

        Raises:
            TranscriptionError: If the service rejects the job.
        """

    @abstractmethod
    def get_job(self, job_name: str) -> TranscriptionJobHandle:
        """
        Reads the current state of a job.

        Raises:
            TransientServiceError: For failures that are safe to retry.
            TranscriptionError: For any other failure.
        """

    @abstractmethod
    def fetch_transcript(self, transcript_uri: str) -> str:
        """
        Downloads a finished transcript document and returns its plain text.

        Raises:
            TranscriptExtractionError: If the document is missing or malformed.
        """
