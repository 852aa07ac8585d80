"""Handler that runs the upload, transcription and summarization pipeline."""

import logging
from collections.abc import Callable, Sequence

from distiller.domain import (
    Artifact,
    ChannelConfig,
    ChannelKind,
    DispatchResult,
    FinalState,
    NotificationDispatcher,
    PipelineRequest,
    PipelineResult,
    ProgressReporter,
    TranscriptionJob,
)
from distiller.exceptions import (
    BucketSelectionError,
    OutputWriteError,
    PipelineError,
    StorageDeleteError,
)
from distiller.handlers.output_handler import OutputHandler
from distiller.infrastructure import writers
from distiller.infrastructure.interfaces import LLMService, StorageClient
from distiller.utils import job_name_for, media_format_for, resolve_source_path

logger = logging.getLogger(__name__)

BucketChooser = Callable[[list[str]], str]


class PipelineHandler:
    """Orchestrates one run from local audio file to delivered summary."""

    def __init__(
        self,
        storage: StorageClient,
        job_factory: Callable[[str], TranscriptionJob],
        llm: LLMService,
        output_handler: OutputHandler,
        dispatcher: NotificationDispatcher,
        reporter: ProgressReporter,
        configured_bucket: str | None = None,
        choose_bucket: BucketChooser | None = None,
        echo: Callable[[str], None] = print,
    ):
        self._storage = storage
        self._job_factory = job_factory
        self._llm = llm
        self._output = output_handler
        self._dispatcher = dispatcher
        self._reporter = reporter
        self._configured_bucket = configured_bucket
        self._choose_bucket = choose_bucket
        self._echo = echo

    def run(self, request: PipelineRequest) -> PipelineResult:
        """
        Runs the pipeline for a single audio file.

        Args:
            request: Input file, language, bucket override and output options.

        Returns:
            PipelineResult with the transcript, the summary and delivery details.

        Raises:
            PipelineError: Subclass naming the stage that failed.
        """
        self._reporter.reset()
        try:
            return self._run(request)
        except PipelineError as e:
            logger.error(
                "Pipeline failed", extra={"stage": e.stage, "error": str(e)}
            )
            self._reporter.finalize(f"{e.stage.capitalize()} failed: {e}", FinalState.FAIL)
            raise

    def dispatch_notifications(
        self,
        kind: ChannelKind,
        channels: Sequence[ChannelConfig],
        selection: Sequence[int],
        text: str,
        title: str | None = None,
    ) -> DispatchResult:
        """Sends already-produced text to webhook channels."""
        return self._dispatcher.dispatch(kind, channels, selection, text, title=title)

    def _run(self, request: PipelineRequest) -> PipelineResult:
        source = resolve_source_path(request.input_path)

        bucket = self._select_bucket(request.bucket_name or self._configured_bucket)

        self._reporter.update("Resolving bucket region...")
        region = self._storage.bucket_region(bucket)
        self._reporter.update(f"Using bucket region {region}")

        self._reporter.update("Uploading file to S3...")
        artifact = self._storage.upload(source, bucket, region)

        self._reporter.update("Transcribing audio...")
        job = self._job_factory(region)
        transcript = job.run(
            artifact,
            request.language_code,
            job_name=job_name_for(source),
            media_format=media_format_for(source),
        )

        self._reporter.update("Summarizing transcription...")
        summary = self._llm.summarize(transcript)

        dispatch, written = self._output.deliver(request, summary)

        deleted = self._cleanup(artifact) if request.delete_after else False

        transcript_file = None
        if request.save_transcript:
            transcript_file = self._save_transcript(request.summary_file_name, transcript)

        self._reporter.finalize("Done!")

        logger.info(
            "Pipeline completed",
            extra={
                "uri": artifact.uri,
                "transcript_characters": len(transcript),
                "summary_characters": len(summary),
                "object_deleted": deleted,
            },
        )
        return PipelineResult(
            artifact=artifact,
            transcript=transcript,
            summary=summary,
            dispatch=dispatch,
            written_files=written,
            transcript_file=transcript_file,
            object_deleted=deleted,
        )

    def _select_bucket(self, preferred: str | None) -> str:
        buckets = self._storage.list_buckets()

        if preferred:
            if preferred in buckets:
                self._echo(f"📦 S3 bucket name: {preferred}")
                return preferred
            self._echo(f"Error: The configured S3 bucket '{preferred}' was not found.")

        if not buckets:
            raise BucketSelectionError("No S3 buckets found. Please create an S3 bucket first.")
        if self._choose_bucket is None:
            raise BucketSelectionError(
                "No valid S3 bucket found. Set aws.s3_bucket_name or pass --bucket."
            )

        choice = self._choose_bucket(buckets)
        if choice not in buckets:
            raise BucketSelectionError(f"Bucket '{choice}' is not available.")
        return choice

    def _cleanup(self, artifact: Artifact) -> bool:
        try:
            self._storage.delete(artifact)
        except StorageDeleteError as e:
            self._echo(f"⚠️ Could not delete {artifact.uri}: {e.cause or e}")
            return False
        return True

    def _save_transcript(self, base_name: str, transcript: str) -> str | None:
        try:
            path = writers.write_transcript_file(base_name, transcript)
        except OutputWriteError as e:
            self._echo(f"⚠️ Error creating transcript file: {e}")
            return None
        self._echo(f"📝 Full transcript saved to {path}")
        return str(path)
