"""Domain models for the distiller pipeline."""

from enum import Enum

import httpx
from pydantic import BaseModel, field_validator, model_validator


class ChannelKind(str, Enum):
    """Notification platform a webhook belongs to."""

    SLACK = "slack"
    TEAMS = "teams"

    @property
    def label(self) -> str:
        return self.value.capitalize()


class ChannelConfig(BaseModel, frozen=True):
    """A single named webhook destination."""

    name: str
    endpoint: str

    @field_validator("endpoint")
    @classmethod
    def _endpoint_is_http(cls, value: str) -> str:
        value = value.strip()
        try:
            url = httpx.URL(value)
        except (httpx.InvalidURL, ValueError) as e:
            raise ValueError(f"webhook endpoint is not a valid URL ({e})") from e
        if url.scheme not in ("http", "https") or not url.host:
            raise ValueError("webhook endpoint must be an http(s) URL with a host")
        return value


class TeamsIcon(BaseModel, frozen=True):
    """Icon shown in the header of a Teams card."""

    name: str = "Flash"
    size: str = "Large"
    style: str = "Filled"
    color: str = "Accent"


class OutputType(str, Enum):
    """Where the finished summary is delivered."""

    TERMINAL = "terminal"
    TEXT = "text"
    WORD = "word"
    MARKDOWN = "markdown"
    SLACK = "slack"
    SLACK_SPLIT = "slack-split"
    TEAMS = "teams"
    TEAMS_SPLIT = "teams-split"

    @property
    def channel_kind(self) -> ChannelKind | None:
        if self in (OutputType.SLACK, OutputType.SLACK_SPLIT):
            return ChannelKind.SLACK
        if self in (OutputType.TEAMS, OutputType.TEAMS_SPLIT):
            return ChannelKind.TEAMS
        return None

    @property
    def is_split(self) -> bool:
        return self in (OutputType.SLACK_SPLIT, OutputType.TEAMS_SPLIT)


class Artifact(BaseModel, frozen=True):
    """An uploaded source file in object storage."""

    bucket: str
    key: str
    region: str

    @property
    def uri(self) -> str:
        return f"s3://{self.bucket}/{self.key}"


class JobStatus(str, Enum):
    """Status values reported by the transcription service."""

    QUEUED = "QUEUED"
    IN_PROGRESS = "IN_PROGRESS"
    COMPLETED = "COMPLETED"
    FAILED = "FAILED"

    @property
    def is_terminal(self) -> bool:
        return self in (JobStatus.COMPLETED, JobStatus.FAILED)


class TranscriptionJobHandle(BaseModel, frozen=True):
    """Snapshot of a transcription job as last reported by the service."""

    job_name: str
    status: JobStatus
    transcript_uri: str | None = None
    failure_reason: str | None = None

    @model_validator(mode="after")
    def _terminal_fields_match_status(self) -> "TranscriptionJobHandle":
        completed = self.status is JobStatus.COMPLETED
        if completed != bool(self.transcript_uri):
            raise ValueError("transcript_uri must be present exactly when COMPLETED")
        failed = self.status is JobStatus.FAILED
        if failed != bool(self.failure_reason):
            raise ValueError("failure_reason must be present exactly when FAILED")
        return self


class DeliveryOutcome(str, Enum):
    SENT = "sent"
    FAILED = "failed"


class ChannelResult(BaseModel, frozen=True):
    """Outcome of delivering a summary to one channel."""

    channel_name: str
    outcome: DeliveryOutcome
    reason: str | None = None


class DispatchStatus(str, Enum):
    SKIPPED = "skipped"
    SUCCESS = "success"
    PARTIAL = "partial"
    FAILURE = "failure"


class DispatchResult(BaseModel, frozen=True):
    """Aggregate outcome of one dispatch, in selection order."""

    kind: ChannelKind
    text: str
    results: tuple[ChannelResult, ...] = ()
    skipped: bool = False

    @property
    def sent_count(self) -> int:
        return sum(1 for r in self.results if r.outcome is DeliveryOutcome.SENT)

    @property
    def failed_count(self) -> int:
        return sum(1 for r in self.results if r.outcome is DeliveryOutcome.FAILED)

    @property
    def failed_channels(self) -> list[str]:
        return [
            r.channel_name for r in self.results if r.outcome is DeliveryOutcome.FAILED
        ]

    @property
    def status(self) -> DispatchStatus:
        if self.skipped or not self.results:
            return DispatchStatus.SKIPPED
        if self.failed_count == 0:
            return DispatchStatus.SUCCESS
        if self.sent_count == 0:
            return DispatchStatus.FAILURE
        return DispatchStatus.PARTIAL


class PipelineRequest(BaseModel, frozen=True):
    """Everything a single run needs from the caller."""

    input_path: str
    language_code: str = "en-US"
    bucket_name: str | None = None
    delete_after: bool = True
    output_type: OutputType = OutputType.TERMINAL
    summary_file_name: str = "summarized_output"
    save_transcript: bool = False
    card_title: str = "A meeting from today..."
    # None selects every configured channel, so a lone channel is always used.
    channel_selection: tuple[int, ...] | None = None


class PipelineResult(BaseModel, frozen=True):
    """What a completed run produced."""

    artifact: Artifact
    transcript: str
    summary: str
    dispatch: DispatchResult | None = None
    written_files: tuple[str, ...] = ()
    transcript_file: str | None = None
    object_deleted: bool = False
