"""Domain layer exports."""

from distiller.domain.models import (
    Artifact,
    ChannelConfig,
    ChannelKind,
    ChannelResult,
    DeliveryOutcome,
    DispatchResult,
    DispatchStatus,
    JobStatus,
    OutputType,
    PipelineRequest,
    PipelineResult,
    TeamsIcon,
    TranscriptionJobHandle,
)
from distiller.domain.progress import FinalState, ProgressReporter
from distiller.domain.dispatcher import NotificationDispatcher, select_channels
from distiller.domain.transcription_job import TranscriptionJob

__all__ = [
    "Artifact",
    "ChannelConfig",
    "ChannelKind",
    "ChannelResult",
    "DeliveryOutcome",
    "DispatchResult",
    "DispatchStatus",
    "FinalState",
    "JobStatus",
    "NotificationDispatcher",
    "OutputType",
    "PipelineRequest",
    "PipelineResult",
    "ProgressReporter",
    "TeamsIcon",
    "TranscriptionJob",
    "TranscriptionJobHandle",
    "select_channels",
]
