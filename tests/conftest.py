import io

import pytest

from distiller.domain import (
    Artifact,
    JobStatus,
    ProgressReporter,
    TranscriptionJobHandle,
)
from distiller.exceptions import WebhookDeliveryError
from distiller.infrastructure.interfaces import (
    LLMService,
    StorageClient,
    TranscriptionService,
    WebhookClient,
)


class FakeStorage(StorageClient):
    def __init__(self, buckets=None, region="us-east-1", delete_error=None):
        self.buckets = ["meetings"] if buckets is None else buckets
        self.region = region
        self.delete_error = delete_error
        self.uploaded = []
        self.deleted = []

    def list_buckets(self):
        return list(self.buckets)

    def bucket_region(self, bucket_name):
        return self.region

    def upload(self, path, bucket_name, region):
        self.uploaded.append((path, bucket_name, region))
        return Artifact(bucket=bucket_name, key=path.name, region=region)

    def delete(self, artifact):
        if self.delete_error:
            raise self.delete_error
        self.deleted.append(artifact)


class FakeTranscriptionService(TranscriptionService):
    """Replays scripted job states, one per get_job call."""

    def __init__(self, states=None, transcript="Hello world.", start_error=None):
        self.states = list(states or [JobStatus.COMPLETED])
        self.transcript = transcript
        self.start_error = start_error
        self.started = []
        self.polls = 0

    def _handle(self, job_name, status):
        if status is JobStatus.COMPLETED:
            return TranscriptionJobHandle(
                job_name=job_name,
                status=status,
                transcript_uri=f"https://transcripts.example.com/{job_name}.json",
            )
        if status is JobStatus.FAILED:
            return TranscriptionJobHandle(
                job_name=job_name, status=status, failure_reason="UNSUPPORTED_MEDIA_FORMAT"
            )
        return TranscriptionJobHandle(job_name=job_name, status=status)

    def start_job(self, job_name, media_uri, language_code, media_format=None):
        if self.start_error:
            raise self.start_error
        self.started.append((job_name, media_uri, language_code, media_format))
        return self._handle(job_name, JobStatus.QUEUED)

    def get_job(self, job_name):
        state = self.states[min(self.polls, len(self.states) - 1)]
        self.polls += 1
        if isinstance(state, Exception):
            raise state
        return self._handle(job_name, state)

    def fetch_transcript(self, transcript_uri):
        return self.transcript


class FakeLLM(LLMService):
    def __init__(self, summary="Greeting exchanged."):
        self.summary = summary
        self.calls = []

    def summarize(self, transcript):
        self.calls.append(transcript)
        return self.summary


class FakeWebhookClient(WebhookClient):
    """Records posts; endpoints listed in ``failing`` raise a delivery error."""

    def __init__(self, failing=()):
        self.failing = set(failing)
        self.posts = []

    def post_json(self, endpoint, payload):
        self.posts.append((endpoint, payload))
        if endpoint in self.failing:
            raise WebhookDeliveryError(endpoint, "500 Internal Server Error", status_code=500)
        return 200


@pytest.fixture
def stream():
    return io.StringIO()


@pytest.fixture
def reporter(stream):
    return ProgressReporter(stream=stream)
