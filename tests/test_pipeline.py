import pytest

from conftest import FakeLLM, FakeStorage, FakeTranscriptionService, FakeWebhookClient
from distiller.domain import (
    ChannelConfig,
    ChannelKind,
    DispatchStatus,
    FinalState,
    JobStatus,
    NotificationDispatcher,
    OutputType,
    PipelineRequest,
    TranscriptionJob,
)
from distiller.exceptions import (
    BucketSelectionError,
    InputFileError,
    StorageDeleteError,
    TranscriptionError,
)
from distiller.handlers import OutputHandler, PipelineHandler

SLACK = [
    ChannelConfig(name="A", endpoint="https://hooks.example.com/a"),
    ChannelConfig(name="B", endpoint="https://hooks.example.com/b"),
]


@pytest.fixture
def audio(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    path = tmp_path / "meeting.wav"
    path.write_bytes(b"RIFF")
    return path


def _pipeline(
    reporter,
    storage=None,
    service=None,
    llm=None,
    webhooks=None,
    configured_bucket="meetings",
    choose_bucket=None,
    slack=SLACK,
):
    storage = storage or FakeStorage()
    service = service or FakeTranscriptionService()
    llm = llm or FakeLLM()
    dispatcher = NotificationDispatcher(webhooks or FakeWebhookClient(), reporter)
    echoed = []
    output = OutputHandler(
        dispatcher, reporter, {ChannelKind.SLACK: slack, ChannelKind.TEAMS: []}, echo=echoed.append
    )
    handler = PipelineHandler(
        storage,
        lambda region: TranscriptionJob(service, reporter, sleep=lambda s: None),
        llm,
        output,
        dispatcher,
        reporter,
        configured_bucket=configured_bucket,
        choose_bucket=choose_bucket,
        echo=echoed.append,
    )
    return handler, echoed


def test_terminal_run_end_to_end(reporter, audio):
    storage = FakeStorage()
    service = FakeTranscriptionService(states=[JobStatus.IN_PROGRESS, JobStatus.COMPLETED])
    llm = FakeLLM()
    pipeline, echoed = _pipeline(reporter, storage, service, llm)

    result = pipeline.run(PipelineRequest(input_path=str(audio)))

    assert result.transcript == "Hello world."
    assert result.summary == "Greeting exchanged."
    assert result.artifact.uri == "s3://meetings/meeting.wav"
    assert result.object_deleted
    assert storage.deleted == [result.artifact]
    assert llm.calls == ["Hello world."]
    assert service.started[0][1:] == ("s3://meetings/meeting.wav", "en-US", "wav")
    assert "\nSummary:\nGreeting exchanged.\n" in echoed
    assert reporter.final_message == "Done!"


def test_object_kept_when_delete_disabled(reporter, audio):
    storage = FakeStorage()
    pipeline, _ = _pipeline(reporter, storage)

    result = pipeline.run(PipelineRequest(input_path=str(audio), delete_after=False))

    assert not result.object_deleted
    assert storage.deleted == []


def test_failed_delete_is_a_warning(reporter, audio):
    storage = FakeStorage(delete_error=StorageDeleteError("meeting.wav"))
    pipeline, echoed = _pipeline(reporter, storage)

    result = pipeline.run(PipelineRequest(input_path=str(audio)))

    assert not result.object_deleted
    assert any(line.startswith("⚠️ Could not delete") for line in echoed)


def test_transcription_failure_stops_before_summarizing(reporter, audio):
    webhooks = FakeWebhookClient()
    llm = FakeLLM()
    pipeline, _ = _pipeline(
        reporter,
        service=FakeTranscriptionService(states=[JobStatus.FAILED]),
        llm=llm,
        webhooks=webhooks,
    )

    with pytest.raises(TranscriptionError, match="UNSUPPORTED_MEDIA_FORMAT"):
        pipeline.run(
            PipelineRequest(
                input_path=str(audio), output_type=OutputType.SLACK, channel_selection=(0,)
            )
        )

    assert llm.calls == []
    assert webhooks.posts == []
    assert reporter.final_state is FinalState.FAIL
    assert reporter.final_message.startswith("Transcription failed:")


def test_missing_input_fails_before_any_remote_call(reporter, tmp_path):
    storage = FakeStorage()
    pipeline, _ = _pipeline(reporter, storage)

    with pytest.raises(InputFileError):
        pipeline.run(PipelineRequest(input_path=str(tmp_path / "nope.wav")))

    assert storage.uploaded == []


def test_slack_partial_failure_completes(reporter, audio):
    webhooks = FakeWebhookClient(failing={"https://hooks.example.com/b"})
    pipeline, echoed = _pipeline(reporter, webhooks=webhooks)

    result = pipeline.run(
        PipelineRequest(
            input_path=str(audio), output_type=OutputType.SLACK, channel_selection=(0, 1)
        )
    )

    assert result.dispatch.status is DispatchStatus.PARTIAL
    assert result.dispatch.failed_channels == ["B"]
    assert reporter.final_state is FinalState.WARN
    assert any("(B)" in line for line in echoed)


def test_slack_split_writes_file_even_when_nothing_selected(reporter, audio):
    pipeline, echoed = _pipeline(reporter)

    result = pipeline.run(
        PipelineRequest(
            input_path=str(audio), output_type=OutputType.SLACK_SPLIT, channel_selection=()
        )
    )

    assert result.dispatch.skipped
    assert result.written_files == ("summarized_output.txt",)
    assert (audio.parent / "summarized_output.txt").read_text() == "Greeting exchanged."
    assert "Summary was only written to file" in echoed[-1]


def test_markdown_output_and_transcript_file(reporter, audio):
    pipeline, _ = _pipeline(reporter)

    result = pipeline.run(
        PipelineRequest(
            input_path=str(audio),
            output_type=OutputType.MARKDOWN,
            summary_file_name="notes",
            save_transcript=True,
        )
    )

    assert result.written_files == ("notes.md",)
    assert result.transcript_file == "notes.trans"
    assert (audio.parent / "notes.trans").read_text() == "Hello world."


def test_unknown_configured_bucket_falls_back_to_chooser(reporter, audio):
    storage = FakeStorage(buckets=["alpha", "beta"])
    pipeline, echoed = _pipeline(
        reporter, storage, configured_bucket="gone", choose_bucket=lambda names: names[1]
    )

    result = pipeline.run(PipelineRequest(input_path=str(audio)))

    assert result.artifact.bucket == "beta"
    assert "Error: The configured S3 bucket 'gone' was not found." in echoed


def test_request_bucket_overrides_configured(reporter, audio):
    storage = FakeStorage(buckets=["alpha", "beta"])
    pipeline, _ = _pipeline(reporter, storage, configured_bucket="alpha")

    result = pipeline.run(PipelineRequest(input_path=str(audio), bucket_name="beta"))

    assert result.artifact.bucket == "beta"


def test_no_buckets(reporter, audio):
    pipeline, _ = _pipeline(reporter, FakeStorage(buckets=[]), configured_bucket=None)

    with pytest.raises(BucketSelectionError, match="No S3 buckets found"):
        pipeline.run(PipelineRequest(input_path=str(audio)))


def test_dispatch_notifications_reuses_text(reporter):
    webhooks = FakeWebhookClient()
    pipeline, _ = _pipeline(reporter, webhooks=webhooks)

    result = pipeline.dispatch_notifications(ChannelKind.SLACK, SLACK, [1], "Greeting exchanged.")

    assert result.sent_count == 1
    assert webhooks.posts[0][0] == "https://hooks.example.com/b"


def test_single_slack_channel_end_to_end(reporter, audio):
    storage = FakeStorage()
    webhooks = FakeWebhookClient()
    service = FakeTranscriptionService(states=[JobStatus.IN_PROGRESS, JobStatus.COMPLETED])
    pipeline, _ = _pipeline(
        reporter, storage, service, webhooks=webhooks, slack=SLACK[:1]
    )

    result = pipeline.run(
        PipelineRequest(
            input_path=str(audio), language_code="en-US", output_type=OutputType.SLACK
        )
    )

    assert result.transcript == "Hello world."
    assert result.summary == "Greeting exchanged."
    [(endpoint, payload)] = webhooks.posts
    assert endpoint == "https://hooks.example.com/a"
    assert payload["content"].endswith("Greeting exchanged.")
    assert storage.deleted == [result.artifact]
    assert reporter.final_message == "Summary sent to Slack! (Sent to 1 webhooks)"


def test_unset_selection_sends_to_every_channel(reporter, audio):
    webhooks = FakeWebhookClient()
    pipeline, _ = _pipeline(reporter, webhooks=webhooks)

    result = pipeline.run(PipelineRequest(input_path=str(audio), output_type=OutputType.SLACK))

    assert [c.channel_name for c in result.dispatch.results] == ["A", "B"]
    assert len(webhooks.posts) == 2


def test_empty_selection_skips_and_shows_summary(reporter, audio):
    webhooks = FakeWebhookClient()
    pipeline, echoed = _pipeline(reporter, webhooks=webhooks, slack=SLACK[:1])

    result = pipeline.run(
        PipelineRequest(input_path=str(audio), output_type=OutputType.SLACK, channel_selection=())
    )

    assert result.dispatch.skipped
    assert webhooks.posts == []
    assert "Summary:\nGreeting exchanged.\n" in echoed
