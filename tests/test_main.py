import argparse
from contextlib import contextmanager

import pytest

from distiller import main as cli
from distiller.domain import OutputType
from distiller.exceptions import TranscriptionError

CONFIG = """
[model]
model_id = "anthropic.claude-3-sonnet"

[slack]
webhook_endpoint = "https://hooks.slack.com/workflows/abc"
"""


class FakePipeline:
    def __init__(self, error=None):
        self.error = error
        self.requests = []

    def run(self, request):
        self.requests.append(request)
        if self.error:
            raise self.error


@pytest.fixture(autouse=True)
def keep_pytest_logging(monkeypatch):
    monkeypatch.setattr(cli, "setup_logging", lambda level=None: None)


@pytest.fixture
def config_path(tmp_path):
    path = tmp_path / "config.toml"
    path.write_text(CONFIG)
    return path


def _patch_session(monkeypatch, pipeline):
    @contextmanager
    def fake_session(config, reporter, parallel=False, choose_bucket=None):
        yield pipeline

    monkeypatch.setattr(cli, "pipeline_session", fake_session)


def test_success_exits_zero(monkeypatch, config_path):
    pipeline = FakePipeline()
    _patch_session(monkeypatch, pipeline)

    code = cli.main(["-i", "meeting.wav", "-c", str(config_path), "-o", "Slack", "-d", "n"])

    assert code == 0
    request = pipeline.requests[0]
    assert request.output_type is OutputType.SLACK
    assert request.channel_selection == (0,)
    assert request.delete_after is False


def test_pipeline_error_exits_one(monkeypatch, config_path, capsys):
    _patch_session(monkeypatch, FakePipeline(TranscriptionError("job", "UNSUPPORTED_MEDIA_FORMAT")))

    code = cli.main(["-i", "meeting.wav", "-c", str(config_path)])

    assert code == 1
    assert "UNSUPPORTED_MEDIA_FORMAT" in capsys.readouterr().err


def test_interrupt_exits_130(monkeypatch, config_path):
    _patch_session(monkeypatch, FakePipeline(KeyboardInterrupt()))

    assert cli.main(["-i", "meeting.wav", "-c", str(config_path)]) == 130


def test_missing_config_exits_one(tmp_path, capsys):
    code = cli.main(["-i", "meeting.wav", "-c", str(tmp_path / "none.toml")])

    assert code == 1
    assert "Configuration error" in capsys.readouterr().err


@pytest.mark.parametrize(
    "value, expected",
    [
        ("terminal", OutputType.TERMINAL),
        ("Markdown", OutputType.MARKDOWN),
        ("slack_split", OutputType.SLACK_SPLIT),
        ("TeamsSplit", OutputType.TEAMS_SPLIT),
    ],
)
def test_parse_output_type(value, expected):
    assert cli.parse_output_type(value) is expected


def test_parse_output_type_rejects_unknown():
    with pytest.raises(argparse.ArgumentTypeError):
        cli.parse_output_type("fax")
