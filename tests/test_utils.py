from pathlib import Path

import pytest

from distiller.exceptions import InputFileError
from distiller.utils import job_name_for, media_format_for, resolve_source_path


def test_resolve_source_path_is_absolute(tmp_path, monkeypatch):
    (tmp_path / "meeting.wav").write_bytes(b"RIFF")
    monkeypatch.chdir(tmp_path)

    assert resolve_source_path("./meeting.wav") == (tmp_path / "meeting.wav").resolve()


def test_resolve_source_path_missing(tmp_path):
    with pytest.raises(InputFileError, match="does not exist"):
        resolve_source_path(str(tmp_path / "nope.wav"))


def test_media_format():
    assert media_format_for(Path("a/Meeting.MP3")) == "mp3"
    assert media_format_for(Path("notes.txt")) is None


def test_job_name_is_unique_and_safe():
    first = job_name_for(Path("team meeting (final).wav"))
    second = job_name_for(Path("team meeting (final).wav"))

    assert first != second
    assert first.startswith("team-meeting-final-")
    assert all(ch.isalnum() or ch in "._-" for ch in first)
