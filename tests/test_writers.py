import pytest
from docx import Document

from distiller.exceptions import OutputWriteError
from distiller.infrastructure import writers


def test_text_and_markdown(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)

    text_path = writers.write_text_file("summary", "Greeting exchanged.")
    md_path = writers.write_markdown_file("summary", "Greeting exchanged.")

    assert text_path.read_text() == "Greeting exchanged."
    assert md_path.read_text() == "# Summary\n\nGreeting exchanged."


def test_transcript_file(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)

    path = writers.write_transcript_file("summary", "Hello world.")

    assert path.name == "summary.trans"
    assert path.read_text() == "Hello world."


def test_word_document(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)

    path = writers.write_word_file("summary", "Greeting exchanged.")

    assert [p.text for p in Document(str(path)).paragraphs] == ["Greeting exchanged."]


def test_unwritable_location(tmp_path):
    target = tmp_path / "missing-dir" / "summary"

    with pytest.raises(OutputWriteError) as excinfo:
        writers.write_text_file(str(target), "x")

    assert excinfo.value.stage == "output"
