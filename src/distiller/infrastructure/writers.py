"""File writers for summaries and transcripts."""

import logging
from pathlib import Path

from docx import Document

from distiller.exceptions import OutputWriteError

logger = logging.getLogger(__name__)


def _write(path: Path, content: str) -> Path:
    try:
        path.write_text(content, encoding="utf-8")
    except OSError as e:
        logger.exception("File write failed", extra={"path": str(path)})
        raise OutputWriteError(str(path), e) from e
    logger.info("File written", extra={"path": str(path), "characters": len(content)})
    return path


def write_text_file(base_name: str, summary: str) -> Path:
    return _write(Path(f"{base_name}.txt"), summary)


def write_markdown_file(base_name: str, summary: str) -> Path:
    return _write(Path(f"{base_name}.md"), f"# Summary\n\n{summary}")


def write_transcript_file(base_name: str, transcript: str) -> Path:
    return _write(Path(f"{base_name}.trans"), transcript)


def write_word_file(base_name: str, summary: str) -> Path:
    """Writes the summary as a single-paragraph Word document."""
    path = Path(f"{base_name}.docx")
    document = Document()
    document.add_paragraph(summary)
    try:
        document.save(str(path))
    except OSError as e:
        logger.exception("Word document write failed", extra={"path": str(path)})
        raise OutputWriteError(str(path), e) from e
    logger.info("Word document written", extra={"path": str(path)})
    return path
