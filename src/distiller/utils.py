import re
import uuid
from pathlib import Path

from distiller.exceptions import InputFileError

TRANSCRIBE_MEDIA_FORMATS = {"mp3", "mp4", "wav", "flac", "ogg", "amr", "webm", "m4a"}

_JOB_NAME_UNSAFE = re.compile(r"[^0-9A-Za-z._-]+")
_MAX_JOB_STEM = 150


def resolve_source_path(raw_path: str) -> Path:
    """
    Turns a user-supplied path into an absolute, canonical one.

    Expands ``~`` and resolves relative segments and symlinks.

    Raises:
        InputFileError: If nothing exists at the path.
    """
    expanded = Path(raw_path).expanduser()
    if not expanded.exists():
        raise InputFileError(str(expanded.absolute()))
    return expanded.resolve()


def media_format_for(path: Path) -> str | None:
    """Returns the transcription media format implied by the file suffix."""
    suffix = path.suffix.lower().lstrip(".")
    return suffix if suffix in TRANSCRIBE_MEDIA_FORMATS else None


def job_name_for(path: Path) -> str:
    """Builds a unique job name that only uses characters the service accepts."""
    stem = _JOB_NAME_UNSAFE.sub("-", path.stem).strip("-.") or "audio"
    return f"{stem[:_MAX_JOB_STEM]}-{uuid.uuid4().hex[:12]}"
