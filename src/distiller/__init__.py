"""Audio distiller: upload, transcribe and summarize recorded meetings."""

__version__ = "0.1.0"
