"""Abstract interface for LLM service operations."""

from abc import ABC, abstractmethod


class LLMService(ABC):
    """Abstract base class for LLM backends."""

    @abstractmethod
    def summarize(self, transcript: str) -> str:
        """
        Summarizes a transcript.

        Args:
            transcript: The transcript text to summarize.

        Returns:
            The summary text.

        Raises:
            SummarizationError: If the LLM call fails or returns no text.
        """
        pass
