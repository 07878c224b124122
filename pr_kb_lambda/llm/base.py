"""Generation client interface.

The handler depends on GenerationClient, not on Bedrock directly, so tests can
drive it with an in-memory fake.
"""

from abc import ABC, abstractmethod

from ..models import GenerationResult, RequestRecord


class GenerationClient(ABC):
    """Answers one prompt against a knowledge base."""

    @abstractmethod
    def generate(self, prompt: str, record: RequestRecord) -> GenerationResult:
        """Submit the prompt with the record's tuning knobs and wait for the full answer.

        Errors from the service propagate unchanged.
        """
