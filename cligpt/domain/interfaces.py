from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Iterator, List

from .models import ChatModel, Embedding, Message
from .transcript import Transcript


class EmbeddingService(ABC):
    """Port for embedding provider (e.g., OpenAI /embeddings)."""

    @abstractmethod
    def embed_text(self, text: str) -> Embedding:
        """Embed a single text into a vector.

        Raises:
            TransportError: The provider rejected the call or was unreachable.
            ContractError: The response held no vector or a vector of the wrong size.
        """
        raise NotImplementedError


class CompletionService(ABC):
    """Port for chat completion provider (e.g., OpenAI /chat/completions)."""

    @abstractmethod
    def stream_reply(self, model: ChatModel, temperature: float, messages: List[Message]) -> Iterator[str]:
        """Yield reply fragments in arrival order; exhaustion ends the reply.

        Raises:
            TransportError: Surfaces on the fragment where the failure happened.
        """
        raise NotImplementedError


class TranscriptStore(ABC):
    """Port for transcript persistence."""

    @abstractmethod
    def load(self) -> Transcript:
        """Return the stored transcript, or an empty one when nothing is stored."""
        raise NotImplementedError

    @abstractmethod
    def save(self, transcript: Transcript) -> None:
        """Replace whatever is stored with ``transcript``."""
        raise NotImplementedError
