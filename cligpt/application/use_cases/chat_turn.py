from __future__ import annotations

from typing import Callable, List, Optional

from ..dto import ChatTurnRequest, ChatTurnResult
from ...domain.errors import InputError
from ...domain.interfaces import CompletionService, EmbeddingService, TranscriptStore
from ...domain.models import Message, Role
from ...domain.partition import partition
from ...domain.transcript import Transcript
from ...infrastructure.logging import get_logger

logger = get_logger("cligpt.chat_turn")


def embedding_input(text: str) -> str:
    return text.rstrip("\n")


def strip_line_terminator(text: str) -> str:
    """Remove exactly one trailing line terminator (``\\r\\n`` or ``\\n``)."""
    if text.endswith("\r\n"):
        return text[:-2]
    if text.endswith("\n"):
        return text[:-1]
    return text


class ChatTurnUseCase:
    """Use-case: run one chat turn, stream the reply, prune and persist the transcript."""

    def __init__(
        self,
        embeddings: EmbeddingService,
        completions: CompletionService,
        store: TranscriptStore,
        write: Callable[[str], None],
        flush: Optional[Callable[[], None]] = None,
    ) -> None:
        self._emb = embeddings
        self._chat = completions
        self._store = store
        self._write = write
        self._flush = flush

    def execute(self, req: ChatTurnRequest) -> ChatTurnResult:
        """
        Append the user message, stream the reply, append it, prune, then save once.

        The store is written only after every remote call succeeded, so any
        exception leaves the persisted transcript as it was.

        Raises:
            InputError: ``req.text`` is empty or whitespace only.
        """
        if not req.text or not req.text.strip():
            raise InputError("Message is empty; pass text on standard input or as arguments")

        transcript = Transcript() if req.clear else self._store.load()

        user = Message(role=Role.USER, content=req.text, name=req.name)
        transcript.append(user, self._emb.embed_text(embedding_input(user.content)))

        reply = self._stream(req, transcript.messages())

        assistant = Message(role=Role.ASSISTANT, content=reply)
        transcript.append(assistant, self._emb.embed_text(embedding_input(assistant.content)))

        current, outdated = partition(transcript)
        self._store.save(current)

        result = ChatTurnResult(reply=reply, current=current, outdated=outdated)
        logger.info(
            "Turn completed | model=%s | entries=%d | pruned=%d",
            req.model.value,
            len(current),
            result.pruned,
        )
        return result

    def _stream(self, req: ChatTurnRequest, messages: List[Message]) -> str:
        buf: List[str] = []
        for fragment in self._chat.stream_reply(req.model, req.temperature, messages):
            self._write(fragment)
            if self._flush is not None:
                self._flush()
            buf.append(fragment)
        return strip_line_terminator("".join(buf))
