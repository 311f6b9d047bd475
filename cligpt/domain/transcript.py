from __future__ import annotations

from typing import Iterable, Iterator, List, Optional, Union, overload

from .models import EmbeddedMessage, Embedding, Message


class Transcript:
    """Chronological sequence of embedded chat messages.

    Entries are only ever appended at the end or cut from the front, so
    insertion order is the conversation order.
    """

    def __init__(self, entries: Optional[Iterable[EmbeddedMessage]] = None) -> None:
        self._entries: List[EmbeddedMessage] = list(entries or [])

    def append(self, message: Message, embedding: Embedding) -> EmbeddedMessage:
        entry = EmbeddedMessage(message=message, embedding=embedding)
        self._entries.append(entry)
        return entry

    def messages(self) -> List[Message]:
        return [e.message for e in self._entries]

    def split_at(self, index: int) -> "tuple[Transcript, Transcript]":
        """Return ``(self[:index], self[index:])`` as two new transcripts."""
        return Transcript(self._entries[:index]), Transcript(self._entries[index:])

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[EmbeddedMessage]:
        return iter(self._entries)

    @overload
    def __getitem__(self, index: int) -> EmbeddedMessage: ...

    @overload
    def __getitem__(self, index: slice) -> "Transcript": ...

    def __getitem__(self, index: Union[int, slice]):
        if isinstance(index, slice):
            return Transcript(self._entries[index])
        return self._entries[index]

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Transcript):
            return NotImplemented
        return self._entries == other._entries

    def __repr__(self) -> str:
        return f"Transcript(entries={len(self._entries)})"
