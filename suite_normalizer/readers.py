"""Primitive readers: assert the kind of the next structural event."""

from __future__ import annotations

from typing import Iterable, Iterator

from .errors import StructuralMismatch, UnexpectedEncoding, UnexpectedEndOfInput
from .events import Event, EventKind
from .rules import ACCEPTED_ENCODING


class EventReader:
    """
    Forward-only cursor over a one-shot event sequence.

    Each ``read_*`` method consumes exactly one event. There is no peeking and
    no push-back: decoders that need to branch call ``next_event`` and dispatch
    on the kind of the event they got.
    """

    def __init__(self, events: Iterable[Event]):
        self._events: Iterator[Event] = iter(events)

    def next_event(self, expected: str) -> Event:
        try:
            return next(self._events)
        except StopIteration:
            raise UnexpectedEndOfInput(expected) from None

    def _expect(self, kind: EventKind) -> Event:
        event = self.next_event(kind.value)
        if event.kind is not kind:
            raise StructuralMismatch(kind.value, event.describe())
        return event

    def read_stream_start(self) -> None:
        event = self._expect(EventKind.STREAM_START)
        if event.encoding != ACCEPTED_ENCODING:
            raise UnexpectedEncoding(event.encoding)

    def read_stream_end(self) -> None:
        self._expect(EventKind.STREAM_END)

    def read_document_start(self) -> None:
        self._expect(EventKind.DOCUMENT_START)

    def read_document_end(self) -> None:
        self._expect(EventKind.DOCUMENT_END)

    def read_mapping_start(self) -> None:
        self._expect(EventKind.MAPPING_START)

    def read_mapping_end(self) -> None:
        self._expect(EventKind.MAPPING_END)

    def read_sequence_start(self) -> None:
        self._expect(EventKind.SEQUENCE_START)

    def read_sequence_end(self) -> None:
        self._expect(EventKind.SEQUENCE_END)

    def read_scalar(self) -> Event:
        """Return the scalar event itself so callers see both text and style."""
        return self._expect(EventKind.SCALAR)

    def read_text(self) -> str:
        return self.read_scalar().text
