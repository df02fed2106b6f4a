"""
Structural events consumed by the decoders.

The document text is tokenized by PyYAML; its events are translated one by one
into the small, immutable ``Event`` type below so the decoders never touch
PyYAML classes and can be driven by hand-built event lists in tests.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Iterator, Optional, Union

import yaml
from charset_normalizer import from_bytes

from .errors import MalformedDocument, UnexpectedEncoding

logger = logging.getLogger(__name__)


class EventKind(str, Enum):
    STREAM_START = "stream start"
    STREAM_END = "stream end"
    DOCUMENT_START = "document start"
    DOCUMENT_END = "document end"
    MAPPING_START = "mapping start"
    MAPPING_END = "mapping end"
    SEQUENCE_START = "sequence start"
    SEQUENCE_END = "sequence end"
    SCALAR = "scalar"
    ALIAS = "alias"


class RenderStyle(str, Enum):
    PLAIN = "plain"
    SINGLE_QUOTED = "single-quoted"
    DOUBLE_QUOTED = "double-quoted"
    LITERAL = "literal"
    FOLDED = "folded"


@dataclass(frozen=True)
class Event:
    kind: EventKind
    text: Optional[str] = None
    style: Optional[RenderStyle] = None
    encoding: Optional[str] = None
    tag: Optional[str] = None

    def describe(self) -> str:
        if self.kind is EventKind.SCALAR:
            return f"scalar {self.text!r}"
        if self.kind is EventKind.ALIAS:
            return f"alias *{self.text}"
        return self.kind.value


# Constructors for hand-built event sequences
def stream_start(encoding: Optional[str] = "utf-8") -> Event:
    return Event(EventKind.STREAM_START, encoding=encoding)


def scalar(text: str, style: RenderStyle = RenderStyle.PLAIN, tag: Optional[str] = None) -> Event:
    return Event(EventKind.SCALAR, text=text, style=style, tag=tag)


STREAM_END = Event(EventKind.STREAM_END)
DOCUMENT_START = Event(EventKind.DOCUMENT_START)
DOCUMENT_END = Event(EventKind.DOCUMENT_END)
MAPPING_START = Event(EventKind.MAPPING_START)
MAPPING_END = Event(EventKind.MAPPING_END)
SEQUENCE_START = Event(EventKind.SEQUENCE_START)
SEQUENCE_END = Event(EventKind.SEQUENCE_END)


_STYLES = {
    None: RenderStyle.PLAIN,
    "": RenderStyle.PLAIN,
    "'": RenderStyle.SINGLE_QUOTED,
    '"': RenderStyle.DOUBLE_QUOTED,
    "|": RenderStyle.LITERAL,
    ">": RenderStyle.FOLDED,
}

_SIMPLE_KINDS = {
    yaml.StreamEndEvent: STREAM_END,
    yaml.DocumentStartEvent: DOCUMENT_START,
    yaml.DocumentEndEvent: DOCUMENT_END,
    yaml.MappingStartEvent: MAPPING_START,
    yaml.MappingEndEvent: MAPPING_END,
    yaml.SequenceStartEvent: SEQUENCE_START,
    yaml.SequenceEndEvent: SEQUENCE_END,
}


def translate(event: yaml.Event) -> Event:
    """Map one PyYAML event onto the package's own event type."""
    if isinstance(event, yaml.ScalarEvent):
        return scalar(event.value, _STYLES.get(event.style, RenderStyle.PLAIN), event.tag)
    if isinstance(event, yaml.StreamStartEvent):
        return stream_start(event.encoding)
    if isinstance(event, yaml.AliasEvent):
        return Event(EventKind.ALIAS, text=event.anchor)
    return _SIMPLE_KINDS[type(event)]


def _guess_encoding(raw: bytes) -> Optional[str]:
    match = from_bytes(raw).best()
    return match.encoding if match is not None else None


def iter_events(source: Union[bytes, str]) -> Iterator[Event]:
    """
    Lazily tokenize a document into structural events.

    Text is encoded to UTF-8 first so the stream always declares an encoding.
    Undecodable bytes raise UnexpectedEncoding naming the best-guess encoding;
    any other tokenizer failure raises MalformedDocument.
    """
    raw = source.encode("utf-8") if isinstance(source, str) else source
    try:
        for event in yaml.parse(raw, Loader=yaml.SafeLoader):
            yield translate(event)
    except yaml.reader.ReaderError as e:
        if e.encoding in ("unicode", None):
            raise MalformedDocument(str(e)) from e
        guessed = _guess_encoding(raw)
        logger.debug("Undecodable input, detected encoding %s", guessed)
        raise UnexpectedEncoding(guessed) from e
    except yaml.YAMLError as e:
        raise MalformedDocument(str(e)) from e
