"""
Field decoders.

One decoder per field whose surface form changed over the life of the test
format. Each decoder consumes exactly the events that make up its field and
returns one normalized, immutable value from ``models``.
"""

from __future__ import annotations

import logging
from typing import Callable, Dict, List, Tuple

from .errors import (
    InvalidGrade,
    StructuralMismatch,
    UnknownField,
    UnknownTableAttribute,
    UnknownTestAttribute,
    UnsupportedTableShape,
    UnsupportedTestMode,
    UnsupportedXfailKey,
    UnsupportedXfailShape,
)
from .events import EventKind, RenderStyle
from .models import (
    Directional,
    FileList,
    Flag,
    InlineDefinition,
    MetadataMap,
    Reason,
    SingleFile,
    TableReference,
    TestCase,
    TestMode,
    Xfail,
)
from .readers import EventReader
from .rules import (
    FALSE_SPELLINGS,
    FLAGS_KEY,
    GRADE_MAX,
    INLINE_TABLE_TAG,
    LEGACY_TABLE_KEYS,
    RESERVED_TEST_ATTRIBUTES,
    TRUE_SPELLINGS,
    XFAIL_DIRECTIONS,
)

logger = logging.getLogger(__name__)

_FILE_STYLES = (RenderStyle.PLAIN, RenderStyle.SINGLE_QUOTED, RenderStyle.DOUBLE_QUOTED)


def _read_string_map(reader: EventReader, allowed=None) -> Dict[str, str]:
    """Read scalar key/value pairs up to the mapping end; later keys overwrite."""
    entries: Dict[str, str] = {}
    while True:
        event = reader.next_event("scalar or mapping end")
        if event.kind is EventKind.MAPPING_END:
            return entries
        if event.kind is not EventKind.SCALAR:
            raise StructuralMismatch("scalar or mapping end", event.describe())
        if allowed is not None and event.text not in allowed:
            raise UnknownTableAttribute(event.text)
        entries[event.text] = reader.read_text()


def _read_paths(reader: EventReader) -> Tuple[str, ...]:
    paths: List[str] = []
    while True:
        event = reader.next_event("table file or sequence end")
        if event.kind is EventKind.SEQUENCE_END:
            return tuple(paths)
        if event.kind is not EventKind.SCALAR:
            raise StructuralMismatch("table file or sequence end", event.describe())
        paths.append(event.text)


def decode_table(reader: EventReader) -> TableReference:
    """Decode a table reference by the shape of its first event."""
    event = reader.next_event("table")

    if event.kind is EventKind.MAPPING_START:
        table = MetadataMap(entries=_read_string_map(reader))
    elif event.kind is EventKind.SEQUENCE_START:
        table = FileList(paths=_read_paths(reader))
    elif event.kind is EventKind.SCALAR and event.tag == INLINE_TABLE_TAG:
        table = InlineDefinition(text=event.text)
    elif event.kind is EventKind.SCALAR and event.style in _FILE_STYLES:
        table = SingleFile(path=event.text)
    elif event.kind is EventKind.SCALAR and event.style is RenderStyle.LITERAL:
        table = InlineDefinition(text=event.text)
    elif event.kind is EventKind.SCALAR and event.style is not None:
        raise UnsupportedTableShape(f"{event.style.value} {event.describe()}")
    else:
        raise UnsupportedTableShape(event.describe())

    logger.debug("Decoded table as %s", type(table).__name__)
    return table


def parse_grade(text: str) -> int:
    if not (text.isascii() and text.isdigit()) or int(text) > GRADE_MAX:
        raise InvalidGrade(text)
    return int(text)


def decode_legacy_table(reader: EventReader) -> MetadataMap:
    """
    Decode the fixed-key table mapping of the legacy format.

    Only ``language``, ``grade``, ``system`` and ``__assert-match`` are
    accepted; the grade must be a small unsigned integer.
    """
    reader.read_mapping_start()
    entries = _read_string_map(reader, allowed=LEGACY_TABLE_KEYS)
    if "grade" in entries:
        entries["grade"] = str(parse_grade(entries["grade"]))
    return MetadataMap(entries=entries)


def decode_flags(reader: EventReader) -> TestMode:
    reader.read_mapping_start()
    key = reader.read_text()
    if key != FLAGS_KEY:
        raise UnknownField(key)
    value = reader.read_text()
    try:
        mode = TestMode(value)
    except ValueError:
        raise UnsupportedTestMode(value) from None
    reader.read_mapping_end()
    return mode


def is_truthy(text: str) -> bool:
    return text not in FALSE_SPELLINGS


def xfail_from_scalar(text: str) -> Xfail:
    if text in FALSE_SPELLINGS:
        return Flag(value=False)
    if text in TRUE_SPELLINGS:
        return Flag(value=True)
    return Reason(text=text)


def decode_xfail(reader: EventReader) -> Xfail:
    event = reader.next_event("xfail value")

    if event.kind is EventKind.SCALAR:
        return xfail_from_scalar(event.text)

    if event.kind is EventKind.MAPPING_START:
        directions: Dict[str, bool] = {}
        while True:
            event = reader.next_event("xfail direction or mapping end")
            if event.kind is EventKind.MAPPING_END:
                return Directional(**directions)
            if event.kind is not EventKind.SCALAR:
                raise StructuralMismatch("xfail direction or mapping end", event.describe())
            if event.text not in XFAIL_DIRECTIONS:
                raise UnsupportedXfailKey(event.text)
            directions[event.text] = is_truthy(reader.read_text())

    raise UnsupportedXfailShape(event.describe())


TEST_ATTRIBUTES: Dict[str, Callable[[EventReader], object]] = {
    "xfail": decode_xfail,
}


def _decode_test_attributes(reader: EventReader) -> Dict[str, object]:
    attributes: Dict[str, object] = {}
    while True:
        event = reader.next_event("test attribute or mapping end")
        if event.kind is EventKind.MAPPING_END:
            return attributes
        if event.kind is not EventKind.SCALAR:
            raise StructuralMismatch("test attribute or mapping end", event.describe())

        decoder = TEST_ATTRIBUTES.get(event.text)
        if decoder is None:
            raise UnknownTestAttribute(event.text, reserved=event.text in RESERVED_TEST_ATTRIBUTES)
        attributes[event.text] = decoder(reader)


def decode_test(reader: EventReader) -> TestCase:
    """Decode one test case; its opening sequence event is already consumed."""
    input_text = reader.read_text()
    expected = reader.read_text()

    event = reader.next_event("sequence end or test attributes")
    if event.kind is EventKind.SEQUENCE_END:
        return TestCase(input=input_text, expected=expected)
    if event.kind is not EventKind.MAPPING_START:
        raise StructuralMismatch("sequence end or test attributes", event.describe())

    attributes = _decode_test_attributes(reader)
    reader.read_sequence_end()
    return TestCase(input=input_text, expected=expected, **attributes)


def decode_tests(reader: EventReader) -> Tuple[TestCase, ...]:
    reader.read_sequence_start()
    tests: List[TestCase] = []
    while True:
        event = reader.next_event("test case or sequence end")
        if event.kind is EventKind.SEQUENCE_END:
            return tuple(tests)
        if event.kind is not EventKind.SEQUENCE_START:
            raise StructuralMismatch("test case or sequence end", event.describe())
        tests.append(decode_test(reader))
