"""
Document decoding: structural events -> normalized test suites.

Responsibilities:
- stream/document framing and the top-level field loop
- accumulating display/table/flags state across fields
- emitting suites according to the selected schema revision
- wrapping the canonical output for the HTTP surface
"""

from __future__ import annotations

import hashlib
import logging
from dataclasses import dataclass, replace
from typing import Any, Callable, Dict, Iterable, List, Optional, Tuple, Union

from .errors import MissingTable, StructuralMismatch, UnknownField
from .events import Event, EventKind, iter_events
from .fields import decode_flags, decode_legacy_table, decode_table, decode_tests
from .models import SchemaRevision, TableReference, TestCase, TestMode, TestSuite
from .readers import EventReader
from .serialize import dump_suites

logger = logging.getLogger(__name__)


def _sha256_hex(data: bytes) -> str:
    return hashlib.sha256(data).hexdigest()


@dataclass(frozen=True)
class SuiteBuilder:
    """Suite fields seen so far in the document; replaced, never mutated."""

    display_table: Optional[str] = None
    table: Optional[TableReference] = None
    mode: TestMode = TestMode.FORWARD
    tests: Tuple[TestCase, ...] = ()

    def build(self) -> TestSuite:
        if self.table is None:
            raise MissingTable()
        return TestSuite(
            display_table=self.display_table,
            table=self.table,
            mode=self.mode,
            tests=self.tests,
        )


FieldStep = Callable[[SuiteBuilder, EventReader, SchemaRevision], SuiteBuilder]


def _read_display(builder: SuiteBuilder, reader: EventReader, revision: SchemaRevision) -> SuiteBuilder:
    return replace(builder, display_table=reader.read_text())


def _read_table(builder: SuiteBuilder, reader: EventReader, revision: SchemaRevision) -> SuiteBuilder:
    if revision is SchemaRevision.LEGACY:
        return replace(builder, table=decode_legacy_table(reader))
    return replace(builder, table=decode_table(reader))


def _read_flags(builder: SuiteBuilder, reader: EventReader, revision: SchemaRevision) -> SuiteBuilder:
    return replace(builder, mode=decode_flags(reader))


def _read_tests(builder: SuiteBuilder, reader: EventReader, revision: SchemaRevision) -> SuiteBuilder:
    # legacy documents may declare the table after the tests
    if revision is SchemaRevision.CURRENT and builder.table is None:
        raise MissingTable()
    return replace(builder, tests=decode_tests(reader))


DOCUMENT_FIELDS: Dict[str, FieldStep] = {
    "display": _read_display,
    "table": _read_table,
    "flags": _read_flags,
    "tests": _read_tests,
}


def decode_document(
    events: Iterable[Event], revision: SchemaRevision = SchemaRevision.CURRENT
) -> List[TestSuite]:
    """
    Decode one document into its test suites.

    With the current format every ``tests`` field closes one suite built from
    the most recent display/table/flags values. The legacy format yields
    exactly one suite per document once the top-level mapping has closed.
    """
    reader = EventReader(events)
    reader.read_stream_start()
    reader.read_document_start()
    reader.read_mapping_start()

    suites: List[TestSuite] = []
    builder = SuiteBuilder()
    while True:
        event = reader.next_event("field name or mapping end")
        if event.kind is EventKind.MAPPING_END:
            break
        if event.kind is not EventKind.SCALAR:
            raise StructuralMismatch("field name or mapping end", event.describe())

        step = DOCUMENT_FIELDS.get(event.text)
        if step is None:
            raise UnknownField(event.text)
        builder = step(builder, reader, revision)

        if event.text == "tests" and revision is SchemaRevision.CURRENT:
            suites.append(builder.build())
            logger.debug("Suite %d closed with %d tests", len(suites), len(builder.tests))

    reader.read_document_end()
    reader.read_stream_end()

    if revision is SchemaRevision.LEGACY:
        suites.append(builder.build())
    return suites


def normalize_document(
    source: Union[bytes, str], revision: SchemaRevision = SchemaRevision.CURRENT
) -> List[TestSuite]:
    return decode_document(iter_events(source), revision)


def normalize_to_yaml(
    source: Union[bytes, str], revision: SchemaRevision = SchemaRevision.CURRENT
) -> str:
    """Normalize a document and render it in canonical form."""
    suites = normalize_document(source, revision)
    logger.info("Normalized %d suite(s) using the %s format", len(suites), revision.value)
    return dump_suites(suites)


def normalize_yaml_bytes(
    raw: bytes, revision: SchemaRevision = SchemaRevision.CURRENT
) -> Dict[str, Any]:
    """
    Returns a dict matching the API's response envelope.
    """
    suites = normalize_document(raw, revision)
    canonical = dump_suites(suites)
    return {
        "canonical": canonical,
        "sha256": _sha256_hex(canonical.encode("utf-8")),
        "summary": {
            "suites": len(suites),
            "tests": sum(len(suite.tests) for suite in suites),
            "schema_revision": revision.value,
        },
    }
