import pytest

from suite_normalizer import events as ev
from suite_normalizer import models
from suite_normalizer.errors import (
    MissingTable,
    StructuralMismatch,
    UnexpectedEndOfInput,
    UnknownField,
    UnsupportedTableShape,
    UnsupportedTestMode,
)
from suite_normalizer.models import SchemaRevision
from suite_normalizer.normalize import (
    SuiteBuilder,
    decode_document,
    normalize_document,
    normalize_to_yaml,
    normalize_yaml_bytes,
)

LEGACY = SchemaRevision.LEGACY


def test_single_suite_end_to_end():
    source = "table: mytable.ctb\nflags: {testmode: backward}\ntests:\n  - [ \"abc\", \"⠁⠃⠉\" ]\n"
    [suite] = normalize_document(source)
    assert suite.table == models.SingleFile(path="mytable.ctb")
    assert suite.mode is models.TestMode.BACKWARD
    assert suite.display_table is None
    [case] = suite.tests
    assert (case.input, case.expected) == ("abc", "⠁⠃⠉")
    assert "xfail" not in normalize_to_yaml(source)


@pytest.mark.parametrize(
    "table_yaml, expected",
    [
        ("table: en-us-g2.ctb\n", models.SingleFile(path="en-us-g2.ctb")),
        (
            "table: [unicode.dis, en-us-g2.ctb]\n",
            models.FileList(paths=("unicode.dis", "en-us-g2.ctb")),
        ),
        (
            "table: |\n  include latinLetterDef6Dots.uti\n  always foo 1\n",
            models.InlineDefinition(text="include latinLetterDef6Dots.uti\nalways foo 1\n"),
        ),
        (
            "table:\n  language: en\n  grade: 2\n  system: ueb\n",
            models.MetadataMap(entries={"language": "en", "grade": "2", "system": "ueb"}),
        ),
    ],
)
def test_table_variants(table_yaml, expected):
    [suite] = normalize_document(table_yaml + "tests:\n  - [a, b]\n")
    assert suite.table == expected


def test_unknown_top_level_field():
    with pytest.raises(UnknownField) as exc:
        normalize_document("table: a.ctb\nbogus: 1\ntests:\n  - [a, b]\n")
    assert exc.value.name == "bogus"


def test_unsupported_testmode():
    with pytest.raises(UnsupportedTestMode):
        normalize_document("table: a.ctb\nflags: {testmode: upsideDown}\ntests: []\n")


def test_trailing_list_in_test_case():
    with pytest.raises(StructuralMismatch):
        normalize_document('table: a.ctb\ntests:\n  - [ "a", "b", [1, 2, 3] ]\n')


def test_tests_before_table():
    with pytest.raises(MissingTable):
        normalize_document("tests:\n  - [a, b]\ntable: a.ctb\n")


def test_alias_is_not_a_table():
    with pytest.raises(UnsupportedTableShape):
        normalize_document("display: &d unicode.dis\ntable: *d\ntests:\n  - [a, b]\n")


def test_alias_is_not_a_field_value():
    with pytest.raises(StructuralMismatch):
        normalize_document("table: a.ctb\ndisplay: &d x.dis\ntests:\n  - [a, *d]\n")


def test_inline_table_with_trailing_spaces_is_tagged():
    text = normalize_to_yaml("table: |\n  include a.ctb   \n  sign a 1\ntests:\n  - [a, b]\n")
    assert "table: !inline" in text


def test_document_without_tests_has_no_suites():
    assert normalize_document("display: unicode.dis\ntable: a.ctb\n") == []


def test_each_tests_field_closes_a_suite():
    source = """\
display: unicode.dis
table: a.ctb
tests:
  - [a, b]
flags:
  testmode: bothDirections
table: |
  include b.ctb
tests:
  - [c, d]
  - [e, f, {xfail: {forward: on}}]
"""
    first, second = normalize_document(source)

    assert first.display_table == "unicode.dis"
    assert first.table == models.SingleFile(path="a.ctb")
    assert first.mode is models.TestMode.FORWARD
    assert [c.input for c in first.tests] == ["a"]

    assert second.display_table == "unicode.dis"
    assert second.table == models.InlineDefinition(text="include b.ctb\n")
    assert second.mode is models.TestMode.BOTH_DIRECTIONS
    assert [c.input for c in second.tests] == ["c", "e"]
    assert second.tests[1].xfail == models.Directional(forward=True, backward=False)


def test_top_level_must_be_a_mapping():
    with pytest.raises(StructuralMismatch) as exc:
        normalize_document("- table: a.ctb\n")
    assert exc.value.expected == "mapping start"


def test_field_names_must_be_scalars():
    with pytest.raises(StructuralMismatch):
        normalize_document("? [table]\n: a.ctb\n")


def test_only_one_document_per_stream():
    with pytest.raises(StructuralMismatch) as exc:
        normalize_document("table: a.ctb\n---\ntable: b.ctb\n")
    assert exc.value.expected == "stream end"


def test_empty_input():
    with pytest.raises(StructuralMismatch) as exc:
        normalize_document("")
    assert exc.value.expected == "document start"


def test_truncated_event_stream():
    events = [
        ev.stream_start(),
        ev.DOCUMENT_START,
        ev.MAPPING_START,
        ev.scalar("table"),
        ev.scalar("a.ctb"),
        ev.scalar("tests"),
        ev.SEQUENCE_START,
    ]
    with pytest.raises(UnexpectedEndOfInput):
        decode_document(events)


def test_error_discards_earlier_suites():
    source = "table: a.ctb\ntests:\n  - [a, b]\nbogus: 1\n"
    with pytest.raises(UnknownField):
        normalize_document(source)


# --- legacy revision ---

LEGACY_SOURCE = """\
display: unicode.dis
table:
  language: de
  grade: 2
  system: de-g2
  __assert-match: de-g2.ctb
flags: {testmode: hyphenate}
tests:
  - [Haus, Haus]
  - [Welt, Welt, {xfail: false}]
"""


def test_legacy_document():
    [suite] = normalize_document(LEGACY_SOURCE, LEGACY)
    assert suite.display_table == "unicode.dis"
    assert suite.table == models.MetadataMap(
        entries={
            "language": "de",
            "grade": "2",
            "system": "de-g2",
            "__assert-match": "de-g2.ctb",
        }
    )
    assert suite.mode is models.TestMode.HYPHENATE
    assert len(suite.tests) == 2


def test_legacy_document_allows_tests_first():
    source = "tests:\n  - [a, b]\ntable:\n  language: en\n"
    [suite] = normalize_document(source, LEGACY)
    assert suite.table.entries == {"language": "en"}
    assert len(suite.tests) == 1


def test_legacy_document_requires_a_table():
    with pytest.raises(MissingTable):
        normalize_document("tests:\n  - [a, b]\n", LEGACY)


def test_legacy_document_rejects_file_tables():
    with pytest.raises(StructuralMismatch):
        normalize_document("table: a.ctb\ntests: []\n", LEGACY)


def test_legacy_document_without_tests():
    [suite] = normalize_document("table:\n  language: en\n", LEGACY)
    assert suite.tests == ()


# --- builder ---

def test_builder_needs_a_table():
    with pytest.raises(MissingTable):
        SuiteBuilder().build()


def test_builder_builds_suite():
    builder = SuiteBuilder(table=models.SingleFile(path="a.ctb"), mode=models.TestMode.DISPLAY)
    suite = builder.build()
    assert suite.table == models.SingleFile(path="a.ctb")
    assert suite.mode is models.TestMode.DISPLAY
    assert suite.tests == ()


def test_response_envelope():
    data = normalize_yaml_bytes(LEGACY_SOURCE.encode("utf-8"), LEGACY)
    assert data["summary"] == {"suites": 1, "tests": 2, "schema_revision": "legacy"}
    assert len(data["sha256"]) == 64
    assert data["canonical"].startswith("- display_table: unicode.dis\n")
