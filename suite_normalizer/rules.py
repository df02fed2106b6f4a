"""
Deterministic normalization rules.

This file exists to make the accepted legacy spellings explicit and enforceable.
"""

ACCEPTED_ENCODING = "utf-8"

FALSE_SPELLINGS = frozenset({"off", "false"})
TRUE_SPELLINGS = frozenset({"on", "true"})

# Fixed keys of the legacy table mapping
LEGACY_TABLE_KEYS = ("language", "grade", "system", "__assert-match")
GRADE_MAX = 255

FLAGS_KEY = "testmode"
XFAIL_DIRECTIONS = ("forward", "backward")

# Per-test attributes that exist in the source format but are not decoded yet
RESERVED_TEST_ATTRIBUTES = (
    "inputPos",
    "outputPos",
    "cursorPos",
    "mode",
    "maxOutputLength",
    "typeform",
    "realInputLength",
)

YAML_SUFFIXES = (".yaml", ".yml")

# Marks inline table bodies that cannot be written as a literal block
INLINE_TABLE_TAG = "!inline"
