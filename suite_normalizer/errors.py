"""Errors raised while normalizing a test-suite document.

Every error is fatal: decoders never recover locally, the first one raised
propagates unchanged to the caller and nothing is emitted for the document.
"""

from __future__ import annotations

from typing import Optional


class NormalizeError(ValueError):
    """Base class for every decoding failure."""


class StructuralMismatch(NormalizeError):
    def __init__(self, expected: str, actual: str):
        self.expected = expected
        self.actual = actual
        super().__init__(f"Expected {expected}, got {actual}")


class UnexpectedEndOfInput(StructuralMismatch):
    def __init__(self, expected: str):
        super().__init__(expected, "end of input")


class UnexpectedEncoding(NormalizeError):
    def __init__(self, encoding: Optional[str]):
        self.encoding = encoding
        super().__init__(f"Encoding {encoding!r} not supported, expected 'utf-8'")


class MalformedDocument(NormalizeError):
    """The event source could not tokenize the document text."""


class UnknownField(NormalizeError):
    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Unknown field {name!r}")


class UnknownTestAttribute(NormalizeError):
    def __init__(self, name: str, reserved: bool = False):
        self.name = name
        self.reserved = reserved
        if reserved:
            msg = f"Test attribute {name!r} is reserved and cannot be converted yet"
        else:
            msg = f"Unknown test attribute {name!r}"
        super().__init__(msg)


class UnknownTableAttribute(NormalizeError):
    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Expected table attribute, got {name!r}")


class UnsupportedTableShape(NormalizeError):
    def __init__(self, actual: str):
        self.actual = actual
        super().__init__(
            f"Expected table file, file list, inline table or metadata mapping, got {actual}"
        )


class UnsupportedTestMode(NormalizeError):
    def __init__(self, value: str):
        self.value = value
        super().__init__(f"Testmode {value!r} not supported")


class UnsupportedXfailShape(NormalizeError):
    def __init__(self, actual: str):
        self.actual = actual
        super().__init__(f"Expected scalar or mapping xfail value, got {actual}")


class UnsupportedXfailKey(NormalizeError):
    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Expected 'forward' or 'backward', got {name!r}")


class InvalidGrade(NormalizeError):
    def __init__(self, value: str):
        self.value = value
        super().__init__(f"Grade {value!r} is not a number between 0 and 255")


class MissingTable(NormalizeError):
    def __init__(self):
        super().__init__("Test suite has no table declared before its tests")
