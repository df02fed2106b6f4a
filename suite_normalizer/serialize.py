"""
Canonical YAML rendering of normalized test suites.

Fields holding their absent value (no display table, non-failing xfail,
empty positions or modes, unset cursor or length) are left out so the output
stays minimal and diffs cleanly against hand-written fixtures.
"""

from __future__ import annotations

from typing import Any, Dict, List, Sequence

import yaml

from .models import (
    Directional,
    FileList,
    InlineDefinition,
    MetadataMap,
    Reason,
    SingleFile,
    TableReference,
    TestCase,
    TestSuite,
    Xfail,
)
from .rules import INLINE_TABLE_TAG


class _LiteralText(str):
    pass


def _represent_literal(dumper: yaml.SafeDumper, data: _LiteralText) -> yaml.ScalarNode:
    text = str(data)
    if dumper.analyze_scalar(text).allow_block:
        return dumper.represent_scalar("tag:yaml.org,2002:str", text, style="|")
    # No literal block for this text: the tag keeps it an inline table
    return dumper.represent_scalar(INLINE_TABLE_TAG, text, style='"')


class CanonicalDumper(yaml.SafeDumper):
    pass


CanonicalDumper.add_representer(_LiteralText, _represent_literal)


def table_to_data(table: TableReference) -> Any:
    # Same surface shapes the current format is decoded from
    if isinstance(table, SingleFile):
        return table.path
    if isinstance(table, FileList):
        return list(table.paths)
    if isinstance(table, InlineDefinition):
        return _LiteralText(table.text)
    if isinstance(table, MetadataMap):
        return dict(table.entries)
    raise TypeError(f"Unsupported table reference: {type(table).__name__}")


def xfail_to_data(xfail: Xfail) -> Any:
    if isinstance(xfail, Reason):
        return xfail.text
    if isinstance(xfail, Directional):
        return {"forward": xfail.forward, "backward": xfail.backward}
    return True


def case_to_data(test: TestCase) -> Dict[str, Any]:
    data: Dict[str, Any] = {"input": test.input, "expected": test.expected}
    if test.xfail.failing:
        data["xfail"] = xfail_to_data(test.xfail)
    if test.input_pos:
        data["input_pos"] = list(test.input_pos)
    if test.output_pos:
        data["output_pos"] = list(test.output_pos)
    if test.cursor_pos is not None:
        data["cursor_pos"] = test.cursor_pos
    if test.mode:
        data["mode"] = sorted(flag.value for flag in test.mode)
    if test.max_output_length is not None:
        data["max_output_length"] = test.max_output_length
    return data


def suite_to_data(suite: TestSuite) -> Dict[str, Any]:
    data: Dict[str, Any] = {}
    if suite.display_table is not None:
        data["display_table"] = suite.display_table
    data["table"] = table_to_data(suite.table)
    data["mode"] = suite.mode.value
    data["tests"] = [case_to_data(test) for test in suite.tests]
    return data


def dump_suites(suites: Sequence[TestSuite]) -> str:
    data: List[Dict[str, Any]] = [suite_to_data(suite) for suite in suites]
    return yaml.dump(
        data,
        Dumper=CanonicalDumper,
        allow_unicode=True,
        default_flow_style=False,
        sort_keys=False,
    )
