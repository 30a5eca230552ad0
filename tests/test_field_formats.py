"""
tests.test_field_formats

Custom field format to client type mapping.
"""

from __future__ import annotations

import pytest

from redmine_modern_api.services.field_formats import FieldKind, FieldType


@pytest.mark.parametrize(
    ("field_format", "expected"),
    [
        ("bool", {"type": "boolean", "options": ["true", "false"]}),
        ("date", {"type": "date", "format": "YYYY-MM-DD"}),
        ("int", {"type": "integer"}),
        ("float", {"type": "float"}),
        ("text", {"type": "textarea"}),
        ("string", {"type": "text_input"}),
        ("link", {"type": "url"}),
        ("user", {"type": "user_select"}),
        ("version", {"type": "version_select"}),
        ("attachment", {"type": "attachment"}),
    ],
)
def test_field_type_for_format(field_format: str, expected: dict) -> None:
    assert FieldType.for_format(field_format).as_dict() == expected


def test_list_format_carries_possible_values() -> None:
    field_type = FieldType.for_format("list", ["a", "b"])
    assert field_type.kind is FieldKind.select
    assert field_type.as_dict() == {"type": "select", "options": ["a", "b"]}

    assert FieldType.for_format("list", None).as_dict() == {"type": "select", "options": []}


def test_unknown_format_is_other() -> None:
    field_type = FieldType.for_format("enumeration")
    assert field_type.kind is FieldKind.other
    assert field_type.name == "enumeration"
