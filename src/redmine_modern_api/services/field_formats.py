"""
redmine_modern_api.services.field_formats

Client-facing type descriptions for custom field formats.

The host stores a free-form `field_format` string. Known formats map onto a
closed set of `FieldKind`s; anything else is carried through as
`FieldKind.other` with the raw format name.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Any


class FieldKind(enum.StrEnum):
    select = "select"
    boolean = "boolean"
    date = "date"
    integer = "integer"
    float = "float"
    textarea = "textarea"
    text_input = "text_input"
    url = "url"
    user_select = "user_select"
    version_select = "version_select"
    other = "other"


_KINDS_BY_FORMAT: dict[str, FieldKind] = {
    "list": FieldKind.select,
    "bool": FieldKind.boolean,
    "date": FieldKind.date,
    "int": FieldKind.integer,
    "float": FieldKind.float,
    "text": FieldKind.textarea,
    "string": FieldKind.text_input,
    "link": FieldKind.url,
    "user": FieldKind.user_select,
    "version": FieldKind.version_select,
}

BOOLEAN_OPTIONS = ("true", "false")
DATE_FORMAT = "YYYY-MM-DD"


@dataclass(frozen=True, slots=True)
class FieldType:
    kind: FieldKind
    # Raw host format; only rendered for FieldKind.other.
    name: str = ""
    options: tuple[str, ...] = ()

    @classmethod
    def for_format(cls, field_format: str, possible_values: list[str] | None = None) -> FieldType:
        kind = _KINDS_BY_FORMAT.get(field_format, FieldKind.other)
        if kind is FieldKind.select:
            return cls(kind=kind, options=tuple(possible_values or ()))
        if kind is FieldKind.boolean:
            return cls(kind=kind, options=BOOLEAN_OPTIONS)
        return cls(kind=kind, name=field_format)

    def as_dict(self) -> dict[str, Any]:
        if self.kind is FieldKind.other:
            return {"type": self.name}
        info: dict[str, Any] = {"type": self.kind.value}
        if self.kind in (FieldKind.select, FieldKind.boolean):
            info["options"] = list(self.options)
        elif self.kind is FieldKind.date:
            info["format"] = DATE_FORMAT
        return info
