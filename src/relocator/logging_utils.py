from __future__ import annotations

from collections.abc import Iterable, Mapping, MutableSequence, Sequence
from textwrap import wrap
from typing import Union

DEFAULT_WRAP_WIDTH = 100
DEFAULT_LABEL_WIDTH = 18
DEFAULT_INDENT = "    "
EMPTY_VALUE = "-"

FieldMapping = Union[Mapping[str, object], Sequence[tuple[str, object]]]


def _coerce_items(fields: FieldMapping) -> list[tuple[str, object]]:
    if isinstance(fields, Mapping):
        return list(fields.items())
    return list(fields)


def _stringify(value: object) -> str:
    if value is None:
        return EMPTY_VALUE
    if isinstance(value, str):
        return value.strip() or EMPTY_VALUE
    if isinstance(value, (list, tuple, set)):
        return ", ".join(_stringify(item) for item in value) or EMPTY_VALUE
    return str(value)


def _wrap_text(text: str, width: int) -> list[str]:
    lines: list[str] = []
    for raw_line in text.splitlines() or [""]:
        lines.extend(wrap(raw_line, width=width) or [""])
    return lines


class LogBlockBuilder:
    """Accumulates a titled, aligned block of lines for multi-line log records."""

    def __init__(
        self,
        title: str,
        *,
        wrap_width: int = DEFAULT_WRAP_WIDTH,
        label_width: int = DEFAULT_LABEL_WIDTH,
        indent: str = DEFAULT_INDENT,
    ) -> None:
        self.wrap_width = wrap_width
        self.label_width = label_width
        self.indent = indent
        self.lines: MutableSequence[str] = ["", title, "-" * len(title)]

    def add_fields(self, fields: FieldMapping | None) -> None:
        items = _coerce_items(fields or ())
        if not items:
            return

        label_width = max(min(max(len(str(key)) for key, _ in items), self.label_width), 8)
        value_width = max(self.wrap_width - len(self.indent) - label_width - 4, 32)

        for key, value in items:
            wrapped = _wrap_text(_stringify(value), value_width)
            self.lines.append(f"{self.indent}{str(key):<{label_width}}: {wrapped[0]}")
            for continuation in wrapped[1:]:
                self.lines.append(f"{self.indent}{'':<{label_width}}  {continuation}")

    def add_section(self, heading: str, items: Iterable[str]) -> None:
        """Append a bulleted list headed by its item count."""
        materialized = [str(item) for item in items if item]
        self.lines.append("")
        self.lines.append(f"{heading} ({len(materialized)})")
        bullet_width = max(self.wrap_width - len(self.indent) - 2, 24)
        for item in materialized:
            wrapped = _wrap_text(item, bullet_width)
            self.lines.append(f"{self.indent}- {wrapped[0]}")
            self.lines.extend(f"{self.indent}  {continuation}" for continuation in wrapped[1:])

    def render(self) -> str:
        return "\n".join(self.lines).rstrip()


def render_fields_block(title: str, fields: FieldMapping) -> str:
    builder = LogBlockBuilder(title)
    builder.add_fields(fields)
    return builder.render()


def render_section_block(title: str, sections: Sequence[tuple[str, Sequence[str]]]) -> str:
    builder = LogBlockBuilder(title)
    for heading, items in sections:
        builder.add_section(heading, items)
    return builder.render()
