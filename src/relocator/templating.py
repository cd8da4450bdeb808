from __future__ import annotations

import string
from typing import Any


class TemplateDict(dict):
    def __missing__(self, key: str) -> str:
        return "{" + key + "}"


def render_template(template: str, context: dict[str, Any]) -> str:
    enriched = TemplateDict(context)
    return template.format_map(enriched)


def template_fields(template: str) -> list[str]:
    """Return placeholder names used by ``template`` in order of appearance."""
    names: list[str] = []
    for _literal, field_name, _spec, _conversion in string.Formatter().parse(template):
        if field_name and field_name not in names:
            names.append(field_name)
    return names
