"""Filename composition from resolved metadata.

Templates are rendered with ``render_template``; every placeholder a template
uses is required, so a filename is either fully labelled or not produced at
all.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any

from .errors import IncompleteMetadata
from .templating import render_template, template_fields
from .utils import replace_invalid_path_characters

DEFAULT_EPISODE_TEMPLATE = "[{release_group}] {title} - {episode_label} [{resolution} {codec}]{extension}"
DEFAULT_FILM_TEMPLATE = "[{release_group}] {title} [{resolution} {codec}]{extension}"

# Human readable names used in error messages.
FIELD_LABELS = {
    "release_group": "release group",
    "title": "title",
    "episode_label": "episode number",
    "episode_title": "episode title",
    "resolution": "resolution",
    "codec": "codec",
    "extension": "extension",
}


@dataclass(frozen=True)
class FilenameParts:
    title: str | None = None
    release_group: str | None = None
    episode_label: str | None = None
    episode_title: str | None = None
    resolution: str | None = None
    codec: str | None = None
    extension: str = ""

    @property
    def is_film(self) -> bool:
        return self.episode_label is None

    def as_template_dict(self) -> dict[str, Any]:
        return {key: ("" if value is None else value) for key, value in asdict(self).items()}


def missing_fields(template: str, parts: FilenameParts) -> list[str]:
    context = parts.as_template_dict()
    missing: list[str] = []
    for name in template_fields(template):
        if name == "extension":
            continue
        value = context.get(name)
        if value is None or not str(value).strip():
            missing.append(name)
    return missing


def compose_filename(
    parts: FilenameParts,
    prefix: str | None = None,
    *,
    template: str | None = None,
    film_template: str | None = None,
) -> str:
    """Render the final filename for ``parts``.

    Args:
        parts: Resolved filename components
        prefix: Optional text placed before the rendered name
        template: Template for episodic content
        film_template: Template used when ``parts`` carries no episode label

    Returns:
        A filename free of path separators and other invalid characters

    Raises:
        IncompleteMetadata: If any component the template uses is empty
    """
    if parts.is_film:
        chosen = film_template or DEFAULT_FILM_TEMPLATE
    else:
        chosen = template or DEFAULT_EPISODE_TEMPLATE

    missing = missing_fields(chosen, parts)
    if missing:
        labels = ", ".join(FIELD_LABELS.get(name, name) for name in missing)
        raise IncompleteMetadata(f"Cannot compose filename without: {labels}")

    rendered = render_template(chosen, parts.as_template_dict())
    if prefix:
        rendered = prefix + rendered
    return replace_invalid_path_characters(rendered)
