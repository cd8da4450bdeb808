from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from .languages import parse_language
from .models import TitleLanguage, TitleType
from .utils import load_yaml_file

DEFAULT_STRATEGY = "release_group"
DEFAULT_DESTINATION_ROOT = "/mnt/array/"
NOT_FOUND_POLICIES = ("defer", "fail")


@dataclass(frozen=True)
class LibrarySegments:
    unrestricted: str = "Anime"
    restricted: str = "Hentai"

    def for_restriction(self, restricted: bool) -> str:
        return self.restricted if restricted else self.unrestricted


@dataclass(frozen=True)
class RelocationSettings:
    """Per-invocation options; read-only and safe to share between threads."""

    strategy: str = DEFAULT_STRATEGY
    apply_prefix: bool = False
    prefix: str = ""
    primary_language: TitleLanguage = TitleLanguage.GERMAN
    secondary_languages: tuple[TitleLanguage, ...] = (TitleLanguage.ENGLISH,)
    language_priority: tuple[str, ...] = ()
    title_languages: tuple[TitleLanguage, ...] | None = None
    title_type: TitleType | None = None
    destination_root: str = DEFAULT_DESTINATION_ROOT
    library_segments: LibrarySegments = field(default_factory=LibrarySegments)
    rule_segments: Mapping[str, str] = field(default_factory=dict)
    require_drop_target: bool = False
    destination_not_found: str = "defer"
    backup_root_path: str | None = None
    filename_template: str | None = None
    film_template: str | None = None

    @property
    def active_prefix(self) -> str | None:
        if self.apply_prefix and self.prefix:
            return self.prefix
        return None

    @property
    def effective_language_priority(self) -> tuple[str, ...]:
        if self.language_priority:
            return self.language_priority
        primary = self.primary_language.value
        return (f"{primary}-dub", f"{primary}-sub", "other", "manual")

    @property
    def defers_missing_destination(self) -> bool:
        return self.destination_not_found == "defer"


def _ensure_string_list(value: Any, *, field_name: str) -> list[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [part.strip() for part in value.split(",") if part.strip()]
    if isinstance(value, (list, tuple)):
        return [str(item).strip() for item in value if str(item).strip()]
    raise ValueError(f"'{field_name}' must be a list of strings or a comma separated string")


def _build_language(value: Any, *, field_name: str) -> TitleLanguage:
    try:
        return parse_language(value)
    except ValueError as exc:
        raise ValueError(f"'{field_name}': {exc}") from exc


def _build_languages(value: Any, *, field_name: str) -> tuple[TitleLanguage, ...]:
    return tuple(
        _build_language(item, field_name=f"{field_name}[{index}]")
        for index, item in enumerate(_ensure_string_list(value, field_name=field_name))
    )


def _build_title_type(value: Any) -> TitleType | None:
    if value is None:
        return None
    try:
        return TitleType(str(value).strip().lower())
    except ValueError as exc:
        raise ValueError(f"'title_type' must be one of {[item.value for item in TitleType]}") from exc


def _build_library_segments(data: Any) -> LibrarySegments:
    if not data:
        return LibrarySegments()
    if not isinstance(data, Mapping):
        raise ValueError("'library_segments' must be provided as a mapping when specified")
    defaults = LibrarySegments()
    return LibrarySegments(
        unrestricted=str(data.get("unrestricted", defaults.unrestricted)),
        restricted=str(data.get("restricted", defaults.restricted)),
    )


def _build_rule_segments(data: Any) -> dict[str, str]:
    if not data:
        return {}
    if not isinstance(data, Mapping):
        raise ValueError("'rule_segments' must be provided as a mapping of rule -> folder name")
    return {str(key).strip().lower(): str(value) for key, value in data.items()}


def _optional_string(data: Mapping[str, Any], key: str) -> str | None:
    value = data.get(key)
    if value is None:
        return None
    text = str(value)
    return text if text.strip() else None


def build_settings(data: Mapping[str, Any] | None) -> RelocationSettings:
    """Build settings from a raw mapping; unknown keys are ignored."""
    data = data or {}
    if not isinstance(data, Mapping):
        raise ValueError("Relocation settings must be provided as a mapping")

    defaults = RelocationSettings()

    not_found = str(data.get("destination_not_found", defaults.destination_not_found)).strip().lower()
    if not_found not in NOT_FOUND_POLICIES:
        raise ValueError(f"'destination_not_found' must be one of {list(NOT_FOUND_POLICIES)}, got '{not_found}'")

    secondary = defaults.secondary_languages
    if "secondary_languages" in data:
        secondary = _build_languages(data["secondary_languages"], field_name="secondary_languages")

    title_languages = None
    if data.get("title_languages"):
        title_languages = _build_languages(data["title_languages"], field_name="title_languages")

    primary = defaults.primary_language
    if data.get("primary_language"):
        primary = _build_language(data["primary_language"], field_name="primary_language")

    priority = tuple(
        token.lower()
        for token in _ensure_string_list(data.get("language_priority"), field_name="language_priority")
    )

    return RelocationSettings(
        strategy=str(data.get("strategy", defaults.strategy)).strip().lower(),
        apply_prefix=bool(data.get("apply_prefix", defaults.apply_prefix)),
        prefix=str(data.get("prefix") or ""),
        primary_language=primary,
        secondary_languages=secondary,
        language_priority=priority,
        title_languages=title_languages,
        title_type=_build_title_type(data.get("title_type")),
        destination_root=str(data.get("destination_root") or defaults.destination_root),
        library_segments=_build_library_segments(data.get("library_segments")),
        rule_segments=_build_rule_segments(data.get("rule_segments")),
        require_drop_target=bool(data.get("require_drop_target", defaults.require_drop_target)),
        destination_not_found=not_found,
        backup_root_path=_optional_string(data, "backup_root_path"),
        filename_template=_optional_string(data, "filename_template"),
        film_template=_optional_string(data, "film_template"),
    )


def load_settings(path: Path) -> RelocationSettings:
    data = load_yaml_file(path)
    # Settings may live at the top level or under a ``relocation`` key.
    section = data.get("relocation", data)
    return build_settings(section)
