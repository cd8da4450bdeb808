from __future__ import annotations

import functools
import os
import re
from pathlib import Path
from typing import Any, Dict, Optional

import yaml


NORMALIZE_PATTERN = re.compile(r"[^a-z0-9]+")

# Boolean true/false string values
_TRUE_VALUES = frozenset({"1", "true", "yes", "on"})
_FALSE_VALUES = frozenset({"0", "false", "no", "off"})

# Look-alike replacements for characters that are invalid in a path segment
# on at least one supported file system.
INVALID_PATH_REPLACEMENTS: Dict[str, str] = {
    "*": "\u2605",  # ★
    "|": "\u00a6",  # ¦
    "\\": "\u29f9",  # ⧹
    "/": "\u2044",  # ⁄
    ":": "\u0589",  # ։
    '"': "\u2033",  # ″
    ">": "\u203a",  # ›
    "<": "\u2039",  # ‹
    "?": "\uff1f",  # ？
}

_CONTROL_CHARS = re.compile(r"[\x00-\x1f\x7f]")
_TRAILING_DOTS = re.compile(r"\.+$")


@functools.lru_cache(maxsize=2048)
def normalize_token(value: str) -> str:
    """Return a normalized token suitable for loose comparisons."""
    lowered = value.lower()
    stripped = NORMALIZE_PATTERN.sub("", lowered)
    return stripped


def replace_invalid_path_characters(value: str) -> str:
    """Swap characters that cannot appear in a file or folder name for look-alikes.

    Path separators and reserved characters become visually similar Unicode
    characters, an ellipsis collapses into a single glyph, control characters
    are dropped and trailing dots become one-dot leaders so that the segment
    never ends in a dot.
    """
    if not value:
        return value

    cleaned = _CONTROL_CHARS.sub("", value)
    cleaned = cleaned.replace("...", "\u2026")
    cleaned = "".join(INVALID_PATH_REPLACEMENTS.get(ch, ch) for ch in cleaned)
    cleaned = _TRAILING_DOTS.sub(lambda match: "\u2024" * len(match.group(0)), cleaned)
    return cleaned


def contains_invalid_path_characters(value: str) -> bool:
    return any(ch in INVALID_PATH_REPLACEMENTS for ch in value) or bool(_CONTROL_CHARS.search(value))


def normalize_location(location: str) -> str:
    """Normalize a folder location for equality checks.

    Separator style is unified and trailing separators are stripped, so
    ``Z:\\Anime\\GerDub\\`` and ``Z:/Anime/GerDub`` compare equal.
    """
    unified = location.strip().replace("\\", "/")
    unified = re.sub(r"/{2,}", "/", unified)
    if len(unified) > 1:
        unified = unified.rstrip("/")
    return unified


def join_location(*segments: str, separator: str = "/") -> str:
    parts = [segment.strip("/\\") for segment in segments if segment and segment.strip("/\\")]
    prefix = separator if segments and segments[0].startswith(("/", "\\")) else ""
    return prefix + separator.join(parts) + separator


def expand_env(value: Any) -> Any:
    if isinstance(value, str):
        return os.path.expandvars(value)
    if isinstance(value, list):
        return [expand_env(item) for item in value]
    if isinstance(value, dict):
        return {key: expand_env(val) for key, val in value.items()}
    return value


def load_yaml_file(path: Path) -> Dict[str, Any]:
    with path.open("r", encoding="utf-8") as handle:
        data = yaml.safe_load(handle) or {}
    if not isinstance(data, dict):
        raise ValueError(f"{path} must contain a mapping at the top level")
    return expand_env(data)


def parse_env_bool(value: Optional[str]) -> Optional[bool]:
    """Parse a boolean from an environment variable string.

    Returns None if value is None or not a recognized boolean string.
    """
    if value is None:
        return None
    lowered = value.strip().lower()
    if lowered in _TRUE_VALUES:
        return True
    if lowered in _FALSE_VALUES:
        return False
    return None


def env_bool(name: str) -> Optional[bool]:
    """Get a boolean from an environment variable.

    Returns None if not set or not a recognized boolean string.
    """
    return parse_env_bool(os.getenv(name))
