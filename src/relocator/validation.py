from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Sequence

from jsonschema import Draft7Validator

from .config import NOT_FOUND_POLICIES
from .destination_builder import MANUAL_RULE, parse_rule_token
from .languages import parse_language
from .logging_utils import render_section_block
from .models import TitleType
from .strategies import STRATEGIES
from .templating import template_fields
from .utils import contains_invalid_path_characters


@dataclass(slots=True)
class ValidationIssue:
    """Represents a single validation problem."""

    severity: str
    path: str
    message: str
    code: str
    fix_suggestion: Optional[str] = None


@dataclass(slots=True)
class ValidationReport:
    """Aggregates validation warnings and errors."""

    errors: List[ValidationIssue] = field(default_factory=list)
    warnings: List[ValidationIssue] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return not self.errors


_STRING_OR_LIST: Dict[str, Any] = {
    "oneOf": [
        {"type": "array", "items": {"type": "string"}},
        {"type": "string"},
    ]
}

SETTINGS_SCHEMA: Dict[str, Any] = {
    "type": "object",
    "properties": {
        "strategy": {"type": "string"},
        "apply_prefix": {"type": "boolean"},
        "prefix": {"type": "string"},
        "primary_language": {"type": "string"},
        "secondary_languages": _STRING_OR_LIST,
        "language_priority": _STRING_OR_LIST,
        "title_languages": _STRING_OR_LIST,
        "title_type": {"type": "string", "enum": [item.value for item in TitleType]},
        "destination_root": {"type": "string", "minLength": 1},
        "library_segments": {
            "type": "object",
            "properties": {
                "unrestricted": {"type": "string", "minLength": 1},
                "restricted": {"type": "string", "minLength": 1},
            },
            "additionalProperties": False,
        },
        "rule_segments": {
            "type": "object",
            "additionalProperties": {"type": "string", "minLength": 1},
        },
        "require_drop_target": {"type": "boolean"},
        "destination_not_found": {"type": "string", "enum": list(NOT_FOUND_POLICIES)},
        "backup_root_path": {"type": ["string", "null"]},
        "filename_template": {"type": ["string", "null"]},
        "film_template": {"type": ["string", "null"]},
    },
    "additionalProperties": True,
}

KNOWN_TEMPLATE_FIELDS = frozenset(
    {"title", "release_group", "episode_label", "episode_title", "resolution", "codec", "extension"}
)

FixSuggestionGenerator = Callable[[str, str, str], Optional[str]]


def _suggest_schema_fix(path: str, message: str, code: str) -> Optional[str]:
    if "is not of type" in message:
        if "'boolean'" in message:
            return "Use true or false for this field"
        if "'object'" in message:
            return "Change this field to a mapping"
        if "'string'" in message or "'array'" in message:
            return "Use a string or a list of strings for this field"
    if "is not one of" in message:
        return "Check the allowed values for this field"
    return None


def _suggest_strategy_fix(path: str, message: str, code: str) -> Optional[str]:
    return f"Use one of: {', '.join(sorted(STRATEGIES))}"


def _suggest_language_fix(path: str, message: str, code: str) -> Optional[str]:
    return "Use a language name such as 'german', 'english' or 'romaji', or a track code such as 'ger'"


def _suggest_rule_fix(path: str, message: str, code: str) -> Optional[str]:
    return "Use '<language>-dub', '<language>-sub', 'other' or 'manual'"


def _suggest_template_fix(path: str, message: str, code: str) -> Optional[str]:
    return f"Available placeholders: {', '.join(sorted(KNOWN_TEMPLATE_FIELDS))}"


FIX_SUGGESTION_REGISTRY: Dict[str, FixSuggestionGenerator] = {
    "schema": _suggest_schema_fix,
    "strategy": _suggest_strategy_fix,
    "language": _suggest_language_fix,
    "language-rule": _suggest_rule_fix,
    "template": _suggest_template_fix,
}


def _format_jsonschema_path(path: Sequence[Any]) -> str:
    if not path:
        return "<root>"
    tokens: List[str] = []
    for part in path:
        if isinstance(part, int):
            if tokens:
                tokens[-1] = f"{tokens[-1]}[{part}]"
            else:
                tokens.append(f"[{part}]")
        else:
            tokens.append(str(part))
    return ".".join(tokens)


def _issue(severity: str, path: str, message: str, code: str) -> ValidationIssue:
    generator = FIX_SUGGESTION_REGISTRY.get(code)
    suggestion = generator(path, message, code) if generator else None
    return ValidationIssue(severity=severity, path=path, message=message, code=code, fix_suggestion=suggestion)


def _as_list(value: Any) -> List[str]:
    if isinstance(value, str):
        return [part.strip() for part in value.split(",") if part.strip()]
    if isinstance(value, list):
        return [str(item).strip() for item in value if isinstance(item, str) and item.strip()]
    return []


def validate_settings_data(data: Dict[str, Any]) -> ValidationReport:
    """Validate a raw relocation settings mapping.

    A mapping with a ``relocation`` key is validated from that section, the
    same way ``load_settings`` reads it.

    Args:
        data: Settings as loaded from YAML

    Returns:
        ValidationReport containing any errors or warnings found
    """
    report = ValidationReport()
    if isinstance(data, dict) and isinstance(data.get("relocation"), dict):
        data = data["relocation"]

    validator = Draft7Validator(SETTINGS_SCHEMA)
    for error in sorted(validator.iter_errors(data), key=lambda exc: _format_jsonschema_path(exc.absolute_path)):
        report.errors.append(_issue("error", _format_jsonschema_path(error.absolute_path), error.message, "schema"))

    if isinstance(data, dict):
        _validate_semantics(data, report)
    return report


def _validate_semantics(data: Dict[str, Any], report: ValidationReport) -> None:
    strategy = data.get("strategy")
    if isinstance(strategy, str) and strategy.strip().lower() not in STRATEGIES:
        report.errors.append(_issue("error", "strategy", f"Unknown relocation strategy '{strategy}'", "strategy"))

    primary = data.get("primary_language")
    if isinstance(primary, str) and primary.strip():
        try:
            parse_language(primary)
        except ValueError as exc:
            report.errors.append(_issue("error", "primary_language", str(exc), "language"))

    for key in ("secondary_languages", "title_languages"):
        for index, token in enumerate(_as_list(data.get(key))):
            try:
                parse_language(token)
            except ValueError as exc:
                report.errors.append(_issue("error", f"{key}[{index}]", str(exc), "language"))

    priority = _as_list(data.get("language_priority"))
    for index, token in enumerate(priority):
        try:
            parse_rule_token(token)
        except ValueError as exc:
            report.errors.append(_issue("error", f"language_priority[{index}]", str(exc), "language-rule"))
    lowered = [token.lower() for token in priority]
    if MANUAL_RULE in lowered and lowered.index(MANUAL_RULE) != len(lowered) - 1:
        report.warnings.append(
            _issue(
                "warning",
                "language_priority",
                "Rules after 'manual' are never reached",
                "rule-order",
            )
        )

    for key in ("filename_template", "film_template"):
        template = data.get(key)
        if not isinstance(template, str):
            continue
        try:
            fields = template_fields(template)
        except ValueError as exc:
            report.errors.append(_issue("error", key, f"Malformed template: {exc}", "template"))
            continue
        unknown = [name for name in fields if name not in KNOWN_TEMPLATE_FIELDS]
        if unknown:
            report.errors.append(
                _issue("error", key, f"Unknown placeholder(s): {', '.join(unknown)}", "template")
            )
        if "extension" not in fields:
            report.warnings.append(
                _issue("warning", key, "Template has no {extension} placeholder", "template")
            )

    if data.get("apply_prefix") is True and not data.get("prefix"):
        report.warnings.append(
            _issue("warning", "prefix", "'apply_prefix' is enabled but no prefix is set", "schema")
        )
    prefix = data.get("prefix")
    if isinstance(prefix, str) and contains_invalid_path_characters(prefix):
        report.warnings.append(
            _issue("warning", "prefix", "Prefix contains characters that will be replaced with look-alikes", "schema")
        )


def format_report(report: ValidationReport) -> str:
    """Render a report as a plain text block for logs."""

    def lines(issues: List[ValidationIssue]) -> List[str]:
        rendered = []
        for issue in issues:
            text = f"{issue.path}: {issue.message}"
            if issue.fix_suggestion:
                text = f"{text} ({issue.fix_suggestion})"
            rendered.append(text)
        return rendered

    return render_section_block(
        "Settings validation",
        [("Errors", lines(report.errors)), ("Warnings", lines(report.warnings))],
    )


__all__ = [
    "ValidationIssue",
    "ValidationReport",
    "SETTINGS_SCHEMA",
    "FIX_SUGGESTION_REGISTRY",
    "validate_settings_data",
    "format_report",
]
