"""Destination folder selection from language coverage and content flags.

This module turns the configured language priority into an ordered chain of
named rules, builds the library path for the first rule a file satisfies and
looks that path up among the folders the host made available. The chain
always ends in a manual-review rule so that every file gets a decision.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING

from .languages import Classification, parse_language
from .models import DestinationFolder, TitleLanguage
from .utils import join_location, normalize_location

if TYPE_CHECKING:
    from .config import RelocationSettings

LOGGER = logging.getLogger(__name__)

MANUAL_RULE = "manual"
OTHER_RULE = "other"
DEFAULT_SEGMENTS = {
    OTHER_RULE: "Other",
    MANUAL_RULE: "_manual",
}
DUPLICATE_FOLDER_NAME = "Duplicate Files"


@dataclass(frozen=True)
class DestinationRule:
    name: str
    segment: str
    predicate: Callable[[Classification], bool]

    def matches(self, classification: Classification) -> bool:
        return self.predicate(classification)


def parse_rule_token(token: str) -> tuple[str, TitleLanguage | None]:
    """Split a priority token into ``(kind, language)``.

    ``"german-dub"`` becomes ``("dub", GERMAN)``; ``"other"`` and
    ``"manual"`` carry no language.

    Raises:
        ValueError: For tokens that are neither keyword nor ``<language>-dub|sub``.
    """
    normalized = token.strip().lower()
    if normalized in (OTHER_RULE, MANUAL_RULE):
        return normalized, None
    language_part, separator, kind = normalized.rpartition("-")
    if not separator or kind not in ("dub", "sub") or not language_part:
        raise ValueError(f"Unknown destination rule '{token}'")
    return kind, parse_language(language_part)


def _coverage_rule(language: TitleLanguage, kind: str) -> Callable[[Classification], bool]:
    def predicate(classification: Classification) -> bool:
        coverage = classification.get(language)
        if coverage is None:
            return False
        return coverage.has_dub if kind == "dub" else coverage.has_sub

    return predicate


def _any_language_rule(languages: Sequence[TitleLanguage]) -> Callable[[Classification], bool]:
    def predicate(classification: Classification) -> bool:
        return any(
            classification[language].any for language in languages if language in classification
        )

    return predicate


def _always(_classification: Classification) -> bool:
    return True


def build_language_rules(settings: RelocationSettings) -> list[DestinationRule]:
    rules: list[DestinationRule] = []
    for token in settings.effective_language_priority:
        kind, language = parse_rule_token(token)
        name = token.strip().lower()
        override = settings.rule_segments.get(name)
        if kind == MANUAL_RULE:
            rules.append(DestinationRule(name, override or DEFAULT_SEGMENTS[MANUAL_RULE], _always))
            # Anything after the catch-all could never match.
            break
        if kind == OTHER_RULE:
            predicate = _any_language_rule(settings.secondary_languages)
            rules.append(DestinationRule(name, override or DEFAULT_SEGMENTS[OTHER_RULE], predicate))
            continue
        segment = override or f"{language.folder_label}{kind.capitalize()}"
        rules.append(DestinationRule(name, segment, _coverage_rule(language, kind)))

    if not rules or rules[-1].name != MANUAL_RULE:
        segment = settings.rule_segments.get(MANUAL_RULE) or DEFAULT_SEGMENTS[MANUAL_RULE]
        rules.append(DestinationRule(MANUAL_RULE, segment, _always))
    return rules


def classification_targets(settings: RelocationSettings) -> list[TitleLanguage]:
    """Every language the rule chain may ask about, primary first."""
    targets: list[TitleLanguage] = [settings.primary_language]
    for language in settings.secondary_languages:
        if language not in targets:
            targets.append(language)
    for token in settings.effective_language_priority:
        _kind, language = parse_rule_token(token)
        if language is not None and language not in targets:
            targets.append(language)
    return targets


def select_rule(classification: Classification, rules: Sequence[DestinationRule]) -> DestinationRule:
    for rule in rules:
        if rule.matches(classification):
            return rule
    raise ValueError("Destination rule chain has no catch-all rule")


def build_destination_location(
    root: str,
    restricted: bool,
    rule: DestinationRule,
    settings: RelocationSettings,
) -> str:
    tier = settings.library_segments.for_restriction(restricted)
    return join_location(root, tier, rule.segment)


def find_folder_by_location(
    location: str,
    candidates: Iterable[DestinationFolder],
    *,
    require_drop_target: bool = False,
) -> DestinationFolder | None:
    wanted = normalize_location(location)
    for folder in candidates:
        if require_drop_target and not folder.drop_destination:
            continue
        if normalize_location(folder.location) == wanted:
            return folder
    return None


def select_destination(
    classification: Classification,
    is_restricted: bool,
    candidates: Sequence[DestinationFolder],
    rules: Sequence[DestinationRule],
    settings: RelocationSettings,
    *,
    require_drop_target: bool | None = None,
) -> DestinationFolder | None:
    """Pick the folder for the first satisfied rule, or ``None`` if absent.

    Args:
        classification: Dub/sub coverage per language
        is_restricted: Whether the series is age restricted
        candidates: Folders supplied by the host for this invocation
        rules: Ordered rule chain ending in a catch-all
        settings: Relocation settings providing the root and tier names
        require_drop_target: Only consider drop destinations; defaults to
            the settings value

    Returns:
        The matching folder, or ``None`` when no candidate has the location
    """
    rule = select_rule(classification, rules)
    location = build_destination_location(settings.destination_root, is_restricted, rule, settings)
    if require_drop_target is None:
        require_drop_target = settings.require_drop_target

    folder = find_folder_by_location(location, candidates, require_drop_target=require_drop_target)
    if folder is None:
        LOGGER.debug("Rule '%s' built %s but no available folder matches", rule.name, location)
    else:
        LOGGER.debug("Rule '%s' selected folder %s (%s)", rule.name, folder.name, folder.location)
    return folder


def first_drop_destination(candidates: Iterable[DestinationFolder]) -> DestinationFolder | None:
    for folder in candidates:
        if folder.drop_destination:
            return folder
    return None


def find_duplicate_folder(candidates: Iterable[DestinationFolder]) -> DestinationFolder | None:
    for folder in candidates:
        if folder.name == DUPLICATE_FOLDER_NAME or "Duplicate" in folder.location:
            return folder
    return None


def find_folder_by_id(candidates: Iterable[DestinationFolder], folder_id: int | None) -> DestinationFolder | None:
    if folder_id is None:
        return None
    for folder in candidates:
        if folder.id == folder_id:
            return folder
    return None
