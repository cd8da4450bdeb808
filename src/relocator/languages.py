"""Dub/sub language coverage detection.

Both the container's own track metadata and the provider's release
information are consulted, since either may be missing for a given file.
An absent source simply contributes no matches.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from typing import Optional

from .models import MediaFile, TitleLanguage, TrackInfo
from .utils import normalize_token

LOGGER = logging.getLogger(__name__)


def parse_language(value: str | TitleLanguage) -> TitleLanguage:
    """Accept an enum value, English name, track code or folder label.

    Raises:
        ValueError: If the value names no known language.
    """
    if isinstance(value, TitleLanguage):
        return value
    token = normalize_token(str(value))
    for language in TitleLanguage:
        candidates = {language.value, normalize_token(language.folder_label)}
        candidates.update(normalize_token(code) for code in language.track_codes)
        if token in candidates:
            return language
    raise ValueError(f"Unknown language '{value}'")


@dataclass(frozen=True, slots=True)
class LanguageCoverage:
    has_dub: bool = False
    has_sub: bool = False

    @property
    def any(self) -> bool:
        return self.has_dub or self.has_sub


Classification = dict[TitleLanguage, LanguageCoverage]


def _tracks_match(tracks: Optional[Iterable[TrackInfo]], language: TitleLanguage) -> bool:
    if not tracks:
        return False
    codes = language.track_codes
    for track in tracks:
        if track is None or not track.language_code:
            continue
        if track.language_code.strip().lower() in codes:
            return True
    return False


def _provider_match(languages: Optional[Iterable[TitleLanguage]], language: TitleLanguage) -> bool:
    if not languages:
        return False
    return language in languages


def classify_languages(
    audio_tracks: Optional[Iterable[TrackInfo]],
    subtitle_tracks: Optional[Iterable[TrackInfo]],
    provider_audio_languages: Optional[Iterable[TitleLanguage]],
    provider_subtitle_languages: Optional[Iterable[TitleLanguage]],
    targets: Sequence[TitleLanguage],
) -> Classification:
    audio = list(audio_tracks or [])
    subtitles = list(subtitle_tracks or [])
    provider_audio = list(provider_audio_languages or [])
    provider_subtitles = list(provider_subtitle_languages or [])

    classification: Classification = {}
    for language in targets:
        classification[language] = LanguageCoverage(
            has_dub=_tracks_match(audio, language) or _provider_match(provider_audio, language),
            has_sub=_tracks_match(subtitles, language) or _provider_match(provider_subtitles, language),
        )
    return classification


def classify_media_file(media_file: MediaFile, targets: Sequence[TitleLanguage]) -> Classification:
    provider = media_file.provider
    if media_file.audio_tracks is None and media_file.subtitle_tracks is None and provider is None:
        LOGGER.debug("No track or provider language data for %s", media_file.filename)
    return classify_languages(
        media_file.audio_tracks,
        media_file.subtitle_tracks,
        provider.audio_languages if provider else None,
        provider.subtitle_languages if provider else None,
        targets,
    )
