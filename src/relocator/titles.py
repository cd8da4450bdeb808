"""Ordered-preference title resolution for series and episodes."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from typing import Optional

from .models import EpisodeInfo, SeriesInfo, Title, TitleLanguage, TitleType


def resolve_title(
    titles: Iterable[Title],
    title_type: Optional[TitleType],
    preferred_languages: Sequence[TitleLanguage],
    fallback: str,
) -> str:
    """Return the first title matching the language preference order.

    Languages are tried in order; within a language the first title of the
    requested type wins. A ``title_type`` of ``None`` accepts any type.
    When nothing matches, ``fallback`` is returned unchanged, which may be
    an empty string that callers must treat as "no usable title".
    """
    materialized = list(titles)
    for language in preferred_languages:
        for title in materialized:
            if title.language != language:
                continue
            if title_type is not None and title.type != title_type:
                continue
            if title.text:
                return title.text
    return fallback or ""


def resolve_series_title(
    series: SeriesInfo,
    title_type: Optional[TitleType],
    languages: Sequence[TitleLanguage],
) -> str:
    return resolve_title(series.titles, title_type, languages, series.preferred_title)


def resolve_series_title_with_first_fallback(
    series: SeriesInfo,
    title_type: Optional[TitleType],
    languages: Sequence[TitleLanguage],
) -> str:
    """Like ``resolve_series_title`` but falls back to the first listed title.

    Very few series lack a main romaji title, but those that do still need a
    folder name.
    """
    first = series.titles[0].text if series.titles else series.preferred_title
    return resolve_title(series.titles, title_type, languages, first)


def resolve_episode_title(episode: EpisodeInfo, languages: Sequence[TitleLanguage]) -> str:
    first = episode.titles[0].text if episode.titles else ""
    return resolve_title(episode.titles, None, languages, first)
