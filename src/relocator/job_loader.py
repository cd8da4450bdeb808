"""Build ``RelocationRequest`` values from YAML job descriptions.

A job file describes one media file together with the metadata a host
would normally supply::

    file:
      filename: Example.Show.04.mkv
      path: /mnt/import/Example.Show.04.mkv
      video: {resolution: 720p, codec: HEVC}
      audio_tracks: [ger, jpn]
      provider: {release_group: Grp}
    series:
      - titles:
          - {language: romaji, type: main, text: Example Show}
        episode_counts: {episode: 12}
    episodes:
      - {type: episode, number: 4}
    groups: [Grp]
    folders:
      - {name: Drop, location: /mnt/array/Anime/, id: 1, drop_destination: true}
    mode: {filename: true, destination: true}
"""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path
from typing import Any, Dict, List, Optional

from .episodes import coerce_episode_type
from .errors import InvalidEpisodeType
from .languages import parse_language
from .models import (
    DestinationFolder,
    EpisodeInfo,
    EpisodeType,
    GroupInfo,
    MediaFile,
    ProviderFileInfo,
    RelocationRequest,
    SeriesInfo,
    SeriesType,
    Title,
    TitleLanguage,
    TitleType,
    TrackInfo,
    VideoInfo,
)
from .utils import load_yaml_file


def _as_list(value: Any, *, field_name: str) -> List[Any]:
    if value is None:
        return []
    if isinstance(value, list):
        return value
    if isinstance(value, Mapping):
        return [value]
    raise ValueError(f"'{field_name}' must be a list")


def _require_mapping(value: Any, *, field_name: str) -> Mapping[str, Any]:
    if not isinstance(value, Mapping):
        raise ValueError(f"'{field_name}' must be a mapping")
    return value


def _optional_text(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _build_title(data: Any, *, field_name: str) -> Title:
    data = _require_mapping(data, field_name=field_name)
    try:
        language = parse_language(data.get("language", TitleLanguage.UNKNOWN.value))
    except ValueError as exc:
        raise ValueError(f"'{field_name}.language': {exc}") from exc
    try:
        title_type = TitleType(str(data.get("type", TitleType.MAIN.value)).strip().lower())
    except ValueError as exc:
        raise ValueError(f"'{field_name}.type' must be one of {[item.value for item in TitleType]}") from exc
    return Title(language=language, type=title_type, text=str(data.get("text") or ""))


def _build_titles(value: Any, *, field_name: str) -> List[Title]:
    return [
        _build_title(item, field_name=f"{field_name}[{index}]")
        for index, item in enumerate(_as_list(value, field_name=field_name))
    ]


def _build_tracks(value: Any, *, field_name: str) -> Optional[List[TrackInfo]]:
    if value is None:
        return None
    tracks: List[TrackInfo] = []
    for item in _as_list(value, field_name=field_name):
        if isinstance(item, Mapping):
            tracks.append(
                TrackInfo(
                    language_code=_optional_text(item.get("language")),
                    title=_optional_text(item.get("title")),
                )
            )
        else:
            tracks.append(TrackInfo(language_code=_optional_text(item)))
    return tracks


def _build_provider_languages(value: Any, *, field_name: str) -> Optional[List[TitleLanguage]]:
    if value is None:
        return None
    languages: List[TitleLanguage] = []
    for index, item in enumerate(_as_list(value, field_name=field_name)):
        try:
            languages.append(parse_language(item))
        except ValueError as exc:
            raise ValueError(f"'{field_name}[{index}]': {exc}") from exc
    return languages


def _build_provider(value: Any) -> Optional[ProviderFileInfo]:
    if value is None:
        return None
    data = _require_mapping(value, field_name="file.provider")
    return ProviderFileInfo(
        release_group=_optional_text(data.get("release_group")),
        original_filename=_optional_text(data.get("original_filename")),
        audio_languages=_build_provider_languages(data.get("audio_languages"), field_name="file.provider.audio_languages"),
        subtitle_languages=_build_provider_languages(
            data.get("subtitle_languages"), field_name="file.provider.subtitle_languages"
        ),
    )


def _build_video(value: Any) -> Optional[VideoInfo]:
    if value is None:
        return None
    data = _require_mapping(value, field_name="file.video")
    return VideoInfo(resolution=_optional_text(data.get("resolution")), codec=_optional_text(data.get("codec")))


def _build_media_file(value: Any) -> MediaFile:
    data = _require_mapping(value, field_name="file")
    filename = _optional_text(data.get("filename"))
    if not filename:
        raise ValueError("'file.filename' is required")
    folder_id = data.get("folder_id")
    return MediaFile(
        filename=filename,
        path=str(data.get("path") or filename),
        relative_path=str(data.get("relative_path") or filename),
        folder_id=int(folder_id) if folder_id is not None else None,
        video=_build_video(data.get("video")),
        audio_tracks=_build_tracks(data.get("audio_tracks"), field_name="file.audio_tracks"),
        subtitle_tracks=_build_tracks(data.get("subtitle_tracks"), field_name="file.subtitle_tracks"),
        provider=_build_provider(data.get("provider")),
        content_hash=_optional_text(data.get("content_hash")),
    )


def _build_episode_counts(value: Any, *, field_name: str) -> Dict[EpisodeType, int]:
    if not value:
        return {}
    data = _require_mapping(value, field_name=field_name)
    counts: Dict[EpisodeType, int] = {}
    for key, count in data.items():
        try:
            counts[coerce_episode_type(str(key))] = int(count)
        except InvalidEpisodeType as exc:
            raise ValueError(f"'{field_name}': {exc.message}") from exc
    return counts


def _build_series(data: Any, *, field_name: str) -> SeriesInfo:
    data = _require_mapping(data, field_name=field_name)
    try:
        series_type = SeriesType(str(data.get("series_type", SeriesType.TV_SERIES.value)).strip().lower())
    except ValueError as exc:
        raise ValueError(f"'{field_name}.series_type' must be one of {[item.value for item in SeriesType]}") from exc
    return SeriesInfo(
        titles=_build_titles(data.get("titles"), field_name=f"{field_name}.titles"),
        preferred_title=str(data.get("preferred_title") or ""),
        restricted=bool(data.get("restricted", False)),
        series_type=series_type,
        episode_counts=_build_episode_counts(data.get("episode_counts"), field_name=f"{field_name}.episode_counts"),
    )


def _build_episode(data: Any, *, field_name: str) -> EpisodeInfo:
    data = _require_mapping(data, field_name=field_name)
    number = data.get("number")
    if number is None:
        raise ValueError(f"'{field_name}.number' is required")
    raw_type = data.get("type", EpisodeType.EPISODE.value)
    return EpisodeInfo(
        # Unknown types are passed through and reported by the engine.
        episode_type=str(raw_type) if raw_type is not None else None,
        number=int(number),
        titles=_build_titles(data.get("titles"), field_name=f"{field_name}.titles"),
        cross_reference_hashes=[
            str(item)
            for item in _as_list(data.get("cross_reference_hashes"), field_name=f"{field_name}.cross_reference_hashes")
        ],
    )


def _build_group(data: Any) -> GroupInfo:
    if isinstance(data, Mapping):
        return GroupInfo(name=str(data.get("name") or ""))
    return GroupInfo(name=str(data))


def _build_folder(data: Any, *, field_name: str) -> DestinationFolder:
    data = _require_mapping(data, field_name=field_name)
    location = _optional_text(data.get("location"))
    if not location:
        raise ValueError(f"'{field_name}.location' is required")
    folder_id = data.get("id")
    return DestinationFolder(
        name=str(data.get("name") or location),
        location=location,
        id=int(folder_id) if folder_id is not None else None,
        drop_destination=bool(data.get("drop_destination", False)),
        drop_source=bool(data.get("drop_source", False)),
    )


def build_request(data: Mapping[str, Any]) -> RelocationRequest:
    """Build a request from a job mapping.

    Raises:
        ValueError: If the mapping is malformed.
    """
    if not isinstance(data, Mapping):
        raise ValueError("A relocation job must be provided as a mapping")
    if "file" not in data:
        raise ValueError("'file' is required")

    mode = data.get("mode") or {}
    mode = _require_mapping(mode, field_name="mode")

    return RelocationRequest(
        file=_build_media_file(data["file"]),
        series=[
            _build_series(item, field_name=f"series[{index}]")
            for index, item in enumerate(_as_list(data.get("series"), field_name="series"))
        ],
        episodes=[
            _build_episode(item, field_name=f"episodes[{index}]")
            for index, item in enumerate(_as_list(data.get("episodes"), field_name="episodes"))
        ],
        groups=[_build_group(item) for item in _as_list(data.get("groups"), field_name="groups")],
        available_folders=[
            _build_folder(item, field_name=f"folders[{index}]")
            for index, item in enumerate(_as_list(data.get("folders"), field_name="folders"))
        ],
        produce_filename=bool(mode.get("filename", True)),
        produce_destination=bool(mode.get("destination", True)),
    )


def load_request(path: Path) -> RelocationRequest:
    return build_request(load_yaml_file(path))
