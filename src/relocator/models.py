from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Tuple, Union

from .errors import ErrorKind


class TitleLanguage(str, Enum):
    ROMAJI = "romaji"
    ENGLISH = "english"
    GERMAN = "german"
    JAPANESE = "japanese"
    FRENCH = "french"
    SPANISH = "spanish"
    ITALIAN = "italian"
    UNKNOWN = "unknown"

    @property
    def track_codes(self) -> Tuple[str, ...]:
        """Language codes that media containers use for this language."""
        return _TRACK_CODES.get(self, ())

    @property
    def folder_label(self) -> str:
        return _FOLDER_LABELS.get(self, self.value.capitalize())


_TRACK_CODES: Dict[TitleLanguage, Tuple[str, ...]] = {
    TitleLanguage.ROMAJI: ("x-jat",),
    TitleLanguage.ENGLISH: ("eng", "en"),
    TitleLanguage.GERMAN: ("ger", "deu", "de"),
    TitleLanguage.JAPANESE: ("jpn", "ja"),
    TitleLanguage.FRENCH: ("fre", "fra", "fr"),
    TitleLanguage.SPANISH: ("spa", "es"),
    TitleLanguage.ITALIAN: ("ita", "it"),
}

_FOLDER_LABELS: Dict[TitleLanguage, str] = {
    TitleLanguage.ROMAJI: "Romaji",
    TitleLanguage.ENGLISH: "Eng",
    TitleLanguage.GERMAN: "Ger",
    TitleLanguage.JAPANESE: "Jpn",
    TitleLanguage.FRENCH: "Fre",
    TitleLanguage.SPANISH: "Spa",
    TitleLanguage.ITALIAN: "Ita",
}


class TitleType(str, Enum):
    MAIN = "main"
    OFFICIAL = "official"
    SHORT = "short"
    SYNONYM = "synonym"


class EpisodeType(str, Enum):
    EPISODE = "episode"
    CREDITS = "credits"
    SPECIAL = "special"
    TRAILER = "trailer"
    PARODY = "parody"
    OTHER = "other"


class SeriesType(str, Enum):
    TV_SERIES = "tv_series"
    OVA = "ova"
    WEB = "web"
    MOVIE = "movie"
    OTHER = "other"


@dataclass(frozen=True, slots=True)
class Title:
    language: TitleLanguage
    type: TitleType
    text: str


@dataclass(frozen=True, slots=True)
class TrackInfo:
    language_code: Optional[str] = None
    title: Optional[str] = None


@dataclass(frozen=True, slots=True)
class VideoInfo:
    resolution: Optional[str] = None
    codec: Optional[str] = None


@dataclass(frozen=True, slots=True)
class ProviderFileInfo:
    """What the metadata provider knows about a released file."""

    release_group: Optional[str] = None
    original_filename: Optional[str] = None
    audio_languages: Optional[List[TitleLanguage]] = None
    subtitle_languages: Optional[List[TitleLanguage]] = None


@dataclass(frozen=True, slots=True)
class MediaFile:
    filename: str
    path: str
    relative_path: str = ""
    folder_id: Optional[int] = None
    video: Optional[VideoInfo] = None
    audio_tracks: Optional[List[TrackInfo]] = None
    subtitle_tracks: Optional[List[TrackInfo]] = None
    provider: Optional[ProviderFileInfo] = None
    content_hash: Optional[str] = None

    @property
    def extension(self) -> str:
        dot = self.filename.rfind(".")
        if dot <= 0:
            return ""
        return self.filename[dot:]


@dataclass(frozen=True, slots=True)
class SeriesInfo:
    titles: List[Title] = field(default_factory=list)
    preferred_title: str = ""
    restricted: bool = False
    series_type: SeriesType = SeriesType.TV_SERIES
    episode_counts: Dict[EpisodeType, int] = field(default_factory=dict)

    @property
    def is_standalone_film(self) -> bool:
        return self.series_type is SeriesType.MOVIE


@dataclass(frozen=True, slots=True)
class EpisodeInfo:
    episode_type: Optional[Union[EpisodeType, str]]
    number: int
    titles: List[Title] = field(default_factory=list)
    cross_reference_hashes: List[str] = field(default_factory=list)


@dataclass(frozen=True, slots=True)
class GroupInfo:
    name: str


@dataclass(frozen=True, slots=True)
class DestinationFolder:
    name: str
    location: str
    id: Optional[int] = None
    drop_destination: bool = False
    drop_source: bool = False


@dataclass(frozen=True, slots=True)
class RelocationRequest:
    file: MediaFile
    series: List[SeriesInfo] = field(default_factory=list)
    episodes: List[EpisodeInfo] = field(default_factory=list)
    groups: List[GroupInfo] = field(default_factory=list)
    available_folders: List[DestinationFolder] = field(default_factory=list)
    produce_filename: bool = True
    produce_destination: bool = True


@dataclass(frozen=True, slots=True)
class RelocationSuccess:
    filename: Optional[str] = None
    destination: Optional[DestinationFolder] = None
    subfolder: Optional[str] = None
    backup_path: Optional[str] = None
    deferred: Tuple[str, ...] = ()

    @property
    def ok(self) -> bool:
        return True

    @property
    def is_noop(self) -> bool:
        """True when nothing was decided and the host should try the next rule."""
        return self.filename is None and self.destination is None and self.backup_path is None


@dataclass(frozen=True, slots=True)
class RelocationFailure:
    kind: ErrorKind
    message: str
    cause: Optional[BaseException] = None

    @property
    def ok(self) -> bool:
        return False

    @property
    def is_noop(self) -> bool:
        return False


RelocationOutcome = Union[RelocationSuccess, RelocationFailure]
