from __future__ import annotations

from collections.abc import Mapping
from typing import Optional, Union

from .errors import IncompleteMetadata, InvalidEpisodeType
from .models import EpisodeType

DEFAULT_PAD_WIDTH = 2

EPISODE_PREFIXES: dict[EpisodeType, str] = {
    EpisodeType.EPISODE: "",
    EpisodeType.CREDITS: "C",
    EpisodeType.SPECIAL: "S",
    EpisodeType.TRAILER: "T",
    EpisodeType.PARODY: "P",
    EpisodeType.OTHER: "O",
}


def coerce_episode_type(value: Optional[Union[EpisodeType, str]]) -> EpisodeType:
    """Map a raw episode type onto ``EpisodeType``.

    Raises:
        InvalidEpisodeType: For ``None`` or anything outside the known set.
    """
    if isinstance(value, EpisodeType):
        return value
    if isinstance(value, str):
        try:
            return EpisodeType(value.strip().lower())
        except ValueError:
            pass
    raise InvalidEpisodeType(f"Unknown episode type: {value!r}")


def pad_width(total: Optional[int]) -> int:
    if not total or total <= 0:
        return DEFAULT_PAD_WIDTH
    return len(str(total))


def format_episode_number(
    index: int,
    episode_type: Optional[Union[EpisodeType, str]],
    totals_by_type: Mapping[EpisodeType, int],
) -> str:
    """Build the episode label used in filenames, e.g. ``"04"`` or ``"S05"``.

    The number is zero-padded to the digit count of the total for its type
    and prefixed with the type letter (regular episodes have no prefix).
    """
    resolved = coerce_episode_type(episode_type)
    if index is None or index < 1:
        raise IncompleteMetadata(f"Episode number must be 1 or greater, got {index!r}")

    width = pad_width(totals_by_type.get(resolved))
    return f"{EPISODE_PREFIXES[resolved]}{index:0{width}d}"
