from __future__ import annotations

from typing import Callable

import pytest

from relocator.models import (
    DestinationFolder,
    EpisodeInfo,
    EpisodeType,
    GroupInfo,
    MediaFile,
    ProviderFileInfo,
    RelocationRequest,
    SeriesInfo,
    Title,
    TitleLanguage,
    TitleType,
    VideoInfo,
)

DROP_FOLDER = DestinationFolder(name="Drop", location="/mnt/array/Anime/", id=1, drop_destination=True)


@pytest.fixture
def make_request() -> Callable[..., RelocationRequest]:
    """Factory for a fully linked request that individual tests tweak."""

    def factory(
        *,
        filename: str = "Example.Show.04.mkv",
        media_file: MediaFile | None = None,
        series: list[SeriesInfo] | None = None,
        episodes: list[EpisodeInfo] | None = None,
        groups: list[GroupInfo] | None = None,
        folders: list[DestinationFolder] | None = None,
        produce_filename: bool = True,
        produce_destination: bool = True,
    ) -> RelocationRequest:
        if media_file is None:
            media_file = MediaFile(
                filename=filename,
                path=f"/import/{filename}",
                relative_path=filename,
                video=VideoInfo(resolution="720p", codec="HEVC"),
                provider=ProviderFileInfo(release_group="Grp"),
            )
        if series is None:
            series = [
                SeriesInfo(
                    titles=[Title(TitleLanguage.ROMAJI, TitleType.MAIN, "Example Show")],
                    preferred_title="Example Show",
                    episode_counts={EpisodeType.EPISODE: 12, EpisodeType.SPECIAL: 5},
                )
            ]
        if episodes is None:
            episodes = [EpisodeInfo(episode_type=EpisodeType.EPISODE, number=4)]
        return RelocationRequest(
            file=media_file,
            series=series,
            episodes=episodes,
            groups=[GroupInfo("Grp")] if groups is None else groups,
            available_folders=[DROP_FOLDER] if folders is None else folders,
            produce_filename=produce_filename,
            produce_destination=produce_destination,
        )

    return factory
