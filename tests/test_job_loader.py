from __future__ import annotations

import pytest

from relocator.job_loader import build_request, load_request
from relocator.models import EpisodeType, SeriesType, TitleLanguage, TitleType, TrackInfo

JOB_YAML = """
file:
  filename: Example.Show.04.mkv
  path: /import/Example.Show.04.mkv
  video: {resolution: 720p, codec: HEVC}
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
"""


def test_load_request_from_yaml(tmp_path) -> None:
    path = tmp_path / "job.yaml"
    path.write_text(JOB_YAML, encoding="utf-8")

    request = load_request(path)

    assert request.file.filename == "Example.Show.04.mkv"
    assert request.file.video.resolution == "720p"
    assert request.file.provider.release_group == "Grp"
    assert request.file.audio_tracks is None
    assert request.series[0].titles[0].type is TitleType.MAIN
    assert request.series[0].episode_counts == {EpisodeType.EPISODE: 12}
    assert request.episodes[0].number == 4
    assert request.groups[0].name == "Grp"
    assert request.available_folders[0].drop_destination is True
    assert request.produce_filename is True
    assert request.produce_destination is True


class TestBuildRequest:
    def test_tracks_and_provider_languages(self) -> None:
        request = build_request(
            {
                "file": {
                    "filename": "ep.mkv",
                    "audio_tracks": ["ger", {"language": "jpn", "title": "Original"}],
                    "subtitle_tracks": [],
                    "provider": {"audio_languages": ["german"], "subtitle_languages": ["eng"]},
                },
            }
        )
        media_file = request.file
        assert media_file.path == "ep.mkv"
        assert media_file.audio_tracks == [TrackInfo("ger"), TrackInfo("jpn", "Original")]
        assert media_file.subtitle_tracks == []
        assert media_file.provider.audio_languages == [TitleLanguage.GERMAN]
        assert media_file.provider.subtitle_languages == [TitleLanguage.ENGLISH]
        assert request.series == []
        assert request.episodes == []

    def test_single_mappings_and_mode(self) -> None:
        request = build_request(
            {
                "file": {"filename": "film.mkv", "folder_id": "3", "content_hash": "abc"},
                "series": {"preferred_title": "Film", "series_type": "movie", "restricted": True},
                "episodes": {"number": 1, "cross_reference_hashes": ["abc"]},
                "groups": [{"name": "Grp"}],
                "mode": {"filename": False},
            }
        )
        assert request.file.folder_id == 3
        assert request.series[0].series_type is SeriesType.MOVIE
        assert request.series[0].restricted is True
        assert request.episodes[0].episode_type == "episode"
        assert request.episodes[0].cross_reference_hashes == ["abc"]
        assert request.groups[0].name == "Grp"
        assert request.produce_filename is False
        assert request.produce_destination is True

    def test_unknown_episode_type_is_passed_through(self) -> None:
        request = build_request({"file": {"filename": "ep.mkv"}, "episodes": [{"type": "bonus", "number": 1}]})
        assert request.episodes[0].episode_type == "bonus"

    @pytest.mark.parametrize(
        "data,match",
        [
            ({}, "'file' is required"),
            ({"file": {"path": "/x"}}, "file.filename"),
            ({"file": {"filename": "a.mkv", "provider": {"audio_languages": ["klingon"]}}}, "audio_languages"),
            ({"file": {"filename": "a.mkv"}, "series": [{"titles": [{"language": "klingon"}]}]}, "language"),
            ({"file": {"filename": "a.mkv"}, "series": [{"episode_counts": {"bonus": 2}}]}, "episode_counts"),
            ({"file": {"filename": "a.mkv"}, "series": [{"series_type": "anthology"}]}, "series_type"),
            ({"file": {"filename": "a.mkv"}, "episodes": [{"type": "episode"}]}, "number"),
            ({"file": {"filename": "a.mkv"}, "folders": [{"name": "Drop"}]}, "location"),
            ({"file": {"filename": "a.mkv"}, "folders": "Drop"}, "folders"),
        ],
    )
    def test_rejects_malformed_jobs(self, data, match: str) -> None:
        with pytest.raises(ValueError, match=match):
            build_request(data)
