from __future__ import annotations

import logging

import pytest

from relocator.config import RelocationSettings
from relocator.errors import ErrorKind
from relocator.models import (
    EpisodeInfo,
    EpisodeType,
    MediaFile,
    ProviderFileInfo,
    RelocationFailure,
    RelocationSuccess,
    SeriesInfo,
    Title,
    TitleLanguage,
    TitleType,
    VideoInfo,
)
from relocator.orchestrator import Relocator, relocate
from relocator.strategies import RelocationStrategy


class TestEndToEnd:
    """Full decisions with the default release group strategy."""

    def test_episode_is_renamed_and_moved(self, make_request) -> None:
        outcome = relocate(make_request(), RelocationSettings())

        assert isinstance(outcome, RelocationSuccess)
        assert outcome.filename == "[Grp] Example Show - 04 [720p HEVC].mkv"
        assert outcome.destination.name == "Drop"
        assert outcome.subfolder == "Grp/Example Show"
        assert outcome.deferred == ()
        assert outcome.is_noop is False

    def test_special_label_is_padded_to_special_total(self, make_request) -> None:
        request = make_request(episodes=[EpisodeInfo(episode_type=EpisodeType.SPECIAL, number=1)])
        outcome = relocate(request, RelocationSettings())
        assert outcome.filename == "[Grp] Example Show - S1 [720p HEVC].mkv"

    def test_series_title_falls_back_to_preferred_title(self, make_request) -> None:
        series = [
            SeriesInfo(
                titles=[Title(TitleLanguage.ENGLISH, TitleType.OFFICIAL, "Only English")],
                preferred_title="Example Show",
                episode_counts={EpisodeType.EPISODE: 12},
            )
        ]
        outcome = relocate(make_request(series=series))
        assert outcome.filename == "[Grp] Example Show - 04 [720p HEVC].mkv"

    def test_settings_default_when_omitted(self, make_request) -> None:
        assert relocate(make_request()).filename == "[Grp] Example Show - 04 [720p HEVC].mkv"

    def test_prefix_applies_only_when_enabled(self, make_request) -> None:
        disabled = relocate(make_request(), RelocationSettings(prefix="[New] "))
        enabled = relocate(make_request(), RelocationSettings(apply_prefix=True, prefix="[New] "))
        assert disabled.filename.startswith("[Grp]")
        assert enabled.filename.startswith("[New] [Grp]")

    def test_is_deterministic(self, make_request) -> None:
        request = make_request()
        assert relocate(request) == relocate(request)


class TestModes:
    def test_filename_only(self, make_request) -> None:
        outcome = relocate(make_request(produce_destination=False))
        assert outcome.filename == "[Grp] Example Show - 04 [720p HEVC].mkv"
        assert outcome.destination is None
        assert outcome.subfolder is None

    def test_destination_only(self, make_request) -> None:
        outcome = relocate(make_request(produce_filename=False))
        assert outcome.filename is None
        assert outcome.destination.name == "Drop"

    def test_nothing_requested_is_a_noop(self, make_request) -> None:
        outcome = relocate(make_request(produce_filename=False, produce_destination=False))
        assert outcome == RelocationSuccess()
        assert outcome.is_noop is True

    def test_unsupported_mode_is_a_noop(self, make_request) -> None:
        request = make_request(produce_filename=False)
        outcome = relocate(request, RelocationSettings(strategy="original_name"))
        assert outcome.ok is True
        assert outcome.is_noop is True


class TestFailures:
    def _assert_failure(self, outcome, kind: ErrorKind) -> None:
        assert isinstance(outcome, RelocationFailure)
        assert outcome.ok is False
        assert outcome.kind is kind
        assert outcome.message

    def test_missing_series(self, make_request) -> None:
        self._assert_failure(relocate(make_request(series=[])), ErrorKind.MISSING_ASSOCIATION)

    def test_missing_episode(self, make_request) -> None:
        self._assert_failure(relocate(make_request(episodes=[])), ErrorKind.MISSING_ASSOCIATION)

    def test_missing_group_for_grouped_destination(self, make_request) -> None:
        self._assert_failure(relocate(make_request(groups=[])), ErrorKind.MISSING_ASSOCIATION)

    def test_no_usable_title(self, make_request) -> None:
        series = [SeriesInfo(titles=[Title(TitleLanguage.ENGLISH, TitleType.OFFICIAL, "Only English")])]
        self._assert_failure(relocate(make_request(series=series)), ErrorKind.NO_USABLE_TITLE)

    def test_invalid_episode_type(self, make_request) -> None:
        request = make_request(episodes=[EpisodeInfo(episode_type="bonus", number=1)])
        self._assert_failure(relocate(request), ErrorKind.INVALID_EPISODE_TYPE)

    def test_missing_release_group(self, make_request) -> None:
        media_file = MediaFile(
            filename="ep.mkv",
            path="/import/ep.mkv",
            video=VideoInfo(resolution="720p", codec="HEVC"),
            provider=ProviderFileInfo(),
        )
        outcome = relocate(make_request(media_file=media_file))
        self._assert_failure(outcome, ErrorKind.INCOMPLETE_METADATA)
        assert "release group" in outcome.message

    def test_unknown_strategy_is_unexpected(self, make_request) -> None:
        outcome = relocate(make_request(), RelocationSettings(strategy="nope"))
        self._assert_failure(outcome, ErrorKind.UNEXPECTED)
        assert isinstance(outcome.cause, ValueError)

    def test_unexpected_errors_are_contained(self, make_request) -> None:
        def explode(_context) -> str:
            raise RuntimeError("boom")

        strategy = RelocationStrategy(
            name="exploding",
            description="Always fails",
            title_type=None,
            title_languages=(),
            resolve_series_title=lambda _context: "Title",
            build_filename=explode,
        )
        outcome = relocate(make_request(), strategy=strategy)
        self._assert_failure(outcome, ErrorKind.UNEXPECTED)
        assert isinstance(outcome.cause, RuntimeError)

    def test_empty_filename_is_incomplete_metadata(self, make_request) -> None:
        strategy = RelocationStrategy(
            name="blank",
            description="Produces an empty filename",
            title_type=None,
            title_languages=(),
            resolve_series_title=lambda _context: "Title",
            build_filename=lambda _context: "",
        )
        outcome = relocate(make_request(), strategy=strategy)
        self._assert_failure(outcome, ErrorKind.INCOMPLETE_METADATA)


class TestMissingDestination:
    def test_defer_policy_keeps_the_filename(self, make_request) -> None:
        outcome = relocate(make_request(folders=[]), RelocationSettings())
        assert outcome.ok is True
        assert outcome.filename == "[Grp] Example Show - 04 [720p HEVC].mkv"
        assert outcome.destination is None
        assert outcome.deferred == ("destination",)

    def test_fail_policy_reports_recoverable_failure(self, make_request) -> None:
        outcome = relocate(make_request(folders=[]), RelocationSettings(destination_not_found="fail"))
        assert isinstance(outcome, RelocationFailure)
        assert outcome.kind is ErrorKind.DESTINATION_NOT_FOUND
        assert outcome.kind.recoverable is True


def test_decision_is_logged_at_debug(make_request, caplog) -> None:
    with caplog.at_level(logging.DEBUG, logger="relocator"):
        relocate(make_request())
    assert "Relocation decision" in caplog.text
    assert "[Grp] Example Show - 04 [720p HEVC].mkv" in caplog.text


def test_failures_are_logged_as_warnings(make_request, caplog) -> None:
    with caplog.at_level(logging.WARNING, logger="relocator"):
        relocate(make_request(series=[]))
    assert "missing_association" in caplog.text


class TestRelocator:
    def test_capabilities_follow_strategy(self) -> None:
        renamer = Relocator(RelocationSettings())
        backup = Relocator(RelocationSettings(strategy="backup"))
        assert renamer.supports_renaming is True
        assert renamer.supports_moving is True
        assert backup.supports_renaming is False
        assert backup.supports_moving is True

    def test_relocate_uses_bound_settings(self, make_request) -> None:
        relocator = Relocator(RelocationSettings(apply_prefix=True, prefix="x "))
        assert relocator.relocate(make_request()).filename.startswith("x [Grp]")

    @pytest.mark.parametrize("strategy", ["release_group", "language_tier", "backup", "original_name", "duplicate"])
    def test_strategy_lookup(self, strategy: str) -> None:
        assert Relocator(RelocationSettings(strategy=strategy)).strategy.name == strategy
