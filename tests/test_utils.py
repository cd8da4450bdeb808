from __future__ import annotations

import pytest

from relocator.utils import (
    contains_invalid_path_characters,
    env_bool,
    join_location,
    load_yaml_file,
    normalize_location,
    normalize_token,
    parse_env_bool,
    replace_invalid_path_characters,
)


def test_normalize_token_removes_non_alphanumerics() -> None:
    assert normalize_token("Ger-Dub!") == "gerdub"


class TestReplaceInvalidPathCharacters:
    def test_replaces_separators_with_look_alikes(self) -> None:
        result = replace_invalid_path_characters("Fate/Zero: Part 1")
        assert result == "Fate\u2044Zero\u0589 Part 1"
        assert "/" not in result
        assert ":" not in result

    @pytest.mark.parametrize(
        "value,expected",
        [
            ("Star*Light", "Star\u2605Light"),
            ("A|B", "A\u00a6B"),
            ("back\\slash", "back\u29f9slash"),
            ('Say "Hi"', "Say \u2033Hi\u2033"),
            ("<Tag>", "\u2039Tag\u203a"),
            ("Why?", "Why\uff1f"),
        ],
    )
    def test_reserved_characters(self, value: str, expected: str) -> None:
        assert replace_invalid_path_characters(value) == expected

    def test_collapses_ellipsis(self) -> None:
        assert replace_invalid_path_characters("Wait... What") == "Wait\u2026 What"

    def test_trailing_dots_become_leaders(self) -> None:
        assert replace_invalid_path_characters("Dr..") == "Dr\u2024\u2024"

    def test_drops_control_characters(self) -> None:
        assert replace_invalid_path_characters("a\x00b\x1fc") == "abc"

    def test_empty_value_is_returned_unchanged(self) -> None:
        assert replace_invalid_path_characters("") == ""


def test_contains_invalid_path_characters() -> None:
    assert contains_invalid_path_characters("a/b") is True
    assert contains_invalid_path_characters("tab\there") is True
    assert contains_invalid_path_characters("plain name") is False


class TestLocations:
    def test_normalize_location_unifies_separators(self) -> None:
        assert normalize_location("Z:\\Anime\\GerDub\\") == "Z:/Anime/GerDub"

    def test_normalize_location_collapses_repeated_separators(self) -> None:
        assert normalize_location("/mnt//array/Anime/") == "/mnt/array/Anime"

    def test_normalize_location_keeps_root(self) -> None:
        assert normalize_location("/") == "/"

    def test_join_location_keeps_leading_and_adds_trailing_separator(self) -> None:
        assert join_location("/mnt/array/", "Anime", "GerDub") == "/mnt/array/Anime/GerDub/"

    def test_join_location_skips_empty_segments(self) -> None:
        assert join_location("root", "", "/Anime/") == "root/Anime/"


class TestLoadYamlFile:
    def test_expands_environment_variables(self, tmp_path, monkeypatch) -> None:
        monkeypatch.setenv("RELOCATOR_TEST_ROOT", "/data")
        path = tmp_path / "settings.yaml"
        path.write_text("destination_root: ${RELOCATOR_TEST_ROOT}/array\nsecondary_languages: [english]\n", encoding="utf-8")

        data = load_yaml_file(path)

        assert data["destination_root"] == "/data/array"
        assert data["secondary_languages"] == ["english"]

    def test_empty_file_is_empty_mapping(self, tmp_path) -> None:
        path = tmp_path / "empty.yaml"
        path.write_text("", encoding="utf-8")
        assert load_yaml_file(path) == {}

    def test_rejects_non_mapping(self, tmp_path) -> None:
        path = tmp_path / "list.yaml"
        path.write_text("- a\n- b\n", encoding="utf-8")
        with pytest.raises(ValueError, match="mapping"):
            load_yaml_file(path)


class TestParseEnvBool:
    @pytest.mark.parametrize("value", ["true", "True", "1", "yes", "ON"])
    def test_parses_truthy_values(self, value: str) -> None:
        assert parse_env_bool(value) is True

    @pytest.mark.parametrize("value", ["false", "FALSE", "0", "no", "off"])
    def test_parses_falsy_values(self, value: str) -> None:
        assert parse_env_bool(value) is False

    def test_returns_none_for_unknown_or_missing(self) -> None:
        assert parse_env_bool("maybe") is None
        assert parse_env_bool(None) is None


def test_env_bool_reads_environment(monkeypatch) -> None:
    monkeypatch.setenv("RELOCATOR_TEST_FLAG", "yes")
    assert env_bool("RELOCATOR_TEST_FLAG") is True
    monkeypatch.delenv("RELOCATOR_TEST_FLAG")
    assert env_bool("RELOCATOR_TEST_FLAG") is None
