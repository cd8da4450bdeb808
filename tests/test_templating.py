from __future__ import annotations

from relocator.templating import render_template, template_fields


def test_render_template_leaves_unknown_placeholders() -> None:
    assert render_template("{title} - {missing}", {"title": "Show"}) == "Show - {missing}"


def test_render_template_formats_values() -> None:
    assert render_template("[{group}] {title}", {"group": "Grp", "title": "Show"}) == "[Grp] Show"


def test_template_fields_in_order_without_duplicates() -> None:
    fields = template_fields("{title} - {episode_label} - {title}{extension}")
    assert fields == ["title", "episode_label", "extension"]


def test_template_fields_of_literal_text() -> None:
    assert template_fields("no placeholders") == []
