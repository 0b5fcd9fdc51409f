from __future__ import annotations

import pytest

from scenedeck.services.dialogue import (
    DEFAULT_EMOJI_URLS,
    Dialogue,
    DialogueError,
    DialogueLine,
    DialogueStyle,
    Segment,
    layout_dialogue,
    parse_dialogue,
    split_segments,
)


def _measure(text: str) -> float:
    return len(text) * 10.0


def test_split_segments_resolves_known_placeholders() -> None:
    segs = split_segments("Hi {win} there", {"win": "u://win"})
    assert segs == [
        Segment("Hi "),
        Segment("{win}", emoji_url="u://win"),
        Segment(" there"),
    ]
    assert [s.is_emoji for s in segs] == [False, True, False]


def test_unknown_placeholder_stays_literal() -> None:
    segs = split_segments("{nope} ok", {"win": "u://win"})
    assert segs == [Segment("{nope}"), Segment(" ok")]


def test_adjacent_placeholders_produce_no_empty_segments() -> None:
    segs = split_segments("{a}{b}", {"a": "u://a", "b": "u://b"})
    assert [s.emoji_url for s in segs] == ["u://a", "u://b"]


def test_blank_or_missing_name_is_unknown_speaker() -> None:
    assert DialogueLine(name=None, text="x").speaker == "Unknown"
    assert DialogueLine(name="   ", text="x").speaker == "Unknown"
    assert DialogueLine(name="Penny", text="x").speaker == "Penny"


def test_payload_emojis_override_defaults() -> None:
    d = parse_dialogue(
        {
            "dialogue": [{"name": "A", "text": "t"}],
            "emojies": [{"name": "win", "url": "u://custom"}, {"name": "wave", "url": "u://wave"}],
        }
    )
    assert d.emojis["win"] == "u://custom"
    assert d.emojis["wave"] == "u://wave"
    assert d.emojis["neutral"] == DEFAULT_EMOJI_URLS["neutral"]


def test_malformed_entries_are_skipped() -> None:
    d = parse_dialogue(
        {
            "dialogue": [{"name": "A", "text": "ok"}, {"name": "B"}, "junk", {"name": 7, "text": "n"}],
            "avatars": [{"name": "A", "url": "u://a"}, {"name": "B"}, {"name": "C", "url": "u://c", "position": "right"}],
        }
    )
    assert [line.text for line in d.lines] == ["ok", "n"]
    assert d.lines[1].speaker == "Unknown"
    assert d.avatars["A"].position == "left"
    assert d.avatars["C"].position == "right"
    assert "B" not in d.avatars


@pytest.mark.parametrize("raw", [None, [], {"emojies": []}, {"dialogue": "nope"}])
def test_parse_rejects_bad_payloads(raw: object) -> None:
    with pytest.raises(DialogueError):
        parse_dialogue(raw)


def test_font_size_scales_with_width_and_caps() -> None:
    style = DialogueStyle()
    assert style.font_size_for(1024) == 24
    assert style.font_size_for(500) == 15
    assert style.font_size_for(50) == 6


def test_layout_places_label_text_and_emoji() -> None:
    dialogue = Dialogue(
        lines=(DialogueLine("Ann", "Hi {win}!"), DialogueLine(None, "bye")),
        emojis={"win": "u://win"},
    )
    placed = layout_dialogue(dialogue, DialogueStyle(), 24, _measure)

    first, second = placed
    assert first.speaker == "Ann"
    assert first.y == 20
    assert first.label_width == 50
    assert [(p.segment.text, p.x, p.width) for p in first.segments] == [
        ("Hi ", 50, 30),
        ("{win}", 80, 29),
        ("!", 109, 10),
    ]
    assert first.width == 119

    assert second.speaker == "Unknown"
    assert second.y == 64
    assert second.segments[0].x == second.label_width == 90


def test_layout_uses_label_measure_for_speaker() -> None:
    dialogue = Dialogue(lines=(DialogueLine("Ann", "x"),))
    (line,) = layout_dialogue(dialogue, DialogueStyle(), 24, _measure, measure_label=lambda s: 7.0)
    assert line.label_width == 7.0
    assert line.segments[0].x == 7.0


def test_line_without_text_is_as_wide_as_its_label() -> None:
    dialogue = Dialogue(lines=(DialogueLine("Ann", ""),))
    (line,) = layout_dialogue(dialogue, DialogueStyle(), 24, _measure)
    assert line.segments == ()
    assert line.width == line.label_width
