from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Callable, Literal, Mapping

TWEMOJI_BASE = "https://cdnjs.cloudflare.com/ajax/libs/twemoji/14.0.2/svg"

DEFAULT_EMOJI_URLS: dict[str, str] = {
    "satisfied": f"{TWEMOJI_BASE}/1f60a.svg",
    "intrigued": f"{TWEMOJI_BASE}/1f914.svg",
    "neutral": f"{TWEMOJI_BASE}/1f610.svg",
    "laughing": f"{TWEMOJI_BASE}/1f602.svg",
    "win": f"{TWEMOJI_BASE}/1f389.svg",
}

UNKNOWN_SPEAKER = "Unknown"

_PLACEHOLDER = re.compile(r"(\{[^}]+\})")

AvatarSide = Literal["left", "right"]


class DialogueError(RuntimeError):
    pass


@dataclass(frozen=True)
class DialogueLine:
    name: str | None
    text: str

    @property
    def speaker(self) -> str:
        if self.name is None or not self.name.strip():
            return UNKNOWN_SPEAKER
        return self.name


@dataclass(frozen=True)
class Avatar:
    name: str
    url: str
    position: AvatarSide = "left"


@dataclass(frozen=True)
class Dialogue:
    lines: tuple[DialogueLine, ...]
    emojis: dict[str, str] = field(default_factory=dict)
    avatars: dict[str, Avatar] = field(default_factory=dict)

    def emoji_urls(self) -> set[str]:
        return set(self.emojis.values())


@dataclass(frozen=True)
class Segment:
    """A run of plain text, or an emoji placeholder resolved to an image URL."""

    text: str
    emoji_url: str | None = None

    @property
    def is_emoji(self) -> bool:
        return self.emoji_url is not None


def split_segments(text: str, emojis: Mapping[str, str]) -> list[Segment]:
    """Split ``text`` on ``{name}`` placeholders.

    Known names become emoji segments; unknown placeholders stay literal text.
    """
    out: list[Segment] = []
    for part in _PLACEHOLDER.split(text):
        if not part:
            continue
        if part.startswith("{") and part.endswith("}"):
            url = emojis.get(part[1:-1])
            if url is not None:
                out.append(Segment(text=part, emoji_url=url))
                continue
        out.append(Segment(text=part))
    return out


def parse_dialogue(raw: object) -> Dialogue:
    if not isinstance(raw, dict):
        raise DialogueError("Dialogue payload must be an object")
    raw_lines = raw.get("dialogue")
    if not isinstance(raw_lines, list):
        raise DialogueError("Dialogue payload is missing a 'dialogue' list")

    lines: list[DialogueLine] = []
    for item in raw_lines:
        if not isinstance(item, dict):
            continue
        text = item.get("text")
        if not isinstance(text, str):
            continue
        name = item.get("name")
        lines.append(DialogueLine(name=name if isinstance(name, str) else None, text=text))

    emojis = dict(DEFAULT_EMOJI_URLS)
    for e in raw.get("emojies") or []:
        if isinstance(e, dict) and isinstance(e.get("name"), str) and isinstance(e.get("url"), str):
            emojis[e["name"]] = e["url"]

    avatars: dict[str, Avatar] = {}
    for a in raw.get("avatars") or []:
        if not isinstance(a, dict):
            continue
        name, url = a.get("name"), a.get("url")
        if not isinstance(name, str) or not isinstance(url, str):
            continue
        side = a.get("position")
        avatars[name] = Avatar(name=name, url=url, position="right" if side == "right" else "left")

    return Dialogue(lines=tuple(lines), emojis=emojis, avatars=avatars)


# Layout

Measure = Callable[[str], float]


@dataclass(frozen=True)
class DialogueStyle:
    padding: float = 20.0
    max_font_size: int = 24
    font_width_fraction: float = 0.03
    emoji_gap: float = 5.0

    def font_size_for(self, width: float) -> int:
        return max(6, int(min(self.max_font_size, width * self.font_width_fraction)))


@dataclass(frozen=True)
class PlacedSegment:
    segment: Segment
    x: float
    width: float


@dataclass(frozen=True)
class PlacedLine:
    speaker: str
    y: float
    label_width: float
    segments: tuple[PlacedSegment, ...]

    @property
    def width(self) -> float:
        if not self.segments:
            return self.label_width
        last = self.segments[-1]
        return last.x + last.width


def layout_dialogue(
    dialogue: Dialogue,
    style: DialogueStyle,
    font_size: int,
    measure: Measure,
    measure_label: Measure | None = None,
) -> list[PlacedLine]:
    """Place each line below the previous one: ``Name: `` label then text and emoji runs.

    ``measure_label`` measures the speaker label when it uses a different face (bold).
    """
    label_measure = measure_label or measure
    placed: list[PlacedLine] = []
    y = style.padding
    for line in dialogue.lines:
        speaker = line.speaker
        label_width = label_measure(f"{speaker}: ")
        x = label_width
        segs: list[PlacedSegment] = []
        for seg in split_segments(line.text, dialogue.emojis):
            w = font_size + style.emoji_gap if seg.is_emoji else measure(seg.text)
            segs.append(PlacedSegment(segment=seg, x=x, width=w))
            x += w
        placed.append(PlacedLine(speaker=speaker, y=y, label_width=label_width, segments=tuple(segs)))
        y += font_size + style.padding
    return placed

