from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping

from jsonschema import Draft202012Validator

from scenedeck.engine.config import CardSizing, ShuffleConfig
from scenedeck.engine.flame import FlameConfig

from .dialogue import Dialogue, DialogueError, DialogueStyle, parse_dialogue

Color = tuple[int, int, int]

DEFAULT_PALETTE: tuple[Color, ...] = (
    (255, 69, 0),
    (255, 165, 0),
    (255, 215, 0),
    (255, 255, 0),
    (255, 255, 255),
    (255, 128, 0),
)


class ContentError(RuntimeError):
    pass


def _load_json(path: Path) -> object:
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError as e:
        raise ContentError(f"Missing content file: {path}") from e
    except json.JSONDecodeError as e:
        raise ContentError(f"Invalid JSON in {path}: {e}") from e


def validate_json(instance: object, schema: object, *, context: str) -> None:
    validator = Draft202012Validator(schema)
    errors = sorted(validator.iter_errors(instance), key=lambda e: e.path)
    if errors:
        lines = [f"Schema validation failed for {context}:"]
        for err in errors[:10]:
            loc = "/".join(str(p) for p in err.absolute_path)
            lines.append(f"- {loc}: {err.message}")
        raise ContentError("\n".join(lines))


def parse_hex_color(value: str) -> Color:
    v = value.lstrip("#")
    if len(v) != 6:
        raise ContentError(f"Expected #RRGGBB color, got {value!r}")
    try:
        return (int(v[0:2], 16), int(v[2:4], 16), int(v[4:6], 16))
    except ValueError as e:
        raise ContentError(f"Expected #RRGGBB color, got {value!r}") from e


def _section(raw: Mapping[str, object], key: str) -> Mapping[str, object]:
    v = raw.get(key, {})
    if not isinstance(v, dict):
        raise ContentError(f"Expected object for {key}")
    return v


def _num(obj: Mapping[str, object], key: str, default: float) -> float:
    v = obj.get(key, default)
    if not isinstance(v, (int, float)) or isinstance(v, bool):
        raise ContentError(f"Expected number for {key}")
    return float(v)


def _int(obj: Mapping[str, object], key: str, default: int) -> int:
    v = obj.get(key, default)
    if not isinstance(v, int) or isinstance(v, bool):
        raise ContentError(f"Expected int for {key}")
    return v


@dataclass(frozen=True)
class ShuffleSettings:
    """Viewport-independent tuning for the shuffling-stacks scene."""

    pile_count: int
    tokens_per_pile: int
    transfer_cadence_ms: int
    transfer_duration_ms: int
    layout: str
    stack_step_ratio: float
    padding: float
    pile_gap: float
    max_layout_attempts: int
    sizing: CardSizing
    palette: tuple[Color, ...]

    def config_for(self, viewport_width: float, viewport_height: float) -> ShuffleConfig:
        return ShuffleConfig.for_viewport(
            viewport_width,
            viewport_height,
            sizing=self.sizing,
            pile_count=self.pile_count,
            tokens_per_pile=self.tokens_per_pile,
            transfer_cadence_ms=self.transfer_cadence_ms,
            transfer_duration_ms=self.transfer_duration_ms,
            layout=self.layout,
            stack_step_ratio=self.stack_step_ratio,
            padding=self.padding,
            pile_gap=self.pile_gap,
            max_layout_attempts=self.max_layout_attempts,
        )


@dataclass(frozen=True)
class DialogueSettings:
    url: str
    timeout_s: float
    style: DialogueStyle


@dataclass(frozen=True)
class SceneCatalog:
    shuffle: ShuffleSettings
    dialogue: DialogueSettings
    flame: FlameConfig


def _parse_shuffle(raw: Mapping[str, object]) -> ShuffleSettings:
    sizing_raw = _section(raw, "card_sizing")
    defaults = CardSizing()
    sizing = CardSizing(
        max_width=_num(sizing_raw, "max_width", defaults.max_width),
        max_height=_num(sizing_raw, "max_height", defaults.max_height),
        width_fraction=_num(sizing_raw, "width_fraction", defaults.width_fraction),
        height_fraction=_num(sizing_raw, "height_fraction", defaults.height_fraction),
    )
    raw_palette = raw.get("palette")
    if isinstance(raw_palette, list):
        palette = tuple(parse_hex_color(c) for c in raw_palette if isinstance(c, str))
    else:
        palette = DEFAULT_PALETTE
    layout = raw.get("layout", "row")
    if not isinstance(layout, str):
        raise ContentError("Expected string for layout")
    return ShuffleSettings(
        pile_count=_int(raw, "pile_count", 12),
        tokens_per_pile=_int(raw, "tokens_per_pile", 12),
        transfer_cadence_ms=_int(raw, "transfer_cadence_ms", 1000),
        transfer_duration_ms=_int(raw, "transfer_duration_ms", 2000),
        layout=layout,
        stack_step_ratio=_num(raw, "stack_step_ratio", 0.6),
        padding=_num(raw, "padding", 20.0),
        pile_gap=_num(raw, "pile_gap", 8.0),
        max_layout_attempts=_int(raw, "max_layout_attempts", 1000),
        sizing=sizing,
        palette=palette or DEFAULT_PALETTE,
    )


def _parse_dialogue_settings(raw: Mapping[str, object]) -> DialogueSettings:
    url = raw.get("url")
    if not isinstance(url, str):
        raise ContentError("Expected string for url")
    style = DialogueStyle(
        padding=_num(raw, "padding", 20.0),
        max_font_size=_int(raw, "max_font_size", 24),
        font_width_fraction=_num(raw, "font_width_fraction", 0.03),
        emoji_gap=_num(raw, "emoji_gap", 5.0),
    )
    return DialogueSettings(url=url, timeout_s=_num(raw, "timeout_s", 8.0), style=style)


def _parse_flame(raw: Mapping[str, object]) -> FlameConfig:
    d = FlameConfig()
    return FlameConfig(
        max_embers=_int(raw, "max_embers", d.max_embers),
        max_circles=_int(raw, "max_circles", d.max_circles),
        ember_frames=_int(raw, "ember_frames", d.ember_frames),
        ember_animation_speed=_num(raw, "ember_animation_speed", d.ember_animation_speed),
        min_radius=_num(raw, "min_radius", d.min_radius),
        max_radius=_num(raw, "max_radius", d.max_radius),
    )


class ContentService:
    def __init__(self, data_dir: Path, schema_dir: Path) -> None:
        self._data_dir = data_dir
        self._schema_dir = schema_dir

    def load_scenes(self) -> SceneCatalog:
        path = self._data_dir / "scenes.json"
        schema = _load_json(self._schema_dir / "scenes.schema.json")
        raw = _load_json(path)
        validate_json(raw, schema, context=str(path))
        if not isinstance(raw, dict):
            raise ContentError("scenes.json must be an object")
        return SceneCatalog(
            shuffle=_parse_shuffle(_section(raw, "ace_of_shadows")),
            dialogue=_parse_dialogue_settings(_section(raw, "magic_words")),
            flame=_parse_flame(_section(raw, "phoenix_flame")),
        )

    def parse_dialogue(self, raw: object, *, context: str) -> Dialogue:
        """Validate a dialogue payload (bundled or fetched) and parse it."""
        schema = _load_json(self._schema_dir / "dialogue.schema.json")
        validate_json(raw, schema, context=context)
        try:
            return parse_dialogue(raw)
        except DialogueError as e:
            raise ContentError(f"{context}: {e}") from e

    def load_bundled_dialogue(self) -> Dialogue:
        path = self._data_dir / "dialogue.json"
        return self.parse_dialogue(_load_json(path), context=str(path))

    def validate_all(self) -> None:
        # Load is validation (schema + parse)
        _ = self.load_scenes()
        _ = self.load_bundled_dialogue()
