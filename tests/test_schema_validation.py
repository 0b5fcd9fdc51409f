from __future__ import annotations

import json
import shutil
from pathlib import Path

import pytest

from scenedeck.paths import get_paths
from scenedeck.services.content import ContentError, ContentService


def _content() -> ContentService:
    paths = get_paths()
    return ContentService(paths.data_dir, paths.schema_dir)


def _content_with_scenes(tmp_path: Path, mutate) -> ContentService:
    paths = get_paths()
    schema_dir = tmp_path / "schemas"
    shutil.copytree(paths.schema_dir, schema_dir)
    raw = json.loads((paths.data_dir / "scenes.json").read_text(encoding="utf-8"))
    mutate(raw)
    (tmp_path / "scenes.json").write_text(json.dumps(raw), encoding="utf-8")
    return ContentService(tmp_path, schema_dir)


def test_content_schemas_validate() -> None:
    _content().validate_all()


def test_bundled_scene_settings() -> None:
    scenes = _content().load_scenes()
    shuffle = scenes.shuffle
    assert shuffle.pile_count == 12
    assert shuffle.tokens_per_pile == 12
    assert shuffle.transfer_cadence_ms == 1000
    assert shuffle.transfer_duration_ms == 2000
    assert shuffle.palette[0] == (255, 69, 0)

    cfg = shuffle.config_for(1024, 768)
    cfg.validate()
    assert cfg.token_width == pytest.approx(81.92)
    assert cfg.token_height == pytest.approx(115.2)
    assert cfg.stack_step == pytest.approx(115.2 * 0.6)

    assert scenes.flame.max_particles == 10
    assert scenes.dialogue.style.max_font_size == 24


def test_card_size_is_capped_on_large_screens() -> None:
    cfg = _content().load_scenes().shuffle.config_for(3000, 2000)
    assert cfg.token_width == 100
    assert cfg.token_height == 150


def test_schema_rejects_single_pile(tmp_path: Path) -> None:
    def mutate(raw: dict) -> None:
        raw["ace_of_shadows"]["pile_count"] = 1

    content = _content_with_scenes(tmp_path, mutate)
    with pytest.raises(ContentError, match="Schema validation failed"):
        content.load_scenes()


def test_schema_rejects_fast_cadence(tmp_path: Path) -> None:
    def mutate(raw: dict) -> None:
        raw["ace_of_shadows"]["transfer_cadence_ms"] = 16

    content = _content_with_scenes(tmp_path, mutate)
    with pytest.raises(ContentError, match="transfer_cadence_ms"):
        content.load_scenes()


def test_missing_file_is_a_content_error(tmp_path: Path) -> None:
    content = ContentService(tmp_path, get_paths().schema_dir)
    with pytest.raises(ContentError, match="Missing content file"):
        content.load_scenes()


def test_bundled_dialogue_parses() -> None:
    dialogue = _content().load_bundled_dialogue()
    assert len(dialogue.lines) == 6
    assert dialogue.lines[0].speaker == "Sheldon"
    assert dialogue.lines[-1].speaker == "Unknown"
    assert dialogue.avatars["Penny"].position == "right"


def test_fetched_dialogue_must_match_schema() -> None:
    with pytest.raises(ContentError):
        _content().parse_dialogue({"dialogue": [{"name": "A"}]}, context="remote")
