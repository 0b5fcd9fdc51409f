from __future__ import annotations

import argparse
import logging
from pathlib import Path

import pygame  # type: ignore[import-not-found]

from scenedeck.logging_config import setup_logging
from scenedeck.paths import get_paths
from scenedeck.services.content import ContentService
from scenedeck.services.telemetry import TelemetryService

from .app import App, GameContext
from .asset_manager import AssetManager
from .scenes.boot import SCENE_CHOICES, BootScene


def main() -> int:
    parser = argparse.ArgumentParser(prog="scenedeck")
    parser.add_argument("--width", type=int, default=1024)
    parser.add_argument("--height", type=int, default=768)
    parser.add_argument("--fps", type=int, default=60)
    parser.add_argument("--scene", choices=SCENE_CHOICES, default="menu")
    parser.add_argument("--offline", action="store_true", help="use the bundled dialogue instead of fetching it")
    parser.add_argument("--no-telemetry", action="store_true")
    parser.add_argument("--log-level", default="INFO", choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    parser.add_argument("--log-file", default=None)
    parser.add_argument("--userdata", type=Path, default=None, help="directory for telemetry output")
    args = parser.parse_args()

    log = setup_logging(getattr(logging, args.log_level), args.log_file)

    pygame.init()
    screen = pygame.display.set_mode((args.width, args.height), pygame.RESIZABLE)

    clock = pygame.time.Clock()
    paths = get_paths(args.userdata)

    ctx = GameContext(
        screen=screen,
        clock=clock,
        paths=paths,
        assets=AssetManager(),
        content=ContentService(data_dir=paths.data_dir, schema_dir=paths.schema_dir),
        telemetry=TelemetryService(paths.telemetry_file, enabled=not args.no_telemetry),
        fps=args.fps,
        offline=args.offline,
        start_scene=args.scene,
    )
    log.info("Starting at %dx%d, scene=%s", args.width, args.height, args.scene)

    app = App(ctx, BootScene(ctx))
    try:
        return app.run()
    finally:
        pygame.quit()


if __name__ == "__main__":
    raise SystemExit(main())
