from __future__ import annotations

import argparse
import logging

import pygame  # type: ignore[import-not-found]

from milchama.paths import get_paths
from milchama.services.commentary import CommentaryProvider, StaticCommentary
from milchama.services.content import ContentService
from milchama.services.telemetry import TelemetryService
from milchama.session import MatchSession

from .app import App, GameContext
from .asset_manager import AssetManager
from .scenes.main_menu import MainMenuScene


def _commentary(kind: str, fallback: str) -> CommentaryProvider | None:
    if kind == "gemini":
        from milchama.services.gemini import gemini_or_static

        return gemini_or_static(fallback)
    if kind == "static":
        return StaticCommentary(fallback)
    return None


def main() -> int:
    parser = argparse.ArgumentParser(prog="milchama")
    parser.add_argument("--width", type=int, default=1024)
    parser.add_argument("--height", type=int, default=768)
    parser.add_argument("--commentary", choices=("gemini", "static", "off"), default="gemini")
    parser.add_argument("--no-telemetry", action="store_true")
    args = parser.parse_args()

    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(name)s %(levelname)s %(message)s")

    pygame.init()
    screen = pygame.display.set_mode((args.width, args.height))
    pygame.display.set_caption("Milchama - War")

    clock = pygame.time.Clock()
    paths = get_paths()

    rules = ContentService(data_dir=paths.data_dir, schema_dir=paths.schema_dir).load_rules()
    telemetry = None if args.no_telemetry else TelemetryService(paths.userdata_dir / "telemetry.jsonl")
    session = MatchSession(
        rules=rules,
        commentary=_commentary(args.commentary, rules.commentary.fallback),
        telemetry=telemetry,
    )

    ctx = GameContext(
        screen=screen,
        clock=clock,
        paths=paths,
        assets=AssetManager(),
        rules=rules,
        session=session,
    )

    app = App(ctx, MainMenuScene(ctx))
    return app.run()


if __name__ == "__main__":
    raise SystemExit(main())
