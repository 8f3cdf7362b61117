from __future__ import annotations

from dataclasses import dataclass

import pygame  # type: ignore[import-not-found]

from milchama.paths import Paths
from milchama.services.content import RulesConfig
from milchama.session import MatchSession

from .asset_manager import AssetManager
from .scene_base import Scene


@dataclass
class GameContext:
    screen: pygame.Surface
    clock: pygame.time.Clock
    paths: Paths
    assets: AssetManager
    rules: RulesConfig
    session: MatchSession


class App:
    def __init__(self, ctx: GameContext, initial_scene: Scene) -> None:
        self.ctx = ctx
        self.scene: Scene = initial_scene
        self.running = True

    def run(self) -> int:
        try:
            while self.running:
                dt = self.ctx.clock.tick(60) / 1000.0
                for event in pygame.event.get():
                    if event.type == pygame.QUIT:
                        self.running = False
                        break
                    self.scene.handle_event(event)

                tr = self.scene.update(dt)
                if tr is not None:
                    self.scene = tr.next_scene

                self.scene.render(self.ctx.screen)
                pygame.display.flip()
        finally:
            self.ctx.session.close()
        return 0
