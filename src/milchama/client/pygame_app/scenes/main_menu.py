from __future__ import annotations

import pygame  # type: ignore[import-not-found]

from milchama.engine.types import GameMode

from ..app import GameContext
from ..scene_base import SceneTransition
from ..ui import Button, Toggle, draw_text
from .table import TableScene


class MainMenuScene:
    def __init__(self, ctx: GameContext) -> None:
        self.ctx = ctx
        self._next: SceneTransition | None = None
        self._message = ""
        self._buttons: list[Button] = []
        self._build_ui()

    def _build_ui(self) -> None:
        x = 60
        y = 200
        w = 320
        h = 56
        gap = 14

        self._buttons = [
            Button(
                rect=pygame.Rect(x, y, w, h),
                text="Vs Computer",
                on_click=lambda: self._on_start("vs_computer"),
            ),
            Button(
                rect=pygame.Rect(x, y + (h + gap) * 1, w, h),
                text="Two Players",
                on_click=lambda: self._on_start("two_players"),
            ),
            Button(
                rect=pygame.Rect(x, y + (h + gap) * 2, w, h),
                text="Quit",
                on_click=lambda: pygame.event.post(pygame.event.Event(pygame.QUIT)),
            ),
        ]
        self._mute = Toggle(
            rect=pygame.Rect(x, y + (h + gap) * 3, w, 42),
            label="Mute",
            value=self.ctx.session.state.muted,
            on_change=self.ctx.session.set_muted,
        )

    def _on_start(self, mode: GameMode) -> None:
        res = self.ctx.session.start(mode)
        if not res.ok:
            self._message = res.error or "Could not start."
            return
        self._next = SceneTransition(TableScene(self.ctx))

    def handle_event(self, event: pygame.event.Event) -> None:
        if self._mute.handle_event(event):
            return
        for b in self._buttons:
            if b.handle_event(event):
                return

    def update(self, dt: float) -> SceneTransition | None:
        return self._next

    def render(self, screen: pygame.Surface) -> None:
        screen.fill((15, 23, 42))
        fonts = self.ctx.assets.fonts
        draw_text(screen, fonts.big, "Milchama", (60, 40))
        draw_text(screen, fonts.ui, "The classic card game. Each player gets half a deck.", (60, 100))
        draw_text(screen, fonts.ui, "Whoever takes all the cards wins!", (60, 126))
        for b in self._buttons:
            b.draw(screen, fonts.ui)
        self._mute.draw(screen, fonts.ui)
        if self._message:
            draw_text(screen, fonts.ui, self._message, (60, 520), color=(240, 200, 120))
