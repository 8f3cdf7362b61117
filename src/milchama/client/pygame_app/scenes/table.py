from __future__ import annotations

import pygame  # type: ignore[import-not-found]

from milchama.engine.match import MatchState, can_step, conceding_players
from milchama.engine.types import Card

from ..app import GameContext
from ..scene_base import SceneTransition
from ..ui import CARD_H, CARD_W, Button, draw_card, draw_card_back, draw_text

# minimum time between two flips; the engine itself imposes no pacing
FLIP_COOLDOWN = 0.35
WIN_HIGHLIGHT = (250, 200, 40)
WAR_HIGHLIGHT = (220, 40, 200)


class TableScene:
    def __init__(self, ctx: GameContext) -> None:
        self.ctx = ctx
        self._next: SceneTransition | None = None
        self._message = ""
        self._cooldown = 0.0

        self.btn_flip = Button(rect=pygame.Rect(400, 660, 220, 56), text="Flip!", on_click=self._on_flip)
        self.btn_concede = Button(
            rect=pygame.Rect(640, 660, 180, 56), text="Concede War", on_click=lambda: self._on_concede(1)
        )
        self.btn_concede2 = Button(
            rect=pygame.Rect(640, 20, 180, 56), text="Concede War", on_click=lambda: self._on_concede(2)
        )
        self.btn_pause = Button(rect=pygame.Rect(860, 20, 140, 40), text="Pause", on_click=self._on_pause)
        self.btn_menu = Button(rect=pygame.Rect(860, 70, 140, 40), text="Menu", on_click=self._on_menu)
        self.btn_mute = Button(rect=pygame.Rect(860, 120, 140, 40), text="Mute", on_click=self._on_mute)
        self.btn_again = Button(
            rect=pygame.Rect(400, 660, 220, 56), text="Play Again", on_click=self._on_play_again
        )

    @property
    def state(self) -> MatchState:
        return self.ctx.session.state

    def _on_flip(self) -> None:
        if self._cooldown > 0:
            return
        res = self.ctx.session.step()
        if not res.ok:
            self._message = res.error or ""
            return
        self._message = ""
        self._cooldown = FLIP_COOLDOWN

    def _on_concede(self, player: int) -> None:
        res = self.ctx.session.concede_war(player=player)
        self._message = "" if res.ok else (res.error or "")

    def _on_pause(self) -> None:
        self.ctx.session.toggle_pause()

    def _on_mute(self) -> None:
        self.ctx.session.set_muted(not self.state.muted)

    def _on_menu(self) -> None:
        from .main_menu import MainMenuScene

        self.ctx.session.reset()
        self._next = SceneTransition(MainMenuScene(self.ctx))

    def _on_play_again(self) -> None:
        self.ctx.session.start(self.state.mode)

    def handle_event(self, event: pygame.event.Event) -> None:
        if event.type == pygame.KEYDOWN and event.key == pygame.K_SPACE:
            self._on_flip()
            return
        if self.state.status == "finished":
            self.btn_again.handle_event(event)
        else:
            self.btn_flip.handle_event(event)
            self.btn_concede.handle_event(event)
            if self.state.mode == "two_players":
                self.btn_concede2.handle_event(event)
            self.btn_pause.handle_event(event)
        self.btn_menu.handle_event(event)
        self.btn_mute.handle_event(event)

    def update(self, dt: float) -> SceneTransition | None:
        self._cooldown = max(0.0, self._cooldown - dt)
        return self._next

    def render(self, screen: pygame.Surface) -> None:
        screen.fill((2, 6, 23))
        fonts = self.ctx.assets.fonts
        st = self.state

        self.btn_pause.text = "Resume" if st.paused else "Pause"
        self.btn_mute.text = "Unmute" if st.muted else "Mute"
        self.btn_flip.text = "WAR!" if st.status == "war" else "Flip!"
        self.btn_flip.enabled = can_step(st) and self._cooldown <= 0
        conceders = conceding_players(st)
        self.btn_concede.enabled = 1 in conceders
        self.btn_concede2.enabled = 2 in conceders
        self.btn_pause.enabled = st.is_active

        # decks
        draw_text(screen, fonts.ui, st.label(2), (60, 40))
        draw_card_back(screen, (60, 70), len(st.player2_deck), fonts.ui)
        draw_text(screen, fonts.ui, st.label(1), (60, 440))
        draw_card_back(screen, (60, 470), len(st.player1_deck), fonts.ui)

        # in-play / just revealed
        self._draw_pile(screen, player=2, y=90)
        self._draw_pile(screen, player=1, y=440)

        result = "Game paused" if st.paused else st.last_result
        draw_text(screen, fonts.big, result, (240, 290))
        if st.status == "war" and st.war_depth > 1:
            draw_text(screen, fonts.ui, f"War x{st.war_depth}", (240, 330), color=WAR_HIGHLIGHT)
        draw_text(screen, fonts.small, f'"{self.ctx.session.commentary}"', (240, 360), color=(200, 200, 255))

        self._draw_history(screen)

        if st.status == "finished":
            winner = st.label(st.winner) if st.winner is not None else "?"
            draw_text(screen, fonts.big, f"{winner} wins the game!", (240, 620), color=WIN_HIGHLIGHT)
            self.btn_again.draw(screen, fonts.ui)
        else:
            self.btn_flip.draw(screen, fonts.ui)
            self.btn_concede.draw(screen, fonts.ui)
            if st.mode == "two_players":
                self.btn_concede2.draw(screen, fonts.ui)
            self.btn_pause.draw(screen, fonts.ui)
        self.btn_menu.draw(screen, fonts.ui)
        self.btn_mute.draw(screen, fonts.ui)

        if self._message:
            draw_text(screen, fonts.ui, self._message, (240, 400), color=(240, 200, 120))

    def _pile_for(self, player: int) -> tuple[tuple[Card, ...], tuple[int, int, int] | None]:
        st = self.state
        live = st.player1_in_play if player == 1 else st.player2_in_play
        if live:
            return live, WAR_HIGHLIGHT if st.status == "war" else None
        if st.revealed is not None:
            shown = st.revealed.player1 if player == 1 else st.revealed.player2
            return shown, WIN_HIGHLIGHT if st.revealed.winner == player else None
        return (), None

    def _draw_pile(self, screen: pygame.Surface, player: int, y: int) -> None:
        pile, highlight = self._pile_for(player)
        x = 420
        if not pile:
            pygame.draw.rect(screen, (40, 40, 60), pygame.Rect(x, y, CARD_W, CARD_H), width=2, border_radius=10)
            return
        draw_card(screen, self.ctx.assets, pile[-1], (x, y), highlight=highlight)
        if len(pile) > 1:
            draw_text(screen, self.ctx.assets.fonts.small, f"+{len(pile) - 1} cards", (x + CARD_W + 10, y + 8))

    def _draw_history(self, screen: pygame.Surface) -> None:
        fonts = self.ctx.assets.fonts
        x, y = 700, 200
        draw_text(screen, fonts.ui, "History", (x, y))
        if not self.state.history:
            draw_text(screen, fonts.small, "No rounds yet", (x, y + 30), color=(140, 140, 160))
            return
        for i, h in enumerate(self.state.history):
            tag = "War!" if h.is_war else "OK"
            line = f"#{h.round_no}  {h.p1_card.label} vs {h.p2_card.label}  {tag}"
            draw_text(screen, fonts.small, line, (x, y + 30 + i * 22))
