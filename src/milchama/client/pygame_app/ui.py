from __future__ import annotations

from dataclasses import dataclass
from typing import Callable

import pygame  # type: ignore[import-not-found]

from milchama.engine.types import Card

from .asset_manager import AssetManager

Color = tuple[int, int, int]

CARD_W, CARD_H = 110, 154


def draw_text(
    screen: pygame.Surface,
    font: pygame.font.Font,
    text: str,
    pos: tuple[int, int],
    color: Color = (240, 240, 240),
) -> None:
    img = font.render(text, True, color)
    screen.blit(img, pos)


def draw_card(
    screen: pygame.Surface,
    assets: AssetManager,
    card: Card,
    topleft: tuple[int, int],
    highlight: Color | None = None,
) -> None:
    rect = pygame.Rect(topleft[0], topleft[1], CARD_W, CARD_H)
    pygame.draw.rect(screen, (245, 245, 240), rect, border_radius=10)
    border = highlight or (0, 0, 0)
    pygame.draw.rect(screen, border, rect, width=4 if highlight else 2, border_radius=10)
    color = assets.suit_color(card.suit)
    img = assets.fonts.card.render(card.label, True, color)
    screen.blit(img, img.get_rect(center=rect.center).topleft)


def draw_card_back(screen: pygame.Surface, topleft: tuple[int, int], count: int, font: pygame.font.Font) -> None:
    rect = pygame.Rect(topleft[0], topleft[1], CARD_W, CARD_H)
    if count <= 0:
        pygame.draw.rect(screen, (60, 60, 70), rect, width=2, border_radius=10)
        return
    # stack depth hint
    for i in range(min(3, count - 1), 0, -1):
        pygame.draw.rect(screen, (40, 30, 90), rect.move(i * 3, -i * 3), border_radius=10)
    pygame.draw.rect(screen, (90, 60, 180), rect, border_radius=10)
    pygame.draw.rect(screen, (0, 0, 0), rect, width=2, border_radius=10)
    img = font.render(str(count), True, (240, 240, 240))
    screen.blit(img, img.get_rect(center=rect.center).topleft)


@dataclass
class Button:
    rect: pygame.Rect
    text: str
    on_click: Callable[[], None]
    enabled: bool = True

    def handle_event(self, event: pygame.event.Event) -> bool:
        if not self.enabled:
            return False
        if event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
            if self.rect.collidepoint(event.pos):
                self.on_click()
                return True
        return False

    def draw(self, screen: pygame.Surface, font: pygame.font.Font) -> None:
        bg = (60, 60, 60) if self.enabled else (30, 30, 30)
        pygame.draw.rect(screen, bg, self.rect, border_radius=8)
        pygame.draw.rect(screen, (0, 0, 0), self.rect, width=2, border_radius=8)
        img = font.render(self.text, True, (240, 240, 240))
        r = img.get_rect(center=self.rect.center)
        screen.blit(img, r.topleft)


@dataclass
class Toggle:
    rect: pygame.Rect
    label: str
    value: bool
    on_change: Callable[[bool], None]

    def handle_event(self, event: pygame.event.Event) -> bool:
        if event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
            if self.rect.collidepoint(event.pos):
                self.value = not self.value
                self.on_change(self.value)
                return True
        return False

    def draw(self, screen: pygame.Surface, font: pygame.font.Font) -> None:
        pygame.draw.rect(screen, (40, 40, 40), self.rect, border_radius=8)
        pygame.draw.rect(screen, (0, 0, 0), self.rect, width=2, border_radius=8)
        box = pygame.Rect(self.rect.x + 10, self.rect.y + 10, 22, 22)
        pygame.draw.rect(screen, (220, 220, 220), box, width=2)
        if self.value:
            pygame.draw.line(screen, (220, 220, 220), (box.x + 4, box.y + 12), (box.x + 10, box.y + 18), 3)
            pygame.draw.line(screen, (220, 220, 220), (box.x + 10, box.y + 18), (box.x + 18, box.y + 6), 3)
        txt = font.render(self.label, True, (240, 240, 240))
        screen.blit(txt, (box.right + 10, self.rect.y + 8))
