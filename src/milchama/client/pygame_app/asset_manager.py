from __future__ import annotations

from dataclasses import dataclass

import pygame  # type: ignore[import-not-found]


@dataclass
class Fonts:
    ui: pygame.font.Font
    small: pygame.font.Font
    big: pygame.font.Font
    card: pygame.font.Font


class AssetManager:
    """Fonts and colours for the table; the client draws everything else procedurally."""

    RED_SUITS = ("Hearts", "Diamonds")

    def __init__(self) -> None:
        pygame.font.init()
        # SysFont(None) falls back to the default font, which lacks suit glyphs on some systems
        self.fonts = Fonts(
            ui=pygame.font.SysFont(None, 24),
            small=pygame.font.SysFont(None, 18),
            big=pygame.font.SysFont(None, 34),
            card=pygame.font.SysFont("dejavusans,segoeuisymbol,arialunicode", 30),
        )

    def suit_color(self, suit: str) -> tuple[int, int, int]:
        return (200, 30, 40) if suit in self.RED_SUITS else (20, 20, 24)
