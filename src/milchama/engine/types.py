from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

Suit = Literal["Hearts", "Diamonds", "Clubs", "Spades"]
Rank = Literal["2", "3", "4", "5", "6", "7", "8", "9", "10", "J", "Q", "K", "A"]

GameMode = Literal["vs_computer", "two_players"]
MatchStatus = Literal["idle", "playing", "war", "finished"]

SUITS: tuple[Suit, ...] = ("Hearts", "Diamonds", "Clubs", "Spades")
RANKS: tuple[Rank, ...] = ("2", "3", "4", "5", "6", "7", "8", "9", "10", "J", "Q", "K", "A")
GAME_MODES: tuple[GameMode, ...] = ("vs_computer", "two_players")

RANK_VALUES: dict[str, int] = {rank: i + 2 for i, rank in enumerate(RANKS)}

SUIT_SYMBOLS: dict[str, str] = {
    "Hearts": "♥",
    "Diamonds": "♦",
    "Clubs": "♣",
    "Spades": "♠",
}

_SUIT_LETTERS: dict[str, Suit] = {"H": "Hearts", "D": "Diamonds", "C": "Clubs", "S": "Spades"}


@dataclass(frozen=True)
class Card:
    suit: Suit
    rank: Rank

    @property
    def value(self) -> int:
        return RANK_VALUES[self.rank]

    @property
    def label(self) -> str:
        return f"{self.rank}{SUIT_SYMBOLS[self.suit]}"

    def __str__(self) -> str:
        return self.label

    @staticmethod
    def parse(code: str) -> "Card":
        """Parse a short code such as ``"7C"``, ``"10H"`` or ``"A♠"``."""
        code = code.strip()
        if len(code) < 2:
            raise ValueError(f"Invalid card code: {code!r}")
        rank, suit_part = code[:-1].upper(), code[-1]
        suit: Suit | None = _SUIT_LETTERS.get(suit_part.upper())
        if suit is None:
            for name, symbol in SUIT_SYMBOLS.items():
                if symbol == suit_part:
                    suit = name  # type: ignore[assignment]
        if suit is None or rank not in RANK_VALUES:
            raise ValueError(f"Invalid card code: {code!r}")
        return Card(suit=suit, rank=rank)  # type: ignore[arg-type]


Pile = tuple[Card, ...]


def cards(*codes: str) -> Pile:
    return tuple(Card.parse(c) for c in codes)
