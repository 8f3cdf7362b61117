from __future__ import annotations

import random
from collections.abc import Sequence

from .types import RANKS, SUITS, Card, Pile

DECK_SIZE = len(SUITS) * len(RANKS)


def shuffle_rng(seed: int, counter: int) -> random.Random:
    """Independent RNG for the ``counter``-th shuffle of a match seeded with ``seed``."""
    return random.Random(f"{seed}:{counter}")


def shuffled(items: Sequence[Card], rng: random.Random) -> Pile:
    out = list(items)
    # random.shuffle is Fisher-Yates: i from last down to 1, swap with j <= i
    rng.shuffle(out)
    return tuple(out)


def build_deck(rng: random.Random) -> Pile:
    ordered = [Card(suit=suit, rank=rank) for suit in SUITS for rank in RANKS]
    return shuffled(ordered, rng)


def deal(deck: Sequence[Card]) -> tuple[Pile, Pile]:
    if len(deck) % 2 != 0:
        raise ValueError("Deck must have an even number of cards.")
    half = len(deck) // 2
    return tuple(deck[:half]), tuple(deck[half:])
