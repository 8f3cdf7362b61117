"""War chain helpers: burning face-down cards, exhaustion and concession.

All functions are pure: they take tuples and return new tuples.
"""

from __future__ import annotations

import random
from dataclasses import dataclass

from .resolver import award
from .types import Pile

WAR_BURN = 3


@dataclass(frozen=True)
class PileTransfer:
    deck1: Pile
    deck2: Pile
    collector: int
    collected1: Pile
    collected2: Pile


def burn(deck: Pile, pile: Pile, count: int = WAR_BURN) -> tuple[Pile, Pile, int]:
    """Move up to ``count`` cards from the front of ``deck`` onto ``pile``.

    A short deck burns everything it has. Returns (deck, pile, burned).
    """
    n = max(0, min(count, len(deck)))
    return deck[n:], pile + deck[:n], n


def forfeit_exhausted(
    deck1: Pile,
    deck2: Pile,
    pile1: Pile,
    pile2: Pile,
    rng: random.Random,
) -> PileTransfer:
    """Settle a war in which at least one side has nothing left to flip.

    The side that cannot flip loses the stakes. If neither side can flip,
    a draw from ``rng`` decides who takes them, which ends the match.
    """
    if not deck1 and not deck2:
        collector = rng.choice((1, 2))
        stakes = award((), pile1, pile2, rng)
        return PileTransfer(
            deck1=stakes if collector == 1 else (),
            deck2=stakes if collector == 2 else (),
            collector=collector,
            collected1=pile1,
            collected2=pile2,
        )
    if not deck1:
        return PileTransfer(
            deck1=deck1,
            deck2=award(deck2, pile1, pile2, rng),
            collector=2,
            collected1=pile1,
            collected2=pile2,
        )
    if not deck2:
        return PileTransfer(
            deck1=award(deck1, pile1, pile2, rng),
            deck2=deck2,
            collector=1,
            collected1=pile1,
            collected2=pile2,
        )
    raise ValueError("Both sides can still flip; nothing to forfeit.")


def concede(
    conceder: int,
    deck1: Pile,
    deck2: Pile,
    pile1: Pile,
    pile2: Pile,
    rng: random.Random,
) -> PileTransfer:
    """All stakes, shuffled, to the opponent of ``conceder``."""
    if conceder == 1:
        return PileTransfer(
            deck1=deck1,
            deck2=award(deck2, pile1, pile2, rng),
            collector=2,
            collected1=pile1,
            collected2=pile2,
        )
    if conceder == 2:
        return PileTransfer(
            deck1=award(deck1, pile1, pile2, rng),
            deck2=deck2,
            collector=1,
            collected1=pile1,
            collected2=pile2,
        )
    raise ValueError(f"Unknown player: {conceder}")
