from __future__ import annotations

import random
from dataclasses import dataclass
from typing import Literal

from .deck import shuffled
from .types import Card, Pile

WinnerId = Literal[0, 1, 2]


class EmptyDeckError(Exception):
    """Raised when a side has no top card to flip."""

    def __init__(self, player1_empty: bool, player2_empty: bool) -> None:
        self.player1_empty = player1_empty
        self.player2_empty = player2_empty
        sides = [str(p) for p, empty in ((1, player1_empty), (2, player2_empty)) if empty]
        super().__init__(f"Deck empty for player(s) {', '.join(sides)}")


@dataclass(frozen=True)
class RoundOutcome:
    winner_id: WinnerId
    is_war: bool
    p1_card: Card
    p2_card: Card
    deck1: Pile
    deck2: Pile
    pile1: Pile
    pile2: Pile
    # piles as they stood when collected; empty on a tie
    collected1: Pile = ()
    collected2: Pile = ()


def compare(p1_card: Card, p2_card: Card) -> WinnerId:
    if p1_card.value > p2_card.value:
        return 1
    if p2_card.value > p1_card.value:
        return 2
    return 0


def award(deck: Pile, pile1: Pile, pile2: Pile, rng: random.Random) -> Pile:
    """Both piles, shuffled, onto the bottom of ``deck``."""
    return deck + shuffled(pile1 + pile2, rng)


def resolve_round(
    deck1: Pile,
    deck2: Pile,
    pile1: Pile,
    pile2: Pile,
    rng: random.Random,
) -> RoundOutcome:
    if not deck1 or not deck2:
        raise EmptyDeckError(player1_empty=not deck1, player2_empty=not deck2)

    p1_card, p2_card = deck1[0], deck2[0]
    deck1, deck2 = deck1[1:], deck2[1:]
    pile1, pile2 = pile1 + (p1_card,), pile2 + (p2_card,)

    winner = compare(p1_card, p2_card)
    if winner == 0:
        return RoundOutcome(
            winner_id=0,
            is_war=True,
            p1_card=p1_card,
            p2_card=p2_card,
            deck1=deck1,
            deck2=deck2,
            pile1=pile1,
            pile2=pile2,
        )

    if winner == 1:
        deck1 = award(deck1, pile1, pile2, rng)
    else:
        deck2 = award(deck2, pile1, pile2, rng)
    return RoundOutcome(
        winner_id=winner,
        is_war=False,
        p1_card=p1_card,
        p2_card=p2_card,
        deck1=deck1,
        deck2=deck2,
        pile1=(),
        pile2=(),
        collected1=pile1,
        collected2=pile2,
    )
