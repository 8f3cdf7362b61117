from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol


class CommentaryError(RuntimeError):
    pass


@dataclass(frozen=True)
class RoundSummary:
    rank1: str
    rank2: str
    winner_label: str
    is_war: bool
    count1: int
    count2: int


class CommentaryProvider(Protocol):
    def generate(
        self,
        rank1: str,
        rank2: str,
        winner_label: str,
        is_war: bool,
        count1: int,
        count2: int,
    ) -> str: ...


class StaticCommentary:
    """Offline provider: always returns the same phrase."""

    def __init__(self, phrase: str) -> None:
        self.phrase = phrase

    def generate(
        self,
        rank1: str,
        rank2: str,
        winner_label: str,
        is_war: bool,
        count1: int,
        count2: int,
    ) -> str:
        return self.phrase


def build_prompt(s: RoundSummary) -> str:
    return (
        "You are a witty and energetic sports commentator for a game of 'War' (card game).\n"
        "The last round:\n"
        f"Player 1 flipped: {s.rank1}\n"
        f"Player 2 flipped: {s.rank2}\n"
        f"Winner: {s.winner_label}\n"
        f"Was it a War?: {'YES!' if s.is_war else 'No'}\n"
        f"Cards left: Player 1 has {s.count1}, Player 2 has {s.count2}.\n\n"
        "Provide a very short, punchy, and exciting reaction (maximum 15 words)."
    )
