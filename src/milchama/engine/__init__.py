"""Deterministic, headless War rules engine.

IMPORTANT: This package must never import pygame.
"""

from .actions import (
    ClearInPlayAction,
    ConcedeWarAction,
    MuteAction,
    PauseAction,
    PlayStepAction,
    ResetAction,
    ResumeAction,
    StartAction,
)
from .deck import build_deck, deal
from .match import MatchConfig, MatchState, StepResult, new_match, replay, step
from .resolver import EmptyDeckError, resolve_round
from .types import Card, GameMode, MatchStatus, Rank, Suit

__all__ = [
    "Card",
    "ClearInPlayAction",
    "ConcedeWarAction",
    "EmptyDeckError",
    "GameMode",
    "MatchConfig",
    "MatchState",
    "MatchStatus",
    "MuteAction",
    "PauseAction",
    "PlayStepAction",
    "Rank",
    "ResetAction",
    "ResumeAction",
    "StartAction",
    "StepResult",
    "Suit",
    "build_deck",
    "deal",
    "new_match",
    "replay",
    "resolve_round",
    "step",
]
