from __future__ import annotations

from dataclasses import dataclass

from .types import GameMode


@dataclass(frozen=True)
class StartAction:
    mode: GameMode
    seed: int


@dataclass(frozen=True)
class PlayStepAction:
    pass


@dataclass(frozen=True)
class ConcedeWarAction:
    player: int = 1


@dataclass(frozen=True)
class PauseAction:
    pass


@dataclass(frozen=True)
class ResumeAction:
    pass


@dataclass(frozen=True)
class MuteAction:
    muted: bool


@dataclass(frozen=True)
class ClearInPlayAction:
    pass


@dataclass(frozen=True)
class ResetAction:
    pass


Action = (
    StartAction
    | PlayStepAction
    | ConcedeWarAction
    | PauseAction
    | ResumeAction
    | MuteAction
    | ClearInPlayAction
    | ResetAction
)
