from __future__ import annotations

import random
from dataclasses import dataclass, field, replace
from typing import Iterable, Sequence

from .actions import (
    Action,
    ClearInPlayAction,
    ConcedeWarAction,
    MuteAction,
    PauseAction,
    PlayStepAction,
    ResetAction,
    ResumeAction,
    StartAction,
)
from .deck import DECK_SIZE, build_deck, deal, shuffle_rng
from .resolver import EmptyDeckError, resolve_round
from .types import GAME_MODES, Card, GameMode, MatchStatus, Pile
from .war import WAR_BURN, PileTransfer, burn, concede, forfeit_exhausted

Event = dict[str, object]

ACTIVE: tuple[MatchStatus, ...] = ("playing", "war")


@dataclass(frozen=True)
class MatchConfig:
    history_cap: int = 10
    war_burn: int = WAR_BURN
    player1_label: str = "Player 1"
    player2_label: str = "Player 2"
    computer_label: str = "Computer"
    idle_text: str = "Press start to play"
    started_text: str = "The game has begun!"
    round_won_text: str = "{label} wins the round!"
    war_text: str = "WAR!"
    conceded_text: str = "{label} concedes the war!"
    forfeit_text: str = "{label} has no cards left for the war!"
    stakes_drawn_text: str = "Both decks ran dry, {label} wins the draw for the stakes!"
    game_over_text: str = "Game over!"

    def __post_init__(self) -> None:
        if self.history_cap < 1:
            raise ValueError("history_cap must be at least 1")
        if self.war_burn < 0:
            raise ValueError("war_burn must not be negative")


@dataclass(frozen=True)
class HistoryEntry:
    round_no: int
    p1_card: Card
    p2_card: Card
    result_text: str
    is_war: bool


@dataclass(frozen=True)
class RevealedTrick:
    """Display copy of the piles collected by the last resolution."""

    player1: Pile
    player2: Pile
    winner: int | None


@dataclass(frozen=True)
class MatchState:
    config: MatchConfig = field(default_factory=MatchConfig)
    status: MatchStatus = "idle"
    mode: GameMode = "vs_computer"
    seed: int = 0
    shuffles: int = 0
    player1_deck: Pile = ()
    player2_deck: Pile = ()
    player1_in_play: Pile = ()
    player2_in_play: Pile = ()
    revealed: RevealedTrick | None = None
    last_result: str = ""
    last_winner_id: int | None = None  # 0 = tie, 1/2 = collector
    winner: int | None = None
    war_depth: int = 0
    rounds_played: int = 0
    history: tuple[HistoryEntry, ...] = ()
    paused: bool = False
    muted: bool = False

    def label(self, player: int) -> str:
        if player == 1:
            return self.config.player1_label
        if self.mode == "vs_computer":
            return self.config.computer_label
        return self.config.player2_label

    def card_count(self) -> int:
        return (
            len(self.player1_deck)
            + len(self.player2_deck)
            + len(self.player1_in_play)
            + len(self.player2_in_play)
        )

    @property
    def is_active(self) -> bool:
        return self.status in ACTIVE


@dataclass
class StepResult:
    ok: bool
    state: MatchState
    events: list[Event]
    error: str | None = None


def _reject(state: MatchState, msg: str) -> StepResult:
    return StepResult(ok=False, state=state, events=[], error=msg)


def _next_rng(state: MatchState) -> tuple[random.Random, int]:
    return shuffle_rng(state.seed, state.shuffles), state.shuffles + 1


def _commit(prev: MatchState, nxt: MatchState, action: Action, events: list[Event]) -> StepResult:
    if prev.is_active and isinstance(action, (PlayStepAction, ConcedeWarAction)):
        assert prev.card_count() == nxt.card_count(), (
            f"card count changed: {prev.card_count()} -> {nxt.card_count()}"
        )
    return StepResult(ok=True, state=nxt, events=events)


def _push_history(state: MatchState, entry: HistoryEntry) -> tuple[HistoryEntry, ...]:
    return ((entry,) + state.history)[: state.config.history_cap]


def _check_winner(state: MatchState, events: list[Event]) -> MatchState:
    if state.status == "finished":
        return state
    p1_out = not state.player1_deck and not state.player1_in_play
    p2_out = not state.player2_deck and not state.player2_in_play
    if not p1_out and not p2_out:
        return state
    winner = 2 if p1_out else 1
    events.append({"type": "GAME_ENDED", "winner": winner, "reason": "out_of_cards"})
    return replace(
        state,
        status="finished",
        winner=winner,
        paused=False,
        war_depth=0,
        last_result=state.config.game_over_text,
    )


def _apply_transfer(state: MatchState, t: PileTransfer) -> MatchState:
    return replace(
        state,
        status="playing",
        player1_deck=t.deck1,
        player2_deck=t.deck2,
        player1_in_play=(),
        player2_in_play=(),
        revealed=RevealedTrick(player1=t.collected1, player2=t.collected2, winner=t.collector),
        last_winner_id=t.collector,
        war_depth=0,
    )


def _settle_exhausted(state: MatchState, rng: random.Random, events: list[Event]) -> MatchState:
    cfg = state.config
    t = forfeit_exhausted(
        state.player1_deck, state.player2_deck, state.player1_in_play, state.player2_in_play, rng
    )
    nxt = _apply_transfer(state, t)
    if not state.player1_deck and not state.player2_deck:
        events.append(
            {
                "type": "STAKES_DRAWN",
                "winner": t.collector,
                "cards": len(t.collected1) + len(t.collected2),
            }
        )
        return replace(nxt, last_result=cfg.stakes_drawn_text.format(label=state.label(t.collector)))
    loser = 1 if t.collector == 2 else 2
    events.append(
        {
            "type": "WAR_FORFEITED",
            "player": loser,
            "winner": t.collector,
            "cards": len(t.collected1) + len(t.collected2),
        }
    )
    return replace(nxt, last_result=cfg.forfeit_text.format(label=state.label(loser)))


def _play_step(state: MatchState, action: PlayStepAction) -> StepResult:
    if not state.is_active:
        return _reject(state, "Match is not in progress.")
    if state.paused:
        return _reject(state, "Match is paused.")

    cfg = state.config
    events: list[Event] = []
    rng, shuffles = _next_rng(state)
    # the previous trick was already collected; drop its display copy
    base = replace(state, revealed=None, shuffles=shuffles)

    try:
        outcome = resolve_round(
            base.player1_deck, base.player2_deck, base.player1_in_play, base.player2_in_play, rng
        )
    except EmptyDeckError:
        nxt = _settle_exhausted(base, rng, events)
        return _commit(state, _check_winner(nxt, events), action, events)

    events.append(
        {"type": "CARDS_FLIPPED", "p1_card": outcome.p1_card.label, "p2_card": outcome.p2_card.label}
    )
    round_no = state.rounds_played + 1

    if outcome.is_war:
        deck1, pile1, burned1 = burn(outcome.deck1, outcome.pile1, cfg.war_burn)
        deck2, pile2, burned2 = burn(outcome.deck2, outcome.pile2, cfg.war_burn)
        depth = state.war_depth + 1
        text = cfg.war_text
        events.append({"type": "WAR_STARTED", "depth": depth})
        events.append({"type": "WAR_CARDS_BURNED", "player1": burned1, "player2": burned2})
        nxt = replace(
            base,
            status="war",
            player1_deck=deck1,
            player2_deck=deck2,
            player1_in_play=pile1,
            player2_in_play=pile2,
            last_winner_id=0,
            war_depth=depth,
        )
    else:
        winner = outcome.winner_id
        text = cfg.round_won_text.format(label=state.label(winner))
        events.append(
            {
                "type": "ROUND_WON",
                "winner": winner,
                "after_war": state.status == "war",
                "cards": len(outcome.collected1) + len(outcome.collected2),
            }
        )
        nxt = replace(
            base,
            status="playing",
            player1_deck=outcome.deck1,
            player2_deck=outcome.deck2,
            player1_in_play=(),
            player2_in_play=(),
            revealed=RevealedTrick(
                player1=outcome.collected1, player2=outcome.collected2, winner=winner
            ),
            last_winner_id=winner,
            war_depth=0,
        )

    entry = HistoryEntry(
        round_no=round_no,
        p1_card=outcome.p1_card,
        p2_card=outcome.p2_card,
        result_text=text,
        is_war=outcome.is_war,
    )
    nxt = replace(
        nxt,
        last_result=text,
        rounds_played=round_no,
        history=_push_history(state, entry),
    )
    return _commit(state, _check_winner(nxt, events), action, events)


def _concede_war(state: MatchState, action: ConcedeWarAction) -> StepResult:
    if state.status != "war":
        return _reject(state, "No war to concede.")
    if state.paused:
        return _reject(state, "Match is paused.")
    if action.player not in (1, 2):
        return _reject(state, "Unknown player.")

    events: list[Event] = []
    rng, shuffles = _next_rng(state)
    t = concede(
        action.player,
        state.player1_deck,
        state.player2_deck,
        state.player1_in_play,
        state.player2_in_play,
        rng,
    )
    events.append(
        {
            "type": "WAR_CONCEDED",
            "player": action.player,
            "winner": t.collector,
            "cards": len(t.collected1) + len(t.collected2),
        }
    )
    nxt = replace(
        _apply_transfer(state, t),
        shuffles=shuffles,
        last_result=state.config.conceded_text.format(label=state.label(action.player)),
    )
    return _commit(state, _check_winner(nxt, events), action, events)


def _start(state: MatchState, action: StartAction) -> StepResult:
    if action.mode not in GAME_MODES:
        return _reject(state, f"Unknown game mode: {action.mode!r}")
    if isinstance(action.seed, bool) or not isinstance(action.seed, int):
        return _reject(state, "Seed must be an integer.")

    deck = build_deck(shuffle_rng(action.seed, 0))
    deck1, deck2 = deal(deck)
    nxt = MatchState(
        config=state.config,
        status="playing",
        mode=action.mode,
        seed=action.seed,
        shuffles=1,
        player1_deck=deck1,
        player2_deck=deck2,
        last_result=state.config.started_text,
        muted=state.muted,
    )
    assert nxt.card_count() == DECK_SIZE
    events: list[Event] = [{"type": "MATCH_STARTED", "mode": action.mode, "seed": action.seed}]
    return _commit(state, nxt, action, events)


def _reset(state: MatchState, action: ResetAction) -> StepResult:
    nxt = MatchState(
        config=state.config,
        mode=state.mode,
        muted=state.muted,
        last_result=state.config.idle_text,
    )
    return StepResult(ok=True, state=nxt, events=[{"type": "RESET"}])


def _set_paused(state: MatchState, action: PauseAction | ResumeAction) -> StepResult:
    if not state.is_active:
        return _reject(state, "Match is not in progress.")
    paused = isinstance(action, PauseAction)
    nxt = replace(state, paused=paused)
    return _commit(state, nxt, action, [{"type": "PAUSED" if paused else "RESUMED"}])


def step(state: MatchState, action: Action) -> StepResult:
    """Apply one action and return the next state.

    ``state`` is never modified. Rejected actions return ``ok=False`` together
    with the unchanged state.
    """
    if isinstance(action, PlayStepAction):
        return _play_step(state, action)
    if isinstance(action, ConcedeWarAction):
        return _concede_war(state, action)
    if isinstance(action, StartAction):
        return _start(state, action)
    if isinstance(action, (PauseAction, ResumeAction)):
        return _set_paused(state, action)
    if isinstance(action, MuteAction):
        nxt = replace(state, muted=bool(action.muted))
        return _commit(state, nxt, action, [{"type": "MUTED", "muted": nxt.muted}])
    if isinstance(action, ClearInPlayAction):
        if state.revealed is None:
            return StepResult(ok=True, state=state, events=[])
        return _commit(state, replace(state, revealed=None), action, [{"type": "IN_PLAY_CLEARED"}])
    if isinstance(action, ResetAction):
        return _reset(state, action)
    return _reject(state, "Unknown action.")


def new_match(
    deck1: Sequence[Card],
    deck2: Sequence[Card],
    seed: int = 0,
    mode: GameMode = "two_players",
    config: MatchConfig | None = None,
) -> MatchState:
    """A playing state with hand-picked decks (front = next card to flip)."""
    cfg = config or MatchConfig()
    d1, d2 = tuple(deck1), tuple(deck2)
    if len(set(d1 + d2)) != len(d1) + len(d2):
        raise ValueError("Decks must not share or repeat cards.")
    if mode not in GAME_MODES:
        raise ValueError(f"Unknown game mode: {mode!r}")
    state = MatchState(
        config=cfg,
        status="playing",
        mode=mode,
        seed=seed,
        shuffles=1,
        player1_deck=d1,
        player2_deck=d2,
        last_result=cfg.started_text,
    )
    return _check_winner(state, [])


def replay(
    actions: Iterable[Action],
    initial: MatchState | None = None,
) -> MatchState:
    state = initial or MatchState()
    for a in actions:
        state = step(state, a).state
    return state


def can_step(state: MatchState) -> bool:
    return state.is_active and not state.paused


def can_concede(state: MatchState) -> bool:
    return state.status == "war" and not state.paused


def conceding_players(state: MatchState) -> tuple[int, ...]:
    """Players at the table who may concede the current war.

    Against the computer only player 1 has controls.
    """
    if not can_concede(state):
        return ()
    return (1, 2) if state.mode == "two_players" else (1,)
