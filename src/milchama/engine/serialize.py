from __future__ import annotations

from dataclasses import asdict
from typing import Iterable

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
from .match import HistoryEntry, MatchState, RevealedTrick
from .types import Card, Pile


def card_to_dict(c: Card) -> dict[str, object]:
    return {"suit": c.suit, "rank": c.rank, "value": c.value, "label": c.label}


def _pile_to_list(p: Pile) -> list[dict[str, object]]:
    return [card_to_dict(c) for c in p]


def action_to_dict(a: Action) -> dict[str, object]:
    if isinstance(a, StartAction):
        return {"type": "start", "mode": a.mode, "seed": a.seed}
    if isinstance(a, PlayStepAction):
        return {"type": "step"}
    if isinstance(a, ConcedeWarAction):
        return {"type": "concede_war", "player": a.player}
    if isinstance(a, PauseAction):
        return {"type": "pause"}
    if isinstance(a, ResumeAction):
        return {"type": "resume"}
    if isinstance(a, MuteAction):
        return {"type": "mute", "muted": a.muted}
    if isinstance(a, ClearInPlayAction):
        return {"type": "clear_in_play"}
    if isinstance(a, ResetAction):
        return {"type": "reset"}
    # should be unreachable
    return {"type": "unknown"}


def _history_to_dict(h: HistoryEntry) -> dict[str, object]:
    return {
        "round_no": h.round_no,
        "p1_card": card_to_dict(h.p1_card),
        "p2_card": card_to_dict(h.p2_card),
        "result_text": h.result_text,
        "is_war": h.is_war,
    }


def _revealed_to_dict(r: RevealedTrick | None) -> dict[str, object] | None:
    if r is None:
        return None
    return {
        "player1": _pile_to_list(r.player1),
        "player2": _pile_to_list(r.player2),
        "winner": r.winner,
    }


def snapshot(state: MatchState) -> dict[str, object]:
    """Return a JSON-serializable read-only view of the match for presentation layers."""
    return {
        "status": state.status,
        "mode": state.mode,
        "player1_deck_count": len(state.player1_deck),
        "player2_deck_count": len(state.player2_deck),
        "player1_in_play": _pile_to_list(state.player1_in_play),
        "player2_in_play": _pile_to_list(state.player2_in_play),
        "revealed": _revealed_to_dict(state.revealed),
        "last_result": state.last_result,
        "last_winner_id": state.last_winner_id,
        "winner": state.winner,
        "winner_label": state.label(state.winner) if state.winner is not None else None,
        "war_depth": state.war_depth,
        "rounds_played": state.rounds_played,
        "paused": state.paused,
        "muted": state.muted,
        "history": [_history_to_dict(h) for h in state.history],
    }


def full_dump(state: MatchState, actions: Iterable[Action] = ()) -> dict[str, object]:
    """Canonical dump including deck order, seed and the given action log (for replays)."""
    out = snapshot(state)
    out.update(
        {
            "seed": state.seed,
            "shuffles": state.shuffles,
            "config": asdict(state.config),
            "player1_deck": _pile_to_list(state.player1_deck),
            "player2_deck": _pile_to_list(state.player2_deck),
            "action_log": [action_to_dict(a) for a in actions],
        }
    )
    return out
