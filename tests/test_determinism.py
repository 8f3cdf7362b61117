from __future__ import annotations

from milchama.engine.actions import (
    Action,
    ConcedeWarAction,
    MuteAction,
    PauseAction,
    PlayStepAction,
    ResumeAction,
    StartAction,
)
from milchama.engine.match import MatchState, replay, step
from milchama.engine.serialize import full_dump, snapshot


def _play(seed: int, steps: int) -> tuple[MatchState, list[Action]]:
    log: list[Action] = []

    def apply(state: MatchState, action: Action) -> MatchState:
        res = step(state, action)
        if res.ok:
            log.append(action)
        return res.state

    state = apply(MatchState(), StartAction(mode="vs_computer", seed=seed))
    for i in range(steps):
        if state.status == "finished":
            break
        if i == 5:
            state = apply(state, PauseAction())
            state = apply(state, PlayStepAction())  # rejected, not logged
            state = apply(state, ResumeAction())
        if state.status == "war" and i % 2 == 0:
            state = apply(state, ConcedeWarAction(player=2))
            continue
        state = apply(state, PlayStepAction())
    return apply(state, MuteAction(muted=True)), log


def test_engine_determinism_replay() -> None:
    state1, log1 = _play(seed=424242, steps=300)
    state2, log2 = _play(seed=424242, steps=300)
    assert full_dump(state1, log1) == full_dump(state2, log2)
    assert PlayStepAction() in log1

    replayed = replay(log1)
    assert replayed == state1
    assert snapshot(replayed) == snapshot(state1)


def test_different_seeds_diverge() -> None:
    a = step(MatchState(), StartAction(mode="two_players", seed=1)).state
    b = step(MatchState(), StartAction(mode="two_players", seed=2)).state
    assert a.player1_deck != b.player1_deck


def test_snapshot_is_json_ready() -> None:
    import json

    state, log = _play(seed=3, steps=40)
    snap = snapshot(state)
    for key in (
        "status",
        "player1_deck_count",
        "player2_deck_count",
        "player1_in_play",
        "player2_in_play",
        "last_result",
        "winner",
        "history",
    ):
        assert key in snap
    assert snap["player1_deck_count"] + snap["player2_deck_count"] + len(snap["player1_in_play"]) + len(
        snap["player2_in_play"]
    ) == 52
    dumped = json.loads(json.dumps(full_dump(state, log), ensure_ascii=False))
    assert dumped["action_log"][0] == {"type": "start", "mode": "vs_computer", "seed": 3}
