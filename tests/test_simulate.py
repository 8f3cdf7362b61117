from __future__ import annotations

import json

import pytest

from milchama.engine.match import MatchConfig
from milchama.simulate import autoplay, main


def test_autoplay_respects_step_limit() -> None:
    state = autoplay(seed=31, max_steps=10)
    assert state.rounds_played <= 10
    assert state.card_count() == 52


def test_autoplay_finishes_a_match() -> None:
    # War has no upper bound on length; at least one of a few seeds must finish
    states = [autoplay(seed=s, max_steps=50_000, config=MatchConfig(history_cap=5)) for s in range(3)]
    state = next(s for s in states if s.status == "finished")
    assert state.status == "finished"
    assert state.winner in (1, 2)
    assert len(state.history) <= 5


def test_autoplay_rejects_unknown_mode() -> None:
    with pytest.raises(ValueError):
        autoplay(seed=1, mode="solo")  # type: ignore[arg-type]


def test_cli_prints_snapshot(capsys: pytest.CaptureFixture[str]) -> None:
    code = main(["--seed", "8", "--max-steps", "50000", "--mode", "vs_computer"])
    out = json.loads(capsys.readouterr().out)
    assert code == (0 if out["status"] == "finished" else 1)
    assert out["mode"] == "vs_computer"
    assert "history" not in out
