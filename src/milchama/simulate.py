from __future__ import annotations

import argparse
import json

from milchama.engine.actions import PlayStepAction, StartAction
from milchama.engine.match import MatchConfig, MatchState, step
from milchama.engine.serialize import snapshot
from milchama.engine.types import GAME_MODES, GameMode
from milchama.paths import get_paths
from milchama.services.content import ContentService


def autoplay(
    seed: int,
    mode: GameMode = "two_players",
    max_steps: int = 10_000,
    config: MatchConfig | None = None,
) -> MatchState:
    """Play a match from ``seed`` until it finishes or ``max_steps`` flips were made."""
    res = step(MatchState(config=config or MatchConfig()), StartAction(mode=mode, seed=seed))
    if not res.ok:
        raise ValueError(res.error)
    state = res.state
    for _ in range(max_steps):
        if state.status == "finished":
            break
        state = step(state, PlayStepAction()).state
    return state


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(prog="milchama-sim", description="Play a headless game of War.")
    parser.add_argument("--seed", type=int, default=0)
    parser.add_argument("--mode", choices=GAME_MODES, default="two_players")
    parser.add_argument("--max-steps", type=int, default=10_000)
    parser.add_argument("--history", action="store_true", help="include the history window")
    args = parser.parse_args(argv)

    paths = get_paths()
    rules = ContentService(paths.data_dir, paths.schema_dir).load_rules()
    state = autoplay(args.seed, mode=args.mode, max_steps=args.max_steps, config=rules.match)

    snap = snapshot(state)
    if not args.history:
        snap.pop("history")
    print(json.dumps(snap, ensure_ascii=False, indent=2))
    return 0 if state.status == "finished" else 1


if __name__ == "__main__":
    raise SystemExit(main())
