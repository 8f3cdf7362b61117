"""Match session: owns the current state and the side effects around it.

The engine reducer is pure; this module adds the parts that are not:
the in-flight latch on ``step``, seed generation, telemetry and
fire-and-forget commentary requests.
"""

from __future__ import annotations

import logging
import secrets
import threading
from concurrent.futures import Executor, Future, ThreadPoolExecutor, wait
from typing import Callable

from milchama.engine.actions import (
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
from milchama.engine.match import MatchState, StepResult, replay, step
from milchama.engine.serialize import full_dump, snapshot
from milchama.engine.types import GameMode
from milchama.services.commentary import CommentaryProvider, RoundSummary
from milchama.services.content import CommentaryTexts, RulesConfig
from milchama.services.telemetry import TelemetryService

logger = logging.getLogger(__name__)

TIE_LABEL = "Tie"


def _random_seed() -> int:
    return secrets.randbits(63)


class MatchSession:
    def __init__(
        self,
        rules: RulesConfig | None = None,
        commentary: CommentaryProvider | None = None,
        telemetry: TelemetryService | None = None,
        executor: Executor | None = None,
        seed_source: Callable[[], int] = _random_seed,
    ) -> None:
        if rules is None:
            from milchama.paths import get_paths
            from milchama.services.content import ContentService

            paths = get_paths()
            rules = ContentService(paths.data_dir, paths.schema_dir).load_rules()
        self.rules = rules
        self._texts: CommentaryTexts = rules.commentary
        self._provider = commentary
        self._telemetry = telemetry
        self._seed_source = seed_source
        self._owns_executor = executor is None and commentary is not None
        self._executor = executor
        if self._owns_executor:
            self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="commentary")

        self._lock = threading.Lock()
        self._in_flight = threading.Lock()
        self._state = MatchState(config=rules.match, last_result=rules.match.idle_text)
        # accepted actions since the last start or reset, replayed from _log_base
        self._log_base = self._state
        self._actions: list[Action] = []
        self._commentary_text = self._texts.ready
        self._generation = 0
        self._pending: set[Future[str]] = set()

    @property
    def state(self) -> MatchState:
        return self._state

    @property
    def commentary(self) -> str:
        return self._commentary_text

    @property
    def action_log(self) -> tuple[Action, ...]:
        with self._lock:
            return tuple(self._actions)

    def replay_log(self) -> MatchState:
        """Rebuild the current state from the action log."""
        with self._lock:
            base, actions = self._log_base, list(self._actions)
        return replay(actions, initial=base)

    def _apply(self, action: Action) -> StepResult:
        with self._lock:
            result = step(self._state, action)
            if result.ok:
                prev, self._state = self._state, result.state
                if isinstance(action, StartAction):
                    self._generation += 1
                    self._commentary_text = self._texts.greeting(action.mode)
                    self._log_base = MatchState(config=prev.config, muted=prev.muted)
                    self._actions = [action]
                elif isinstance(action, ResetAction):
                    self._generation += 1
                    self._commentary_text = self._texts.ready
                    self._log_base = result.state
                    self._actions = []
                else:
                    self._actions.append(action)
        if result.ok and self._telemetry is not None:
            self._telemetry.log_events(result.events)
        return result

    def start(self, mode: GameMode, seed: int | None = None) -> StepResult:
        return self._apply(StartAction(mode=mode, seed=self._seed_source() if seed is None else seed))

    def step(self) -> StepResult:
        """Advance one comparison or one war layer.

        A call that arrives while another step is still committing is ignored.
        """
        if not self._in_flight.acquire(blocking=False):
            return StepResult(ok=False, state=self._state, events=[], error="Step already in flight.")
        try:
            result = self._apply(PlayStepAction())
            if result.ok:
                self._request_commentary(result)
            return result
        finally:
            self._in_flight.release()

    def concede_war(self, player: int = 1) -> StepResult:
        return self._apply(ConcedeWarAction(player=player))

    def pause(self) -> StepResult:
        return self._apply(PauseAction())

    def resume(self) -> StepResult:
        return self._apply(ResumeAction())

    def toggle_pause(self) -> StepResult:
        return self.resume() if self._state.paused else self.pause()

    def set_muted(self, muted: bool) -> StepResult:
        return self._apply(MuteAction(muted=muted))

    def clear_in_play(self) -> StepResult:
        return self._apply(ClearInPlayAction())

    def reset(self) -> StepResult:
        return self._apply(ResetAction())

    def snapshot(self) -> dict[str, object]:
        with self._lock:
            snap = snapshot(self._state)
            snap["commentary"] = self._commentary_text
        return snap

    def dump(self) -> dict[str, object]:
        with self._lock:
            return full_dump(self._state, self._actions)

    def _request_commentary(self, result: StepResult) -> None:
        if self._provider is None or self._executor is None:
            return
        flipped = next((e for e in result.events if e.get("type") == "CARDS_FLIPPED"), None)
        if flipped is None:
            return
        st = result.state
        entry = st.history[0]
        if entry.is_war:
            winner_label = TIE_LABEL
        else:
            winner_label = st.label(st.last_winner_id or 1)
        summary = RoundSummary(
            rank1=entry.p1_card.rank,
            rank2=entry.p2_card.rank,
            winner_label=winner_label,
            is_war=entry.is_war,
            count1=len(st.player1_deck),
            count2=len(st.player2_deck),
        )
        with self._lock:
            generation = self._generation
        fut = self._executor.submit(self._produce_commentary, summary, generation)
        with self._lock:
            self._pending.add(fut)
        # runs immediately if the future is already done
        fut.add_done_callback(self._forget)

    def _forget(self, fut: Future[str]) -> None:
        with self._lock:
            self._pending.discard(fut)

    def _produce_commentary(self, s: RoundSummary, generation: int) -> str:
        assert self._provider is not None
        try:
            text = self._provider.generate(
                s.rank1, s.rank2, s.winner_label, s.is_war, s.count1, s.count2
            )
        except Exception as e:
            logger.warning("Commentary failed, using fallback: %s", e)
            text = self._texts.fallback
        if not text:
            text = self._texts.empty
        with self._lock:
            # a restart or reset makes late replies stale
            if generation == self._generation:
                self._commentary_text = text
        return text

    def flush(self, timeout: float | None = None) -> None:
        """Wait for outstanding commentary requests."""
        with self._lock:
            pending = list(self._pending)
        if pending:
            wait(pending, timeout=timeout)
        with self._lock:
            self._pending = {f for f in self._pending if not f.done()}

    def close(self) -> None:
        if self._owns_executor and self._executor is not None:
            self._executor.shutdown(wait=False, cancel_futures=True)
