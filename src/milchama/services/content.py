from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping

from jsonschema import Draft202012Validator

from milchama.engine.match import MatchConfig
from milchama.engine.types import GameMode


class ContentError(RuntimeError):
    pass


def _load_json(path: Path) -> object:
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError as e:
        raise ContentError(f"Missing content file: {path}") from e
    except json.JSONDecodeError as e:
        raise ContentError(f"Invalid JSON in {path}: {e}") from e


def validate_json(instance: object, schema: object, *, context: str) -> None:
    validator = Draft202012Validator(schema)
    errors = sorted(validator.iter_errors(instance), key=lambda e: list(e.path))
    if errors:
        lines = [f"Schema validation failed for {context}:"]
        for err in errors[:10]:
            loc = "/".join(str(p) for p in err.absolute_path)
            lines.append(f"- {loc}: {err.message}")
        raise ContentError("\n".join(lines))


def _require_map(obj: Mapping[str, object], key: str) -> Mapping[str, object]:
    v = obj.get(key)
    if not isinstance(v, dict):
        raise ContentError(f"Expected object for {key}")
    return v


def _require_str(obj: Mapping[str, object], key: str) -> str:
    v = obj.get(key)
    if not isinstance(v, str):
        raise ContentError(f"Expected string for {key}")
    return v


def _require_int(obj: Mapping[str, object], key: str) -> int:
    v = obj.get(key)
    if not isinstance(v, int) or isinstance(v, bool):
        raise ContentError(f"Expected int for {key}")
    return v


@dataclass(frozen=True)
class CommentaryTexts:
    ready: str
    fallback: str
    empty: str
    greetings: dict[str, str]

    def greeting(self, mode: GameMode) -> str:
        return self.greetings.get(mode, self.ready)


@dataclass(frozen=True)
class RulesConfig:
    match: MatchConfig
    commentary: CommentaryTexts


def parse_rules(raw: Mapping[str, object]) -> RulesConfig:
    labels = _require_map(raw, "labels")
    texts = _require_map(raw, "texts")
    comm = _require_map(raw, "commentary")
    greetings_raw = _require_map(comm, "greetings")

    match = MatchConfig(
        history_cap=_require_int(raw, "history_cap"),
        war_burn=_require_int(raw, "war_burn"),
        player1_label=_require_str(labels, "player1"),
        player2_label=_require_str(labels, "player2"),
        computer_label=_require_str(labels, "computer"),
        idle_text=_require_str(texts, "idle"),
        started_text=_require_str(texts, "started"),
        round_won_text=_require_str(texts, "round_won"),
        war_text=_require_str(texts, "war"),
        conceded_text=_require_str(texts, "conceded"),
        forfeit_text=_require_str(texts, "forfeit"),
        stakes_drawn_text=_require_str(texts, "stakes_drawn"),
        game_over_text=_require_str(texts, "game_over"),
    )
    commentary = CommentaryTexts(
        ready=_require_str(comm, "ready"),
        fallback=_require_str(comm, "fallback"),
        empty=_require_str(comm, "empty"),
        greetings={k: v for k, v in greetings_raw.items() if isinstance(v, str)},
    )
    return RulesConfig(match=match, commentary=commentary)


class ContentService:
    def __init__(self, data_dir: Path, schema_dir: Path) -> None:
        self._data_dir = data_dir
        self._schema_dir = schema_dir

    def load_rules(self, path: Path | None = None) -> RulesConfig:
        rules_path = path or self._data_dir / "rules.json"
        schema = _load_json(self._schema_dir / "rules.schema.json")
        raw = _load_json(rules_path)
        validate_json(raw, schema, context=str(rules_path))
        if not isinstance(raw, dict):
            raise ContentError("rules.json must be an object")
        return parse_rules(raw)

    def validate_all(self) -> None:
        # Load is validation (schema + parse)
        _ = self.load_rules()
