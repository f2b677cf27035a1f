"""engine.runlog

Small helpers for storing run logs.

A run log is JSON-serializable so it can be exported/imported later and
replayed to prove the run is reproducible from its seed.
"""

from __future__ import annotations

import json
from typing import Any, Dict, List, Tuple

from core.commands import Command, command_from_dict, command_to_dict
from core.state import GameState, state_from_dict, state_to_dict

from .config import EngineConfig, config_from_mapping, config_to_dict
from .pipeline import EngineOutput, new_game, step

RUNLOG_VERSION = 1


def make_run_export(*, seed: int, config: EngineConfig, initial_state: GameState, intro: List[str]) -> Dict[str, Any]:
    return {
        "version": RUNLOG_VERSION,
        "seed": int(seed),
        "config": config_to_dict(config),
        "initial_state": state_to_dict(initial_state),
        "intro": list(intro),
        "turns": [],
    }


def record_turn(run: Dict[str, Any], cmd: Command, out: EngineOutput, state: GameState) -> Dict[str, Any]:
    """Return a copy of `run` with one more turn entry appended."""
    entry = {"command": command_to_dict(cmd), "lines": list(out.lines), "state": state_to_dict(state)}
    return {**run, "turns": [*list(run.get("turns", [])), entry]}


def dumps_run_export(obj: Dict[str, Any]) -> str:
    return json.dumps(obj, ensure_ascii=False, indent=2, sort_keys=True)


def loads_run_export(text: str) -> Dict[str, Any]:
    obj = json.loads(text)
    if not isinstance(obj, dict):
        raise ValueError("Run export root is not an object")
    if int(obj.get("version", 0)) != RUNLOG_VERSION:
        raise ValueError(f"Unsupported run export version: {obj.get('version')!r}")
    if "seed" not in obj:
        raise ValueError("Run export has no seed")
    return obj


def last_state(run: Dict[str, Any]) -> GameState:
    turns = list(run.get("turns", []))
    if turns:
        return state_from_dict(turns[-1]["state"])
    return state_from_dict(run["initial_state"])


def replay_run(run: Dict[str, Any]) -> Tuple[GameState, List[str]]:
    """Re-run every recorded command from the seed and verify output matches.

    Raises ValueError on the first diverging turn. Runs containing a seedless
    restart cannot be replayed past that point.
    """
    cfg = config_from_mapping(dict(run.get("config", {})))
    state, out = new_game(int(run["seed"]), cfg)
    lines = list(out.lines)
    if run.get("intro") is not None and list(run["intro"]) != lines:
        raise ValueError("Replay diverged at game start")

    for i, entry in enumerate(list(run.get("turns", []))):
        cmd = command_from_dict(dict(entry["command"]))
        if cmd.kind == "restart" and getattr(cmd, "seed", None) is None:
            raise ValueError(f"Turn {i}: seedless restart cannot be replayed")
        state, out = step(state, cmd, cfg)
        if list(out.lines) != list(entry.get("lines", [])):
            raise ValueError(f"Replay diverged at entry {i} ({cmd.kind})")
        lines.extend(out.lines)
    return state, lines
