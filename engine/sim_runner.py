"""engine.sim_runner

Headless runner for quick sanity checks.

This keeps tests deterministic and CI-friendly: a tiny built-in policy picks
commands from the visible state, no UI involved.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List

from core.commands import Command, Override, Repair, Rest, Reroute, Scan, Transmit
from core.data import ANTENNA
from core.state import GameState, Severity

from .config import DEFAULT_CONFIG, EngineConfig
from .pipeline import new_game, step
from .runlog import make_run_export, record_turn


@dataclass
class CautiousPolicy:
    """Deterministic policy for tests (no randomness of its own)."""

    def choose(self, state: GameState) -> Command:
        if state.external_window and state.power >= 14:
            return Transmit()
        if state.focus < 20:
            return Rest()
        if state.turn == 1:
            return Scan()
        worst = max(state.subsystem_list, key=lambda n: state.subsystems[n].status.rank)
        if state.subsystems[worst].status == Severity.NOMINAL:
            return Reroute(target=ANTENNA) if state.power >= 30 else Rest()
        if state.power >= 25:
            return Repair(target=worst)
        if state.power >= 10 and state.focus >= 8:
            return Override()
        return Rest()


def run_headless_sim(seed: int = 123, max_turns: int = 40, config: EngineConfig = DEFAULT_CONFIG) -> Dict[str, Any]:
    """Run a deterministic simulation and return summary + run log."""
    state, out = new_game(seed, config)
    run = make_run_export(seed=seed, config=config, initial_state=state, intro=out.lines)
    policy = CautiousPolicy()
    commands: List[str] = []

    for _ in range(max_turns):
        if state.ended:
            break
        cmd = policy.choose(state)
        state, out = step(state, cmd, config)
        run = record_turn(run, cmd, out, state)
        commands.append(cmd.kind)

    return {
        "seed": seed,
        "final": state,
        "commands": commands,
        "run": run,
    }
