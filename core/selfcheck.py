"""
core.selfcheck
Minimal "it runs" proof for the core rules.

Run:
  python -m core.selfcheck
"""

from __future__ import annotations

from dataclasses import replace

from .data import AI_CORE, ANTENNA, QUIRKS
from .effects import LOSS_POWER, LOSS_TIME, WIN_CLEAN, finalize, improve, worsen
from .rng import Rng
from .state import GameState, Severity, Subsystem, state_from_dict, state_to_dict


def _sample_state(seed: int) -> GameState:
    subs = {
        ANTENNA: Subsystem(ANTENNA, Severity.DEGRADED, QUIRKS[ANTENNA][0]),
        AI_CORE: Subsystem(AI_CORE, Severity.NOMINAL, QUIRKS[AI_CORE][0]),
    }
    return GameState(
        seed=seed, turn=1, turns_left=10, power=55, integrity=70, focus=60,
        subsystems=subs, subsystem_list=[ANTENNA, AI_CORE],
    )


def run_core_smoke() -> None:
    a, b = Rng(42), Rng(42)
    draws = [a.next() for _ in range(100)]
    assert draws == [b.next() for _ in range(100)]
    assert all(0.0 <= x < 1.0 for x in draws)

    sub = Subsystem(ANTENNA, Severity.FAILING, QUIRKS[ANTENNA][1])
    assert worsen(sub).status == Severity.FAILING
    assert improve(improve(improve(sub))).status == Severity.NOMINAL

    state = _sample_state(7)
    wild = finalize(replace(state, power=140, integrity=-3, focus=50))
    assert wild.power == 100 and wild.integrity == 0 and wild.ended

    assert finalize(replace(state, power=0)).ending_text == LOSS_POWER
    assert finalize(replace(state, turns_left=0)).ending_text == LOSS_TIME
    assert finalize(replace(state, transmitted=True)).ending_text == WIN_CLEAN

    assert state_from_dict(state_to_dict(state)) == state

    print("OK: core smoke test passed.")
    print("First draws (seed 42):", [round(x, 6) for x in draws[:3]])


if __name__ == "__main__":
    run_core_smoke()
