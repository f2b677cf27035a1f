from __future__ import annotations

from dataclasses import replace
from typing import Dict, List, Optional

from core.data import AI_CORE, ANTENNA, find_quirk
from core.state import GameState, Severity, Subsystem


def make_state(
    subsystems: Optional[List[Subsystem]] = None,
    **overrides,
) -> GameState:
    """Hand-built state with a two-member roster unless told otherwise."""
    if subsystems is None:
        subsystems = [
            Subsystem(ANTENNA, Severity.DEGRADED, find_quirk(ANTENNA, "Calibration drift")),
            Subsystem(AI_CORE, Severity.NOMINAL, find_quirk(AI_CORE, "Thermal feedback loop")),
        ]
    subs: Dict[str, Subsystem] = {s.name: s for s in subsystems}
    base = GameState(
        seed=1234,
        turn=1,
        turns_left=10,
        power=55,
        integrity=70,
        focus=60,
        subsystems=subs,
        subsystem_list=[s.name for s in subsystems],
    )
    return replace(base, **overrides)


def sub(name: str, status: Severity, quirk: str, **flags) -> Subsystem:
    return Subsystem(name, status, find_quirk(name, quirk), **flags)
