"""
core.effects
Station physics rules:
- status transitions (worsen / improve)
- clamp rules
- AI misleading counter
- end-condition evaluation
"""

from __future__ import annotations

from dataclasses import replace
from typing import Optional

from .data import AI_CORE, AI_LINES, DOCKING
from .rng import AI_LINE_MIX, rng_for
from .state import STATUS_ORDER, GameState, Severity, Subsystem, clamp

LOSS_POWER = "LOSS: POWER DEPLETED — Station goes dark."
LOSS_INTEGRITY = "LOSS: STATION FAILURE — Structural collapse."
LOSS_FOCUS = "LOSS: FOCUS LOST — You freeze, unable to act."
LOSS_TIME = "LOSS: TIME EXPIRED — Relay fails before transmission."
WIN_IMPERFECT = "SUCCESS (IMPERFECT): Transmission sent, but escape is uncertain."
WIN_CLEAN = "SUCCESS: Transmission sent and escape sequence viable."


def worsen(s: Subsystem, steps: int = 1) -> Subsystem:
    i = min(len(STATUS_ORDER) - 1, s.status.rank + steps)
    return replace(s, status=STATUS_ORDER[i])


def improve(s: Subsystem, steps: int = 1) -> Subsystem:
    i = max(0, s.status.rank - steps)
    return replace(s, status=STATUS_ORDER[i])


def chance_pct(p: float, lo: int = 5, hi: int = 95) -> float:
    """Clamp a probability to lo..hi percent."""
    return max(float(lo), min(float(hi), p * 100)) / 100


def next_mislead_counter(state: GameState) -> int:
    ai = state.get(AI_CORE)
    if ai is not None and not ai.nominal:
        return state.ai_mislead_counter + 1
    return 0


def ai_misleading(state: GameState) -> bool:
    return state.ai_mislead_counter >= 2


def ai_line(seed: int, turn: int) -> str:
    return rng_for(seed, turn, AI_LINE_MIX).pick(AI_LINES)


def escape_risk(state: GameState) -> int:
    risk = 0
    docking = state.get(DOCKING)
    if docking is not None and docking.status != Severity.NOMINAL:
        risk += 1
    if state.power < 10:
        risk += 1
    if state.integrity < 40:
        risk += 1
    return risk


def ending_for(state: GameState) -> Optional[str]:
    """Return the ending message for `state`, or None while still active.

    First match wins; the transmitted branch sits after the time check.
    """
    if state.power <= 0:
        return LOSS_POWER
    if state.integrity <= 0:
        return LOSS_INTEGRITY
    if state.focus <= 0:
        return LOSS_FOCUS
    if state.turns_left <= 0 and not state.transmitted:
        return LOSS_TIME
    if state.transmitted:
        return WIN_IMPERFECT if escape_risk(state) >= 2 else WIN_CLEAN
    return None


def check_end(state: GameState) -> GameState:
    if state.ended:
        return state
    text = ending_for(state)
    if text is None:
        return state
    return replace(state, ended=True, ending_text=text)


def finalize(state: GameState) -> GameState:
    """Clamp resources then evaluate end conditions (pure function)."""
    if state.ended:
        return state
    return check_end(
        replace(
            state,
            power=clamp(int(state.power)),
            integrity=clamp(int(state.integrity)),
            focus=clamp(int(state.focus)),
            turns_left=max(0, int(state.turns_left)),
        )
    )
