"""engine.tick

End-of-turn tick: drift, feedback coupling, random event, window countdown,
AI misleading counter, turn advance.

Uses its own generator scoped to (seed, turn, TICK_MIX), independent of the
command stream for the same turn.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import List, Tuple

from core import data as D
from core.effects import ai_line, finalize, next_mislead_counter, worsen
from core.rng import TICK_MIX, Rng, rng_for
from core.state import GameState, Severity

logger = logging.getLogger(__name__)


def drift_chance(sev_rank: int, cavitating: bool) -> float:
    p = 0.15 + 0.10 * sev_rank
    if cavitating:
        p += 0.10
    return min(0.85, p)


def event_chance(failing_count: int, integrity: int, power: int) -> float:
    p = 0.35 + 0.08 * failing_count
    if integrity < 50:
        p += 0.10
    if power < 20:
        p += 0.08
    return min(0.85, p)


def _drift(s: GameState, rng: Rng) -> GameState:
    for name in s.subsystem_list:
        sub = s.subsystems[name]
        if sub.nominal:
            continue
        cavitating = sub.name == D.COOLING and sub.has_quirk("Pump cavitation")
        if rng.next() < drift_chance(sub.status.rank, cavitating):
            s = s.with_subsystem(worsen(sub))
    return s


def _feedback_coupling(s: GameState, rng: Rng) -> GameState:
    ai = s.get(D.AI_CORE)
    cool = s.get(D.COOLING)
    if ai is None or cool is None:
        return s
    # roll only when the coupling can apply
    if cool.has_quirk("Feedback coupling") and not ai.nominal and rng.next() < 0.5:
        s = s.with_subsystem(worsen(cool))
    return s


def _apply_event(s: GameState, event: str, rng: Rng, window_turns: int) -> Tuple[GameState, str]:
    if event == D.POWER_SURGE:
        loss = rng.int_range(4, 12)
        return replace(s, power=s.power - loss), f"EVENT: Power surge. Power -{loss}."

    if event == D.FALSE_DIAGNOSTIC:
        ai = s.get(D.AI_CORE)
        beacon = s.get(D.BEACON)
        relevant = (ai is not None and not ai.nominal) or (
            beacon is not None and beacon.has_quirk("Ghost pings") and beacon.status == Severity.FAILING
        )
        if relevant:
            return replace(s, focus=s.focus - 6), "EVENT: False diagnostic flood. Focus -6."
        return s, "EVENT: Diagnostic anomaly detected; resolved automatically."

    if event == D.SIGNAL_WINDOW:
        return (
            replace(s, external_window=True, external_window_turns=window_turns),
            "EVENT: EXTERNAL SIGNAL WINDOW OPEN — limited duration.",
        )

    if event == D.STRUCTURAL_GROAN:
        dmg = rng.int_range(3, 9)
        beacon = s.get(D.BEACON)
        if beacon is not None and beacon.has_quirk("Loose mounting") and not beacon.nominal:
            dmg += 3
        return replace(s, integrity=s.integrity - dmg), f"EVENT: Structural strain. Integrity -{dmg}."

    if event == D.COOLANT_HICCUP:
        cool = s.get(D.COOLING)
        if cool is not None and not cool.nominal:
            dmg = rng.int_range(4, 10)
            return replace(s, integrity=s.integrity - dmg), f"EVENT: Cooling instability cascades. Integrity -{dmg}."
        return s, "EVENT: Cooling oscillation detected; contained."

    if event == D.AI_COMMENTARY:
        return s, f"EVENT: AI says: {ai_line(s.seed, s.turn)}"

    raise ValueError(f"Unknown event: {event!r}")


def end_of_turn_tick(state: GameState, window_turns: int = 2) -> Tuple[GameState, List[str]]:
    """Run one tick on an active (already finalized) state.

    Returns (new_state, lines). The new state is clamped and end-checked.
    """
    rng = rng_for(state.seed, state.turn, TICK_MIX)
    lines: List[str] = []

    s = _drift(state, rng)
    s = _feedback_coupling(s, rng)

    failing = sum(1 for n in s.subsystem_list if s.subsystems[n].status == Severity.FAILING)
    if rng.next() < event_chance(failing, s.integrity, s.power):
        event = rng.pick(D.EVENTS)
        s, line = _apply_event(s, event, rng, window_turns)
        lines.append(line)
        logger.debug("turn %s event: %s", state.turn, event)

    # a window opened this tick is decremented in the same tick
    if s.external_window:
        left = s.external_window_turns - 1
        if left <= 0:
            s = replace(s, external_window=False, external_window_turns=0)
            lines.append("The external signal window closes.")
        else:
            s = replace(s, external_window_turns=left)

    s = replace(
        s,
        ai_mislead_counter=next_mislead_counter(s),
        turns_left=s.turns_left - 1,
        turn=s.turn + 1,
    )
    return finalize(s), lines
