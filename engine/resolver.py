"""engine.resolver

Command resolution (headless).

Every random decision inside one command draws from a single generator
scoped to (seed, turn, COMMAND_MIX). The turn tick uses its own stream.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from typing import Callable, Dict, List, Tuple

from core import data as D
from core.commands import Command, Help, Override, Repair, Rest, Reroute, Scan, Status, Transmit
from core.effects import ai_line, ai_misleading, chance_pct, improve, next_mislead_counter, worsen
from core.rng import COMMAND_MIX, Rng, rng_for
from core.state import GameState, Severity, Subsystem

from .render import HELP_LINES, render_status

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Resolution:
    """Outcome of one command. `advances` is False for read-only commands (no tick)."""

    state: GameState
    lines: List[str] = field(default_factory=list)
    advances: bool = True


Handler = Callable[[GameState, Command, Rng], Tuple[GameState, List[str]]]


def repair_chance(s: GameState, target: Subsystem) -> float:
    success = 0.75 - 0.10 * target.status.rank
    if target.scanned:
        success += 0.10
    if ai_misleading(s) and target.name != D.AI_CORE:
        success -= 0.15
    if target.name == D.ANTENNA and target.has_quirk("Calibration drift"):
        if target.repaired_once and not target.scanned:
            success -= 0.25
    if target.name == D.DOCKING and target.has_quirk("Miswired relay") and not target.scanned:
        success -= 0.15
    return chance_pct(success)


def transmit_chance(ant: Subsystem) -> float:
    success = 0.8 - 0.2 * ant.status.rank
    if ant.scanned:
        success += 0.08
    if ant.has_quirk("Hairline feed crack") and not ant.nominal:
        success -= 0.1
    return chance_pct(success)


def _scan(s: GameState, cmd: Scan, rng: Rng) -> Tuple[GameState, List[str]]:
    if s.power < D.SCAN_POWER:
        return s, ["Scan aborted: insufficient power."]

    lines = ["You initiate a diagnostic sweep."]
    s = replace(s, power=s.power - D.SCAN_POWER, focus=s.focus - D.SCAN_FOCUS)

    order = list(s.subsystem_list)
    rng.shuffle(order)
    reveal = rng.int_range(1, min(2, len(order)))
    for name in order[:reveal]:
        sub = s.subsystems[name]
        s = s.with_subsystem(replace(sub, scanned=True))
        lines.append(f"- {name}: quirk detected — {sub.quirk.name}. ({sub.quirk.desc})")

    s = replace(s, ai_mislead_counter=next_mislead_counter(s))
    if ai_misleading(s):
        lines.append("Hidden warning: AI Core instability may produce incorrect recommendations.")
    lines.append(ai_line(s.seed, s.turn))
    return s, lines


def _repair(s: GameState, cmd: Repair, rng: Rng) -> Tuple[GameState, List[str]]:
    target = s.require(cmd.target)
    sev = target.status.rank
    cost_power = 8 + 2 * sev
    cost_focus = 4 + 2 * sev
    if target.name == D.COOLING and target.has_quirk("Sensor misread") and not target.scanned:
        cost_focus += 2

    if s.power < cost_power:
        return s, ["Repair aborted: insufficient power."]
    if s.focus < cost_focus:
        return s, ["Repair aborted: insufficient focus."]

    s = replace(s, power=s.power - cost_power, focus=s.focus - cost_focus)
    success = repair_chance(s, target)

    if rng.next() < success:
        fixed = replace(improve(target), repaired_once=True)
        gain = 3 + (2 if target.name == D.COOLING else 0)
        s = replace(s.with_subsystem(fixed), integrity=s.integrity + gain)
        logger.debug("repair %s succeeded (p=%.2f)", cmd.target, success)
        return s, [f"You repair {cmd.target}. Status {target.status.value} -> {fixed.status.value}. Integrity +{gain}."]

    loss = 6 + 2 * sev
    after = worsen(target) if rng.next() < 0.5 else target
    s = replace(s.with_subsystem(after), integrity=s.integrity - loss)
    logger.debug("repair %s failed (p=%.2f)", cmd.target, success)
    return s, [f"Repair attempt on {cmd.target} fails. Integrity -{loss}. {cmd.target} now {after.status.value}."]


def _reroute(s: GameState, cmd: Reroute, rng: Rng) -> Tuple[GameState, List[str]]:
    target = s.require(cmd.target)
    if s.power < D.REROUTE_POWER:
        return s, ["Reroute aborted: insufficient power."]

    lines: List[str] = []
    s = replace(s, power=s.power - D.REROUTE_POWER)

    improved = False
    if target.status != Severity.NOMINAL and rng.next() < 0.75:
        s = s.with_subsystem(improve(target))
        improved = True

    if target.name == D.ANTENNA and target.has_quirk("Intermittent phase noise"):
        s = replace(s, power=s.power - D.PHASE_NOISE_DRAIN)
        lines.append(f"(Extra power drain -{D.PHASE_NOISE_DRAIN} due to phase noise.)")

    others = [n for n in s.subsystem_list if n != cmd.target]
    if not others:
        lines.append(
            f"You reroute power to {cmd.target}. "
            f"{'It stabilizes slightly.' if improved else 'No measurable improvement.'}"
        )
        return s, lines

    head = f"You reroute power to {cmd.target}. {'It stabilizes slightly.' if improved else 'It resists stabilization.'}"
    side = rng.pick(others)
    if rng.next() < 0.6:
        s = s.with_subsystem(worsen(s.subsystems[side]))
        lines.append(f"{head} Side effect: {side} worsens.")
    else:
        s = replace(s, integrity=s.integrity - 4)
        lines.append(f"{head} Side effect: structural strain (Integrity -4).")
    return s, lines


def _rest(s: GameState, cmd: Rest, rng: Rng) -> Tuple[GameState, List[str]]:
    recover = D.REST_FOCUS
    ai = s.get(D.AI_CORE)
    if ai is not None and ai.has_quirk("Memory leak") and not ai.nominal:
        recover = D.REST_FOCUS_LEAKING
    s = replace(s, focus=s.focus + recover, integrity=s.integrity - 1)
    return s, [f"You rest briefly. Focus +{recover}. Integrity -1."]


def _override(s: GameState, cmd: Override, rng: Rng) -> Tuple[GameState, List[str]]:
    if s.power < D.OVERRIDE_POWER or s.focus < D.OVERRIDE_FOCUS:
        return s, ["Override aborted: insufficient resources."]

    s = replace(s, power=s.power - D.OVERRIDE_POWER, focus=s.focus - D.OVERRIDE_FOCUS)
    name = rng.pick(list(s.subsystem_list))
    target = s.subsystems[name]

    ai = s.get(D.AI_CORE)
    stronger = ai is not None and ai.has_quirk("Priority inversion")
    p = 0.6 if stronger else 0.5

    if rng.next() < p:
        after = improve(target, 2)
        gain = 6 if stronger else 4
        s = replace(s.with_subsystem(after), integrity=s.integrity + gain)
        return s, [f"Override succeeds. {name} {target.status.value} -> {after.status.value}. Integrity +{gain}."]

    after = worsen(target, 2)
    dmg = 12 if stronger else 10
    s = replace(s.with_subsystem(after), integrity=s.integrity - dmg)
    return s, [f"Override backfires. {name} {target.status.value} -> {after.status.value}. Integrity -{dmg}."]


def _transmit(s: GameState, cmd: Transmit, rng: Rng) -> Tuple[GameState, List[str]]:
    if not s.external_window:
        return s, ["Transmission attempt fails: no external signal window."]
    if s.power < D.TX_POWER:
        return s, ["Transmission aborted: insufficient power."]

    s = replace(s, power=s.power - D.TX_POWER)
    ant = s.require(D.ANTENNA)
    sev = ant.status.rank
    success = transmit_chance(ant)

    if rng.next() < success:
        surge = rng.int_range(2, 8) if ant.nominal else rng.int_range(6, 16)
        after = replace(ant, status=Severity.DEGRADED if ant.nominal else Severity.FAILING)
        s = replace(s.with_subsystem(after), transmitted=True, power=s.power - surge)
        logger.info("transmission sent (seed=%s turn=%s)", s.seed, s.turn)
        return s, [
            "You force an emergency transmission.",
            "For one second, silence—then: “Relay K-7, signal received.”",
            f"Power surge -{surge}. Antenna now {after.status.value}.",
        ]

    dmg = 10 + 4 * sev
    after = worsen(ant)
    s = replace(s.with_subsystem(after), integrity=s.integrity - dmg, focus=s.focus - 6)
    return s, [
        "You attempt an emergency transmission, but the carrier collapses.",
        f"Integrity -{dmg}, Focus -6. Antenna now {after.status.value}.",
    ]


_HANDLERS: Dict[type, Handler] = {
    Scan: _scan,
    Repair: _repair,
    Reroute: _reroute,
    Rest: _rest,
    Override: _override,
    Transmit: _transmit,
}


def resolve_command(state: GameState, cmd: Command) -> Resolution:
    """Resolve one command against a non-ended state.

    Raises ValueError when a target subsystem is not in the roster and
    TypeError for commands the resolver does not own (restart).
    """
    if isinstance(cmd, Help):
        return Resolution(state=state, lines=list(HELP_LINES), advances=False)
    if isinstance(cmd, Status):
        return Resolution(state=state, lines=render_status(state), advances=False)

    handler = _HANDLERS.get(type(cmd))
    if handler is None:
        raise TypeError(f"Resolver cannot handle command: {cmd!r}")

    rng = rng_for(state.seed, state.turn, COMMAND_MIX)
    new_state, lines = handler(state, cmd, rng)
    logger.debug("turn %s: %s -> %d line(s)", state.turn, cmd.kind, len(lines))
    return Resolution(state=new_state, lines=lines)
