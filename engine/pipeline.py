"""engine.pipeline

Core turn flow (headless).

Responsibilities:
- new_game(seed): roster selection, quirks, starting resources, intro lines
- step(state, command): resolve command -> clamp/end-check -> tick -> clamp/end-check -> status block

This layer is UI-agnostic. The caller echoes raw input; the engine never does.
"""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from core.commands import Command, Restart
from core.data import ANTENNA, MANDATORY_SUBSYSTEMS, QUIRKS, SUBSYSTEM_POOL
from core.effects import finalize
from core.rng import Rng
from core.state import GameState, Severity, Subsystem

from .config import DEFAULT_CONFIG, EngineConfig
from .render import ENDED_LINE, INTRO_LINES, render_ending, render_status
from .resolver import resolve_command
from .tick import end_of_turn_tick

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EngineOutput:
    lines: List[str] = field(default_factory=list)
    prompt: str = DEFAULT_CONFIG.prompt


def fresh_seed() -> int:
    """Seed for a restart without an explicit seed (not reproducible)."""
    return random.SystemRandom().randrange(1_000_000_000)


def _pick_roster(rng: Rng) -> List[str]:
    extras = [n for n in SUBSYSTEM_POOL if n not in MANDATORY_SUBSYSTEMS]
    rng.shuffle(extras)
    return [*MANDATORY_SUBSYSTEMS, *extras[: rng.int_range(1, len(extras))]]


def new_game(seed: int, config: EngineConfig = DEFAULT_CONFIG) -> tuple[GameState, EngineOutput]:
    """Create a fresh game from `seed`. Same seed => same roster, statuses and quirks."""
    rng = Rng(seed)
    roster = _pick_roster(rng)

    subsystems: Dict[str, Subsystem] = {}
    for name in roster:
        quirk = rng.pick(QUIRKS[name])
        if name == ANTENNA:
            status = Severity.DEGRADED
        else:
            status = rng.pick((Severity.NOMINAL, Severity.DEGRADED))
        subsystems[name] = Subsystem(name=name, status=status, quirk=quirk)

    state = finalize(
        GameState(
            seed=int(seed),
            turn=1,
            turns_left=int(config.turns),
            power=int(config.start_power),
            integrity=int(config.start_integrity),
            focus=int(config.start_focus),
            subsystems=subsystems,
            subsystem_list=roster,
        )
    )
    logger.info("new game seed=%s roster=%s", seed, ", ".join(roster))
    lines = [*INTRO_LINES, *render_status(state)]
    return state, EngineOutput(lines=lines, prompt=config.prompt)


def step(
    state: GameState,
    cmd: Command,
    config: EngineConfig = DEFAULT_CONFIG,
) -> tuple[GameState, EngineOutput]:
    """Apply one structured command and advance the turn.

    Returns (new_state, output). Output lines are ordered; callers must not reorder them.
    """
    if isinstance(cmd, Restart):
        seed = fresh_seed() if cmd.seed is None else int(cmd.seed)
        logger.info("restart requested (seed=%s)", seed)
        return new_game(seed, config)

    if state.ended:
        return state, EngineOutput(lines=[ENDED_LINE], prompt=config.prompt)

    res = resolve_command(state, cmd)
    if not res.advances:
        return res.state, EngineOutput(lines=list(res.lines), prompt=config.prompt)

    lines: List[str] = list(res.lines)
    s = finalize(res.state)

    if not s.ended:
        s, tick_lines = end_of_turn_tick(s, window_turns=config.window_turns)
        lines.extend(tick_lines)

    s = finalize(s)
    if s.ended:
        logger.info("game over seed=%s turn=%s: %s", s.seed, s.turn, s.ending_text)
    lines.extend(render_ending(s))
    lines.append("")
    lines.extend(render_status(s))
    return s, EngineOutput(lines=lines, prompt=config.prompt)


def run_commands(seed: int, commands: List[Command], config: Optional[EngineConfig] = None) -> tuple[GameState, List[str]]:
    """Convenience: new_game(seed) then step through `commands`, collecting every line."""
    cfg = config or DEFAULT_CONFIG
    state, out = new_game(seed, cfg)
    lines = list(out.lines)
    for cmd in commands:
        state, out = step(state, cmd, cfg)
        lines.extend(out.lines)
    return state, lines
