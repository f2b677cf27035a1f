"""engine.render

Plain-text blocks emitted by the engine: banners, help listing, status block.
"""

from __future__ import annotations

from typing import List

from core.state import GameState

RULE = "=" * 62

INTRO_LINES = [
    RULE,
    " SIGNAL LOST: THE LAST RELAY",
    RULE,
    "You are the last field engineer at Relay Station K-7.",
    "Restore stability long enough to transmit, then attempt escape.",
    "",
    "Type 'help' for commands.",
    "",
]

HELP_LINES = [
    "Commands:",
    "  scan",
    "  repair <subsystem>         e.g. repair antenna | repair cooling | repair ai",
    "  reroute <subsystem>        e.g. reroute antenna",
    "  rest",
    "  override",
    "  tx                         (only during external signal window)",
    "  status",
    "  restart [seed]",
    "",
    "Subsystem keywords: antenna, cooling, beacon, ai, docking",
]

ENDED_LINE = "Game has ended. Type 'restart' or 'restart <seed>' to play again."


def render_status(s: GameState) -> List[str]:
    lines = [
        f"Turn {s.turn} | Turns Left: {s.turns_left}",
        f"Power {s.power} | Integrity {s.integrity} | Focus {s.focus}",
        "Subsystems:",
    ]
    for name in s.subsystem_list:
        ss = s.subsystems[name]
        lines.append(f"  - {ss.name}: {ss.status.value}{' (scanned)' if ss.scanned else ''}")
    if s.external_window:
        lines.append(f"ALERT: EXTERNAL SIGNAL WINDOW OPEN ({s.external_window_turns} turn(s) remaining)")
    return lines


def render_ending(s: GameState) -> List[str]:
    if not (s.ended and s.ending_text):
        return []
    return ["", RULE, s.ending_text, RULE]
