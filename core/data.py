"""
core.data
Static reference tables: subsystem pool, quirks, status order, events, AI lines.

Kept in core so balancing lives in one place, but UI can still display labels.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Tuple

ANTENNA = "Antenna Array"
COOLING = "Cooling Loop"
BEACON = "Navigation Beacon"
AI_CORE = "AI Core"
DOCKING = "Docking Control"

SUBSYSTEM_POOL: Tuple[str, ...] = (ANTENNA, COOLING, BEACON, AI_CORE, DOCKING)
MANDATORY_SUBSYSTEMS: Tuple[str, ...] = (ANTENNA, AI_CORE)


@dataclass(frozen=True)
class Quirk:
    name: str
    desc: str


QUIRKS: Dict[str, Tuple[Quirk, ...]] = {
    ANTENNA: (
        Quirk("Calibration drift", "Repairs work once; repeat repairs are less effective unless scanned first."),
        Quirk("Hairline feed crack", "Emergency transmission has higher surge risk unless repaired."),
        Quirk("Intermittent phase noise", "Reroute to antenna is stronger but drains extra power."),
    ),
    COOLING: (
        Quirk("Sensor misread", "Repair restores more Integrity, but costs extra Focus unless scanned."),
        Quirk("Pump cavitation", "Events are harsher while Degraded/Failing."),
        Quirk("Feedback coupling", "If AI Core unstable, Cooling Loop may worsen each turn."),
    ),
    BEACON: (
        Quirk("Loose mounting", "Integrity loss events hit harder unless repaired."),
        Quirk("Timing jitter", "Scan is more valuable; reveals impending fault."),
        Quirk("Ghost pings", "AI advice becomes unreliable if Beacon is Failing."),
    ),
    AI_CORE: (
        Quirk("Thermal feedback loop", "AI becomes misleading if unstable for 2 turns."),
        Quirk("Priority inversion", "Override is stronger but increases Integrity risk."),
        Quirk("Memory leak", "Rest recovers less Focus until repaired."),
    ),
    DOCKING: (
        Quirk("Stuck actuator", "Escape risk increases unless repaired."),
        Quirk("Power bus noise", "Reroutes cause bigger swings."),
        Quirk("Miswired relay", "Repairs can fail if not scanned first."),
    ),
}


def find_quirk(subsystem: str, name: str) -> Quirk:
    for q in QUIRKS.get(subsystem, ()):
        if q.name == name:
            return q
    raise ValueError(f"Unknown quirk {name!r} for {subsystem!r}")


# Event kinds (tick draws one uniformly)
POWER_SURGE = "Power surge"
FALSE_DIAGNOSTIC = "False diagnostic"
SIGNAL_WINDOW = "External signal window"
STRUCTURAL_GROAN = "Structural groan"
COOLANT_HICCUP = "Coolant hiccup"
AI_COMMENTARY = "AI commentary"

EVENTS: Tuple[str, ...] = (
    POWER_SURGE,
    FALSE_DIAGNOSTIC,
    SIGNAL_WINDOW,
    STRUCTURAL_GROAN,
    COOLANT_HICCUP,
    AI_COMMENTARY,
)

AI_LINES: Tuple[str, ...] = (
    "“Engineer. Panic remains inefficient.”",
    "“I have updated my confidence interval: lower.”",
    "“Your choices exhibit… creativity.”",
    "“I cannot feel fear. I can simulate it, if helpful.”",
    "“If this ends poorly, I will file a complaint.”",
)

# Command costs
SCAN_POWER = 5
SCAN_FOCUS = 2
REROUTE_POWER = 6
PHASE_NOISE_DRAIN = 4
OVERRIDE_POWER = 10
OVERRIDE_FOCUS = 8
TX_POWER = 14
REST_FOCUS = 12
REST_FOCUS_LEAKING = 7
