"""
core.state
Core domain data models (UI independent).
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional

from .data import MANDATORY_SUBSYSTEMS, SUBSYSTEM_POOL, Quirk, find_quirk


def clamp(x: int, lo: int = 0, hi: int = 100) -> int:
    return max(lo, min(hi, x))


class Severity(str, Enum):
    NOMINAL = "Nominal"
    DEGRADED = "Degraded"
    FAILING = "Failing"

    @property
    def rank(self) -> int:
        return STATUS_ORDER.index(self)


STATUS_ORDER: List[Severity] = [Severity.NOMINAL, Severity.DEGRADED, Severity.FAILING]


@dataclass(frozen=True)
class Subsystem:
    """One station subsystem.

    `scanned` and `repaired_once` are one-way flags.
    """

    name: str
    status: Severity
    quirk: Quirk
    scanned: bool = False
    repaired_once: bool = False

    def has_quirk(self, quirk_name: str) -> bool:
        return self.quirk.name == quirk_name

    @property
    def nominal(self) -> bool:
        return self.status == Severity.NOMINAL


@dataclass(frozen=True)
class GameState:
    """Snapshot of one game in progress.

    power/integrity/focus are clamped to 0..100 by core.effects.finalize().
    `subsystem_list` is the roster in selection order; `subsystems` maps the same keys.
    """

    seed: int
    turn: int
    turns_left: int
    power: int
    integrity: int
    focus: int
    subsystems: Dict[str, Subsystem] = field(default_factory=dict)
    subsystem_list: List[str] = field(default_factory=list)
    external_window: bool = False
    external_window_turns: int = 0
    transmitted: bool = False
    ai_mislead_counter: int = 0
    ended: bool = False
    ending_text: Optional[str] = None

    def get(self, name: str) -> Optional[Subsystem]:
        """Optional lookup: absent subsystems simply do not apply this game."""
        return self.subsystems.get(name)

    def require(self, name: str) -> Subsystem:
        sub = self.subsystems.get(name)
        if sub is None:
            raise ValueError(f"Subsystem not in roster: {name!r}")
        return sub

    def with_subsystem(self, sub: Subsystem) -> "GameState":
        """Return a new state with `sub` written back (copy-on-write mapping)."""
        subs = dict(self.subsystems)
        subs[sub.name] = sub
        return replace(self, subsystems=subs)


def subsystem_to_dict(s: Subsystem) -> Dict[str, Any]:
    return {
        "name": s.name,
        "status": s.status.value,
        "quirk": s.quirk.name,
        "scanned": bool(s.scanned),
        "repaired_once": bool(s.repaired_once),
    }


def state_to_dict(s: GameState) -> Dict[str, Any]:
    return {
        "seed": int(s.seed),
        "turn": int(s.turn),
        "turns_left": int(s.turns_left),
        "power": int(s.power),
        "integrity": int(s.integrity),
        "focus": int(s.focus),
        "subsystems": [subsystem_to_dict(s.subsystems[n]) for n in s.subsystem_list],
        "external_window": bool(s.external_window),
        "external_window_turns": int(s.external_window_turns),
        "transmitted": bool(s.transmitted),
        "ai_mislead_counter": int(s.ai_mislead_counter),
        "ended": bool(s.ended),
        "ending_text": s.ending_text,
    }


def state_from_dict(d: Mapping[str, Any]) -> GameState:
    """Bridge helper for exported snapshots. Raises ValueError on malformed input."""
    if "seed" not in d:
        raise ValueError("Snapshot has no seed")
    subs: Dict[str, Subsystem] = {}
    order: List[str] = []
    for raw in list(d.get("subsystems", []) or []):
        name = str(raw.get("name", ""))
        if name not in SUBSYSTEM_POOL:
            raise ValueError(f"Unknown subsystem: {name!r}")
        if name in subs:
            raise ValueError(f"Duplicate subsystem: {name!r}")
        try:
            status = Severity(str(raw.get("status", "")))
        except ValueError:
            raise ValueError(f"Unknown status for {name}: {raw.get('status')!r}") from None
        subs[name] = Subsystem(
            name=name,
            status=status,
            quirk=find_quirk(name, str(raw.get("quirk", ""))),
            scanned=bool(raw.get("scanned", False)),
            repaired_once=bool(raw.get("repaired_once", False)),
        )
        order.append(name)

    missing = [m for m in MANDATORY_SUBSYSTEMS if m not in subs]
    if missing:
        raise ValueError(f"Snapshot missing mandatory subsystems: {missing}")

    meters = {k: int(d.get(k, 0)) for k in ("power", "integrity", "focus")}
    for k, v in meters.items():
        if v != clamp(v):
            raise ValueError(f"{k} out of range 0..100: {v}")
    turns_left = int(d.get("turns_left", 0))
    if turns_left < 0:
        raise ValueError(f"turns_left must not be negative: {turns_left}")

    ending = d.get("ending_text")
    return GameState(
        seed=int(d["seed"]),
        turn=int(d.get("turn", 1)),
        turns_left=turns_left,
        power=meters["power"],
        integrity=meters["integrity"],
        focus=meters["focus"],
        subsystems=subs,
        subsystem_list=order,
        external_window=bool(d.get("external_window", False)),
        external_window_turns=int(d.get("external_window_turns", 0)),
        transmitted=bool(d.get("transmitted", False)),
        ai_mislead_counter=int(d.get("ai_mislead_counter", 0)),
        ended=bool(d.get("ended", False)),
        ending_text=None if ending is None else str(ending),
    )
