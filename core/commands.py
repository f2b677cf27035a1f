"""
core.commands
Structured command vocabulary accepted by the engine.

One frozen dataclass per command kind; `Command` is the union of all of them.
The engine never sees raw text (see content.parsing).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Union


@dataclass(frozen=True)
class Scan:
    kind = "scan"


@dataclass(frozen=True)
class Repair:
    target: str
    kind = "repair"


@dataclass(frozen=True)
class Reroute:
    target: str
    kind = "reroute"


@dataclass(frozen=True)
class Rest:
    kind = "rest"


@dataclass(frozen=True)
class Override:
    kind = "override"


@dataclass(frozen=True)
class Transmit:
    kind = "tx"


@dataclass(frozen=True)
class Status:
    kind = "status"


@dataclass(frozen=True)
class Help:
    kind = "help"


@dataclass(frozen=True)
class Restart:
    seed: Optional[int] = None
    kind = "restart"


Command = Union[Scan, Repair, Reroute, Rest, Override, Transmit, Status, Help, Restart]

COMMAND_TYPES = (Scan, Repair, Reroute, Rest, Override, Transmit, Status, Help, Restart)


def command_to_dict(cmd: Command) -> dict:
    out = {"kind": cmd.kind}
    if isinstance(cmd, (Repair, Reroute)):
        out["target"] = cmd.target
    if isinstance(cmd, Restart) and cmd.seed is not None:
        out["seed"] = int(cmd.seed)
    return out


def command_from_dict(d: dict) -> Command:
    kind = str(d.get("kind", ""))
    for cls in COMMAND_TYPES:
        if cls.kind != kind:
            continue
        if cls in (Repair, Reroute):
            return cls(target=str(d["target"]))
        if cls is Restart:
            seed = d.get("seed")
            return Restart(seed=None if seed is None else int(seed))
        return cls()
    raise ValueError(f"Unknown command kind: {kind!r}")
