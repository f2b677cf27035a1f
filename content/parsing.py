"""content.parsing

Command-line parsing for player input.

Turns free text into a structured core.commands value, or a readable error.
We never hand raw text to the engine; subsystem aliases are resolved here and
targets can be restricted to the active roster.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Dict, Optional, Sequence

from core.commands import Command, Help, Override, Repair, Rest, Reroute, Restart, Scan, Status, Transmit
from core.data import AI_CORE, ANTENNA, BEACON, COOLING, DOCKING


@dataclass(frozen=True)
class ParseResult:
    command: Optional[Command]
    raw: str
    error: str = ""

    @property
    def ok(self) -> bool:
        return self.command is not None


class CommandParseError(ValueError):
    pass


SUBSYSTEM_ALIASES: Dict[str, str] = {
    "antenna": ANTENNA,
    "ant": ANTENNA,
    "cooling": COOLING,
    "cool": COOLING,
    "beacon": BEACON,
    "nav": BEACON,
    "ai": AI_CORE,
    "core": AI_CORE,
    "docking": DOCKING,
    "dock": DOCKING,
}

_SIMPLE: Dict[str, Command] = {
    "help": Help(),
    "?": Help(),
    "status": Status(),
    "st": Status(),
    "scan": Scan(),
    "rest": Rest(),
    "override": Override(),
    "ovr": Override(),
    "tx": Transmit(),
    "transmit": Transmit(),
}

_TARGETED = {
    "repair": ("repair", Repair),
    "reroute": ("reroute", Reroute),
    "route": ("reroute", Reroute),
}

_INT_RE = re.compile(r"^-?\d+$")
_USAGE_TARGETS = "antenna|cooling|beacon|ai|docking"


def parse_subsystem(token: Optional[str]) -> Optional[str]:
    if not token:
        return None
    return SUBSYSTEM_ALIASES.get(token.lower())


def parse_command(text: str, roster: Optional[Sequence[str]] = None) -> ParseResult:
    """Parse one input line. Returns ParseResult(command=None, error=...) on failure.

    When `roster` is given, repair/reroute targets outside it are rejected.
    """
    raw = (text or "").strip()
    if not raw:
        return ParseResult(command=None, raw=raw, error="Empty command. Type 'help'.")

    parts = raw.split()
    word = parts[0].lower()
    arg = parts[1] if len(parts) > 1 else None

    if word in _SIMPLE:
        return ParseResult(command=_SIMPLE[word], raw=raw)

    if word in _TARGETED:
        verb, cls = _TARGETED[word]
        target = parse_subsystem(arg)
        if target is None:
            return ParseResult(command=None, raw=raw, error=f"Usage: {verb} <{_USAGE_TARGETS}>")
        if roster is not None and target not in roster:
            return ParseResult(command=None, raw=raw, error=f"{target} is not installed on this station.")
        return ParseResult(command=cls(target=target), raw=raw)

    if word in ("restart", "new"):
        seed = int(arg) if arg and _INT_RE.match(arg) else None
        return ParseResult(command=Restart(seed=seed), raw=raw)

    return ParseResult(command=None, raw=raw, error=f"Unknown command '{word}'. Type 'help'.")


def must_parse_command(text: str, roster: Optional[Sequence[str]] = None) -> Command:
    res = parse_command(text, roster)
    if res.command is None:
        raise CommandParseError(res.error or "Command parse failed")
    return res.command
