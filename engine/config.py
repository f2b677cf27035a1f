"""engine.config

Engine configuration passed from UI.
"""

from __future__ import annotations

from dataclasses import dataclass, fields
from typing import Any, Mapping


@dataclass(frozen=True)
class EngineConfig:
    start_power: int = 55
    start_integrity: int = 70
    start_focus: int = 60
    turns: int = 10
    window_turns: int = 2
    prompt: str = "k7> "


DEFAULT_CONFIG = EngineConfig()


def config_from_mapping(d: Mapping[str, Any]) -> EngineConfig:
    """Build a config from loose key/values (secrets, query params). Unknown keys are ignored."""
    kwargs = {}
    for f in fields(EngineConfig):
        if f.name not in d or d[f.name] is None:
            continue
        kwargs[f.name] = str(d[f.name]) if f.type in (str, "str") else int(d[f.name])
    return EngineConfig(**kwargs)


def config_to_dict(cfg: EngineConfig) -> dict:
    return {f.name: getattr(cfg, f.name) for f in fields(EngineConfig)}
