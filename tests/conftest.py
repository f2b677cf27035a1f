from __future__ import annotations

from pathlib import Path
from typing import List

import pytest

from engine.pipeline import new_game

GOLDEN_DIR = Path(__file__).resolve().parent / "golden"


@pytest.fixture
def seed42():
    state, _ = new_game(42)
    return state


@pytest.fixture
def golden():
    def _read(name: str) -> List[str]:
        return (GOLDEN_DIR / name).read_text(encoding="utf-8").splitlines()

    return _read
