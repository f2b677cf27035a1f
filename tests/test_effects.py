from dataclasses import replace

import pytest

from core.data import DOCKING
from core.effects import (
    LOSS_FOCUS,
    LOSS_INTEGRITY,
    LOSS_POWER,
    LOSS_TIME,
    WIN_CLEAN,
    WIN_IMPERFECT,
    ai_line,
    chance_pct,
    check_end,
    ending_for,
    finalize,
)
from core.state import Severity

from .helpers import make_state, sub

DOCK_BAD = sub(DOCKING, Severity.DEGRADED, "Stuck actuator")


@pytest.mark.parametrize(
    "overrides,text",
    [
        (dict(power=0, integrity=0, focus=0), LOSS_POWER),
        (dict(integrity=0, focus=0, turns_left=0), LOSS_INTEGRITY),
        (dict(focus=0, turns_left=0), LOSS_FOCUS),
        (dict(turns_left=0), LOSS_TIME),
        (dict(transmitted=True), WIN_CLEAN),
        (dict(transmitted=True, power=9), WIN_CLEAN),
        (dict(transmitted=True, power=9, integrity=39), WIN_IMPERFECT),
    ],
)
def test_ending_priority(overrides, text):
    assert ending_for(make_state(**overrides)) == text


def test_time_loss_wins_over_transmission_only_when_not_transmitted():
    assert ending_for(make_state(turns_left=0, transmitted=True)) == WIN_CLEAN


def test_docking_counts_toward_escape_risk():
    base = make_state()
    state = base.with_subsystem(DOCK_BAD)
    state = replace(state, subsystem_list=[*base.subsystem_list, DOCKING], transmitted=True, power=5)
    assert ending_for(state) == WIN_IMPERFECT


def test_active_state_has_no_ending():
    state = make_state()
    assert ending_for(state) is None
    assert check_end(state) is state


def test_finalize_clamps_then_ends():
    state = finalize(make_state(power=130, integrity=-20, focus=101, turns_left=-2))
    assert (state.power, state.integrity, state.focus, state.turns_left) == (100, 0, 100, 0)
    assert state.ended and state.ending_text == LOSS_INTEGRITY


def test_ending_is_frozen_once_set():
    ended = finalize(make_state(power=0))
    revived = replace(ended, power=80)
    assert finalize(revived).ending_text == LOSS_POWER
    assert check_end(revived) is revived


def test_ai_line_is_seeded_by_seed_and_turn():
    assert ai_line(42, 1) == "“I have updated my confidence interval: lower.”"
    assert ai_line(42, 1) == ai_line(42, 1)


def test_chance_pct_clamps_to_5_and_95():
    assert chance_pct(-0.4) == 0.05
    assert chance_pct(1.3) == 0.95
    assert chance_pct(0.5) == 0.5


def test_chance_pct_keeps_fractional_percent():
    assert chance_pct(0.1234) == pytest.approx(0.1234)
    assert isinstance(chance_pct(0.3), float)
