from dataclasses import replace

import pytest

from core.commands import Help, Override, Repair, Rest, Reroute, Restart, Scan, Status, Transmit
from core.data import AI_CORE, ANTENNA, COOLING, DOCKING
from core.state import Severity
from engine.pipeline import new_game
from engine.render import HELP_LINES, render_status
from engine.resolver import repair_chance, resolve_command, transmit_chance

from .helpers import make_state, sub


def _with(state, *subs):
    for s in subs:
        if s.name not in state.subsystem_list:
            state = replace(state, subsystem_list=[*state.subsystem_list, s.name])
        state = state.with_subsystem(s)
    return state


# ---- read-only commands


def test_status_and_help_are_read_only(seed42):
    res = resolve_command(seed42, Status())
    assert res.state is seed42 and not res.advances
    assert res.lines == render_status(seed42)
    res = resolve_command(seed42, Help())
    assert res.state is seed42 and res.lines == HELP_LINES


def test_restart_is_not_a_resolver_command(seed42):
    with pytest.raises(TypeError):
        resolve_command(seed42, Restart(seed=1))


def test_target_outside_roster_is_a_precondition_violation():
    with pytest.raises(ValueError):
        resolve_command(make_state(), Repair(DOCKING))
    with pytest.raises(ValueError):
        resolve_command(make_state(), Reroute(COOLING))


# ---- scan


def test_scan_costs_and_reveals(seed42):
    res = resolve_command(seed42, Scan())
    s = res.state
    assert (s.power, s.focus) == (50, 58)
    revealed = [n for n in s.subsystem_list if s.subsystems[n].scanned]
    assert 1 <= len(revealed) <= 2
    assert revealed == [COOLING]
    assert res.lines[0] == "You initiate a diagnostic sweep."
    assert res.lines[-1] == "“I have updated my confidence interval: lower.”"
    assert s.ai_mislead_counter == 1


def test_scan_aborts_without_power():
    state = make_state(power=4)
    res = resolve_command(state, Scan())
    assert res.state == state
    assert res.lines == ["Scan aborted: insufficient power."]


def test_scan_does_not_gate_on_focus():
    res = resolve_command(make_state(focus=1), Scan())
    assert res.state.focus == -1
    assert res.state.power == 50


def test_scan_hidden_warning_when_ai_unstable():
    state = _with(make_state(ai_mislead_counter=1), sub(AI_CORE, Severity.FAILING, "Memory leak"))
    res = resolve_command(state, Scan())
    assert res.state.ai_mislead_counter == 2
    assert "Hidden warning: AI Core instability may produce incorrect recommendations." in res.lines


def test_scan_resets_counter_when_ai_nominal():
    res = resolve_command(make_state(ai_mislead_counter=5), Scan())
    assert res.state.ai_mislead_counter == 0


# ---- repair


def test_repair_aborts_on_power_before_anything():
    state = make_state(power=7)
    res = resolve_command(state, Repair(ANTENNA))
    assert res.state == state
    assert res.lines == ["Repair aborted: insufficient power."]


def test_repair_aborts_on_focus():
    state = make_state(focus=5)
    res = resolve_command(state, Repair(ANTENNA))
    assert res.state == state
    assert res.lines == ["Repair aborted: insufficient focus."]


def test_sensor_misread_surcharge():
    cool = sub(COOLING, Severity.DEGRADED, "Sensor misread")
    state = _with(make_state(focus=7), cool)
    assert resolve_command(state, Repair(COOLING)).lines == ["Repair aborted: insufficient focus."]
    scanned = _with(make_state(focus=7), replace(cool, scanned=True))
    assert resolve_command(scanned, Repair(COOLING)).state.focus == 1


@pytest.mark.parametrize("seed", range(20))
def test_repair_outcomes(seed):
    state = make_state(seed=seed)
    res = resolve_command(state, Repair(ANTENNA))
    s = res.state
    ant = s.subsystems[ANTENNA]
    assert (s.power, s.focus) == (45, 54)
    if ant.repaired_once:
        assert ant.status == Severity.NOMINAL
        assert s.integrity == 73
        assert res.lines[0].startswith("You repair Antenna Array.")
    else:
        assert ant.status in (Severity.DEGRADED, Severity.FAILING)
        assert s.integrity == 62
        assert res.lines[0].startswith("Repair attempt on Antenna Array fails.")


def test_cooling_repair_grants_extra_integrity():
    cool = sub(COOLING, Severity.DEGRADED, "Pump cavitation")
    for seed in range(30):
        res = resolve_command(_with(make_state(seed=seed), cool), Repair(COOLING))
        if res.state.subsystems[COOLING].repaired_once:
            assert res.state.integrity == 75
            return
    pytest.fail("no successful cooling repair in 30 seeds")


def test_repair_chance_formula():
    state = make_state()
    ant = state.subsystems[ANTENNA]
    assert repair_chance(state, ant) == pytest.approx(0.65)
    assert repair_chance(state, replace(ant, scanned=True)) == pytest.approx(0.75)
    drifted = replace(ant, repaired_once=True)
    assert repair_chance(state, drifted) == pytest.approx(0.40)
    assert repair_chance(replace(state, ai_mislead_counter=2), drifted) == pytest.approx(0.25)
    ai = state.subsystems[AI_CORE]
    assert repair_chance(replace(state, ai_mislead_counter=2), ai) == pytest.approx(0.75)
    relay = sub(DOCKING, Severity.FAILING, "Miswired relay")
    misled = replace(state, ai_mislead_counter=3)
    assert repair_chance(misled, relay) == pytest.approx(0.25)


# ---- reroute


def test_reroute_aborts_without_power():
    state = make_state(power=5)
    res = resolve_command(state, Reroute(ANTENNA))
    assert res.state == state and res.lines == ["Reroute aborted: insufficient power."]


@pytest.mark.parametrize("seed", range(15))
def test_reroute_side_effects(seed):
    state = make_state(seed=seed)
    res = resolve_command(state, Reroute(ANTENNA))
    s = res.state
    assert s.power == 49
    line = res.lines[-1]
    if "Side effect: AI Core worsens." in line:
        assert s.subsystems[AI_CORE].status == Severity.DEGRADED
        assert s.integrity == 70
    else:
        assert "structural strain (Integrity -4)" in line
        assert s.integrity == 66
    assert s.subsystems[ANTENNA].status in (Severity.NOMINAL, Severity.DEGRADED)


def test_reroute_phase_noise_drain():
    state = _with(make_state(power=20), sub(ANTENNA, Severity.NOMINAL, "Intermittent phase noise"))
    res = resolve_command(state, Reroute(ANTENNA))
    assert res.state.power == 10
    assert res.lines[0] == "(Extra power drain -4 due to phase noise.)"
    assert "It resists stabilization." in res.lines[1]


def test_reroute_single_member_roster_skips_side_effect():
    ant = sub(ANTENNA, Severity.NOMINAL, "Calibration drift")
    state = make_state(subsystems=[ant])
    res = resolve_command(state, Reroute(ANTENNA))
    assert res.lines == ["You reroute power to Antenna Array. No measurable improvement."]
    assert res.state.integrity == 70


# ---- rest


def test_rest():
    res = resolve_command(make_state(), Rest())
    assert (res.state.focus, res.state.integrity) == (72, 69)
    assert res.lines == ["You rest briefly. Focus +12. Integrity -1."]


def test_rest_with_memory_leak():
    leaking = _with(make_state(), sub(AI_CORE, Severity.DEGRADED, "Memory leak"))
    assert resolve_command(leaking, Rest()).state.focus == 67
    healthy = _with(make_state(), sub(AI_CORE, Severity.NOMINAL, "Memory leak"))
    assert resolve_command(healthy, Rest()).state.focus == 72


def test_rest_has_no_cost_check():
    res = resolve_command(make_state(power=0, focus=95), Rest())
    assert res.state.focus == 107


# ---- override


@pytest.mark.parametrize("overrides", [dict(power=9), dict(focus=7)])
def test_override_aborts(overrides):
    state = make_state(**overrides)
    res = resolve_command(state, Override())
    assert res.state == state
    assert res.lines == ["Override aborted: insufficient resources."]


@pytest.mark.parametrize("seed", range(20))
def test_override_moves_two_steps(seed):
    inverted = sub(AI_CORE, Severity.DEGRADED, "Priority inversion")
    state = _with(make_state(seed=seed), inverted)
    res = resolve_command(state, Override())
    s = res.state
    assert (s.power, s.focus) == (45, 52)
    if res.lines[0].startswith("Override succeeds."):
        assert s.integrity == 76
        assert sum(x.status == Severity.NOMINAL for x in s.subsystems.values()) == 1
    else:
        assert res.lines[0].startswith("Override backfires.")
        assert s.integrity == 58
        assert sum(x.status == Severity.FAILING for x in s.subsystems.values()) == 1


# ---- transmit


def test_tx_requires_window():
    state = make_state()
    res = resolve_command(state, Transmit())
    assert res.state == state
    assert res.lines == ["Transmission attempt fails: no external signal window."]


def test_tx_requires_power():
    state = make_state(external_window=True, external_window_turns=1, power=13)
    res = resolve_command(state, Transmit())
    assert res.state == state
    assert res.lines == ["Transmission aborted: insufficient power."]


@pytest.mark.parametrize("seed", range(25))
def test_tx_has_exactly_two_outcomes(seed):
    state = make_state(seed=seed, external_window=True, external_window_turns=2)
    res = resolve_command(state, Transmit())
    s = res.state
    ant = s.subsystems[ANTENNA]
    assert ant.status == Severity.FAILING
    if s.transmitted:
        assert 55 - 14 - 16 <= s.power <= 55 - 14 - 6
        assert (s.integrity, s.focus) == (70, 60)
    else:
        assert s.power == 41
        assert (s.integrity, s.focus) == (56, 54)


def test_tx_from_nominal_antenna_degrades_it():
    ant = sub(ANTENNA, Severity.NOMINAL, "Calibration drift")
    for seed in range(10):
        state = _with(make_state(seed=seed, external_window=True, external_window_turns=2), ant)
        s = resolve_command(state, Transmit()).state
        assert s.subsystems[ANTENNA].status == Severity.DEGRADED
        if s.transmitted:
            assert 55 - 14 - 8 <= s.power <= 55 - 14 - 2


def test_transmit_chance_formula():
    assert transmit_chance(sub(ANTENNA, Severity.NOMINAL, "Calibration drift")) == pytest.approx(0.80)
    assert transmit_chance(sub(ANTENNA, Severity.NOMINAL, "Calibration drift", scanned=True)) == pytest.approx(0.88)
    assert transmit_chance(sub(ANTENNA, Severity.DEGRADED, "Hairline feed crack")) == pytest.approx(0.50)
    assert transmit_chance(sub(ANTENNA, Severity.FAILING, "Hairline feed crack")) == pytest.approx(0.30)


def test_resolution_uses_command_stream_per_turn():
    state, _ = new_game(9)
    a = resolve_command(state, Override())
    b = resolve_command(state, Override())
    assert a == b
