"""Signal Lost: The Last Relay (Streamlit)

Terminal-style surface for the relay survival engine.

Principles:
- UI only renders + triggers.
- Core domain and engine are pure Python modules.
- The UI echoes player input; the engine never does.

Entry point for Streamlit: app.py
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import List, Optional

import streamlit as st

from content.parsing import parse_command
from core.commands import Restart
from core.rng import stable_int_seed
from engine.config import DEFAULT_CONFIG, EngineConfig, config_from_mapping
from engine.pipeline import new_game, step
from engine.runlog import dumps_run_export, last_state, loads_run_export, make_run_export, record_turn

APP_TITLE = "Signal Lost: The Last Relay"
APP_SUBTITLE = "Relay Station K-7. Ten turns to stabilize, transmit, and get out."
APP_VERSION = "1.0.0"

HISTORY_LIMIT = 100

logging.basicConfig(level=logging.INFO, format="%(asctime)s %(name)s %(levelname)s %(message)s")

st.set_page_config(page_title=APP_TITLE, page_icon="📡", layout="wide", initial_sidebar_state="expanded")

CSS = """
<style>
.block-container {padding-top: 2.4rem; padding-bottom: 2rem;}
.screen pre {
  background: #050805;
  color: #8dff9a;
  border: 1px solid rgba(120,255,160,0.20);
  border-radius: 10px;
  padding: 14px 16px;
  max-height: 62vh;
  overflow-y: auto;
  white-space: pre-wrap;
}
.small {font-size: 13px; opacity:.75;}
</style>
"""

st.markdown(CSS, unsafe_allow_html=True)


# =========================
# Helpers
# =========================


def _now_id() -> str:
    return datetime.utcnow().strftime("%Y%m%d%H%M%S%f")


def _seed_from_text(text: str) -> int:
    """Integers are used as-is; any other phrase maps to a stable 32-bit seed."""
    t = (text or "").strip()
    if t.lstrip("-").isdigit():
        return int(t)
    return stable_int_seed(t)


def _query_seed() -> Optional[int]:
    raw = st.query_params.get("seed")
    if raw is None or not str(raw).lstrip("-").isdigit():
        return None
    return int(raw)


def _config() -> EngineConfig:
    try:
        overrides = dict(st.secrets.get("relay", {}))
    except Exception:
        # no secrets.toml configured
        overrides = {}
    return config_from_mapping(overrides) if overrides else DEFAULT_CONFIG


# =========================
# Session State
# =========================


def _start_game(seed: int) -> None:
    ss = st.session_state
    cfg = _config()
    state, out = new_game(seed, cfg)
    ss.run_id = _now_id()
    ss.engine_config = cfg
    ss.game_state = state
    ss.buffer = list(out.lines)
    ss.prompt = out.prompt
    ss.run = make_run_export(seed=seed, config=cfg, initial_state=state, intro=out.lines)


def _ensure_state() -> None:
    ss = st.session_state
    if "history" not in ss:
        ss.history = []
    if "seed_text" not in ss:
        q = _query_seed()
        ss.seed_text = str(q) if q is not None else str(stable_int_seed(_now_id()) % 1_000_000_000)
    if "game_state" not in ss:
        _start_game(_seed_from_text(ss.seed_text))


def _run_command(raw: str) -> None:
    ss = st.session_state
    ss.buffer = [*ss.buffer, f"{ss.prompt}{raw}"]
    ss.history = [raw, *ss.history][:HISTORY_LIMIT]

    res = parse_command(raw, roster=ss.game_state.subsystem_list)
    if res.command is None:
        ss.buffer = [*ss.buffer, f"ERR: {res.error}"]
        return

    cmd = res.command
    state, out = step(ss.game_state, cmd, ss.engine_config)
    if isinstance(cmd, Restart):
        ss.run = make_run_export(seed=state.seed, config=ss.engine_config, initial_state=state, intro=out.lines)
        ss.seed_text = str(state.seed)
    else:
        ss.run = record_turn(ss.run, cmd, out, state)
    ss.game_state = state
    ss.buffer = [*ss.buffer, *out.lines]
    ss.prompt = out.prompt


def _on_submit() -> None:
    raw = str(st.session_state.get("cmd_input", "")).rstrip()
    st.session_state.cmd_input = ""
    if raw.strip():
        _run_command(raw)


# =========================
# Pages
# =========================


def page_terminal() -> None:
    ss = st.session_state
    st.title(APP_TITLE)
    st.caption(APP_SUBTITLE)

    text = "\n".join(ss.buffer)
    st.markdown("<div class='screen'>", unsafe_allow_html=True)
    st.code(text, language=None)
    st.markdown("</div>", unsafe_allow_html=True)

    st.text_input(ss.prompt.strip(), key="cmd_input", on_change=_on_submit, placeholder="scan")
    st.markdown(
        "<div class='small'>Try: <code>scan</code>, <code>repair antenna</code>, <code>reroute ai</code>, "
        "<code>tx</code>, <code>status</code>, <code>restart 123</code></div>",
        unsafe_allow_html=True,
    )

    if ss.history:
        with st.expander("Command history"):
            for i, h in enumerate(ss.history[:20]):
                if st.button(h, key=f"hist_{i}"):
                    _run_command(h)
                    st.rerun()


def export_import_controls() -> None:
    ss = st.session_state
    st.sidebar.markdown("---")
    st.sidebar.markdown("### Run Export / Import")

    st.sidebar.download_button(
        "Download run",
        data=dumps_run_export(ss.run).encode("utf-8"),
        file_name=f"relay_k7_run_{ss.get('run_id', 'run')}.json",
        mime="application/json",
    )

    up = st.sidebar.file_uploader("Load run", type=["json"], accept_multiple_files=False)
    if up is not None and st.sidebar.button("Resume loaded run"):
        try:
            run = loads_run_export(up.read().decode("utf-8"))
            ss.engine_config = config_from_mapping(dict(run.get("config", {})))
            ss.game_state = last_state(run)
            ss.run = run
            lines: List[str] = list(run.get("intro", []))
            for entry in list(run.get("turns", [])):
                lines.extend(list(entry.get("lines", [])))
            ss.buffer = lines
            ss.seed_text = str(run["seed"])
            st.sidebar.success("Run loaded.")
            st.rerun()
        except (ValueError, KeyError) as e:
            st.sidebar.error(f"Import failed: {e}")


def sidebar() -> None:
    ss = st.session_state

    st.sidebar.markdown(f"**{APP_TITLE}**  ")
    st.sidebar.markdown(f"v{APP_VERSION}")
    st.sidebar.markdown("---")

    ss.seed_text = st.sidebar.text_input("Seed (number or phrase)", value=str(ss.seed_text))
    st.sidebar.caption(f"Current game seed: {ss.game_state.seed}")

    if st.sidebar.button("New game with this seed", use_container_width=True):
        _start_game(_seed_from_text(ss.seed_text))
        st.rerun()

    export_import_controls()


# =========================
# Main
# =========================


def main() -> None:
    _ensure_state()
    sidebar()
    page_terminal()


if __name__ == "__main__":
    main()
