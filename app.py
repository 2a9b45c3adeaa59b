"""Centible Life (Streamlit)

A month-by-month financial life simulator.

Principles:
- UI only renders + triggers.
- Game rules live in core/engine (pure Python, no Streamlit).
- Custom scenario content comes from Gemini; if it fails we show the error and let the player retry.

Entry point: streamlit run app.py
"""

from __future__ import annotations

import os
from dataclasses import asdict
from typing import Any, Dict, Optional

import streamlit as st

from content.prompts import build_event_deck_prompt
from content.providers.base import ProviderStatus
from content.providers.gemini import GeminiProvider
from core.scenarios import DEFAULT_SCENARIOS, SCENARIO_IDS, CustomProfile
from engine.config import EngineConfig
from engine.logging import dumps_run_export, session_run_export
from engine.persistence import GameStore
from engine.session import GameSession

APP_TITLE = "Centible Life"
APP_SUBTITLE = "A financial life simulator: one event per month, one decision, then the month settles."
APP_VERSION = "1.0.0"

st.set_page_config(page_title=APP_TITLE, page_icon="💸", layout="wide", initial_sidebar_state="expanded")


# =========================
# Helpers
# =========================


def _get_api_key() -> str:
    # Streamlit Cloud: st.secrets
    if "GEMINI_API_KEY" in st.secrets:
        return str(st.secrets["GEMINI_API_KEY"])  # type: ignore
    # Local
    return os.getenv("GEMINI_API_KEY") or os.getenv("GOOGLE_API_KEY") or ""


def _provider() -> GeminiProvider:
    return GeminiProvider.from_api_key_string(_get_api_key())


def _provider_status() -> ProviderStatus:
    return _provider().status()


def _store() -> GameStore:
    cfg: EngineConfig = st.session_state.config
    return GameStore(cfg.storage_dir)


def _money(x: float) -> str:
    return f"${x:,.0f}"


# =========================
# Session State
# =========================


def _ensure_state() -> None:
    ss = st.session_state
    if "config" not in ss:
        ss.config = EngineConfig.from_env()
    if "game" not in ss:
        saved = GameStore(ss.config.storage_dir).load()
        game: Optional[GameSession] = None
        if saved:
            try:
                game = GameSession.from_dict(saved, config=ss.config)
            except (TypeError, ValueError, KeyError):
                game = None
        ss.game = game or GameSession(config=ss.config)
        ss.show_survey = game is None and ss.game.state.scenario_id == "custom"
    if "initial_state" not in ss:
        ss.initial_state = ss.game.state
    if "ai_error" not in ss:
        ss.ai_error = ""


def _persist() -> None:
    _store().save(st.session_state.game.to_dict())


def _switch_scenario(scenario_id: str) -> None:
    ss = st.session_state
    game: GameSession = ss.game
    game.new_game(scenario_id)
    ss.initial_state = game.state
    ss.show_survey = scenario_id == "custom"
    _persist()


# =========================
# Custom deck generation
# =========================


def _generate_custom_game(profile: CustomProfile) -> None:
    ss = st.session_state
    provider = _provider()
    stt = provider.status()
    if not stt.ok:
        raise RuntimeError(f"Gemini not ready: {stt.error or 'API key?'}")

    prompt = build_event_deck_prompt(profile.to_dict())
    deck, _raw = provider.generate_event_deck(prompt=prompt)

    game: GameSession = ss.game
    game.start_custom(profile, deck)
    ss.initial_state = game.state
    ss.show_survey = False
    _persist()


# =========================
# UI Pages
# =========================


def page_survey() -> None:
    ss = st.session_state
    st.subheader("Quick Financial Profile")

    with st.form("profile"):
        c1, c2 = st.columns(2)
        knowledge = c1.selectbox("Financial knowledge", ["beginner", "intermediate", "advanced"])
        risk = c2.selectbox("Risk tolerance", ["low", "medium", "high"], index=1)
        region = c1.text_input("Region", value="US")
        income = c2.number_input("Monthly income ($)", value=2500, step=100)
        savings = c1.number_input("Savings ($)", value=1000, step=100)
        debt = c2.number_input("Debt ($)", value=0, step=100)
        fixed = c1.number_input("Fixed monthly expenses ($)", value=1800, step=50)
        goals = c2.text_input("Goal", value="save more")
        submitted = st.form_submit_button("Generate AI Events")

    if ss.ai_error:
        st.error(ss.ai_error)

    if submitted:
        profile = CustomProfile(
            knowledge=knowledge,
            risk=risk,
            region=region,
            income=income,
            savings=savings,
            debt=debt,
            fixed_expenses=fixed,
            goals=goals,
        )
        try:
            with st.spinner("Generating your events (Gemini)…"):
                _generate_custom_game(profile)
            ss.ai_error = ""
        except (RuntimeError, ValueError) as e:
            ss.ai_error = f"Error generating events: {e}"
        st.rerun()

    if st.button("Cancel"):
        ss.show_survey = False
        st.rerun()


def render_stats(game: GameSession) -> None:
    s = game.state.stats
    st.caption(f"Month {s.month}")
    a, b, c = st.columns(3)
    a.metric("Savings", _money(s.savings))
    b.metric("Debt", _money(s.debt))
    c.metric("Budget", _money(s.budget))
    for label, value in (("Impulse", s.impulse), ("Happiness", s.happiness), ("Stress", s.stress)):
        st.progress(int(max(0, min(100, value))), text=f"{label}: {value:g}")
    st.markdown(f"Income: {_money(s.income)} · Fixed expenses: {_money(s.fixed_expenses)}")


def page_play() -> None:
    ss = st.session_state
    game: GameSession = ss.game
    out = game.outcome()

    left, right = st.columns([1.0, 2.0])
    with left:
        render_stats(game)
        st.markdown(f"**Goal:** {out['goal']}")

    with right:
        if out["lost"]:
            st.error(out["message"])
        elif out["won"]:
            st.success(out["message"])

        ev = game.current_event
        if ev is None or game.state.game_over:
            st.info("Start a new game to keep playing.")
        else:
            st.markdown(f"## {ev.title}")
            st.markdown(ev.description)
            for ch in ev.choices:
                if st.button(ch.label, key=f"choice_{game.state.stats.month}_{ev.id}_{ch.id}",
                             disabled=game.choice_made is not None, use_container_width=True):
                    game.choose(ch.id)
                    _persist()
                    st.rerun()

            if game.choice_made is not None:
                st.success(game.choice_made.log)
                if game.choice_made.explain:
                    st.caption(game.choice_made.explain)
                if st.button("Next month", type="primary", disabled=game.state.game_over):
                    game.next_month()
                    _persist()
                    st.rerun()

        with st.expander("Log", expanded=True):
            for line in reversed(game.state.log[-40:]):
                st.markdown(f"- {line}")


# =========================
# Sidebar
# =========================


def sidebar() -> None:
    ss = st.session_state
    game: GameSession = ss.game

    st.sidebar.markdown(f"**{APP_TITLE}** v{APP_VERSION}")
    st.sidebar.markdown("---")

    current = game.state.scenario_id
    sid = st.sidebar.selectbox(
        "Scenario",
        list(SCENARIO_IDS),
        index=list(SCENARIO_IDS).index(current),
        format_func=lambda k: DEFAULT_SCENARIOS[k].title,
    )
    st.sidebar.caption(DEFAULT_SCENARIOS[sid].desc)
    if sid != current:
        _switch_scenario(sid)
        st.rerun()

    cols = st.sidebar.columns(2)
    with cols[0]:
        if st.button("New Game", use_container_width=True):
            _store().clear()
            _switch_scenario(current)
            st.rerun()
    with cols[1]:
        if st.button("Save", use_container_width=True):
            _persist()
            st.sidebar.success("Saved.")

    st.sidebar.markdown("---")
    ps = _provider_status()
    if ps.ok:
        st.sidebar.success(f"Gemini ready ({ps.backend} / {ps.model})")
    else:
        st.sidebar.warning("Gemini not ready (custom scenario disabled)")
        st.sidebar.caption(ps.error or "API key missing")

    export: Dict[str, Any] = session_run_export(game, ss.initial_state)
    st.sidebar.download_button(
        "Download run log",
        data=dumps_run_export(export).encode("utf-8"),
        file_name="centible_run.json",
        mime="application/json",
    )
    with st.sidebar.expander("Debug"):
        st.json(asdict(ss.config))
        st.json(game.to_dict())


# =========================
# Main
# =========================


def main() -> None:
    _ensure_state()
    sidebar()

    st.title(APP_TITLE)
    st.caption(APP_SUBTITLE)

    if st.session_state.show_survey:
        page_survey()
    else:
        page_play()


if __name__ == "__main__":
    main()
