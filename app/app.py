# Project: meteo-chart
# Owner: GreenUnicorn
"""
app.py — Streamlit weather chart with date-range filtering and city search.

Run with: streamlit run app/app.py
Requires: pip install -e ".[ui]"
"""

import sys
from pathlib import Path

# Ensure the src/ package is importable when running from the project root
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

import streamlit as st

from meteo_chart.chart import build_chart, daily_summary
from meteo_chart.config import DEFAULT_CONFIG, load_config
from meteo_chart.logger import setup_logger
from meteo_chart.session import initial_state, reload, search_location, set_window_dates


# ─────────────────────────────────────────────────────────────
# Page config — must be first Streamlit call
# ─────────────────────────────────────────────────────────────

st.set_page_config(
    page_title="Météo",
    page_icon="🌤",
    layout="wide",
    initial_sidebar_state="collapsed",
)


# ─────────────────────────────────────────────────────────────
# CSS injection
# ─────────────────────────────────────────────────────────────

CUSTOM_CSS = """
<style>
  #MainMenu, footer, header { visibility: hidden; }
  .block-container { padding-top: 2rem; padding-bottom: 4rem; max-width: 1100px; }

  html, body, [class*="css"] {
    font-family: -apple-system, BlinkMacSystemFont, "SF Pro Display",
                 "SF Pro Text", "Segoe UI", Roboto, sans-serif;
    background-color: #0a0a0a;
    color: #f5f5f7;
  }

  .stTextInput > div > div > input {
    background: #1c1c1e !important;
    border: 1px solid #3a3a3c !important;
    border-radius: 980px !important;
    color: #f5f5f7 !important;
    text-align: center;
  }

  .wa-card {
    background: #1c1c1e;
    border: 1px solid #2c2c2e;
    border-radius: 16px;
    padding: 20px 24px;
    margin-bottom: 1.5rem;
  }

  .error-card {
    background: rgba(255, 69, 58, 0.1);
    border: 1px solid rgba(255, 69, 58, 0.3);
    border-radius: 12px;
    color: #ff453a;
    font-size: 0.95rem;
    padding: 20px 24px;
    margin: 1rem 0;
    white-space: pre-line;
  }

  .location-resolved {
    color: #8e8e93;
    font-size: 0.85rem;
    text-align: center;
    margin-top: 0.5rem;
  }

  .section-label {
    font-size: 0.72rem;
    text-transform: uppercase;
    letter-spacing: 0.1em;
    color: #636366;
    font-weight: 600;
    margin-bottom: 0.75rem;
  }

  .day-strip { display: flex; gap: 12px; justify-content: center; flex-wrap: wrap; }
  .day-pill {
    background: #2c2c2e;
    border-radius: 12px;
    padding: 10px 14px;
    text-align: center;
    min-width: 110px;
  }
  .day-pill .emoji { font-size: 1.6rem; }
  .day-pill .label { font-size: 0.75rem; color: #8e8e93; text-transform: uppercase; }
  .day-pill .temps { font-weight: 600; }
  .day-pill .sun { font-size: 0.75rem; color: #8e8e93; }

  .wa-footer {
    text-align: center;
    color: #48484a;
    font-size: 0.8rem;
    padding: 3rem 0 1rem;
  }
</style>
"""

st.markdown(CUSTOM_CSS, unsafe_allow_html=True)


# ─────────────────────────────────────────────────────────────
# Helpers
# ─────────────────────────────────────────────────────────────

def _load_config() -> dict:
    """Load config.toml, falling back to the built-in defaults."""
    try:
        return load_config()
    except FileNotFoundError:
        return DEFAULT_CONFIG


def day_pill_html(day: dict) -> str:
    """Render one day of the summary strip as HTML."""
    temps = ""
    if day["temp_min"] is not None:
        temps = f'{day["temp_min"]:.0f}° / {day["temp_max"]:.0f}°'
    sun = f'☀ {day["sunrise"]} – {day["sunset"]}' if day["sunrise"] else ""
    return f"""
    <div class="day-pill">
      <div class="label">{day["label"]}</div>
      <div class="emoji">{day["emoji"]}</div>
      <div class="temps">{temps}</div>
      <div class="sun">{sun}</div>
    </div>
    """


# ─────────────────────────────────────────────────────────────
# Session state initialisation — first mount triggers the first load
# ─────────────────────────────────────────────────────────────

if "weather" not in st.session_state:
    config = _load_config()
    setup_logger(Path(config["log"]["path"]), config["log"]["level"])
    st.session_state.weather = reload(initial_state(config))

state = st.session_state.weather
is_forecast = state.config["source"]["kind"] == "forecast"


# ─────────────────────────────────────────────────────────────
# SECTION 1: Title + city search (forecast source only)
# ─────────────────────────────────────────────────────────────

st.markdown("<h2 style='text-align:center'>Météo</h2>", unsafe_allow_html=True)

if is_forecast:
    col_l, col_c, col_r = st.columns([1, 2, 1])
    with col_c:
        with st.form("search", border=False):
            place = st.text_input(
                label="city",
                placeholder="Search a city in France",
                label_visibility="collapsed",
            )
            submitted = st.form_submit_button("Search", use_container_width=True)
        if submitted and place.strip():
            state = search_location(state, place.strip())
            st.session_state.weather = state

        if state.location_error:
            st.markdown(f'<div class="error-card">⚠️ {state.location_error}</div>', unsafe_allow_html=True)

        altitude = f" &nbsp;·&nbsp; {state.elevation:.0f} m" if state.elevation is not None else ""
        st.markdown(
            f'<div class="location-resolved">'
            f'📍 {state.place_name} &nbsp;·&nbsp; '
            f'{state.latitude:.4f}°, {state.longitude:.4f}°{altitude}'
            f'</div>',
            unsafe_allow_html=True,
        )

if state.error:
    st.markdown(f'<div class="error-card">{state.error}</div>', unsafe_allow_html=True)


# ─────────────────────────────────────────────────────────────
# SECTION 2: Date window
# ─────────────────────────────────────────────────────────────

if state.records and state.window is not None:
    first_day = state.records[0].time.date()
    last_day = state.records[-1].time.date()
    window = state.window

    col_start, col_end = st.columns(2)
    with col_start:
        start_day = st.date_input(
            "From",
            value=window.start.date() if window.start else first_day,
            min_value=first_day,
            max_value=last_day,
            format="DD/MM/YYYY",
        )
    with col_end:
        end_day = st.date_input(
            "To",
            value=window.end.date() if window.end else last_day,
            min_value=first_day,
            max_value=last_day,
            format="DD/MM/YYYY",
        )

    state = set_window_dates(state, start_day, end_day)
    st.session_state.weather = state


# ─────────────────────────────────────────────────────────────
# SECTION 3: Day strip + chart
# ─────────────────────────────────────────────────────────────

if state.filtered:
    st.markdown('<div class="section-label">Temperature · wind · precipitation</div>', unsafe_allow_html=True)

    days = daily_summary(state.filtered)
    pills = "".join(day_pill_html(d) for d in days)
    st.markdown(f'<div class="day-strip">{pills}</div>', unsafe_allow_html=True)

    st.plotly_chart(build_chart(state.filtered), use_container_width=True, config={"displayModeBar": False})
elif state.records and not state.error:
    st.info("No data in the selected date range.")


# ─────────────────────────────────────────────────────────────
# Footer
# ─────────────────────────────────────────────────────────────

st.markdown(
    '<div class="wa-footer">'
    'Forecast by <a href="https://open-meteo.com" style="color:#0a84ff;text-decoration:none;">Open-Meteo</a>'
    ' &nbsp;·&nbsp; Geocoding by OpenStreetMap Nominatim'
    '</div>',
    unsafe_allow_html=True,
)
