# Project: meteo-chart
# Owner: GreenUnicorn
"""
chart.py — Plotly figures and per-day summaries for the dashboard.

build_chart() returns a figure; rendering is left to the caller
(st.plotly_chart in the dashboard).
"""

from collections import defaultdict
from typing import Sequence

import plotly.graph_objects as go

from meteo_chart.derived import describe
from meteo_chart.models import WeatherRecord
from meteo_chart.utils import fmt_day

COLORS = {
    "temperature": "#E62BD9",
    "precipitation": "#2662D9",
    "windspeed": "#379124",
    "windgust": "#8FD175",
}

PLOTLY_LAYOUT = dict(
    paper_bgcolor="rgba(0,0,0,0)",
    plot_bgcolor="rgba(0,0,0,0)",
    font=dict(family="-apple-system, BlinkMacSystemFont, 'SF Pro Display', sans-serif",
              color="#8e8e93", size=12),
    margin=dict(l=8, r=8, t=32, b=8),
    legend=dict(bgcolor="rgba(0,0,0,0)", font=dict(color="#8e8e93"), orientation="h"),
    xaxis=dict(showgrid=False, zeroline=False, tickfont=dict(color="#636366")),
    yaxis=dict(gridcolor="#2c2c2e", zeroline=False, tickfont=dict(color="#636366")),
)


def _hover_text(record: WeatherRecord) -> str:
    d = describe(record)
    text = f"{d['emoji']} {record.time.strftime('%a %d %b %H:%M')}"
    if d["sunrise"]:
        text += f"<br>☀ {d['sunrise']} – {d['sunset']}"
    return text


def build_chart(records: Sequence[WeatherRecord], height: int = 400) -> go.Figure:
    """Build the temperature / wind / precipitation area chart.

    Temperature and precipitation share the left axis (°C and mm), wind
    speed and gusts use the right axis (km/h). Gusts are drawn only when
    the data has them.

    Args:
        records: Filtered records, in display order.
        height: Figure height in pixels.

    Returns:
        A plotly Figure (empty traces when records is empty).
    """
    times = [r.time for r in records]
    hover = [_hover_text(r) for r in records]

    fig = go.Figure()
    fig.add_trace(go.Scatter(
        x=times, y=[r.temperature for r in records],
        name="T°C",
        mode="lines",
        line=dict(color=COLORS["temperature"], width=2, shape="spline"),
        fill="tozeroy",
        fillcolor="rgba(230,43,217,0.15)",
        text=hover,
        hovertemplate="%{text}<br>%{y} °C<extra></extra>",
    ))
    fig.add_trace(go.Bar(
        x=times, y=[r.precipitation for r in records],
        name="Rain",
        marker_color="rgba(38,98,217,0.7)",
        marker_line_width=0,
        hovertemplate="%{y} mm<extra></extra>",
    ))
    fig.add_trace(go.Scatter(
        x=times, y=[r.windspeed for r in records],
        name="Wind",
        mode="lines",
        line=dict(color=COLORS["windspeed"], width=2, shape="spline"),
        yaxis="y2",
        hovertemplate="%{y} km/h<extra></extra>",
    ))
    if any(r.windgust is not None for r in records):
        fig.add_trace(go.Scatter(
            x=times, y=[r.windgust for r in records],
            name="Gusts",
            mode="lines",
            line=dict(color=COLORS["windgust"], width=1, dash="dot"),
            yaxis="y2",
            hovertemplate="%{y} km/h<extra></extra>",
        ))

    fig.update_layout(
        **PLOTLY_LAYOUT,
        height=height,
        hovermode="x unified",
        bargap=0.1,
    )
    fig.update_layout(
        yaxis=dict(**PLOTLY_LAYOUT["yaxis"], ticksuffix="°C"),
        yaxis2=dict(
            overlaying="y", side="right",
            showgrid=False, zeroline=False,
            tickfont=dict(color=COLORS["windspeed"]),
            ticksuffix=" km/h",
            rangemode="tozero",
        ),
    )
    return fig


def daily_summary(records: Sequence[WeatherRecord]) -> list[dict]:
    """Summarise records per calendar day, in first-seen order.

    Returns:
        List of dicts with keys: date, label, emoji (icon of the record
        closest to noon), temp_min, temp_max, precipitation (total mm),
        wind_max, sunrise, sunset.
    """
    by_day: dict = defaultdict(list)
    for r in records:
        by_day[r.time.date()].append(r)

    summaries = []
    for day, day_records in by_day.items():
        noon = min(day_records, key=lambda r: abs(r.time.hour * 60 + r.time.minute - 12 * 60))
        d = describe(noon)
        temps = [r.temperature for r in day_records if r.temperature is not None]
        winds = [r.windspeed for r in day_records if r.windspeed is not None]
        summaries.append({
            "date": day,
            "label": fmt_day(day),
            "emoji": d["emoji"],
            "temp_min": min(temps) if temps else None,
            "temp_max": max(temps) if temps else None,
            "precipitation": round(sum(r.precipitation for r in day_records), 1),
            "wind_max": max(winds) if winds else None,
            "sunrise": d["sunrise"],
            "sunset": d["sunset"],
        })
    return summaries
