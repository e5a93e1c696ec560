# Project: meteo-chart
# Owner: GreenUnicorn
"""
window.py — Date-range filtering of normalized records.

A DateWindow is inclusive on both ends and unbounded where a bound is None.
Naive bounds (as returned by a date picker) are read in the records' zone.
"""

from __future__ import annotations

from datetime import date, datetime, time, timedelta
from typing import Optional, Sequence

from meteo_chart.models import DateWindow, WeatherRecord


def _align(bound: Optional[datetime], reference: datetime) -> Optional[datetime]:
    """Make `bound` comparable with `reference` (same awareness)."""
    if bound is None:
        return None
    if reference.tzinfo is not None and bound.tzinfo is None:
        return bound.replace(tzinfo=reference.tzinfo)
    if reference.tzinfo is None and bound.tzinfo is not None:
        return bound.replace(tzinfo=None)
    return bound


def filter_records(records: Sequence[WeatherRecord], window: Optional[DateWindow]) -> list[WeatherRecord]:
    """Return the records whose time lies inside the window, in input order.

    A start later than the end simply matches nothing.
    """
    if not records:
        return []
    if window is None:
        return list(records)

    reference = records[0].time
    start = _align(window.start, reference)
    end = _align(window.end, reference)
    return [
        r for r in records
        if (start is None or r.time >= start) and (end is None or r.time <= end)
    ]


def full_span(records: Sequence[WeatherRecord]) -> DateWindow:
    """Window from the earliest to the latest record (empty input -> unbounded)."""
    if not records:
        return DateWindow()
    times = [r.time for r in records]
    return DateWindow(start=min(times), end=max(times))


def _covers_day(records: Sequence[WeatherRecord], day: date) -> bool:
    return any(r.time.date() == day for r in records)


def default_window(records: Sequence[WeatherRecord], now: Optional[datetime] = None) -> DateWindow:
    """Pick the initial window for a forecast: from now until the end of tomorrow.

    Args:
        records: Normalized records of the first successful load.
        now: Current time; defaults to datetime.now() in the records' zone.

    Returns:
        start = now if today appears in the data, else the earliest record.
        end = 23:59:59 tomorrow if tomorrow appears in the data, else the
        latest record.
    """
    span = full_span(records)
    if not records:
        return span

    tz = records[0].time.tzinfo
    if now is None:
        now = datetime.now(tz)
    now = _align(now, records[0].time)

    today = now.date()
    tomorrow = today + timedelta(days=1)

    start = now if _covers_day(records, today) else span.start
    if _covers_day(records, tomorrow):
        end = datetime.combine(tomorrow, time(23, 59, 59), tzinfo=now.tzinfo)
    else:
        end = span.end
    return DateWindow(start=start, end=end)


def _clamp(bound: Optional[datetime], low: datetime, high: datetime) -> Optional[datetime]:
    if bound is None:
        return None
    return min(max(bound, low), high)


def reconcile_window(window: Optional[DateWindow], records: Sequence[WeatherRecord]) -> Optional[DateWindow]:
    """Keep a user-chosen window across reloads, clamped to the new data span.

    Returns the window unchanged if both bounds still fall inside the span
    of `records`; otherwise each out-of-span bound is clamped to the span.
    """
    if window is None or not records:
        return window

    span = full_span(records)
    start = _align(window.start, span.start)
    end = _align(window.end, span.start)

    inside = all(b is None or span.start <= b <= span.end for b in (start, end))
    if inside:
        return window
    return DateWindow(
        start=_clamp(start, span.start, span.end),
        end=_clamp(end, span.start, span.end),
    )
