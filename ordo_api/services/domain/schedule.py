"""
Opening-hours arithmetic shared by the restaurant and reservation services.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Any

from ordo_shared.config.constants import WEEKDAYS
from ordo_shared.config.settings import settings
from ordo_shared.utils.validators import format_hhmm, parse_hhmm


@dataclass(frozen=True)
class DayWindow:
    """Open/close of one day in minutes since midnight."""

    weekday: str
    open_minutes: int
    close_minutes: int

    def contains(self, minutes: int) -> bool:
        return self.open_minutes <= minutes < self.close_minutes

    @property
    def last_booking_minutes(self) -> int:
        """Latest time a reservation may start."""
        return self.close_minutes - settings.reservation_close_buffer_minutes

    def accepts_booking_at(self, minutes: int) -> bool:
        return self.open_minutes <= minutes <= self.last_booking_minutes

    def booking_slots(self, step_minutes: int | None = None) -> list[str]:
        """Slot starts from opening time up to and including the last booking time."""
        step = step_minutes or settings.reservation_slot_minutes
        return [
            format_hhmm(minutes)
            for minutes in range(self.open_minutes, self.last_booking_minutes + 1, step)
        ]


def weekday_name(day: date) -> str:
    return WEEKDAYS[day.weekday()]


def day_window(opening_hours: dict[str, Any] | None, day: date) -> DayWindow | None:
    """
    The opening window for a date, or None when that weekday is closed or
    has no schedule.
    """
    weekday = weekday_name(day)
    schedule = (opening_hours or {}).get(weekday)
    if not schedule or schedule.get("is_closed"):
        return None
    return DayWindow(
        weekday=weekday,
        open_minutes=parse_hhmm(schedule["open"]),
        close_minutes=parse_hhmm(schedule["close"]),
    )
