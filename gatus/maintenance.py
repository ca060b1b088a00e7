"""Maintenance windows during which no alerts are sent."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone

LONG_DAY_NAMES = (
    "Sunday",
    "Monday",
    "Tuesday",
    "Wednesday",
    "Thursday",
    "Friday",
    "Saturday",
)

_DAY = timedelta(hours=24)
_INTEGER_PATTERN = re.compile(r"[+-]?[0-9]+\Z")


class InvalidMaintenanceStartFormatError(ValueError):
    """The start of the maintenance window is not a valid hh:mm time."""

    def __init__(
        self,
        message: str = (
            "invalid maintenance start format: must be hh:mm, between 00:00 and 23:59 "
            "inclusively (e.g. 23:00)"
        ),
    ) -> None:
        super().__init__(message)


class InvalidMaintenanceDurationError(ValueError):
    """The duration of the maintenance window is not within (0, 24h)."""

    def __init__(
        self, message: str = "invalid maintenance duration: must be bigger than 0 (e.g. 30m)"
    ) -> None:
        super().__init__(message)


class InvalidDayNameError(ValueError):
    """A day of the week in the maintenance configuration is not recognised."""

    def __init__(
        self,
        message: str = (
            "invalid value specified for 'on'. supported values are "
            f"[{' '.join(LONG_DAY_NAMES)}]"
        ),
    ) -> None:
        super().__init__(message)


@dataclass
class MaintenanceConfig:
    """A daily or weekly maintenance window, in UTC.

    ``enabled`` of None means enabled. An empty ``every`` means every day.
    """

    enabled: bool | None = None
    start: str = ""
    duration: timedelta = timedelta(0)
    every: list[str] = field(default_factory=list)
    _start_from_midnight: timedelta = field(
        default=timedelta(0), init=False, repr=False, compare=False
    )

    def is_enabled(self) -> bool:
        return True if self.enabled is None else self.enabled

    def validate_and_set_defaults(self) -> None:
        """Validate the window; must be called before is_under_maintenance."""
        if not self.is_enabled():
            return
        for day in self.every:
            if day not in LONG_DAY_NAMES:
                raise InvalidDayNameError()
        self._start_from_midnight = _hhmm_to_duration(self.start)
        if self.duration <= timedelta(0) or self.duration >= _DAY:
            raise InvalidMaintenanceDurationError()

    def is_under_maintenance(self, now: datetime | None = None) -> bool:
        """Return whether ``now`` (default: the current time) falls in the window."""
        if not self.is_enabled():
            return False
        now = _as_utc(now)
        start_hours = int(self._start_from_midnight.total_seconds() // 3600)
        if now.hour >= start_hours:
            start_day = _midnight(now)
        else:
            start_day = _midnight(now - self.duration)
        if self.every and _day_name(start_day) not in self.every:
            return False
        start = start_day + self._start_from_midnight
        end = start + self.duration
        return start < now < end


def get_default_config() -> MaintenanceConfig:
    """Return a configuration with maintenance disabled."""
    return MaintenanceConfig(enabled=False)


def _as_utc(now: datetime | None) -> datetime:
    if now is None:
        return datetime.now(timezone.utc)
    if now.tzinfo is None:
        return now.replace(tzinfo=timezone.utc)
    return now.astimezone(timezone.utc)


def _midnight(moment: datetime) -> datetime:
    return moment.replace(hour=0, minute=0, second=0, microsecond=0)


def _day_name(moment: datetime) -> str:
    return LONG_DAY_NAMES[(moment.weekday() + 1) % 7]


def _parse_padded_int(text: str) -> int:
    text = text.removeprefix("0")
    if not _INTEGER_PATTERN.match(text):
        raise ValueError(f"parsing {text!r}: invalid syntax")
    return int(text)


def _hhmm_to_duration(text: str) -> timedelta:
    if len(text) != 5:
        raise InvalidMaintenanceStartFormatError()
    hours = _parse_padded_int(text[:2])
    minutes = _parse_padded_int(text[3:5])
    if not 0 <= hours <= 23 or not 0 <= minutes <= 59:
        raise InvalidMaintenanceStartFormatError()
    duration = timedelta(hours=hours, minutes=minutes)
    if duration < timedelta(0) or duration >= _DAY:
        raise InvalidMaintenanceStartFormatError()
    return duration