from __future__ import annotations

import datetime as dt
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Union

logger = logging.getLogger(__name__)

DEFAULT_START_HOUR = 9
DEFAULT_END_HOUR = 21


def day_key(day: dt.date) -> str:
    """Canonical YYYY-MM-DD key for a calendar day."""
    if isinstance(day, dt.datetime):
        day = day.date()
    return day.isoformat()


def upcoming_days(count: int, today: dt.date | None = None) -> list[dt.date]:
    # Local midnight, so keys do not drift with the wall clock during a session.
    start = today or dt.date.today()
    return [start + dt.timedelta(days=i) for i in range(count)]


@dataclass(frozen=True)
class BookingRecord:
    first_name: str
    last_name: str
    phone: str

    def to_dict(self) -> dict[str, str]:
        return {"firstName": self.first_name, "lastName": self.last_name, "phone": self.phone}

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> BookingRecord:
        fields = (raw["firstName"], raw["lastName"], raw["phone"])
        if not all(isinstance(value, str) for value in fields):
            raise TypeError(f"Booking fields must be strings, got {fields!r}")
        return cls(*fields)


@dataclass
class AvailabilityState:
    """Everything the scheduler persists, as one blob.

    Slot labels are never stored on their own: they are derived from
    ``start_hour``/``end_hour`` whenever needed.
    """

    bookings: dict[str, dict[str, BookingRecord]] = field(default_factory=dict)
    disabled_days: set[str] = field(default_factory=set)
    disabled_slots: set[tuple[str, str]] = field(default_factory=set)
    start_hour: int = DEFAULT_START_HOUR
    end_hour: int = DEFAULT_END_HOUR

    def booking(self, day: str, slot: str) -> BookingRecord | None:
        return self.bookings.get(day, {}).get(slot)

    def to_dict(self) -> dict[str, Any]:
        disabled_slots: dict[str, dict[str, bool]] = {}
        for day, slot in sorted(self.disabled_slots):
            disabled_slots.setdefault(day, {})[slot] = True

        return {
            "bookings": {
                day: {slot: record.to_dict() for slot, record in sorted(by_slot.items())}
                for day, by_slot in sorted(self.bookings.items())
            },
            "disabledDays": {day: True for day in sorted(self.disabled_days)},
            "disabledSlots": disabled_slots,
            "startHour": self.start_hour,
            "endHour": self.end_hour,
        }

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> AvailabilityState:
        state = cls()

        for day, by_slot in _mapping(raw.get("bookings")).items():
            if not isinstance(by_slot, dict):
                continue
            day_bookings = state.bookings.setdefault(str(day), {})
            for slot, item in by_slot.items():
                try:
                    record = BookingRecord.from_dict(item)
                except (KeyError, TypeError):
                    logger.warning("Skipping malformed booking %s %s", day, slot)
                    continue
                day_bookings[str(slot)] = record

        state.disabled_days = {str(day) for day, flag in _mapping(raw.get("disabledDays")).items() if flag}

        for day, by_slot in _mapping(raw.get("disabledSlots")).items():
            for slot, flag in _mapping(by_slot).items():
                if flag:
                    state.disabled_slots.add((str(day), str(slot)))

        # bool is an int subclass; a stray true/false is not an hour.
        start_hour = raw.get("startHour")
        if isinstance(start_hour, int) and not isinstance(start_hour, bool):
            state.start_hour = start_hour
        end_hour = raw.get("endHour")
        if isinstance(end_hour, int) and not isinstance(end_hour, bool):
            state.end_hour = end_hour

        return state


def _mapping(value: Any) -> dict[Any, Any]:
    return value if isinstance(value, dict) else {}


class RejectReason(str, Enum):
    MISSING_SELECTION = "missing_selection"
    DAY_DISABLED = "day_disabled"
    SLOT_DISABLED = "slot_disabled"
    ALREADY_BOOKED = "already_booked"
    MISSING_NAME = "missing_name"
    INVALID_PHONE = "invalid_phone"


@dataclass(frozen=True)
class Accept:
    record: BookingRecord


@dataclass(frozen=True)
class Reject:
    reason: RejectReason


Decision = Union[Accept, Reject]
