from __future__ import annotations

import logging

from barberbook.domain import AvailabilityState, BookingRecord
from barberbook.slots import clamp_end_hour, clamp_start_hour, generate_slots
from barberbook.state_file import StateStorage

logger = logging.getLogger(__name__)


class AvailabilityStore:
    """Owns one AvailabilityState and persists it after every change.

    Operator-only mutations take an explicit ``privileged`` flag. Without it
    they do nothing: no error, no save.
    """

    def __init__(self, storage: StateStorage, state: AvailabilityState | None = None) -> None:
        self._storage = storage
        self._state = state if state is not None else AvailabilityState()

    @classmethod
    def open(cls, storage: StateStorage) -> AvailabilityStore:
        blob = storage.load()
        if blob is None:
            return cls(storage)
        try:
            state = AvailabilityState.from_dict(blob)
        except (TypeError, ValueError, AttributeError) as e:
            logger.warning("Discarding unreadable state (%s: %s)", type(e).__name__, e)
            state = AvailabilityState()
        return cls(storage, state)

    @property
    def state(self) -> AvailabilityState:
        return self._state

    @property
    def operating_window(self) -> tuple[int, int]:
        return self._state.start_hour, self._state.end_hour

    def slots(self) -> list[str]:
        return generate_slots(self._state.start_hour, self._state.end_hour)

    def snapshot(self) -> dict:
        return self._state.to_dict()

    def is_day_disabled(self, day: str) -> bool:
        return day in self._state.disabled_days

    def is_slot_disabled(self, day: str, slot: str) -> bool:
        return (day, slot) in self._state.disabled_slots

    def is_booked(self, day: str, slot: str) -> bool:
        return self._state.booking(day, slot) is not None

    def get_booking(self, day: str, slot: str) -> BookingRecord | None:
        return self._state.booking(day, slot)

    def toggle_day_disabled(self, day: str, privileged: bool) -> None:
        if not privileged:
            logger.debug("Ignoring unprivileged toggle of day %s", day)
            return
        if day in self._state.disabled_days:
            self._state.disabled_days.discard(day)
        else:
            self._state.disabled_days.add(day)
        logger.info("Day %s disabled=%s", day, day in self._state.disabled_days)
        self._persist()

    def toggle_slot_disabled(self, day: str, slot: str, privileged: bool) -> None:
        if not privileged:
            logger.debug("Ignoring unprivileged toggle of slot %s %s", day, slot)
            return
        key = (day, slot)
        if key in self._state.disabled_slots:
            self._state.disabled_slots.discard(key)
        else:
            self._state.disabled_slots.add(key)
        logger.info("Slot %s %s disabled=%s", day, slot, key in self._state.disabled_slots)
        self._persist()

    def set_booking(self, day: str, slot: str, record: BookingRecord) -> None:
        # Unconditional; BookingValidator is what keeps this from overwriting.
        self._state.bookings.setdefault(day, {})[slot] = record
        logger.info("Booked %s %s", day, slot)
        self._persist()

    def cancel_booking(self, day: str, slot: str, privileged: bool) -> None:
        if not privileged:
            logger.debug("Ignoring unprivileged cancel of %s %s", day, slot)
            return
        by_slot = self._state.bookings.get(day)
        if by_slot is not None:
            by_slot.pop(slot, None)
            if not by_slot:
                del self._state.bookings[day]
        logger.info("Cancelled booking %s %s", day, slot)
        self._persist()

    def clear_all(self, privileged: bool) -> None:
        if not privileged:
            logger.debug("Ignoring unprivileged clear")
            return
        self._state.bookings = {}
        self._state.disabled_days = set()
        self._state.disabled_slots = set()
        logger.info("Cleared all bookings and disabled flags")
        self._persist()

    def set_operating_window(self, start_hour: int, end_hour: int, privileged: bool) -> None:
        if not privileged:
            logger.debug("Ignoring unprivileged operating window change")
            return
        # Clamped independently: start >= end is allowed and yields no slots.
        self._state.start_hour = clamp_start_hour(start_hour)
        self._state.end_hour = clamp_end_hour(end_hour)
        logger.info("Operating window set to %02d:00-%02d:00", self._state.start_hour, self._state.end_hour)
        self._persist()

    def _persist(self) -> None:
        self._storage.save(self._state.to_dict())
