from __future__ import annotations

import datetime as dt
import logging
from dataclasses import dataclass
from typing import Callable

from barberbook.access import AccessGate
from barberbook.domain import Accept, BookingRecord, Decision, Reject, RejectReason, day_key, upcoming_days
from barberbook.store import AvailabilityStore
from barberbook.validator import validate

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SlotView:
    """What a single slot of a day looks like to a client or the operator."""

    label: str
    booking: BookingRecord | None
    slot_disabled: bool
    day_disabled: bool

    @property
    def booked(self) -> bool:
        return self.booking is not None

    @property
    def bookable(self) -> bool:
        return not (self.booked or self.slot_disabled or self.day_disabled)


class BookingSession:
    """One acting session: a store, a privilege gate and a fixed "today"."""

    def __init__(
        self,
        store: AvailabilityStore,
        gate: AccessGate,
        *,
        days_ahead: int = 7,
        today: dt.date | None = None,
    ) -> None:
        self.store = store
        self.gate = gate
        self.days_ahead = days_ahead
        self.today = today or dt.date.today()

    def days(self) -> list[str]:
        return [day_key(d) for d in upcoming_days(self.days_ahead, self.today)]

    def day_view(self, day: str) -> list[SlotView]:
        day_disabled = self.store.is_day_disabled(day)
        return [
            SlotView(
                label=slot,
                booking=self.store.get_booking(day, slot),
                slot_disabled=self.store.is_slot_disabled(day, slot),
                day_disabled=day_disabled,
            )
            for slot in self.store.slots()
        ]

    def book(self, day: str | None, slot: str | None, payload: BookingRecord) -> Decision:
        # Only days and times the session offers can be picked.
        if day not in self.days() or slot not in self.store.slots():
            decision: Decision = Reject(RejectReason.MISSING_SELECTION)
        else:
            decision = validate(self.store.state, day, slot, payload)

        if isinstance(decision, Accept):
            self.store.set_booking(day, slot, decision.record)
        else:
            logger.info("Booking %s %s rejected: %s", day, slot, decision.reason.value)
        return decision

    def toggle_day(self, day: str) -> None:
        self.store.toggle_day_disabled(day, privileged=self.gate.privileged)

    def toggle_slot(self, day: str, slot: str) -> None:
        self.store.toggle_slot_disabled(day, slot, privileged=self.gate.privileged)

    def cancel(self, day: str, slot: str) -> None:
        self.store.cancel_booking(day, slot, privileged=self.gate.privileged)

    def set_hours(self, start_hour: int, end_hour: int) -> None:
        self.store.set_operating_window(start_hour, end_hour, privileged=self.gate.privileged)

    def clear_all(self, confirm: Callable[[], bool]) -> bool:
        if not self.gate.privileged:
            return False
        if not confirm():
            return False
        self.store.clear_all(privileged=True)
        return True

    def toggle_operator(self, prompt: Callable[[], str | None]) -> bool:
        """Log out when privileged, otherwise prompt for the secret and log in."""
        if self.gate.privileged:
            self.gate.logout()
            return False
        return self.gate.login(prompt())
