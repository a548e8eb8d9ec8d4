from __future__ import annotations

import re

from barberbook.domain import Accept, AvailabilityState, BookingRecord, Decision, Reject, RejectReason

# Optional leading "+", then 10-14 ASCII digits.
_PHONE_RE = re.compile(r"^\+?[0-9]{10,14}$")
_PHONE_SEPARATORS_RE = re.compile(r"[\s-]")

ACCEPT_MESSAGE = "Your appointment has been booked."

REJECTION_MESSAGES: dict[RejectReason, str] = {
    RejectReason.MISSING_SELECTION: "Please choose a day and a time first.",
    RejectReason.DAY_DISABLED: "This day is closed for bookings.",
    RejectReason.SLOT_DISABLED: "This time slot has been disabled.",
    RejectReason.ALREADY_BOOKED: "This time slot is already booked.",
    RejectReason.MISSING_NAME: "Please enter both first and last name.",
    RejectReason.INVALID_PHONE: "Please enter a valid phone number (10 to 14 digits).",
}


def normalize_phone(phone: str) -> str:
    return _PHONE_SEPARATORS_RE.sub("", phone.strip())


def is_valid_phone(phone: str) -> bool:
    return _PHONE_RE.match(normalize_phone(phone)) is not None


def validate(state: AvailabilityState, day: str | None, slot: str | None, payload: BookingRecord) -> Decision:
    """Decide whether ``payload`` may be booked at (day, slot).

    Checks run in a fixed order and the first failure wins, so the message a
    client sees is always the most fundamental problem with the request.
    """
    if not day or not slot:
        return Reject(RejectReason.MISSING_SELECTION)
    if day in state.disabled_days:
        return Reject(RejectReason.DAY_DISABLED)
    if (day, slot) in state.disabled_slots:
        return Reject(RejectReason.SLOT_DISABLED)
    if state.booking(day, slot) is not None:
        return Reject(RejectReason.ALREADY_BOOKED)
    # Names are stripped for the check only and stored as given.
    if not (payload.first_name or "").strip() or not (payload.last_name or "").strip():
        return Reject(RejectReason.MISSING_NAME)
    if not is_valid_phone(payload.phone or ""):
        return Reject(RejectReason.INVALID_PHONE)

    return Accept(
        BookingRecord(
            first_name=payload.first_name,
            last_name=payload.last_name,
            phone=normalize_phone(payload.phone),
        )
    )


def message_for(decision: Decision) -> str:
    if isinstance(decision, Reject):
        return REJECTION_MESSAGES[decision.reason]
    return ACCEPT_MESSAGE
