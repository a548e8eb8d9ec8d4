from __future__ import annotations

import pytest

from barberbook.domain import Accept, AvailabilityState, BookingRecord, Reject, RejectReason
from barberbook.validator import REJECTION_MESSAGES, message_for, validate

DAY = "2025-03-10"


def _payload(first: str = "Ali", last: str = "Rezaei", phone: str = "0912 345 6789") -> BookingRecord:
    return BookingRecord(first_name=first, last_name=last, phone=phone)


def test_scenario_a_accepts_and_strips_phone_separators() -> None:
    decision = validate(AvailabilityState(), DAY, "09:00", _payload())

    assert isinstance(decision, Accept)
    assert decision.record.phone == "09123456789"
    assert decision.record.first_name == "Ali"
    assert decision.record.last_name == "Rezaei"


def test_scenario_b_short_phone_is_invalid() -> None:
    decision = validate(AvailabilityState(), DAY, "09:00", _payload(phone="123"))
    assert decision == Reject(RejectReason.INVALID_PHONE)


def test_scenario_c_disabled_day_wins_over_slot_flags() -> None:
    state = AvailabilityState(disabled_days={DAY}, disabled_slots={(DAY, "09:00")})
    assert validate(state, DAY, "09:00", _payload()) == Reject(RejectReason.DAY_DISABLED)
    assert validate(state, DAY, "10:30", _payload()) == Reject(RejectReason.DAY_DISABLED)


@pytest.mark.parametrize("day, slot", [("", "09:00"), (DAY, ""), (None, None)])
def test_missing_selection_comes_first(day: str | None, slot: str | None) -> None:
    state = AvailabilityState(disabled_days={DAY})
    assert validate(state, day, slot, _payload(first="")) == Reject(RejectReason.MISSING_SELECTION)


def test_disabled_slot_is_rejected() -> None:
    state = AvailabilityState(disabled_slots={(DAY, "09:00")})
    assert validate(state, DAY, "09:00", _payload()) == Reject(RejectReason.SLOT_DISABLED)
    assert isinstance(validate(state, DAY, "09:30", _payload()), Accept)


def test_already_booked_fires_before_name_and_phone_checks() -> None:
    state = AvailabilityState(bookings={DAY: {"09:00": _payload()}})
    bad = _payload(first=" ", last="", phone="x")
    assert validate(state, DAY, "09:00", bad) == Reject(RejectReason.ALREADY_BOOKED)


@pytest.mark.parametrize("first, last", [("", "Rezaei"), ("Ali", "   "), ("\t", "\n")])
def test_blank_names_are_rejected(first: str, last: str) -> None:
    decision = validate(AvailabilityState(), DAY, "09:00", _payload(first=first, last=last, phone="123"))
    assert decision == Reject(RejectReason.MISSING_NAME)


def test_names_are_stored_as_given() -> None:
    decision = validate(AvailabilityState(), DAY, "09:00", _payload(first="  Ali ", last="Rezaei  "))
    assert isinstance(decision, Accept)
    assert decision.record.first_name == "  Ali "
    assert decision.record.last_name == "Rezaei  "


@pytest.mark.parametrize(
    "phone, expected",
    [
        ("09123456789", "09123456789"),
        ("+98-912-345-6789", "+989123456789"),
        ("  0912 345 6789  ", "09123456789"),
        ("12345678901234", "12345678901234"),
    ],
)
def test_valid_phones(phone: str, expected: str) -> None:
    decision = validate(AvailabilityState(), DAY, "09:00", _payload(phone=phone))
    assert isinstance(decision, Accept)
    assert decision.record.phone == expected


@pytest.mark.parametrize(
    "phone",
    [
        "123456789",  # 9 digits
        "123456789012345",  # 15 digits
        "++9123456789",
        "0912345678a",
        "0912.345.6789",
        "۰۹۱۲۳۴۵۶۷۸۹",  # non-ASCII digits
        "",
    ],
)
def test_invalid_phones(phone: str) -> None:
    assert validate(AvailabilityState(), DAY, "09:00", _payload(phone=phone)) == Reject(RejectReason.INVALID_PHONE)


def test_every_reason_has_its_own_message() -> None:
    messages = [REJECTION_MESSAGES[reason] for reason in RejectReason]
    assert len(set(messages)) == len(RejectReason)
    assert message_for(Reject(RejectReason.ALREADY_BOOKED)) == REJECTION_MESSAGES[RejectReason.ALREADY_BOOKED]
    assert message_for(Accept(_payload())) not in messages
