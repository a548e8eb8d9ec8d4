from __future__ import annotations

MIN_START_HOUR = 0
MAX_START_HOUR = 23
MIN_END_HOUR = 1
MAX_END_HOUR = 24


def generate_slots(start_hour: int, end_hour: int) -> list[str]:
    """Half-hour labels for every hour in [start_hour, end_hour).

    Callers clamp the hours first; a degenerate window simply yields no slots.
    """
    slots: list[str] = []
    for hour in range(start_hour, end_hour):
        slots.append(f"{hour:02d}:00")
        slots.append(f"{hour:02d}:30")
    return slots


def clamp_start_hour(value: int) -> int:
    return min(MAX_START_HOUR, max(MIN_START_HOUR, int(value)))


def clamp_end_hour(value: int) -> int:
    return min(MAX_END_HOUR, max(MIN_END_HOUR, int(value)))
