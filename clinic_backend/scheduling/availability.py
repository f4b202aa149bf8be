"""Doctor availability rules.

Pure functions over a doctor's weekly window: whether a calendar day is
bookable and which discrete time slots of that day are still free. Nothing
here touches the database; callers fetch the doctor and the booked
appointments and pass them in.
"""

from datetime import date, datetime, time, timedelta
from typing import Any, Iterable

WEEKDAY_NAMES = (
    'Sunday',
    'Monday',
    'Tuesday',
    'Wednesday',
    'Thursday',
    'Friday',
    'Saturday',
)

_TIME_FORMATS = ('%H:%M:%S', '%H:%M')


def weekday_index(day: date) -> int:
    """Return the weekday with Sunday as 0 and Saturday as 6."""
    return day.isoweekday() % 7


def is_date_available(doctor: Any, day: date) -> bool:
    if doctor is None:
        return False

    weekday = weekday_index(day)
    from_weekday = doctor.available_from_weekday
    to_weekday = doctor.available_to_weekday

    if from_weekday <= to_weekday:
        return from_weekday <= weekday <= to_weekday

    # Range wraps past Saturday, e.g. Thursday (4) through Monday (1).
    return weekday >= from_weekday or weekday <= to_weekday


def parse_time_of_day(value: str | time) -> time:
    if isinstance(value, time):
        return value.replace(microsecond=0)

    normalized = (value or '').strip()
    for time_format in _TIME_FORMATS:
        try:
            return datetime.strptime(normalized, time_format).time()
        except ValueError:
            continue

    raise ValueError(f'Invalid time of day: {value!r}. Use HH:MM or HH:MM:SS.')


def format_slot_value(slot_time: time) -> str:
    return slot_time.strftime('%H:%M:%S')


def format_slot_label(slot_time: time) -> str:
    return slot_time.strftime('%H:%M')


def iterate_slot_times(start: time, end: time, interval_minutes: int) -> list[time]:
    """Slot start times from ``start`` (inclusive) to ``end`` (exclusive)."""
    if interval_minutes < 1:
        raise ValueError('Slot interval must be at least one minute.')

    anchor = date.min
    current = datetime.combine(anchor, start)
    last = datetime.combine(anchor, end)
    step = timedelta(minutes=interval_minutes)

    slot_times: list[time] = []
    while current < last:
        slot_times.append(current.time())
        current += step

    return slot_times


def generate_time_slots(
    doctor: Any,
    day: date,
    booked: Iterable[datetime],
    interval_minutes: int,
) -> list[dict]:
    """Build the slot list for ``doctor`` on ``day``.

    A slot is unavailable when one of ``booked`` falls on the same day at the
    same time of day. Callers editing an appointment leave that appointment
    out of ``booked`` so its own slot stays selectable.
    """
    start = parse_time_of_day(doctor.available_from_time)
    end = parse_time_of_day(doctor.available_to_time)

    booked_times = {
        booked_at.time().replace(microsecond=0)
        for booked_at in booked
        if booked_at.date() == day
    }

    return [
        {
            'value': format_slot_value(slot_time),
            'label': format_slot_label(slot_time),
            'available': slot_time not in booked_times,
        }
        for slot_time in iterate_slot_times(start, end, interval_minutes)
    ]


def find_slot(slots: list[dict], slot_time: time) -> dict | None:
    value = format_slot_value(slot_time)
    for slot in slots:
        if slot['value'] == value:
            return slot
    return None


def describe_availability(doctor: Any) -> dict:
    return {
        'from_weekday': WEEKDAY_NAMES[doctor.available_from_weekday],
        'to_weekday': WEEKDAY_NAMES[doctor.available_to_weekday],
        'from_time': format_slot_label(parse_time_of_day(doctor.available_from_time)),
        'to_time': format_slot_label(parse_time_of_day(doctor.available_to_time)),
    }
