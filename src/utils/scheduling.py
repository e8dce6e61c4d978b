# src/utils/scheduling.py
"""
Calendar dates, time blocks and appointment status rules.

Dates are carried as canonical ``YYYY-MM-DD`` strings and times as zero-padded
24-hour ``HH:MM`` strings. Both are compared as strings, never as date objects,
so no timezone offset can move an appointment to another day.
"""
import re
from datetime import date, datetime, time, timedelta
from enum import Enum as PyEnum
from typing import Any, Iterable, List, NamedTuple, Optional, Tuple, Union
from models.appointment import AppointmentStatus

CANONICAL_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")
_TIME_24H_RE = re.compile(r"^(\d{1,2}):(\d{2})(?::(\d{2})(?:\.\d+)?)?$")
_TIME_12H_RE = re.compile(r"^(\d{1,2})(?::(\d{2}))?\s*([AaPp])\.?\s*[Mm]\.?$")

# Accepted when a string is not already canonical
_FALLBACK_DATE_FORMATS = (
    "%Y-%m-%d",
    "%Y-%m-%d %H:%M:%S",
    "%Y-%m-%d %H:%M",
    "%Y/%m/%d",
    "%d/%m/%Y",
    "%d-%m-%Y",
)

MINUTES_PER_DAY = 24 * 60

DateInput = Union[str, date, datetime]
TimeInput = Union[str, time]


# ---------------------------------------------------------------------------
# Dates
# ---------------------------------------------------------------------------


def normalize_date(value: DateInput) -> str:
    """Return the canonical ``YYYY-MM-DD`` form of a calendar date.

    Structured dates contribute their own year/month/day fields; an aware
    datetime is *not* converted to UTC first. Strings lose any time suffix
    (everything from ``T``) and are re-parsed when they are not canonical.
    """
    if isinstance(value, (datetime, date)):
        return f"{value.year:04d}-{value.month:02d}-{value.day:02d}"

    if not isinstance(value, str):
        raise ValueError(f"Unsupported date value: {value!r}")

    candidate = value.strip().split("T", 1)[0]
    if CANONICAL_DATE_RE.match(candidate):
        # Rejects 2024-02-30 and friends
        date.fromisoformat(candidate)
        return candidate

    for fmt in _FALLBACK_DATE_FORMATS:
        try:
            parsed = datetime.strptime(candidate, fmt)
        except ValueError:
            continue
        return normalize_date(parsed)

    raise ValueError(f"Unrecognized date: {value!r}")


def today_str(today: Optional[date] = None) -> str:
    return normalize_date(today or date.today())


def shift_date(value: DateInput, days: int) -> str:
    base = date.fromisoformat(normalize_date(value))
    return normalize_date(base + timedelta(days=days))


def tomorrow_str(today: Optional[DateInput] = None) -> str:
    return shift_date(today if today is not None else date.today(), 1)


def is_past_date(value: DateInput, today: Optional[DateInput] = None) -> bool:
    reference = normalize_date(today) if today is not None else today_str()
    return normalize_date(value) < reference


class AppointmentView(str, PyEnum):
    TODAY = "today"
    TOMORROW = "tomorrow"
    UPCOMING = "upcoming"
    ALL = "all"


def _date_of(item: Any) -> str:
    if isinstance(item, dict):
        return item["date"]
    return item.date


def filter_by_view(
    appointments: Iterable[Any],
    view: Union[AppointmentView, str],
    today: Optional[DateInput] = None,
) -> List[Any]:
    """Select the appointments shown under the today/tomorrow/upcoming tabs"""
    view = AppointmentView(view)
    today_value = normalize_date(today) if today is not None else today_str()
    tomorrow_value = tomorrow_str(today_value)

    if view == AppointmentView.TODAY:
        return [a for a in appointments if _date_of(a) == today_value]
    if view == AppointmentView.TOMORROW:
        return [a for a in appointments if _date_of(a) == tomorrow_value]
    if view == AppointmentView.UPCOMING:
        return [a for a in appointments if _date_of(a) >= today_value]
    return list(appointments)


# ---------------------------------------------------------------------------
# Times
# ---------------------------------------------------------------------------


def parse_time(value: TimeInput) -> Tuple[int, int]:
    """Parse ``HH:MM``, ``H:MM``, ``HH:MM:SS`` or ``9AM``/``9:30 PM`` into (hour, minute)"""
    if isinstance(value, time):
        return value.hour, value.minute

    if not isinstance(value, str):
        raise ValueError(f"Unsupported time value: {value!r}")

    text = value.strip()

    match = _TIME_24H_RE.match(text)
    if match:
        hour, minute = int(match.group(1)), int(match.group(2))
        if hour > 23 or minute > 59:
            raise ValueError(f"Time out of range: {value!r}")
        return hour, minute

    match = _TIME_12H_RE.match(text)
    if match:
        hour = int(match.group(1))
        minute = int(match.group(2) or 0)
        if not 1 <= hour <= 12 or minute > 59:
            raise ValueError(f"Time out of range: {value!r}")
        is_pm = match.group(3).lower() == "p"
        if is_pm and hour < 12:
            hour += 12
        if not is_pm and hour == 12:
            hour = 0
        return hour, minute

    raise ValueError(f"Unrecognized time: {value!r}")


def normalize_time(value: TimeInput) -> str:
    hour, minute = parse_time(value)
    return f"{hour:02d}:{minute:02d}"


def time_to_minutes(value: TimeInput) -> int:
    hour, minute = parse_time(value)
    return hour * 60 + minute


def minutes_to_time(minutes: int) -> str:
    minutes %= MINUTES_PER_DAY
    return f"{minutes // 60:02d}:{minutes % 60:02d}"


def derive_end_time(start: TimeInput, hours: int = 1) -> str:
    """End of an hour-picker block; wraps past midnight (23:00 -> 00:00)"""
    return minutes_to_time(time_to_minutes(start) + hours * 60)


def format_time_label(value: TimeInput) -> str:
    """12-hour label for a single time, e.g. ``9:00 AM``"""
    hour, minute = parse_time(value)
    period = "PM" if hour >= 12 else "AM"
    hour12 = hour % 12 or 12
    return f"{hour12}:{minute:02d} {period}"


def _compact_label(value: TimeInput) -> str:
    hour, minute = parse_time(value)
    period = "PM" if hour >= 12 else "AM"
    hour12 = hour % 12 or 12
    if minute:
        return f"{hour12}:{minute:02d}{period}"
    return f"{hour12}{period}"


def format_block_label(start: TimeInput, end: TimeInput) -> str:
    """Display label for a block, e.g. ``9AM - 10AM``"""
    return f"{_compact_label(start)} - {_compact_label(end)}"


def _end_minutes(end: TimeInput) -> int:
    # An end of 00:00 closes the day
    minutes = time_to_minutes(end)
    return minutes or MINUTES_PER_DAY


class TimeBlock(NamedTuple):
    start: str
    end: str

    @property
    def value(self) -> str:
        return f"{self.start}-{self.end}"

    @property
    def label(self) -> str:
        return format_block_label(self.start, self.end)

    @property
    def start_minutes(self) -> int:
        return time_to_minutes(self.start)

    @property
    def end_minutes(self) -> int:
        return _end_minutes(self.end)

    def overlaps(self, other: "TimeBlock") -> bool:
        return blocks_overlap(self.start, self.end, other.start, other.end)


def make_time_block(start: TimeInput, end: Optional[TimeInput] = None) -> TimeBlock:
    """Build a validated block; without ``end`` the block lasts one hour"""
    start_value = normalize_time(start)
    end_value = normalize_time(end) if end is not None else derive_end_time(start_value)
    if time_to_minutes(start_value) >= _end_minutes(end_value):
        raise ValueError(
            f"Start time {start_value} must be before end time {end_value}"
        )
    return TimeBlock(start_value, end_value)


def parse_time_block(value: str) -> TimeBlock:
    """Parse ``09:00-10:00`` (or ``9AM - 10AM``) into a block"""
    if not value or "-" not in value:
        raise ValueError(f"Time block must look like HH:MM-HH:MM, got {value!r}")
    start, end = value.split("-", 1)
    return make_time_block(start, end)


def blocks_overlap(
    start_a: TimeInput, end_a: TimeInput, start_b: TimeInput, end_b: TimeInput
) -> bool:
    """Half-open interval overlap: [start_a, end_a) against [start_b, end_b)"""
    return time_to_minutes(start_a) < _end_minutes(end_b) and time_to_minutes(
        start_b
    ) < _end_minutes(end_a)


TIME_BLOCK_CATALOG: List[TimeBlock] = [
    TimeBlock(f"{hour:02d}:00", f"{hour + 1:02d}:00") for hour in range(8, 19)
]


def half_hour_slots(
    day_start: TimeInput = "08:00", day_end: TimeInput = "19:00", step: int = 30
) -> List[str]:
    """Start times offered by the free-form picker across the business day"""
    current = time_to_minutes(day_start)
    last = _end_minutes(day_end)
    slots = []
    while current < last:
        slots.append(minutes_to_time(current))
        current += step
    return slots


# ---------------------------------------------------------------------------
# Status
# ---------------------------------------------------------------------------

# Statuses that keep a doctor's time block occupied
BLOCKING_STATUSES = frozenset(
    status for status in AppointmentStatus if status != AppointmentStatus.CANCELLED
)


def transition_status(
    current: Union[AppointmentStatus, str], target: Union[AppointmentStatus, str]
) -> AppointmentStatus:
    """Move an appointment between statuses.

    The status set is flat: every status can be reached from every other one
    by an explicit user action. Unknown statuses raise ``ValueError``.
    """
    AppointmentStatus(current)
    return AppointmentStatus(target)


def find_overlapping(
    start: TimeInput,
    end: TimeInput,
    others: Iterable[Any],
    exclude_id: Any = None,
) -> List[Any]:
    """Appointments in ``others`` whose block overlaps [start, end).

    ``others`` are expected to share the doctor and date already; cancelled
    appointments never conflict.
    """
    conflicts = []
    for other in others:
        if exclude_id is not None and other.id == exclude_id:
            continue
        if AppointmentStatus(other.status) not in BLOCKING_STATUSES:
            continue
        if blocks_overlap(start, end, other.start_time, other.end_time):
            conflicts.append(other)
    return conflicts
