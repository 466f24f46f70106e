import logging
from datetime import datetime, timezone
from typing import Any, List
from zoneinfo import ZoneInfo

from barber_booking import config
from barber_booking.models import ResolvedMoment

logger = logging.getLogger(__name__)

# Indexed by weekday, 0 = Sunday
WEEKDAY_NAMES: List[str] = [
    "domingo",
    "segunda-feira",
    "terça-feira",
    "quarta-feira",
    "quinta-feira",
    "sexta-feira",
    "sábado",
]

MONTH_NAMES: List[str] = [
    "janeiro",
    "fevereiro",
    "março",
    "abril",
    "maio",
    "junho",
    "julho",
    "agosto",
    "setembro",
    "outubro",
    "novembro",
    "dezembro",
]


def extract_start(expr: Any) -> str | None:
    """Returns the usable value of a Dialogflow date/time parameter.

    Parameters arrive either as a plain value or as a range object with
    ``start``/``end`` keys; only the start is used. Empty values count as absent.
    """
    if isinstance(expr, dict):
        expr = expr.get("start")
    if expr is None:
        return None
    value = str(expr).strip()
    return value or None


def combine_date_time(date_value: str, time_value: str) -> str:
    """Joins the calendar part of ``date_value`` with the clock part of ``time_value``.

    >>> combine_date_time("2025-10-14T12:00:00-03:00", "2025-10-13T10:30:00-03:00")
    '2025-10-14T10:30:00-03:00'
    """
    date_part = date_value.split("T", 1)[0]
    time_part = time_value.split("T", 1)[1] if "T" in time_value else time_value
    return f"{date_part}T{time_part}"


def parse_instant(text: str) -> datetime:
    """Parses an ISO-8601 timestamp into an aware UTC datetime.

    Timestamps without an offset are taken as UTC. Raises ValueError when the
    text is not a valid timestamp.
    """
    parsed = datetime.fromisoformat(text)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def resolve_moment(instant: datetime, tz_name: str | None = None) -> ResolvedMoment:
    """Decomposes ``instant`` into calendar components of the given zone."""
    local = instant.astimezone(ZoneInfo(tz_name or config.TIMEZONE))

    # Weekday comes from the local wall clock, never from the UTC instant
    wall_clock = datetime(local.year, local.month, local.day, local.hour, local.minute)
    weekday = wall_clock.isoweekday() % 7

    moment = ResolvedMoment(
        instant=instant,
        year=local.year,
        month=local.month,
        day=local.day,
        hour=local.hour,
        minute=local.minute,
        weekday=weekday,
        decimal_hour=local.hour + local.minute / 60,
    )
    logger.debug(f"Resolved {instant.isoformat()} to local {wall_clock} (weekday {weekday})")
    return moment


def to_iso_utc(instant: datetime) -> str:
    """Formats an instant as UTC ISO-8601 with milliseconds, e.g. 2025-10-14T13:30:00.000Z."""
    utc = instant.astimezone(timezone.utc)
    return f"{utc:%Y-%m-%dT%H:%M:%S}.{utc.microsecond // 1000:03d}Z"


def weekday_name(weekday: int) -> str:
    return WEEKDAY_NAMES[weekday]


def format_short(moment: ResolvedMoment) -> str:
    """Formats local time as DD/MM/YYYY HH:MM for the spreadsheet."""
    return f"{moment.day:02d}/{moment.month:02d}/{moment.year} {moment.hour:02d}:{moment.minute:02d}"


def format_long(moment: ResolvedMoment) -> str:
    """Formats local time for the customer, e.g. 'terça-feira, 14 de outubro de 2025 às 10:30'."""
    return (
        f"{weekday_name(moment.weekday)}, {moment.day} de {MONTH_NAMES[moment.month - 1]} "
        f"de {moment.year} às {moment.hour:02d}:{moment.minute:02d}"
    )
