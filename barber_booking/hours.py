import logging
from dataclasses import dataclass
from typing import Iterable, Optional

from barber_booking.models import BusinessHoursRow, ResolvedMoment
from barber_booking.moments import weekday_name

logger = logging.getLogger(__name__)


@dataclass
class HoursCheck:
    is_open: bool
    message: str = ""


def hours_to_decimal(value: str | None) -> float | None:
    """Converts an "HH:MM" boundary into a number by reading ':' as a decimal point.

    "09:00" becomes 9.0 and "09:30" becomes 9.3, not 9.5. Existing sheets are
    configured against this reading, so it must not change.
    """
    if not value:
        return None
    return float(value.strip().replace(":", ".", 1))


def is_within(decimal_hour: float, start: float | None, end: float | None) -> bool:
    """Half-open interval test: start is included, end is not."""
    if start is None or end is None:
        return False
    return start <= decimal_hour < end


def find_day_config(rows: Iterable[BusinessHoursRow], weekday: int) -> Optional[BusinessHoursRow]:
    for row in rows:
        if row.weekday == weekday:
            return row
    return None


def describe_hours(day_config: BusinessHoursRow) -> str:
    morning = f"das {day_config.morning_open} às {day_config.morning_close}"
    afternoon = ""
    if day_config.afternoon_open and day_config.afternoon_close:
        afternoon = f" e das {day_config.afternoon_open} às {day_config.afternoon_close}"
    return f"{morning}{afternoon}"


def check_business_hours(moment: ResolvedMoment, rows: Iterable[BusinessHoursRow]) -> HoursCheck:
    """Checks whether the shop is open at the requested local time.

    Args:
        moment: Requested time, already decomposed in the shop's time zone.
        rows: Business hours configuration, one row per weekday.

    Returns:
        HoursCheck with is_open set, or a customer-facing message explaining why not.
    """
    day_name = weekday_name(moment.weekday)
    day_config = find_day_config(rows, moment.weekday)

    if not day_config or not day_config.morning_open:
        logger.info(f"No business hours configured for weekday {moment.weekday}")
        return HoursCheck(is_open=False, message=f"Desculpe, não funcionamos em {day_name}.")

    morning_open = hours_to_decimal(day_config.morning_open)
    morning_close = hours_to_decimal(day_config.morning_close)
    afternoon_open = hours_to_decimal(day_config.afternoon_open)
    afternoon_close = hours_to_decimal(day_config.afternoon_close)

    logger.debug(
        f"Requested {moment.decimal_hour:.2f} against morning {morning_open}-{morning_close}, "
        f"afternoon {afternoon_open}-{afternoon_close}"
    )

    if is_within(moment.decimal_hour, morning_open, morning_close) or is_within(
        moment.decimal_hour, afternoon_open, afternoon_close
    ):
        return HoursCheck(is_open=True)

    return HoursCheck(
        is_open=False,
        message=f"Estamos abertos em {day_name}, mas nosso horário é {describe_hours(day_config)}.",
    )
