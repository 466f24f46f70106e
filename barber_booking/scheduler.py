import logging
from datetime import datetime, timezone
from typing import Any

from barber_booking import config
from barber_booking.hours import check_business_hours
from barber_booking.models import AppointmentRecord, BookingRequest, DecisionResult
from barber_booking.moments import (
    combine_date_time,
    extract_start,
    format_long,
    format_short,
    parse_instant,
    resolve_moment,
    to_iso_utc,
)
from barber_booking.store import SheetStore

logger = logging.getLogger(__name__)

INCOMPLETE_MESSAGE = "Por favor, informe data e hora completas para o agendamento."
UNPARSEABLE_MESSAGE = "Não consegui processar a data. Tente um formato como 'amanhã às 10:00'."
TAKEN_MESSAGE = "Este horário já está ocupado. Por favor, escolha outro."


def _booking_timestamp() -> str:
    return datetime.now(timezone.utc).isoformat()


def is_slot_taken(iso_date: str, appointments) -> bool:
    """A slot is taken only when a stored instant matches the requested one exactly."""
    for appointment in appointments:
        if appointment.iso_date == iso_date:
            logger.info(f"Conflict found with appointment of {appointment.client_name} at {iso_date}")
            return True
    return False


def _book(request: BookingRequest, store: SheetStore) -> DecisionResult:
    date_value = extract_start(request.date_expr)
    time_value = extract_start(request.time_expr)
    if not date_value or not time_value:
        logger.info("Date or time parameter missing.")
        return DecisionResult(success=False, message=INCOMPLETE_MESSAGE)

    combined = combine_date_time(date_value, time_value)
    try:
        instant = parse_instant(combined)
    except ValueError:
        logger.warning(f"Could not parse combined date/time '{combined}'")
        return DecisionResult(success=False, message=UNPARSEABLE_MESSAGE)

    moment = resolve_moment(instant)
    iso_date = to_iso_utc(instant)
    logger.info(f"Requested slot {iso_date} (local {format_short(moment)})")

    # Both worksheets must exist before any business answer is given
    business_hours = store.load_business_hours()
    appointments = store.load_appointments()

    hours_check = check_business_hours(moment, business_hours)
    if not hours_check.is_open:
        return DecisionResult(success=False, message=hours_check.message)

    # Not atomic with the append below: concurrent requests may both pass
    if is_slot_taken(iso_date, appointments):
        return DecisionResult(success=False, message=TAKEN_MESSAGE)

    store.append_appointment(
        AppointmentRecord(
            client_name=request.name,
            formatted_date=format_short(moment),
            iso_date=iso_date,
            timestamp=_booking_timestamp(),
            status=config.STATUS_CONFIRMED,
        )
    )
    return DecisionResult(
        success=True,
        message=f"Perfeito, {request.name}! Seu agendamento foi confirmado para {format_long(moment)}.",
    )


def decide(name: str | None, date_expr: Any, time_expr: Any, store: SheetStore) -> DecisionResult:
    """Validates a requested date/time and books it when the slot is free.

    Never raises: every failure, including spreadsheet errors, is reported
    through the returned result.
    """
    try:
        request = BookingRequest(name=name or config.DEFAULT_CLIENT_NAME, date_expr=date_expr, time_expr=time_expr)
        return _book(request, store)
    except Exception as e:
        logger.error(f"Failed to process booking for {name!r}: {e}", exc_info=True)
        return DecisionResult(success=False, message=UNPARSEABLE_MESSAGE)
