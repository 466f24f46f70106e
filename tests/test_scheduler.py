from unittest.mock import MagicMock, patch

import gspread
import pytest

from barber_booking import scheduler
from barber_booking.models import AppointmentRecord, BusinessHoursRow
from barber_booking.store import SheetNotFoundError, SheetStore

TUESDAY = "2025-10-14T12:00:00-03:00"
SUNDAY = "2025-10-12T12:00:00-03:00"


def make_store(appointments=None):
    store = MagicMock()
    store.load_business_hours.return_value = [
        BusinessHoursRow(weekday=2, morning_open="09:00", morning_close="12:00"),
    ]
    store.load_appointments.return_value = appointments or []
    return store


def existing(iso_date: str) -> AppointmentRecord:
    return AppointmentRecord(
        client_name="Ana",
        formatted_date="14/10/2025 10:30",
        iso_date=iso_date,
        timestamp="2025-10-01T12:00:00+00:00",
        status="Confirmado",
    )


@pytest.mark.parametrize(
    "date_expr, time_expr",
    [
        (None, "2025-10-14T10:30:00-03:00"),
        (TUESDAY, None),
        ("", ""),
        ({"start": "", "end": ""}, "2025-10-14T10:30:00-03:00"),
    ],
)
def test_incomplete_date_or_time(date_expr, time_expr):
    store = make_store()
    result = scheduler.decide("João", date_expr, time_expr, store)

    assert result.success is False
    assert "informe data e hora completas" in result.message
    store.load_business_hours.assert_not_called()


def test_unparseable_date():
    store = make_store()
    result = scheduler.decide("João", "amanhã", "dez e meia", store)

    assert result.success is False
    assert result.message == scheduler.UNPARSEABLE_MESSAGE
    store.append_appointment.assert_not_called()


@patch("barber_booking.scheduler._booking_timestamp", return_value="2025-10-10T09:00:00+00:00")
def test_scenario_books_tuesday_morning(mock_timestamp):
    store = make_store()
    result = scheduler.decide("João", TUESDAY, "2025-10-13T10:30:00-03:00", store)

    assert result.success is True
    assert result.message == "Perfeito, João! Seu agendamento foi confirmado para terça-feira, 14 de outubro de 2025 às 10:30."

    store.append_appointment.assert_called_once()
    record = store.append_appointment.call_args[0][0]
    assert record.client_name == "João"
    assert record.iso_date == "2025-10-14T13:30:00.000Z"
    assert record.formatted_date == "14/10/2025 10:30"
    assert record.timestamp == "2025-10-10T09:00:00+00:00"
    assert record.status == "Confirmado"


def test_scenario_rejects_morning_close_boundary():
    store = make_store()
    result = scheduler.decide("João", TUESDAY, "2025-10-14T12:00:00-03:00", store)

    assert result.success is False
    assert result.message == "Estamos abertos em terça-feira, mas nosso horário é das 09:00 às 12:00."
    store.append_appointment.assert_not_called()


def test_scenario_rejects_unconfigured_sunday():
    store = make_store()
    result = scheduler.decide("João", SUNDAY, "2025-10-12T10:00:00-03:00", store)

    assert result.success is False
    assert "domingo" in result.message
    store.append_appointment.assert_not_called()


def test_range_parameters_use_start():
    store = make_store()
    result = scheduler.decide(
        "João",
        {"start": TUESDAY, "end": "2025-10-15T12:00:00-03:00"},
        {"start": "2025-10-14T09:00:00-03:00", "end": "2025-10-14T09:45:00-03:00"},
        store,
    )

    assert result.success is True
    assert store.append_appointment.call_args[0][0].iso_date == "2025-10-14T12:00:00.000Z"


def test_slot_already_taken():
    store = make_store([existing("2025-10-14T13:30:00.000Z")])
    result = scheduler.decide("João", TUESDAY, "2025-10-14T10:30:00-03:00", store)

    assert result.success is False
    assert result.message == scheduler.TAKEN_MESSAGE
    store.append_appointment.assert_not_called()


def test_slot_one_millisecond_apart_is_free():
    store = make_store([existing("2025-10-14T13:30:00.001Z")])
    result = scheduler.decide("João", TUESDAY, "2025-10-14T10:30:00-03:00", store)

    assert result.success is True
    store.append_appointment.assert_called_once()


def test_missing_name_uses_placeholder():
    store = make_store()
    result = scheduler.decide(None, TUESDAY, "2025-10-14T10:30:00-03:00", store)

    assert result.message.startswith("Perfeito, Cliente!")
    assert store.append_appointment.call_args[0][0].client_name == "Cliente"


def test_missing_worksheet_is_reported_not_raised():
    store = make_store()
    store.load_business_hours.side_effect = SheetNotFoundError("Worksheet 'Horarios' not found")

    result = scheduler.decide("João", TUESDAY, "2025-10-14T10:30:00-03:00", store)

    assert result.success is False
    assert result.message == scheduler.UNPARSEABLE_MESSAGE


def test_store_write_failure_is_reported_not_raised():
    store = make_store()
    store.append_appointment.side_effect = gspread.exceptions.GSpreadException("quota exceeded")

    result = scheduler.decide("João", TUESDAY, "2025-10-14T10:30:00-03:00", store)

    assert result.success is False
    assert result.message == scheduler.UNPARSEABLE_MESSAGE


def test_is_slot_taken_exact_match_only():
    appointments = [existing("2025-10-14T13:30:00.000Z")]
    assert scheduler.is_slot_taken("2025-10-14T13:30:00.000Z", appointments) is True
    assert scheduler.is_slot_taken("2025-10-14T13:30:00.000+00:00", appointments) is False
    assert scheduler.is_slot_taken("2025-10-14T14:30:00.000Z", []) is False


def test_non_text_name_is_reported_not_raised():
    store = make_store()
    result = scheduler.decide(42, TUESDAY, "2025-10-14T10:30:00-03:00", store)

    assert result.success is False
    assert result.message == scheduler.UNPARSEABLE_MESSAGE
    store.append_appointment.assert_not_called()


def test_missing_appointments_sheet_beats_closed_hours():
    store = make_store()
    store.load_appointments.side_effect = SheetNotFoundError("Worksheet 'Agendamentos Barbearia' not found")

    # 12:00 is outside the configured hours, but the missing sheet is reported first
    result = scheduler.decide("João", TUESDAY, "2025-10-14T12:00:00-03:00", store)

    assert result.success is False
    assert result.message == scheduler.UNPARSEABLE_MESSAGE


def test_sheet_without_header_row_is_not_confirmed():
    hours_ws = MagicMock()
    hours_ws.get_all_records.return_value = [
        {"DiaDaSemana": "2", "InicioManha": "09:00", "FimManha": "12:00", "InicioTarde": "", "FimTarde": ""}
    ]
    schedules_ws = MagicMock()
    schedules_ws.get_all_records.return_value = []
    schedules_ws.row_values.return_value = []

    client = MagicMock()
    client.open_by_key.return_value.worksheet.side_effect = {
        "Horarios": hours_ws,
        "Agendamentos Barbearia": schedules_ws,
    }.__getitem__

    result = scheduler.decide("Ana", TUESDAY, "2025-10-14T10:30:00-03:00", SheetStore(client, "sheet-123"))

    assert result.success is False
    assert result.message == scheduler.UNPARSEABLE_MESSAGE
    schedules_ws.append_row.assert_not_called()
