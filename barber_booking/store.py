import logging
import threading
from typing import Dict, List, Optional

import gspread
from pydantic import ValidationError

from barber_booking import config
from barber_booking.models import AppointmentRecord, BusinessHoursRow

logger = logging.getLogger(__name__)


class BookingStoreError(Exception):
    """Raised when the spreadsheet cannot serve a request."""


class SheetNotFoundError(BookingStoreError):
    pass


class SheetStore:
    """Reads business hours and appointments from, and appends bookings to, a Google spreadsheet."""

    def __init__(self, client: gspread.Client, sheet_id: str):
        self.client = client
        self.sheet_id = sheet_id
        self._spreadsheet: Optional[gspread.Spreadsheet] = None

    @property
    def spreadsheet(self) -> gspread.Spreadsheet:
        if self._spreadsheet is None:
            self._spreadsheet = self.client.open_by_key(self.sheet_id)
            logger.info(f"Opened spreadsheet {self.sheet_id}")
        return self._spreadsheet

    def worksheet(self, title: str) -> gspread.Worksheet:
        try:
            return self.spreadsheet.worksheet(title)
        except gspread.exceptions.WorksheetNotFound as e:
            raise SheetNotFoundError(f"Worksheet '{title}' not found in spreadsheet {self.sheet_id}.") from e

    def _records(self, title: str) -> List[Dict]:
        # Keep every cell as text so "09:00" and ISO timestamps are not reinterpreted
        return self.worksheet(title).get_all_records(numericise_ignore=["all"])

    def load_business_hours(self) -> List[BusinessHoursRow]:
        """Loads the weekday configuration rows, skipping rows that do not parse."""
        rows = []
        for record in self._records(config.HOURS_SHEET):
            try:
                rows.append(BusinessHoursRow.model_validate(record))
            except ValidationError:
                logger.debug(f"Skipping business hours row: {record}")
        return rows

    def load_appointments(self) -> List[AppointmentRecord]:
        """Loads every booked appointment."""
        appointments = []
        for record in self._records(config.SCHEDULES_SHEET):
            try:
                appointments.append(AppointmentRecord.model_validate(record))
            except ValidationError:
                logger.debug(f"Skipping appointment row: {record}")
        return appointments

    def append_appointment(self, appointment: AppointmentRecord):
        """Appends a booking, placing each field under its matching header."""
        worksheet = self.worksheet(config.SCHEDULES_SHEET)
        headers = worksheet.row_values(1)
        by_header = appointment.model_dump(by_alias=True)
        missing = [column for column in by_header if column not in headers]
        if missing:
            raise BookingStoreError(
                f"Worksheet '{config.SCHEDULES_SHEET}' is missing header columns: {', '.join(missing)}"
            )
        worksheet.append_row([by_header.get(header, "") for header in headers], value_input_option="RAW")
        logger.info(f"Appointment saved for: {appointment.client_name} at {appointment.iso_date}")


_store: Optional[SheetStore] = None
_store_lock = threading.Lock()


def create_store() -> SheetStore:
    """Authorizes a gspread client with the configured service account."""
    if not config.SHEET_ID:
        raise BookingStoreError("SHEET_ID is not configured.")
    client = gspread.service_account_from_dict(config.load_google_credentials())
    return SheetStore(client, config.SHEET_ID)


def get_store() -> SheetStore:
    """Returns the process-wide store, creating it on first use."""
    global _store
    if _store is None:
        with _store_lock:
            if _store is None:
                _store = create_store()
    return _store
