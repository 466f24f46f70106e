from datetime import datetime
from typing import Any, Dict, List

from pydantic import BaseModel, ConfigDict, Field, field_validator


class DecisionResult(BaseModel):
    success: bool
    message: str


class BookingRequest(BaseModel):
    name: str
    date_expr: Any = None
    time_expr: Any = None


class ResolvedMoment(BaseModel):
    instant: datetime  # UTC-aware
    year: int
    month: int
    day: int
    hour: int
    minute: int
    weekday: int  # 0 = Sunday ... 6 = Saturday, local zone
    decimal_hour: float


class BusinessHoursRow(BaseModel):
    """One row of the business hours worksheet."""

    model_config = ConfigDict(populate_by_name=True)

    weekday: int = Field(alias="DiaDaSemana")
    morning_open: str | None = Field(default=None, alias="InicioManha")
    morning_close: str | None = Field(default=None, alias="FimManha")
    afternoon_open: str | None = Field(default=None, alias="InicioTarde")
    afternoon_close: str | None = Field(default=None, alias="FimTarde")

    @field_validator("weekday", mode="before")
    @classmethod
    def _parse_weekday(cls, value):
        # Sheets may hand back 2, "2" or " 2 "
        return int(str(value).strip())

    @field_validator("morning_open", "morning_close", "afternoon_open", "afternoon_close", mode="before")
    @classmethod
    def _blank_to_none(cls, value):
        if value is None:
            return None
        value = str(value).strip()
        return value or None


class AppointmentRecord(BaseModel):
    """One row of the appointments worksheet."""

    model_config = ConfigDict(populate_by_name=True)

    client_name: str = Field(alias="NomeCliente")
    formatted_date: str = Field(default="", alias="DataHoraFormatada")
    iso_date: str = Field(default="", alias="DataHoraISO")
    timestamp: str = Field(default="", alias="TimestampAgendamento")
    status: str = Field(default="", alias="Status")

    @field_validator("client_name", "formatted_date", "iso_date", "timestamp", "status", mode="before")
    @classmethod
    def _as_text(cls, value):
        return "" if value is None else str(value)


# --- Dialogflow ES webhook payload ---


class DialogflowIntent(BaseModel):
    display_name: str = Field(alias="displayName", min_length=1)


class DialogflowContext(BaseModel):
    name: str = ""
    parameters: Dict[str, Any] = Field(default_factory=dict)


class DialogflowQueryResult(BaseModel):
    query_text: str = Field(default="", alias="queryText")
    intent: DialogflowIntent
    parameters: Dict[str, Any] = Field(default_factory=dict)
    output_contexts: List[DialogflowContext] = Field(default_factory=list, alias="outputContexts")


class DialogflowRequest(BaseModel):
    query_result: DialogflowQueryResult = Field(alias="queryResult")
