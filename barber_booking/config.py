import json
import logging
import os
from typing import Dict, List

logger = logging.getLogger(__name__)

# --- Google Sheets ---
GOOGLE_CREDENTIALS_RAW = os.environ.get("GOOGLE_CREDENTIALS")
SHEET_ID = os.environ.get("SHEET_ID")

SCHEDULES_SHEET = "Agendamentos Barbearia"
HOURS_SHEET = "Horarios"

# --- Scheduling ---
TIMEZONE = os.environ.get("TIMEZONE", "America/Sao_Paulo")
STATUS_CONFIRMED = "Confirmado"
DEFAULT_CLIENT_NAME = "Cliente"

# --- Dialogflow ---
BOOKING_INTENT = "AgendarHorario"
DATE_PARAM = "date"
TIME_PARAM = "time"

# --- Server ---
PORT = int(os.environ.get("PORT", "3000"))

# --- Firestore migration ---
FIREBASE_CREDENTIALS_FILE = os.environ.get("FIREBASE_CREDENTIALS_FILE")
TENANT_COLLECTION = "barbearias"
TENANT_ID = "01"
TENANT_NAME = "Gestão Barbearia (Migrado)"
LEGACY_COLLECTIONS: List[str] = ["Agendamentos", "Horarios", "Servicos"]
FIRESTORE_BATCH_LIMIT = 500

if not SHEET_ID:
    logger.warning("SHEET_ID not set. Booking requests will fail until it is configured.")


def load_google_credentials() -> Dict:
    """Parses the service account JSON held in GOOGLE_CREDENTIALS."""
    return json.loads(GOOGLE_CREDENTIALS_RAW or "{}")


def validate_environment() -> bool:
    """Checks the settings the webhook needs before it starts serving."""
    if not GOOGLE_CREDENTIALS_RAW or not SHEET_ID:
        logger.error("Environment variables GOOGLE_CREDENTIALS or SHEET_ID are missing.")
        return False
    try:
        load_google_credentials()
    except json.JSONDecodeError:
        logger.error("GOOGLE_CREDENTIALS is not valid JSON.")
        return False
    logger.info("Environment configured correctly.")
    return True
