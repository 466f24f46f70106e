import json
import logging
from typing import Dict, List

from flask import Flask, jsonify, request

from barber_booking import config, scheduler, store
from barber_booking.models import DecisionResult, DialogflowContext, DialogflowRequest

logger = logging.getLogger(__name__)

INTERNAL_ERROR_MESSAGE = "Desculpe, ocorreu um erro interno. Por favor, tente novamente."
PASSTHROUGH_MESSAGE = "Webhook contatado, mas a intenção não é de agendamento."


def get_person_name(contexts: List[DialogflowContext]) -> str | None:
    """Returns the requester's name from the first context that carries person.original."""
    for context in contexts:
        params = context.parameters
        name = params.get("person.original")
        if not name and isinstance(params.get("person"), dict):
            name = params["person"].get("original")
        if isinstance(name, str) and name.strip():
            return name.strip()
    return None


def create_response(text: str) -> Dict:
    """Builds the Dialogflow ES fulfillment payload."""
    return {"fulfillmentMessages": [{"text": {"text": [text]}}]}


def handle_request(body: Dict) -> DecisionResult:
    """Routes one Dialogflow request. Raises on malformed payloads."""
    query_result = DialogflowRequest.model_validate(body).query_result
    intent = query_result.intent.display_name
    parameters = query_result.parameters

    logger.info(f"Intent: {intent} | Text: \"{query_result.query_text}\"")
    logger.debug(f"Parameters received: {json.dumps(parameters, ensure_ascii=False)}")

    if intent != config.BOOKING_INTENT:
        return DecisionResult(success=True, message=PASSTHROUGH_MESSAGE)

    name = get_person_name(query_result.output_contexts)
    return scheduler.decide(
        name,
        parameters.get(config.DATE_PARAM),
        parameters.get(config.TIME_PARAM),
        store.get_store(),
    )


def create_app() -> Flask:
    app = Flask(__name__)

    @app.get("/health")
    def health():
        return jsonify({"status": "ok"})

    @app.post("/webhook")
    def webhook():
        logger.info("=== New webhook request ===")
        try:
            result = handle_request(request.get_json(silent=True) or {})
        except Exception as e:
            logger.error(f"Critical error in webhook: {e}", exc_info=True)
            return jsonify(create_response(INTERNAL_ERROR_MESSAGE))
        logger.info(f"Reply sent: \"{result.message}\"")
        return jsonify(create_response(result.message))

    return app
