import structlog
from flask import Blueprint, current_app, jsonify, request

from ..config.constants import PROCESS_ROUTE
from ..services.errors import MethodNotAllowed, PayloadTooLarge, RelayError
from ..services.relay_service import RelayService

logger = structlog.get_logger()
process_bp = Blueprint('process', __name__)


def error_response(error: RelayError):
    return jsonify(error.to_dict()), error.status_code


@process_bp.route(PROCESS_ROUTE, methods=['POST'])
def process_image():
    """
    Turns an uploaded image into animated SVG markup.
    Expects a JSON body with:
        - 'imageData': base64 image bytes, without the data-URL prefix.
        - 'mimeType': content type of the image.
    Returns:
        response: `{svg, animated}` on success, `{error[, raw]}` with the matching status code otherwise.
    """
    service = RelayService(
        current_app.config["RELAY_CONFIG"],
        current_app.config.get("MODEL_CLIENT_FACTORY"),
    )
    try:
        result = service.process(request.get_json(silent=True))
        return jsonify(result), 200
    except RelayError as e:
        logger.info("Process request failed", status=e.status_code, error=e.message)
        return error_response(e)


def handle_method_not_allowed(e):
    return error_response(MethodNotAllowed("Method not allowed"))


def handle_payload_too_large(e):
    max_mb = current_app.config["RELAY_CONFIG"].max_upload_mb
    return error_response(PayloadTooLarge(f"Request body exceeds the {max_mb} MB upload limit"))
