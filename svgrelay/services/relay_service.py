import base64
import binascii

import structlog
from google import genai
from google.genai import types

from ..config.constants import IMAGE_PROMPT, REQUIRED_FIELDS
from ..config.settings import RelayConfig
from ..utils.svg_utils import has_animation, is_svg_markup, raw_preview, strip_code_fences
from .errors import BadRequest, InvalidModelOutput, ServerMisconfigured, UpstreamFailure

logger = structlog.get_logger()


def default_client_factory(api_key: str):
    return genai.Client(api_key=api_key)


def validate_payload(payload) -> tuple:
    """
    Checks the request body for the image fields.
    Args:
        payload (dict | None): Parsed JSON body.
    Returns:
        (image_bytes, mime_type) (tuple[bytes, str]): Decoded image and its content type.
    Raises:
        BadRequest: If a field is missing or `imageData` is not base64.
    """
    payload = payload if isinstance(payload, dict) else {}
    missing = [field for field in REQUIRED_FIELDS if not payload.get(field)]
    if missing:
        raise BadRequest(f"Missing required field(s): {', '.join(missing)}")

    try:
        image_bytes = base64.b64decode(payload["imageData"], validate=True)
    except (binascii.Error, TypeError, ValueError) as e:
        raise BadRequest(f"imageData is not valid base64: {e}") from e

    return image_bytes, str(payload["mimeType"])


def shape_model_reply(text: str) -> dict:
    """
    Unwraps and validates the model's reply.
    Args:
        text (str): Raw completion text.
    Returns:
        response (dict:{svg:str, animated:bool}): Body for a successful response.
    Raises:
        InvalidModelOutput: If the unwrapped text does not start with `<svg`.
    """
    svg = strip_code_fences(text)
    if not is_svg_markup(svg):
        logger.warning("Model reply is not SVG", preview=raw_preview(svg, 80))
        raise InvalidModelOutput("Model did not return a valid SVG", raw=raw_preview(svg))

    animated = has_animation(svg)
    if not animated:
        logger.warning("Model returned an SVG without animation markers", length=len(svg))
    return {"svg": svg, "animated": animated}


class RelayService:
    """
    Forwards one image to the model and shapes its reply.

    A new model client is built for every call through `client_factory`, so no
    state is shared between requests.
    """

    def __init__(self, config: RelayConfig, client_factory=None):
        self.config = config
        self.client_factory = client_factory or default_client_factory

    def generate_svg(self, image_bytes: bytes, mime_type: str) -> str:
        """
        Sends the system prompt and the inline image in a single request.
        Returns:
            response.text (str): Raw text of the completion.
        Raises:
            ServerMisconfigured: If no API key is configured. The model is not called.
            UpstreamFailure: On any error raised by the model client.
        """
        if self.config.missing_fields():
            raise ServerMisconfigured("GEMINI_API_KEY is not configured on the server")

        try:
            client = self.client_factory(self.config.gemini_api_key)
            response = client.models.generate_content(
                model=self.config.model_name,
                contents=[
                    types.Part.from_bytes(data=image_bytes, mime_type=mime_type),
                    IMAGE_PROMPT,
                ],
                config=types.GenerateContentConfig(
                    system_instruction=self.config.system_prompt,
                ),
            )
            return response.text or ""
        except Exception as e:
            logger.exception("Gemini API error")
            raise UpstreamFailure(str(e)) from e

    def process(self, payload) -> dict:
        image_bytes, mime_type = validate_payload(payload)
        logger.info("Processing image", mime_type=mime_type, size=len(image_bytes))
        return shape_model_reply(self.generate_svg(image_bytes, mime_type))
