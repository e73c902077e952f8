import requests
import structlog

from ..config.constants import PROCESS_ROUTE

logger = structlog.get_logger()


class RelayClientError(Exception):
    """Human-readable failure of a process request."""


class RelayClient:
    """
    Sends encoded images to the relay's process endpoint.
    Args:
        base_url (str): Root URL of the relay server.
        session (requests.Session): Optional session, mostly for tests.
        timeout (float): Seconds to wait for the relay. `None` waits until the request completes.
    """

    def __init__(self, base_url: str = "http://localhost:5000", session=None, timeout=None):
        self.url = base_url.rstrip("/") + PROCESS_ROUTE
        self.session = session or requests.Session()
        self.timeout = timeout

    def process_image(self, image_data: str, mime_type: str) -> dict:
        """
        Posts one image and returns the decoded JSON body.
        Args:
            image_data (str): Base64 image bytes without a data-URL prefix.
            mime_type (str): Content type of the image.
        Returns:
            data (dict): `{svg, animated}` as returned by the relay.
        Raises:
            RelayClientError: On network errors, non-JSON bodies, or non-2xx responses.
        """
        try:
            response = self.session.post(
                self.url,
                json={"imageData": image_data, "mimeType": mime_type},
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            logger.warning("Relay request failed", url=self.url, error=str(e))
            raise RelayClientError(f"Could not reach the server: {e}") from e

        try:
            data = response.json()
        except ValueError as e:
            raise RelayClientError(f"Unexpected response from server (HTTP {response.status_code})") from e

        if not isinstance(data, dict):
            raise RelayClientError(f"Unexpected response from server (HTTP {response.status_code})")
        if not response.ok:
            raise RelayClientError(data.get("error") or "Processing failed")
        if not isinstance(data.get("svg"), str):
            raise RelayClientError("Server response did not include SVG markup")
        return data
