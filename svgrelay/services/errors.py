class RelayError(Exception):
    """Base for every failure the relay turns into a JSON error response."""
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict:
        return {"error": self.message}


class MethodNotAllowed(RelayError):
    status_code = 405


class BadRequest(RelayError):
    status_code = 400


class PayloadTooLarge(RelayError):
    status_code = 413


class ServerMisconfigured(RelayError):
    status_code = 500


class InvalidModelOutput(RelayError):
    status_code = 500

    def __init__(self, message: str, raw: str):
        super().__init__(message)
        self.raw = raw

    def to_dict(self) -> dict:
        return {"error": self.message, "raw": self.raw}


class UpstreamFailure(RelayError):
    status_code = 500
