"""
Gateway error taxonomy.

Every failure is terminal for the request: it maps to one HTTP status and is
returned to the caller as an OpenAI-style error object. Nothing is retried.
"""

from starlette.responses import JSONResponse


class GatewayError(Exception):
    """Base class for errors surfaced directly to the HTTP caller.

    Attributes:
        status_code (int): HTTP status returned to the client.
        error_type (str): OpenAI ``error.type`` value.
        code (str): OpenAI ``error.code`` value.
        message (str): Human-readable description, used as ``error.message``.
    """

    status_code = 500
    error_type = "server_error"
    code = "internal_error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class Unauthorized(GatewayError):
    status_code = 401
    error_type = "authentication_error"
    code = "invalid_api_key"

    def __init__(self, message: str = "Unauthorized"):
        super().__init__(message)


class MethodNotAllowed(GatewayError):
    status_code = 405
    error_type = "invalid_request_error"
    code = "method_not_allowed"

    def __init__(self, message: str = "Method not allowed"):
        super().__init__(message)


class InvalidRequest(GatewayError):
    status_code = 400
    error_type = "invalid_request_error"
    code = "invalid_request"


class UnsupportedModel(InvalidRequest):
    code = "model_not_supported"


class UpstreamError(GatewayError):
    """The upstream call failed: transport error, bad status or undecodable body."""

    code = "upstream_error"


def error_response(exc: GatewayError) -> JSONResponse:
    """Render a GatewayError as an OpenAI-compatible error response.

    Args:
        exc: The error to render.

    Returns:
        JSONResponse: ``{"error": {"message", "type", "code"}}`` with the
                      error's HTTP status.
    """
    return JSONResponse(
        {
            "error": {
                "message": exc.message,
                "type": exc.error_type,
                "code": exc.code,
            }
        },
        status_code=exc.status_code,
    )
