"""Exceptions raised for failed Airtable API calls.

Airtable answers errors with a JSON body that is either
``{"error": "NOT_FOUND"}`` or
``{"error": {"type": "INVALID_REQUEST_UNKNOWN", "message": "..."}}``.
The exception class is picked from the HTTP status code.
"""

import requests

RETRYABLE_STATUS_CODES = (429, 500, 502, 503, 504)


class AirtableError(Exception):
    default_message = "Airtable request failed"

    def __init__(self, status_code=0, message=None, error_type=None, response=None):
        self.status_code = status_code
        self.message = message or self.default_message
        self.error_type = error_type
        self.response = response
        super().__init__(f"[{status_code}] {self.message}")

    @property
    def is_client_error(self):
        return 400 <= self.status_code < 500

    @property
    def is_server_error(self):
        return self.status_code >= 500

    @property
    def is_retryable(self):
        return False

    @classmethod
    def from_response(cls, status_code, body=None):
        """Build the exception matching an Airtable error response."""
        error_type, message = parse_error_body(body)
        if status_code >= 500:
            error_class = ServerError
        else:
            error_class = STATUS_CODE_ERRORS.get(status_code)
            if error_class is None:
                error_class = ClientError if 400 <= status_code < 500 else cls
        return error_class(
            status_code, message=message, error_type=error_type, response=body
        )


class AuthenticationError(AirtableError):
    default_message = "Invalid or missing personal access token"


class PermissionDeniedError(AirtableError):
    default_message = "Token is not allowed to access this resource"


class NotFoundError(AirtableError):
    default_message = "Resource not found"


class InvalidRequestError(AirtableError):
    default_message = "Invalid request"


class RateLimitError(AirtableError):
    default_message = "Rate limit exceeded"

    @property
    def is_retryable(self):
        return True


class ClientError(AirtableError):
    default_message = "Client error"


class ServerError(AirtableError):
    default_message = "Airtable server error"

    @property
    def is_retryable(self):
        return True


class NetworkError(AirtableError):
    default_message = "Could not reach Airtable"

    def __init__(self, message=None, original_error=None):
        super().__init__(0, message=message)
        self.original_error = original_error

    @property
    def is_retryable(self):
        return True


STATUS_CODE_ERRORS = {
    401: AuthenticationError,
    403: PermissionDeniedError,
    404: NotFoundError,
    422: InvalidRequestError,
    429: RateLimitError,
}


def parse_error_body(body):
    if not isinstance(body, dict):
        return None, None
    error = body.get("error")
    if isinstance(error, dict):
        return error.get("type"), error.get("message")
    if isinstance(error, str):
        return error, body.get("message")
    return None, body.get("message")


def decode_response_body(response):
    try:
        return response.json()
    except ValueError:
        return None


def translate_http_error(exc):
    """Turn a ``requests`` exception into the matching AirtableError."""
    response = getattr(exc, "response", None)
    if isinstance(exc, requests.exceptions.RetryError):
        # urllib3 gave up retrying the statuses in its forcelist (429)
        return RateLimitError(429, message=str(exc))
    if response is None:
        return NetworkError(str(exc), original_error=exc)
    return AirtableError.from_response(
        response.status_code, decode_response_body(response)
    )
