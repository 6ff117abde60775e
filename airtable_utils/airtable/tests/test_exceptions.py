import requests

from airtable_utils.airtable.exceptions import (
    AirtableError,
    AuthenticationError,
    ClientError,
    InvalidRequestError,
    NetworkError,
    NotFoundError,
    PermissionDeniedError,
    RateLimitError,
    ServerError,
    translate_http_error,
)
from airtable_utils.airtable.tests.base import TestCase


class TestAirtableErrorFromResponse(TestCase):
    def test_status_codes(self):
        for status_code, error_class in (
            (401, AuthenticationError),
            (403, PermissionDeniedError),
            (404, NotFoundError),
            (422, InvalidRequestError),
            (429, RateLimitError),
            (418, ClientError),
            (500, ServerError),
            (503, ServerError),
        ):
            with self.subTest(status_code=status_code):
                error = AirtableError.from_response(status_code, {})
                self.assertIsInstance(error, error_class)
                self.assertEqual(error.status_code, status_code)

    def test_string_error_body(self):
        error = AirtableError.from_response(404, {"error": "NOT_FOUND"})

        self.assertEqual(error.error_type, "NOT_FOUND")
        self.assertEqual(error.message, "Resource not found")

    def test_object_error_body(self):
        body = {
            "error": {
                "type": "INVALID_VALUE_FOR_COLUMN",
                "message": "Field \"Score\" cannot accept the provided value",
            }
        }

        error = AirtableError.from_response(422, body)

        self.assertEqual(error.error_type, "INVALID_VALUE_FOR_COLUMN")
        self.assertEqual(
            str(error), '[422] Field "Score" cannot accept the provided value'
        )
        self.assertEqual(error.response, body)
        self.assertTrue(error.is_client_error)

    def test_retryable(self):
        self.assertTrue(AirtableError.from_response(429).is_retryable)
        self.assertTrue(AirtableError.from_response(502).is_retryable)
        self.assertFalse(AirtableError.from_response(422).is_retryable)
        self.assertFalse(AirtableError.from_response(401).is_retryable)


class TestTranslateHttpError(TestCase):
    def test_http_error(self):
        body = {"error": {"type": "INVALID_PERMISSIONS"}}
        exc = requests.HTTPError(response=self.mock_response(403, body))

        error = translate_http_error(exc)

        self.assertIsInstance(error, PermissionDeniedError)
        self.assertEqual(error.error_type, "INVALID_PERMISSIONS")

    def test_connection_error(self):
        exc = requests.ConnectionError("connection refused")

        error = translate_http_error(exc)

        self.assertIsInstance(error, NetworkError)
        self.assertEqual(error.status_code, 0)
        self.assertIs(error.original_error, exc)
        self.assertTrue(error.is_retryable)

    def test_retry_error(self):
        error = translate_http_error(requests.exceptions.RetryError("too many 429"))

        self.assertIsInstance(error, RateLimitError)
