import logging
import time

import requests

from airtable_utils.airtable.conf import get_setting
from airtable_utils.airtable.exceptions import (
    RETRYABLE_STATUS_CODES,
    AirtableError,
    NetworkError,
    decode_response_body,
)
from airtable_utils.airtable.throttling import get_rate_limiter

logger = logging.getLogger(__name__)

# a failed POST may still have created something on Airtable's side
NON_IDEMPOTENT_METHODS = ("POST",)


class AirtableRestAPI:
    """Plain REST access to Airtable for the endpoints pyairtable doesn't wrap.

    Requests are throttled per base and retried on 429/5xx/network failures.
    POSTs are only resent when Airtable can't have acted on them. Other
    errors are raised as ``AirtableError`` subclasses.
    """

    def __init__(self, base_id=None, api_key=None):
        self.base_id = base_id or get_setting("AIRTABLE_BASE_KEY")
        self.api_key = api_key or get_setting("AIRTABLE_API_KEY")
        self.api_url = get_setting("AIRTABLE_API_URL").rstrip("/")
        self.base_url = f"{self.api_url}/bases/{self.base_id}"
        self.meta_url = f"{self.api_url}/meta"

    def get_auth_headers(self):
        return {"authorization": f"Bearer {self.api_key}"}

    def get(self, url, params=None):
        return self.request("GET", url, params=params)

    def post(self, url, json=None):
        return self.request("POST", url, json=json)

    def patch(self, url, json=None):
        return self.request("PATCH", url, json=json)

    def delete(self, url):
        return self.request("DELETE", url)

    def request(self, method, url, throttle_key=None, **kwargs):
        max_retries = get_setting("AIRTABLE_MAX_RETRIES")
        rate_limiter = get_rate_limiter(throttle_key or self.base_id)
        attempt = 0
        while True:
            rate_limiter.acquire()
            try:
                response = requests.request(
                    method,
                    url,
                    headers=self.get_auth_headers(),
                    timeout=get_setting("AIRTABLE_TIMEOUT"),
                    **kwargs,
                )
            except (requests.ConnectionError, requests.Timeout) as exc:
                error = NetworkError(f"Network error: {exc}", exc)
                retry_after = None
                # read timeouts happen after the request was sent
                can_resend = method not in NON_IDEMPOTENT_METHODS or isinstance(
                    exc, requests.ConnectionError
                )
            else:
                if 200 <= response.status_code < 300:
                    return decode_response_body(response) if response.content else {}
                error = AirtableError.from_response(
                    response.status_code, decode_response_body(response)
                )
                if response.status_code not in RETRYABLE_STATUS_CODES:
                    logger.error("Airtable %s %s failed: %s", method, url, error)
                    raise error
                retry_after = response.headers.get("Retry-After")
                can_resend = (
                    method not in NON_IDEMPOTENT_METHODS or response.status_code == 429
                )

            if not can_resend:
                logger.error("Airtable %s %s failed: %s", method, url, error)
                raise error
            if attempt >= max_retries:
                logger.error(
                    "Airtable %s %s failed after %d retries: %s",
                    method,
                    url,
                    attempt,
                    error,
                )
                raise error
            delay = self.get_backoff_delay(attempt, retry_after)
            logger.warning(
                "Airtable %s %s failed (%s), retrying in %.1fs",
                method,
                url,
                error,
                delay,
            )
            time.sleep(delay)
            attempt += 1

    def get_backoff_delay(self, attempt, retry_after=None):
        if retry_after is not None:
            try:
                return float(retry_after)
            except ValueError:
                pass
        return min(
            get_setting("AIRTABLE_BACKOFF_SECONDS") * 2**attempt,
            get_setting("AIRTABLE_MAX_BACKOFF_SECONDS"),
        )

    def paginate(self, url, items_key, params=None, throttle_key=None):
        params = dict(params or {})
        while True:
            response = self.request(
                "GET", url, params={**params}, throttle_key=throttle_key
            )
            yield from response.get(items_key, [])
            offset = response.get("offset")
            if not offset:
                break
            params["offset"] = offset
