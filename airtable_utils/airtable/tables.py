import logging
from contextlib import contextmanager

import more_itertools
import requests
from pyairtable import Api as AirtableAPI
from pyairtable import retry_strategy

from airtable_utils.airtable.conf import get_setting
from airtable_utils.airtable.exceptions import (
    RETRYABLE_STATUS_CODES,
    translate_http_error,
)
from airtable_utils.airtable.formulas import AND, formula_from_filters, match
from airtable_utils.airtable.throttling import get_rate_limiter

logger = logging.getLogger(__name__)

# Airtable rejects write requests carrying more than 10 records
MAX_RECORDS_PER_REQUEST = 10


@contextmanager
def translate_errors():
    try:
        yield
    except requests.RequestException as exc:
        raise translate_http_error(exc) from exc


def get_endpoint_url():
    # pyairtable appends the "/v0" version segment itself
    return get_setting("AIRTABLE_API_URL").rstrip("/").removesuffix("/v0")


def get_airtable_api(api_key=None):
    timeout = get_setting("AIRTABLE_TIMEOUT")
    return AirtableAPI(
        api_key or get_setting("AIRTABLE_API_KEY"),
        timeout=(timeout, timeout),
        retry_strategy=retry_strategy(
            total=get_setting("AIRTABLE_MAX_RETRIES"),
            backoff_factor=get_setting("AIRTABLE_BACKOFF_SECONDS"),
            status_forcelist=RETRYABLE_STATUS_CODES,
        ),
        endpoint_url=get_endpoint_url(),
    )


def get_airtable_table(table_name, base_id=None, api_key=None):
    return get_airtable_api(api_key).table(
        base_id or get_setting("AIRTABLE_BASE_KEY"), table_name
    )


def record_fields(record):
    return record.get("fields", {})


def records_by_id(records):
    return {record["id"]: record for record in records}


class AirtableTable:
    """Record operations on one Airtable table.

    Every HTTP call made through this class waits for the base's rate limiter
    and raises ``AirtableError`` subclasses instead of ``requests`` errors.
    Batch writes are sent in chunks of ``MAX_RECORDS_PER_REQUEST``.
    """

    def __init__(self, table_name, base_id=None, api_key=None):
        self.base_id = base_id or get_setting("AIRTABLE_BASE_KEY")
        self.table_name = table_name
        self.table = get_airtable_table(table_name, self.base_id, api_key)
        self.rate_limiter = get_rate_limiter(self.base_id)

    def __repr__(self):
        return f"<AirtableTable {self.base_id}/{self.table_name}>"

    def call(self, method_name, *args, **kwargs):
        self.rate_limiter.acquire()
        with translate_errors():
            return getattr(self.table, method_name)(*args, **kwargs)

    def get_options(self, formula=None, filters=None, **options):
        if filters:
            formula = AND(formula, formula_from_filters(filters))
        if formula:
            options["formula"] = formula
        return {key: value for key, value in options.items() if value is not None}

    def iterate_pages(
        self,
        formula=None,
        view=None,
        fields=None,
        sort=None,
        max_records=None,
        page_size=None,
        filters=None,
        **options,
    ):
        pages = self.table.iterate(
            **self.get_options(
                formula=formula,
                filters=filters,
                view=view,
                fields=fields,
                sort=sort,
                max_records=max_records,
                page_size=page_size,
                **options,
            )
        )
        while True:
            self.rate_limiter.acquire()
            with translate_errors():
                page = next(pages, None)
            if page is None:
                return
            yield page

    def iterate_records(self, **options):
        for page in self.iterate_pages(**options):
            yield from page

    def list_records(self, **options):
        return list(self.iterate_records(**options))

    def first(self, **options):
        options["max_records"] = 1
        return next(self.iterate_records(**options), None)

    def find_record(self, **field_values):
        return self.first(formula=match(field_values))

    def get_record(self, record_id):
        return self.call("get", record_id)

    def create(self, fields, typecast=False):
        return self.call("create", fields, typecast=typecast)

    def batch_create(self, records, typecast=False):
        created = []
        for chunk in more_itertools.chunked(records, MAX_RECORDS_PER_REQUEST):
            created.extend(self.call("batch_create", chunk, typecast=typecast))
        logger.info("Created %d records in %r", len(created), self)
        return created

    def update(self, record_id, fields, replace=False, typecast=False):
        return self.call(
            "update", record_id, fields, replace=replace, typecast=typecast
        )

    def batch_update(self, records, replace=False, typecast=False):
        updated = []
        for chunk in more_itertools.chunked(records, MAX_RECORDS_PER_REQUEST):
            updated.extend(
                self.call("batch_update", chunk, replace=replace, typecast=typecast)
            )
        logger.info("Updated %d records in %r", len(updated), self)
        return updated

    def batch_upsert(self, records, key_fields, replace=False, typecast=False):
        result = {"createdRecords": [], "updatedRecords": [], "records": []}
        for chunk in more_itertools.chunked(records, MAX_RECORDS_PER_REQUEST):
            chunk_result = self.call(
                "batch_upsert",
                chunk,
                key_fields=key_fields,
                replace=replace,
                typecast=typecast,
            )
            for key in result:
                result[key].extend(chunk_result.get(key, []))
        logger.info(
            "Upserted %d records in %r (%d created)",
            len(result["records"]),
            self,
            len(result["createdRecords"]),
        )
        return result

    def delete(self, record_id):
        return self.call("delete", record_id)

    def batch_delete(self, record_ids):
        deleted = []
        for chunk in more_itertools.chunked(record_ids, MAX_RECORDS_PER_REQUEST):
            deleted.extend(self.call("batch_delete", chunk))
        logger.info("Deleted %d records in %r", len(deleted), self)
        return deleted
