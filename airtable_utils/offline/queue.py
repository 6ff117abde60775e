"""Local queue for Airtable writes that couldn't be delivered right away.

Operations are stored as ``PendingOperation`` rows and replayed in the order
they were queued. A sync run is sequential. Operations touching a record whose
earlier operation just failed are held back until the next run, so writes to
one record always reach Airtable in queue order.
"""

import datetime
import logging
from dataclasses import dataclass

from django.core.exceptions import ValidationError
from django.utils import timezone

from airtable_utils.airtable.conf import get_setting
from airtable_utils.airtable.exceptions import AirtableError, RateLimitError
from airtable_utils.airtable.tables import AirtableTable
from airtable_utils.offline.models import PendingOperation

logger = logging.getLogger(__name__)


@dataclass
class SyncResult:
    synced: int = 0
    retried: int = 0
    failed: int = 0
    skipped: int = 0

    def __str__(self):
        return (
            f"synced={self.synced} retried={self.retried} "
            f"failed={self.failed} skipped={self.skipped}"
        )


def build_operation(
    action,
    table_name,
    fields=None,
    record_id=None,
    base_id=None,
    key_fields=None,
    replace=False,
    typecast=False,
):
    if action not in PendingOperation.ACTION_CHOICES:
        raise ValidationError({"action": f"Unknown action: {action}"})
    operation = PendingOperation(
        base_id=base_id or get_setting("AIRTABLE_BASE_KEY"),
        table_name=table_name,
        action=action,
        record_id=record_id,
        fields=fields or {},
        key_fields=key_fields or [],
        replace=replace,
        typecast=typecast,
    )
    operation.clean()
    return operation


def enqueue(action, table_name, **kwargs):
    operation = build_operation(action, table_name, **kwargs)
    operation.save()
    logger.info("Queued Airtable operation %s", operation)
    return operation


def has_pending_operations(operation):
    """Tell whether earlier queued operations still target the same record."""
    pending = PendingOperation.objects.pending()
    if operation.action == PendingOperation.ACTION_CHOICES.upsert:
        upserts = pending.filter(
            base_id=operation.base_id,
            table_name=operation.table_name,
            action=operation.action,
        )
        return any(
            upsert.target_key == operation.target_key for upsert in upserts.iterator()
        )
    if not operation.record_id:
        return False
    return pending.for_record(
        operation.base_id, operation.table_name, operation.record_id
    ).exists()


def write_or_enqueue(action, table_name, **kwargs):
    """Write to Airtable now, or queue the write if Airtable can't take it.

    Returns ``(record_id, None)`` when the write went through and
    ``(None, pending_operation)`` when it was queued. Errors that retrying
    can't fix (401, 403, 404, 422, ...) are raised.
    """
    operation = build_operation(action, table_name, **kwargs)
    if has_pending_operations(operation):
        operation.save()
        logger.info("Queued %s behind earlier pending operations", operation)
        return None, operation

    try:
        record_id = operation.apply(AirtableTable(table_name, operation.base_id))
    except AirtableError as error:
        if not error.is_retryable:
            raise
        operation.last_error = str(error)
        operation.save()
        logger.warning("Airtable unavailable (%s), queued %s", error, operation)
        return None, operation
    return record_id, None


def sync_pending_operations(max_attempts=None):
    max_attempts = max_attempts or get_setting("AIRTABLE_OFFLINE_MAX_ATTEMPTS")
    result = SyncResult()
    blocked_records = set()
    rate_limited_bases = set()
    tables = {}

    for operation in list(PendingOperation.objects.pending().in_queue_order()):
        target_key = operation.target_key
        if operation.base_id in rate_limited_bases or (
            target_key and target_key in blocked_records
        ):
            result.skipped += 1
            continue

        table_key = (operation.base_id, operation.table_name)
        if table_key not in tables:
            tables[table_key] = AirtableTable(operation.table_name, operation.base_id)

        try:
            record_id = operation.apply(tables[table_key])
        except AirtableError as error:
            if not error.is_retryable:
                logger.error("Airtable rejected %s: %s", operation, error)
                operation.mark_failed(error)
                result.failed += 1
                continue
            operation.mark_attempt_failed(error, max_attempts)
            if operation.status == PendingOperation.STATUS_CHOICES.failed:
                logger.error(
                    "Giving up on %s after %d attempts: %s",
                    operation,
                    operation.attempts,
                    error,
                )
                result.failed += 1
            else:
                result.retried += 1
            if target_key:
                blocked_records.add(target_key)
            if isinstance(error, RateLimitError):
                rate_limited_bases.add(operation.base_id)
            continue

        operation.mark_synced(record_id)
        result.synced += 1

    logger.info("Airtable offline sync finished: %s", result)
    return result


def retry_failed_operations(ids=None):
    operations = PendingOperation.objects.failed()
    if ids is not None:
        operations = operations.filter(id__in=ids)
    return operations.update(
        status=PendingOperation.STATUS_CHOICES.pending, attempts=0
    )


def prune_synced_operations(older_than_days=30):
    cutoff = timezone.now() - datetime.timedelta(days=older_than_days)
    deleted, _ = (
        PendingOperation.objects.synced().filter(synced_at__lt=cutoff).delete()
    )
    return deleted
