from celery import shared_task

from airtable_utils.offline import queue


@shared_task(name="offline.sync_pending_operations")
def sync_pending_operations(max_attempts=None):
    return str(queue.sync_pending_operations(max_attempts=max_attempts))


@shared_task(name="offline.prune_synced_operations")
def prune_synced_operations(older_than_days=30):
    return queue.prune_synced_operations(older_than_days=older_than_days)
