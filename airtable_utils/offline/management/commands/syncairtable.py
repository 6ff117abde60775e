from django.core.management.base import BaseCommand

from airtable_utils.offline.queue import (
    retry_failed_operations,
    sync_pending_operations,
)


class Command(BaseCommand):
    help = "Send queued Airtable operations"

    def add_arguments(self, parser):
        parser.add_argument("-m", "--max-attempts", type=int, default=None)
        parser.add_argument("-r", "--retry-failed", action="store_true")

    def handle(self, *args, **options):
        if options["retry_failed"]:
            retried = retry_failed_operations()
            self.stdout.write(f"Requeued {retried} failed operations")
        result = sync_pending_operations(max_attempts=options["max_attempts"])
        self.stdout.write(str(result))
