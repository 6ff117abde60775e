from django.contrib import admin

from airtable_utils.offline.models import PendingOperation
from airtable_utils.offline.queue import retry_failed_operations


@admin.register(PendingOperation)
class PendingOperationAdmin(admin.ModelAdmin):
    list_display = (
        "id",
        "action",
        "base_id",
        "table_name",
        "record_id",
        "status",
        "attempts",
        "created",
    )
    list_filter = ("status", "action", "base_id")
    search_fields = ("record_id", "synced_record_id", "table_name")
    readonly_fields = ("attempts", "last_error", "synced_record_id", "synced_at")
    actions = ("retry_operations",)

    @admin.action(description="Retry selected failed operations")
    def retry_operations(self, request, queryset):
        retried = retry_failed_operations(
            ids=list(queryset.values_list("id", flat=True))
        )
        self.message_user(request, f"{retried} operations queued for retry")
