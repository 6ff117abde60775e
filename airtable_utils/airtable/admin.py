from django.contrib import admin

from airtable_utils.airtable.models import AirtableWebhook


@admin.register(AirtableWebhook)
class AirtableWebhookAdmin(admin.ModelAdmin):
    list_display = (
        "airtable_id",
        "base_id",
        "last_transaction_number",
        "expiration_time",
        "modified",
    )
    list_filter = ("base_id",)
    search_fields = ("airtable_id", "base_id")
    readonly_fields = ("mac_secret", "last_transaction_number")
