from celery import shared_task

from airtable_utils.airtable.models import AirtableWebhook
from airtable_utils.airtable.webhooks import AirtableWebhookAPI
from airtable_utils.core import Environments


@shared_task
def re_enable_webhooks(base_id=None):
    airtable_webhook_api = AirtableWebhookAPI(base_id)
    webhooks = airtable_webhook_api.list_webhooks()["webhooks"]
    for webhook in webhooks:
        if not webhook["areNotificationsEnabled"]:
            airtable_webhook_api.enable_webhook(webhook["id"])


@shared_task(name="airtable.refresh_webhooks")
def refresh_webhooks(force=False):
    # webhooks expire 7 days after creation or their last refresh
    if Environments.is_dev() and not force:
        return

    for airtable_webhook in AirtableWebhook.objects.all():
        AirtableWebhookAPI(airtable_webhook.base_id).refresh_webhook(
            airtable_webhook.airtable_id
        )
