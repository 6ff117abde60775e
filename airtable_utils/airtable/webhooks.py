import logging
from typing import NamedTuple

from django.utils.dateparse import parse_datetime

from airtable_utils.airtable.api import AirtableRestAPI
from airtable_utils.airtable.models import AirtableWebhook
from airtable_utils.core import absolute_link

logger = logging.getLogger(__name__)


class RecordChange(NamedTuple):
    record_id: str
    table_id: str
    change_type: str


class AirtableWebhookAPI(AirtableRestAPI):
    def create_webhook(self, webhook_settings):
        response = self.post(f"{self.base_url}/webhooks", json=webhook_settings)
        AirtableWebhook.objects.create(
            airtable_id=response["id"],
            base_id=self.base_id,
            mac_secret=response["macSecretBase64"],
            notification_url=webhook_settings.get("notificationUrl") or "",
            expiration_time=parse_expiration_time(response),
        )
        logger.info("Created Airtable webhook %s on %s", response["id"], self.base_id)
        return response

    def create_webhook_from_data(self, table_id, change_types, webhook_url_name):
        webhook_settings = {
            "specification": {
                "options": {
                    "filters": {
                        "dataTypes": ["tableData"],
                        "recordChangeScope": table_id,
                        "changeTypes": change_types,
                    }
                }
            },
            "notificationUrl": absolute_link(webhook_url_name),
        }
        return self.create_webhook(webhook_settings)

    def list_webhooks(self):
        return self.get(f"{self.base_url}/webhooks")

    def list_webhook_payloads(self, webhook_id, cursor=1, limit=50):
        payloads = []
        while True:
            payloads_response = self.get(
                f"{self.base_url}/webhooks/{webhook_id}/payloads",
                params={"cursor": cursor, "limit": limit},
            )
            payloads.extend(payloads_response.get("payloads", []))
            if not payloads_response.get("mightHaveMore"):
                break
            cursor = payloads_response["cursor"]
        return payloads

    def delete_webhook(self, webhook_id):
        response = self.delete(f"{self.base_url}/webhooks/{webhook_id}")
        AirtableWebhook.objects.filter(airtable_id=webhook_id).delete()
        return response

    def enable_webhook(self, webhook_id, enable=True):
        return self.post(
            f"{self.base_url}/webhooks/{webhook_id}/enableNotifications",
            json={"enable": enable},
        )

    def refresh_webhook(self, webhook_id):
        response = self.post(f"{self.base_url}/webhooks/{webhook_id}/refresh")
        AirtableWebhook.objects.filter(airtable_id=webhook_id).update(
            expiration_time=parse_expiration_time(response)
        )
        return response


def parse_expiration_time(response):
    if expiration_time := response.get("expirationTime"):
        return parse_datetime(expiration_time)
    return None


def get_table_changes(changed_table_id, changed_table_data):
    for record_id in changed_table_data.get("createdRecordsById", {}):
        yield RecordChange(record_id, changed_table_id, "created")
    for record_id in changed_table_data.get("changedRecordsById", {}):
        yield RecordChange(record_id, changed_table_id, "updated")
    for record_id in changed_table_data.get("destroyedRecordIds", []):
        yield RecordChange(record_id, changed_table_id, "deleted")


def iterate_changed_records(airtable_webhook: AirtableWebhook):
    airtable_webhook_api = AirtableWebhookAPI(airtable_webhook.base_id)
    payloads = airtable_webhook_api.list_webhook_payloads(airtable_webhook.airtable_id)

    for payload in payloads:
        base_transaction_number = payload.get("baseTransactionNumber")
        if base_transaction_number is None:
            logger.warning(
                "Skipping Airtable payload without a transaction number on %s",
                airtable_webhook.airtable_id,
            )
            continue
        if not airtable_webhook.is_newer_transaction(base_transaction_number):
            continue
        airtable_webhook.last_transaction_number = base_transaction_number
        airtable_webhook.save(update_fields=["last_transaction_number", "modified"])
        for changed_table_id, changed_table_data in payload.get(
            "changedTablesById", {}
        ).items():
            yield from get_table_changes(changed_table_id, changed_table_data)


def initiate_process_airtable_webhook(webhook_id):
    airtable_webhook = AirtableWebhook.objects.get(airtable_id=webhook_id)
    records = list(iterate_changed_records(airtable_webhook))

    return airtable_webhook, records
