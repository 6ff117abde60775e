from django.urls import path
from rest_framework import response

from airtable_utils.airtable.views import BaseAirtableWebhookView
from airtable_utils.airtable.webhooks import initiate_process_airtable_webhook


class RecordChangesWebhookView(BaseAirtableWebhookView):
    webhook_url_name = "airtable-webhook"

    def handle_records(self):
        _, records = initiate_process_airtable_webhook(
            self.airtable_webhook.airtable_id
        )
        return response.Response(
            {"records": [record._asdict() for record in records]}
        )


urlpatterns = [
    path(
        "airtable/webhook/",
        RecordChangesWebhookView.as_view(),
        name=RecordChangesWebhookView.webhook_url_name,
    ),
]
