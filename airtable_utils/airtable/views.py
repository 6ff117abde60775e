import base64
import hashlib
import hmac
import logging

from rest_framework import response, status, views

from airtable_utils.airtable.models import AirtableWebhook
from airtable_utils.airtable.webhooks import AirtableWebhookAPI

logger = logging.getLogger(__name__)


def compute_content_mac(mac_secret, request_body):
    signature = hmac.new(
        base64.b64decode(mac_secret),
        request_body,
        hashlib.sha256,
    ).hexdigest()
    return "hmac-sha256=" + signature


class BaseAirtableWebhookView(views.APIView):
    authentication_classes = []
    permission_classes = []
    http_method_names = ["post"]
    webhook_url_name = None

    def post(self, request, *args, **kwargs):
        request_body = request.body
        self.request_data = request.data
        try:
            self.airtable_webhook = AirtableWebhook.objects.get(
                airtable_id=self.request_data["webhook"]["id"]
            )
        except (KeyError, TypeError, AirtableWebhook.DoesNotExist):
            return response.Response(status=status.HTTP_404_NOT_FOUND)

        content_mac = request.META.get("HTTP_X_AIRTABLE_CONTENT_MAC", "")
        if not hmac.compare_digest(
            compute_content_mac(self.airtable_webhook.mac_secret, request_body),
            content_mac,
        ):
            logger.warning(
                "Rejected Airtable notification for %s: bad content MAC",
                self.airtable_webhook.airtable_id,
            )
            return response.Response(status=status.HTTP_401_UNAUTHORIZED)

        return self.handle_records()

    def handle_records(self):
        raise NotImplementedError

    @classmethod
    def create_notification_webhook(cls, table_id, change_types, base_id=None):
        """Register an Airtable webhook that notifies this view."""
        return AirtableWebhookAPI(base_id).create_webhook_from_data(
            table_id, change_types, cls.webhook_url_name
        )
