from django.db import models
from model_utils.models import TimeStampedModel


class AirtableWebhook(TimeStampedModel):
    airtable_id = models.CharField(max_length=32, unique=True)
    base_id = models.CharField(max_length=32)
    mac_secret = models.CharField(max_length=256)
    last_transaction_number = models.PositiveIntegerField(null=True, blank=True)
    notification_url = models.URLField(max_length=512, blank=True)
    expiration_time = models.DateTimeField(null=True, blank=True)

    def __str__(self):
        return f"{self.airtable_id} ({self.base_id})"

    def is_newer_transaction(self, transaction_number):
        return (
            self.last_transaction_number is None
            or self.last_transaction_number < transaction_number
        )
