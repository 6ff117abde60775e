import json

from django.core.exceptions import ValidationError
from django.db import models
from django.utils import timezone
from django_lifecycle import AFTER_CREATE, hook
from django_lifecycle.models import LifecycleModelMixin
from model_utils.choices import Choices
from model_utils.models import TimeStampedModel

from airtable_utils.airtable.conf import get_setting
from airtable_utils.airtable.ids import is_airtable_id
from airtable_utils.core import run_task_in_transaction


class PendingOperationQuerySet(models.QuerySet):
    def pending(self):
        return self.filter(status=PendingOperation.STATUS_CHOICES.pending)

    def failed(self):
        return self.filter(status=PendingOperation.STATUS_CHOICES.failed)

    def synced(self):
        return self.filter(status=PendingOperation.STATUS_CHOICES.synced)

    def for_record(self, base_id, table_name, record_id):
        return self.filter(base_id=base_id, table_name=table_name, record_id=record_id)

    def in_queue_order(self):
        return self.order_by("id")


class PendingOperation(LifecycleModelMixin, TimeStampedModel):
    ACTION_CHOICES = Choices(
        ("create", "Create"),
        ("update", "Update"),
        ("upsert", "Upsert"),
        ("delete", "Delete"),
    )
    STATUS_CHOICES = Choices(
        ("pending", "Pending"),
        ("synced", "Synced"),
        ("failed", "Failed"),
    )

    base_id = models.CharField(max_length=32, db_index=True)
    table_name = models.CharField(max_length=255)
    action = models.CharField(max_length=16, choices=ACTION_CHOICES)
    record_id = models.CharField(max_length=32, null=True, blank=True, db_index=True)
    fields = models.JSONField(default=dict, blank=True)
    key_fields = models.JSONField(default=list, blank=True)
    replace = models.BooleanField(default=False)
    typecast = models.BooleanField(default=False)
    status = models.CharField(
        max_length=16,
        choices=STATUS_CHOICES,
        default=STATUS_CHOICES.pending,
        db_index=True,
    )
    attempts = models.PositiveIntegerField(default=0)
    last_error = models.TextField(blank=True)
    synced_record_id = models.CharField(max_length=32, null=True, blank=True)
    synced_at = models.DateTimeField(null=True, blank=True)

    objects = PendingOperationQuerySet.as_manager()

    class Meta:
        ordering = ("id",)

    def __str__(self):
        target = self.record_id or "new record"
        return f"{self.action} {self.table_name}/{target} ({self.status})"

    @property
    def target_key(self):
        """Identify the Airtable record this operation writes to, or None for creates.

        Upserts find their record by the values of their key fields.
        """
        if self.action == self.ACTION_CHOICES.upsert:
            key_values = json.dumps(
                {name: self.fields.get(name) for name in self.key_fields},
                sort_keys=True,
                default=str,
            )
            return (self.base_id, self.table_name, self.action, key_values)
        if self.record_id:
            return (self.base_id, self.table_name, self.record_id)
        return None

    def clean(self):
        targets_record = self.action in (
            self.ACTION_CHOICES.update,
            self.ACTION_CHOICES.delete,
        )
        if targets_record and not self.record_id:
            raise ValidationError({"record_id": f"{self.action} needs a record id"})
        if self.action == self.ACTION_CHOICES.create and self.record_id:
            raise ValidationError({"record_id": "create can't target a record id"})
        if self.action == self.ACTION_CHOICES.upsert and not self.key_fields:
            raise ValidationError({"key_fields": "upsert needs key fields"})
        if self.record_id and not is_airtable_id(self.record_id, "record"):
            raise ValidationError({"record_id": f"{self.record_id} isn't a record id"})

    @hook(AFTER_CREATE)
    def schedule_sync(self):
        if get_setting("AIRTABLE_OFFLINE_SYNC_ON_ENQUEUE"):
            from airtable_utils.offline.tasks import sync_pending_operations

            run_task_in_transaction(sync_pending_operations)

    def apply(self, table):
        """Send the operation to Airtable and return the affected record id."""
        match self.action:
            case self.ACTION_CHOICES.create:
                return table.create(self.fields, typecast=self.typecast)["id"]
            case self.ACTION_CHOICES.update:
                return table.update(
                    self.record_id,
                    self.fields,
                    replace=self.replace,
                    typecast=self.typecast,
                )["id"]
            case self.ACTION_CHOICES.upsert:
                result = table.batch_upsert(
                    [{"fields": self.fields}],
                    key_fields=self.key_fields,
                    replace=self.replace,
                    typecast=self.typecast,
                )
                return result["records"][0]["id"]
            case self.ACTION_CHOICES.delete:
                return table.delete(self.record_id)["id"]
        raise ValueError(f"Unknown action: {self.action}")

    def mark_synced(self, record_id):
        self.status = self.STATUS_CHOICES.synced
        self.synced_record_id = record_id
        self.synced_at = timezone.now()
        self.last_error = ""
        self.save()

    def mark_attempt_failed(self, error, max_attempts):
        self.attempts += 1
        self.last_error = str(error)
        if self.attempts >= max_attempts:
            self.status = self.STATUS_CHOICES.failed
        self.save()

    def mark_failed(self, error):
        self.attempts += 1
        self.last_error = str(error)
        self.status = self.STATUS_CHOICES.failed
        self.save()
