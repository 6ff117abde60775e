from airtable_utils.airtable.tests.base import TestCase as AirtableTestCase
from airtable_utils.offline.tests.factories import PendingOperationFactory


class TestCase(AirtableTestCase):
    def make_operation(self, **kwargs):
        return PendingOperationFactory(**kwargs)
