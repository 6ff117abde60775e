import json
from unittest.mock import MagicMock

from test_plus.test import TestCase as PlusTestCase


class TestMixin:
    def mock_with_attributes(self, **kwargs):
        mock = MagicMock()
        for k, v in kwargs.items():
            setattr(mock, k, v)
        return mock

    def mock_response(self, status_code=200, json_data=None, headers=None):
        return self.mock_with_attributes(
            status_code=status_code,
            headers=headers or {},
            content=b"" if json_data is None else json.dumps(json_data).encode(),
            json=MagicMock(return_value=json_data),
        )


class TestCase(TestMixin, PlusTestCase):
    pass