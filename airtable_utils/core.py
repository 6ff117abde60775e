from django.conf import settings
from django.db import transaction
from django.urls import reverse


def run_task_in_transaction(task, *args, **kwargs):
    transaction.on_commit(lambda: task.delay(*args, **kwargs))


def absolute_link(url_name, *args, **kwargs):
    from django.contrib.sites.models import Site

    domain = Site.objects.get_current().domain
    return f"https://{domain}{reverse(url_name, args=args, kwargs=kwargs)}"


class Environments:
    DEV = "dev"
    TEST = "test"
    PRODUCTION = "production"

    @classmethod
    def current(cls):
        return getattr(settings, "ENVIRONMENT", cls.DEV)

    @classmethod
    def is_dev(cls):
        return cls.current() == cls.DEV

    @classmethod
    def is_test(cls):
        return cls.current() == cls.TEST

    @classmethod
    def is_production(cls):
        return cls.current() == cls.PRODUCTION
