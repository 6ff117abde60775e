from django.conf import settings

DEFAULTS = {
    "AIRTABLE_API_KEY": "",
    "AIRTABLE_BASE_KEY": "",
    "AIRTABLE_API_URL": "https://api.airtable.com/v0",
    "AIRTABLE_TIMEOUT": 30,
    "AIRTABLE_REQUESTS_PER_SECOND": 5,
    "AIRTABLE_MAX_RETRIES": 5,
    "AIRTABLE_BACKOFF_SECONDS": 1.0,
    "AIRTABLE_MAX_BACKOFF_SECONDS": 30.0,
    "AIRTABLE_OFFLINE_MAX_ATTEMPTS": 3,
    "AIRTABLE_OFFLINE_SYNC_ON_ENQUEUE": True,
}


def get_setting(name):
    return getattr(settings, name, DEFAULTS[name])
