import re

ID_PREFIXES = {
    "base": "app",
    "table": "tbl",
    "record": "rec",
    "field": "fld",
    "view": "viw",
    "webhook": "ach",
}
ID_BODY_LENGTH = 14

_ID_PATTERN = re.compile(r"([a-z]{3})[a-zA-Z0-9]{%d}" % ID_BODY_LENGTH)
_KINDS_BY_PREFIX = {prefix: kind for kind, prefix in ID_PREFIXES.items()}


def id_kind(value):
    """Return the kind of a well-formed Airtable id ("base", "record", ...) or None."""
    if not isinstance(value, str):
        return None
    match = _ID_PATTERN.fullmatch(value)
    if not match:
        return None
    return _KINDS_BY_PREFIX.get(match.group(1))


def is_airtable_id(value, kind=None):
    if kind is None:
        return id_kind(value) is not None
    if kind not in ID_PREFIXES:
        raise ValueError(f"Unknown Airtable id kind: {kind}")
    return id_kind(value) == kind


def validate_airtable_id(value, kind):
    if not is_airtable_id(value, kind):
        raise ValueError(f"{value!r} is not a valid Airtable {kind} id")
    return value


def looks_like_table_id(value):
    return is_airtable_id(value, "table")
