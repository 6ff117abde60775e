"""Helpers for building Airtable formulas for ``filterByFormula``.

    >>> AND(eq("Status", "Done"), gt("Score", 3))
    'AND({Status}="Done", {Score}>3)'
"""

import datetime
from decimal import Decimal


def field(name):
    return "{%s}" % name.replace("}", "\\}")


def quote(value):
    if value is None:
        return "BLANK()"
    if isinstance(value, bool):
        return "TRUE()" if value else "FALSE()"
    if isinstance(value, Decimal):
        return str(value)
    if isinstance(value, (int, float)):
        return repr(value)
    if isinstance(value, (datetime.date, datetime.datetime)):
        return f'DATETIME_PARSE("{value.isoformat()}")'
    value = str(value).replace("\\", "\\\\").replace('"', '\\"')
    return f'"{value}"'


def _compare(operator):
    def compare(field_name, value):
        return f"{field(field_name)}{operator}{quote(value)}"

    compare.__name__ = {
        "=": "eq",
        "!=": "ne",
        ">": "gt",
        ">=": "gte",
        "<": "lt",
        "<=": "lte",
    }[operator]
    return compare


eq = _compare("=")
ne = _compare("!=")
gt = _compare(">")
gte = _compare(">=")
lt = _compare("<")
lte = _compare("<=")


def AND(*formulas):
    formulas = [formula for formula in formulas if formula]
    if not formulas:
        return "TRUE()"
    if len(formulas) == 1:
        return formulas[0]
    return f"AND({', '.join(formulas)})"


def OR(*formulas):
    formulas = [formula for formula in formulas if formula]
    if not formulas:
        return "FALSE()"
    if len(formulas) == 1:
        return formulas[0]
    return f"OR({', '.join(formulas)})"


def NOT(formula):
    return f"NOT({formula})"


def contains(field_name, text):
    return f"FIND(LOWER({quote(text)}), LOWER({field(field_name)}))"


def is_blank(field_name):
    return f"{field(field_name)}=BLANK()"


def is_not_blank(field_name):
    return NOT(is_blank(field_name))


def match(fields, match_any=False):
    equalities = [eq(field_name, value) for field_name, value in fields.items()]
    return OR(*equalities) if match_any else AND(*equalities)


def formula_from_filter(filter):
    field_name = filter["field"]
    filter_type = filter["type"]
    filter_value = filter.get("value")
    if isinstance(filter_value, str):
        filter_value = filter_value.strip()
    match filter_type:
        case "is":
            if isinstance(filter_value, str):
                return f"LOWER({field(field_name)})=LOWER({quote(filter_value)})"
            return eq(field_name, filter_value)
        case "is_not":
            return NOT(formula_from_filter({**filter, "type": "is"}))
        case "is_one_of":
            return OR(*[eq(field_name, value) for value in filter_value])
        case "is_none_of":
            return NOT(OR(*[eq(field_name, value) for value in filter_value]))
        case "contains":
            return contains(field_name, filter_value)
        case "not_contains":
            return NOT(contains(field_name, filter_value))
        case "exists":
            return is_not_blank(field_name)
        case "not_exists":
            return is_blank(field_name)
        case "gt":
            return gt(field_name, filter_value)
        case "lt":
            return lt(field_name, filter_value)
    raise ValueError(f"Unknown filter type: {filter_type}")


def formula_from_filters(filters, match_any=False):
    formulas = [formula_from_filter(filter) for filter in filters]
    return OR(*formulas) if match_any else AND(*formulas)
