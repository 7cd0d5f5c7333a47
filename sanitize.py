from functools import singledispatch

import bleach
from flask import request


@singledispatch
def sanitize(value):
    """Strip unsafe markup from every string inside a JSON-like value.

    Numbers, booleans and None pass through untouched. Lists and dicts are
    rebuilt with the same shape.
    """
    return value


@sanitize.register
def _(value: str):
    # bleach escapes bare ampersands too; only markup should change
    return bleach.clean(value, strip=True).replace("&amp;", "&")


@sanitize.register(list)
@sanitize.register(tuple)
def _(value):
    return [sanitize(item) for item in value]


@sanitize.register
def _(value: dict):
    return {key: sanitize(item) for key, item in value.items()}


def request_payload():
    """The JSON body of the current request, sanitized.

    A missing, non-JSON or malformed body comes back as None, which the
    schema validator rejects with a 400.
    """
    return sanitize(request.get_json(silent=True))
