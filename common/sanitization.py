"""Input sanitization for request-carried strings.

Every string in the request body, the query string and the URL kwargs has
script blocks, ``javascript:`` URIs and inline event-handler attributes
removed. Sanitization rewrites values in place and never rejects a request;
validators that must reject dangerous content look at
``request.sanitized_fields`` to see which body fields were rewritten.
"""

import logging
import re

from django.http import QueryDict

from .throttling import client_ip

logger = logging.getLogger(__name__)

SCRIPT_BLOCK = re.compile(r"<script\b[^<]*(?:(?!</script>)<[^<]*)*</script>", re.IGNORECASE)
JAVASCRIPT_URI = re.compile(r"javascript:", re.IGNORECASE)
EVENT_HANDLER = re.compile(r"on\w+\s*=", re.IGNORECASE)

SUSPICIOUS_PATTERNS = (
    re.compile(r"script", re.IGNORECASE),
    re.compile(r"javascript:", re.IGNORECASE),
    re.compile(r"on\w+=", re.IGNORECASE),
    re.compile(r"<.*>"),
    re.compile(r"union.*select", re.IGNORECASE),
    re.compile(r"drop.*table", re.IGNORECASE),
)


def clean_string(value: str) -> str:
    """Strip script blocks, ``javascript:`` and ``on*=`` handlers from a string."""
    value = SCRIPT_BLOCK.sub("", value)
    value = JAVASCRIPT_URI.sub("", value)
    return EVENT_HANDLER.sub("", value)


def sanitize_in_place(container, path=()):
    """Sanitize all strings inside ``container`` recursively.

    Dicts and lists are rewritten in place; other values are left alone.
    Returns the paths (tuples of keys/indexes) of every value that changed.
    """
    changed = []
    if isinstance(container, dict):
        items = list(container.items())
    elif isinstance(container, list):
        items = list(enumerate(container))
    else:
        return changed

    for key, value in items:
        if isinstance(value, str):
            cleaned = clean_string(value)
            if cleaned != value:
                container[key] = cleaned
                changed.append(path + (key,))
        elif isinstance(value, (dict, list)):
            changed.extend(sanitize_in_place(value, path + (key,)))
    return changed


def sanitize_querydict(querydict: QueryDict):
    """Return a sanitized immutable copy of ``querydict`` and the changed keys."""
    copy = querydict.copy()
    changed = []
    for key in list(copy.keys()):
        values = copy.getlist(key)
        cleaned = [clean_string(v) if isinstance(v, str) else v for v in values]
        if cleaned != values:
            copy.setlist(key, cleaned)
            changed.append(key)
    copy._mutable = False
    return copy, changed


def find_suspicious(container, path=()):
    """Yield ``(path, value)`` for strings matching a suspicious-input pattern."""
    if isinstance(container, QueryDict):
        for key in container.keys():
            for value in container.getlist(key):
                if isinstance(value, str) and _is_suspicious(value):
                    yield path + (key,), value
        return
    if isinstance(container, dict):
        items = container.items()
    elif isinstance(container, list):
        items = enumerate(container)
    else:
        return
    for key, value in items:
        if isinstance(value, str):
            if _is_suspicious(value):
                yield path + (key,), value
        elif isinstance(value, (dict, list)):
            yield from find_suspicious(value, path + (key,))


def _is_suspicious(value: str) -> bool:
    return any(pattern.search(value) for pattern in SUSPICIOUS_PATTERNS)


def _log_suspicious(request, source, container):
    for path, value in find_suspicious(container):
        logger.warning(
            "Suspicious input detected from IP %s in %s.%s: %r",
            client_ip(request),
            source,
            ".".join(str(p) for p in path),
            value[:200],
        )


def sanitize_request(request, path_kwargs: dict):
    """Sanitize body, query string and URL kwargs of a DRF request in place."""
    data = request.data
    _log_suspicious(request, "body", data)
    _log_suspicious(request, "query", request.query_params)

    if isinstance(data, QueryDict):
        cleaned, keys = sanitize_querydict(data)
        request._full_data = cleaned
        body_changed = set(keys)
    else:
        body_changed = {path[0] for path in sanitize_in_place(data)}

    cleaned_query, _ = sanitize_querydict(request._request.GET)
    request._request.GET = cleaned_query

    sanitize_in_place(path_kwargs)

    request.sanitized_fields = frozenset(str(k) for k in body_changed)
    return request.sanitized_fields
