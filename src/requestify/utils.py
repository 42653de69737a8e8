"""
Request helpers - URL resolution, query encoding and body serialization.
"""

from __future__ import annotations

import io
import json
from collections.abc import AsyncIterable, Iterator
from typing import Any, Mapping, Optional, Union
from urllib.parse import quote, urlencode, urlsplit

QueryValue = Union[str, int, float, bool]


def resolve_url(base_url: Optional[str], url: str) -> str:
    """
    Join a relative path onto the base URL.

    URLs that already carry a scheme are returned untouched, as is any URL
    when no base is configured.
    """
    if not base_url or urlsplit(url).scheme:
        return url
    return base_url.rstrip("/") + "/" + url.lstrip("/")


def _query_value(value: QueryValue) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return value if isinstance(value, str) else str(value)


def encode_query(params: Optional[Mapping[str, QueryValue]], *, prefix: str = "?") -> str:
    """
    Encode query parameters as a URL suffix.

    Returns an empty string when there are no parameters. Keys and values are
    percent-encoded the way encodeURIComponent does (spaces become %20).
    """
    if not params:
        return ""
    pairs = [(key, _query_value(value)) for key, value in params.items()]
    return prefix + urlencode(pairs, quote_via=quote, safe="")


def append_query(url: str, params: Optional[Mapping[str, QueryValue]]) -> str:
    """Append encoded parameters, continuing an existing query string."""
    return url + encode_query(params, prefix="&" if "?" in url else "?")


def is_passthrough_body(data: Any) -> bool:
    """Binary, stream and file-like payloads are handed to the transport as-is."""
    return isinstance(
        data, (bytes, bytearray, memoryview, io.IOBase, Iterator, AsyncIterable)
    )


def default_serialize_body(data: Any) -> Any:
    """
    Default body serializer.

    - None stays None (no body)
    - bytes, file objects and iterators pass through unmodified
    - str passes through
    - dicts, lists and tuples become JSON text
    - other values are stringified
    """
    if data is None:
        return None
    if is_passthrough_body(data) or isinstance(data, str):
        return data
    if isinstance(data, (Mapping, list, tuple)):
        return json.dumps(data, ensure_ascii=False)
    if isinstance(data, bool):
        return "true" if data else "false"
    return str(data)


def is_success(result: Any) -> bool:
    """
    Read the success indicator of a transport result.

    Understands httpx responses (`is_success`), objects or mappings with an
    `ok` flag, and anything exposing a numeric status.
    """
    flag = getattr(result, "is_success", None)
    if isinstance(flag, bool):
        return flag
    flag = getattr(result, "ok", None)
    if isinstance(flag, bool):
        return flag
    if isinstance(result, Mapping):
        if isinstance(result.get("ok"), bool):
            return result["ok"]
        status = result.get("status", result.get("status_code"))
    else:
        status = getattr(result, "status_code", getattr(result, "status", None))
    if isinstance(status, int) and not isinstance(status, bool):
        return 200 <= status < 300
    return False
