"""Shared HTTP helpers used by the hosting API clients.

Transport failures come back as status 0 with the failure text; the
clients decide which RemoteSourceError to raise. Successful responses are
cached for Constants.HTTP_CACHE_TTL_SEC, keyed by URL and headers, so a
token change never reuses another caller's page.
"""
from __future__ import annotations

import json
import logging
import time
from typing import Any, Dict, Optional, Tuple

import requests

from constants import Constants
from common.logging_utils import extra_context, is_debug_enabled, safe_url, Timer

logger = logging.getLogger(__name__)

Response = Tuple[int, Dict[str, str], str]

_http_cache: Dict[str, Tuple[Response, float]] = {}


def clear_cache() -> None:
    """Drop all cached responses."""
    _http_cache.clear()


def _cache_key(url: str, headers: Optional[Dict[str, str]]) -> str:
    return f"GET:{url}:{sorted(headers.items()) if headers else ''}"


def _cached(key: str) -> Optional[Response]:
    entry = _http_cache.get(key)
    if entry is None:
        return None
    data, stored_at = entry
    if time.time() - stored_at >= Constants.HTTP_CACHE_TTL_SEC:
        del _http_cache[key]
        return None
    return data


def _trace(message: str, url: str, **fields: Any) -> None:
    if is_debug_enabled(logger):
        logger.debug(
            message,
            extra=extra_context(component="http_client", target=safe_url(url), **fields),
        )


def robust_get(
    url: str,
    *,
    headers: Optional[Dict[str, str]] = None,
    **kwargs: Any
) -> Response:
    """GET with timeout, retries on 5xx and transport errors, and a short-lived cache.

    Returns:
        (status_code, headers, body text); status 0 when every attempt failed.
    """
    key = _cache_key(url, headers)
    hit = _cached(key)
    if hit is not None:
        _trace("HTTP cache hit", url, event="cache_hit", action="GET")
        return hit

    failure = None
    for attempt in range(1, Constants.HTTP_RETRY_MAX + 1):
        if attempt > 1:
            time.sleep(Constants.HTTP_RETRY_BASE_DELAY_SEC * (2 ** (attempt - 2)))
        _trace("HTTP request", url, event="http_request", action="GET", attempt=attempt)
        with Timer() as t:
            try:
                response = requests.get(url, timeout=Constants.REQUEST_TIMEOUT, headers=headers, **kwargs)
            except requests.Timeout:
                failure = "timeout"
                _trace("HTTP timeout", url, event="http_exception", outcome="timeout", attempt=attempt)
                continue
            except requests.RequestException as exc:
                failure = str(exc)
                _trace("HTTP request exception", url, event="http_exception", outcome="request_exception",
                       attempt=attempt)
                continue

        if response.status_code >= 500:
            failure = f"HTTP {response.status_code}"
            _trace("HTTP server error", url, event="http_response", outcome="retry",
                   status_code=response.status_code, attempt=attempt)
            continue

        data = (response.status_code, dict(response.headers), response.text)
        if response.status_code == 200:
            _http_cache[key] = (data, time.time())
        _trace("HTTP response", url, event="http_response", action="GET", status_code=response.status_code,
               duration_ms=t.duration_ms())
        return data

    return 0, {}, f"Request failed after {Constants.HTTP_RETRY_MAX} attempts: {failure}"


def get_json(
    url: str,
    *,
    headers: Optional[Dict[str, str]] = None,
    **kwargs: Any
) -> Tuple[int, Dict[str, str], Optional[Any]]:
    """GET and decode a JSON body.

    Args:
        url: Target URL
        headers: Optional request headers
        **kwargs: Additional requests.get parameters

    Returns:
        Tuple of (status_code, headers_dict, payload). The payload is the
        decoded JSON for a 200 response, the error text when the status is 0,
        and None otherwise (including undecodable bodies).
    """
    status_code, response_headers, text = robust_get(url, headers=headers, **kwargs)
    if status_code == 0:
        return status_code, response_headers, text
    if status_code != 200 or not text:
        return status_code, response_headers, None
    try:
        payload = json.loads(text)
    except json.JSONDecodeError:
        _trace("JSON decode error", url, event="parse", action="get_json", outcome="json_decode_error")
        return status_code, response_headers, None
    return status_code, response_headers, payload
