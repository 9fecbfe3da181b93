from __future__ import annotations

import logging
from typing import Any, List, Optional

import requests

from .exceptions import ParseError, TransportError
from .models import NewsItem
from .normalizer import normalize_envelope

logger = logging.getLogger(__name__)


def fetch_from_proxy(
    url: str,
    *,
    session: Optional[requests.Session] = None,
    timeout: Optional[float] = None,
) -> List[NewsItem]:
    """
    GET the proxy endpoint once and return its news items.

    Raises TransportError on network failure or non-2xx status, and ParseError when
    the body is not a JSON object with a `news` list. No retry.
    """
    http = session or requests
    try:
        resp = http.get(url, headers={"Accept": "application/json"}, timeout=timeout)
    except requests.RequestException as e:
        raise TransportError(f"Proxy unreachable: {url} ({e})") from e

    if not resp.ok:
        # Body is `{error, message}`; keep it for logs only
        detail = _error_detail(resp)
        logger.warning("Proxy %s answered %s: %s", url, resp.status_code, detail)
        raise TransportError(f"Proxy returned HTTP {resp.status_code}: {detail}", status=resp.status_code)

    try:
        data = resp.json()
    except ValueError as e:
        raise ParseError(f"Proxy body is not JSON: {url}", raw_text=resp.text) from e

    if not isinstance(data, dict) or not isinstance(data.get("news"), list):
        raise ParseError(f"Proxy body has no 'news' list: {url}", raw_text=resp.text)
    return normalize_envelope(data)


def _error_detail(resp: Any) -> str:
    try:
        body = resp.json()
    except ValueError:
        return (resp.text or "")[:200]
    if isinstance(body, dict):
        return str(body.get("message") or body.get("error") or body)[:200]
    return str(body)[:200]
