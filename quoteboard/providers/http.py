"""
Shared HTTP helper for providers: one GET, bounded by a timeout, JSON object body.

Every failure mode (network error, non-2xx status, invalid JSON, non-object body)
is raised as ProviderError so the chain can log it and move on. No retries.
"""

from __future__ import annotations

from typing import Any, Dict, Mapping, Optional, Tuple

import requests
from requests import Response

from ..core.errors import ProviderError


def get_json(
    session: requests.Session,
    url: str,
    *,
    provider: str,
    timeout: float,
    params: Optional[Mapping[str, Any]] = None,
    headers: Optional[Mapping[str, str]] = None,
) -> Dict[str, Any]:
    try:
        response = session.get(url, params=params, headers=headers, timeout=timeout)
        response.raise_for_status()
    except requests.HTTPError as exc:
        resp = exc.response
        status_code = getattr(resp, "status_code", None)
        message, payload = _extract_error(resp, provider)
        raise ProviderError(message, provider=provider, status_code=status_code, payload=payload) from exc
    except requests.RequestException as exc:
        status_code = getattr(getattr(exc, "response", None), "status_code", None)
        raise ProviderError(
            f"{provider} request failed: {type(exc).__name__}",
            provider=provider,
            status_code=status_code,
        ) from exc

    try:
        payload_raw = response.json()
    except ValueError as exc:
        raise ProviderError(f"{provider} returned invalid JSON", provider=provider, payload=response.text) from exc

    if not isinstance(payload_raw, dict):
        raise ProviderError(
            f"{provider} returned unexpected payload type", provider=provider, payload=payload_raw
        )
    return payload_raw


def _extract_error(response: Optional[Response], provider: str) -> Tuple[str, Any]:
    message = f"{provider} request failed"
    payload: Any = None
    if response is None:
        return message, payload
    message = f"{message} (HTTP {response.status_code})"
    try:
        payload = response.json()
        if isinstance(payload, dict) and payload.get("message"):
            message = f"{message}: {payload['message']}"
    except ValueError:
        payload = response.text
    return message, payload
