"""HTTP helper for the HamnetDB JSON endpoints."""

from __future__ import annotations

import requests

from hamnetdb.errors import UpstreamError


def _get_json_list(url: str, timeout: float = 30) -> list[dict]:
    """GET *url* and return the decoded JSON array.

    Every failure (transport, status, decoding, unexpected shape) is raised
    as :class:`UpstreamError`.
    """
    try:
        resp = requests.get(url, headers={"Accept": "application/json"}, timeout=timeout)
    except requests.RequestException as exc:
        raise UpstreamError(f"Request for '{url}' failed: {exc}") from exc

    if not resp.ok:
        raise UpstreamError(
            f"Request for '{url}' failed: Status {resp.status_code}, Reason '{resp.reason}'"
        )

    try:
        data = resp.json()
    except ValueError as exc:
        raise UpstreamError(f"Response of '{url}' is not valid JSON") from exc

    if not isinstance(data, list):
        raise UpstreamError(
            f"Response of '{url}' is a JSON {type(data).__name__}, expected a list of records"
        )
    return data
