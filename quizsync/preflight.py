import logging
from typing import Optional

import requests

from .client import ApiClient
from .errors import EndpointUnreachable, Unauthenticated

log = logging.getLogger(__name__)

# health "status" values that mean the API is up but not serving
DOWN_STATES = {"down", "error", "fail", "failed", "unhealthy", "maintenance"}


def run_preflight(client: ApiClient, access_key: Optional[str] = None, require_auth: bool = False) -> None:
    """
    Make sure the API is up (and, if required, that the access key works)
    before any record is sent.

    Raises:
        EndpointUnreachable: the health probe failed or returned garbage.
        Unauthenticated: the access key is missing or was refused.
    """
    log.info("checking API at %s", client.base_url)
    try:
        r = client.health()
    except requests.RequestException as e:
        raise EndpointUnreachable(f"cannot connect to {client.base_url}: {e}") from e

    if not 200 <= r.status_code < 300:
        raise EndpointUnreachable(f"health check failed with HTTP {r.status_code}")
    try:
        body = r.json()
    except ValueError as e:
        raise EndpointUnreachable(f"health check returned a non-JSON body (HTTP {r.status_code})") from e
    if not isinstance(body, dict):
        raise EndpointUnreachable(f"health check returned an unexpected body: {body!r}"[:200])
    if str(body.get("status", "")).lower() in DOWN_STATES:
        raise EndpointUnreachable(f"API reports status {body['status']!r}")
    status = body.get("message") or body.get("status")
    log.info("API health check passed%s", f": {status}" if status else "")

    if not require_auth:
        return
    if not access_key:
        raise Unauthenticated("an access key is required for this upload (set ACCESS_KEY or --access-key)")

    log.info("verifying access key")
    try:
        r = client.verify(access_key)
    except requests.RequestException as e:
        raise EndpointUnreachable(f"cannot reach the auth endpoint: {e}") from e
    try:
        body = r.json()
    except ValueError:
        body = None
    if not (200 <= r.status_code < 300 and isinstance(body, dict) and body.get("success") is True):
        reason = body.get("message") if isinstance(body, dict) else None
        raise Unauthenticated(f"access key rejected (HTTP {r.status_code}){': ' + reason if reason else ''}")
    log.info("authentication successful")
