# quizsync/client.py
import requests
from typing import Any, Optional

from .models import Endpoint
from .settings import DEFAULT_TIMEOUT

HEALTH_PATH = "/health"
VERIFY_PATH = "/api/auth/verify"


class ApiClient:
    """
    Thin wrapper over a requests.Session bound to one API base URL.
    Returns raw responses; callers decide what counts as success.

    `session` may be any object with requests-style get/post/request
    (tests pass FastAPI's TestClient).
    """
    def __init__(self, base_url: str, timeout: float = DEFAULT_TIMEOUT, session: Any = None):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session if session is not None else requests.Session()
        self.session.headers.update({"Content-Type": "application/json"})

    def url(self, path: str) -> str:
        return f"{self.base_url}/{path.lstrip('/')}"

    def health(self):
        return self.session.get(self.url(HEALTH_PATH), timeout=self.timeout)

    def verify(self, access_key: str):
        return self.session.post(self.url(VERIFY_PATH), json={"AccessKey": access_key}, timeout=self.timeout)

    def send(self, endpoint: Endpoint, body: Any, access_key: Optional[str] = None):
        headers = {}
        if endpoint.auth and access_key:
            headers["Authorization"] = f"{endpoint.auth_scheme} {access_key}"
        return self.session.request(
            endpoint.method, self.url(endpoint.path),
            json=body, headers=headers, timeout=self.timeout,
        )

    def close(self):
        self.session.close()
