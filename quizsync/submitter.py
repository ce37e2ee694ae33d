import logging
import re
import time
from typing import Callable, Iterator, List, Optional, Sequence

import requests

from .client import ApiClient
from .models import Endpoint, SubmissionResult
from .normalizers.types import Record

log = logging.getLogger(__name__)

_DUPLICATE = re.compile(r"already exists|duplicate", re.IGNORECASE)


def default_label(index: int, rec: Record) -> str:
    return f"record {index}"


class Submitter:
    """
    Send records one at a time, in order, waiting `delay` seconds after each.

    Every record gets a SubmissionResult; nothing a single record does can
    stop the run.
    """
    def __init__(
        self,
        client: ApiClient,
        endpoint: Endpoint,
        delay: float = 0.0,
        access_key: Optional[str] = None,
        label: Callable[[int, Record], str] = default_label,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.client = client
        self.endpoint = endpoint
        self.delay = delay
        self.access_key = access_key
        self.label = label
        self.sleep = sleep

    def submit_one(self, index: int, rec: Record) -> SubmissionResult:
        label = self.label(index, rec)
        try:
            r = self.client.send(self.endpoint, rec, access_key=self.access_key)
        except requests.RequestException as e:
            return SubmissionResult(index=index, label=label, status="transport_failed", message=str(e))

        try:
            body = r.json()
        except ValueError:
            snippet = (r.text or "")[:200]
            return SubmissionResult(
                index=index, label=label, status="transport_failed", http_status=r.status_code,
                message=f"non-JSON response (HTTP {r.status_code}): {snippet}",
            )
        if not isinstance(body, dict):
            return SubmissionResult(
                index=index, label=label, status="transport_failed", http_status=r.status_code,
                message=f"unexpected response body (HTTP {r.status_code}): {body!r}"[:300],
            )

        if 200 <= r.status_code < 300 and body.get("success") is True:
            return SubmissionResult(index=index, label=label, status="succeeded", http_status=r.status_code)

        message = body.get("message") or body.get("error") or "Unknown error"
        return SubmissionResult(
            index=index, label=label, status="rejected", http_status=r.status_code,
            message=str(message), details=body.get("details"),
            duplicate=bool(_DUPLICATE.search(str(message))),
        )

    def iter_submit(
        self, records: Sequence[Record], numbers: Optional[Sequence[int]] = None
    ) -> Iterator[SubmissionResult]:
        """Yield one result per record as soon as it is known.

        `numbers` gives each record's 1-based position in its source file
        (defaults to 1..n) so reports can point back at the original entry.
        """
        numbers = numbers if numbers is not None else range(1, len(records) + 1)
        for index, rec in zip(numbers, records):
            result = self.submit_one(index, rec)
            if result.ok:
                log.info("uploaded %s", result.label)
            else:
                log.warning("failed %s: %s", result.label, result.message)
                if result.details is not None:
                    log.warning("  validation details: %s", result.details)
            yield result
            # rate limit: wait after every record, success or not
            if self.delay > 0:
                self.sleep(self.delay)

    def submit_all(self, records: Sequence[Record]) -> List[SubmissionResult]:
        return list(self.iter_submit(records))
