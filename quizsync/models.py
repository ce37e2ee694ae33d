# quizsync/models.py
from typing import Any, Literal, Optional
from pydantic import BaseModel

Status = Literal["succeeded", "rejected", "transport_failed"]


class Endpoint(BaseModel):
    """Where and how one dataset's records are sent."""
    path: str                       # e.g. "/api/quiz/create"
    method: str = "POST"
    auth: bool = False              # send the access key as an Authorization header
    auth_scheme: str = "AccessKey"  # header value is "<scheme> <key>"


class SubmissionResult(BaseModel):
    index: int                      # 1-based position in the submitted sequence
    label: str                      # human-readable name used in reports
    status: Status
    message: Optional[str] = None   # server message or transport error text
    details: Any = None             # server validation details, verbatim
    http_status: Optional[int] = None
    duplicate: bool = False         # server said the record already exists

    @property
    def ok(self) -> bool:
        return self.status == "succeeded"


class RunSummary(BaseModel):
    total: int = 0
    succeeded: int = 0
    failed: int = 0
    duplicates: int = 0             # subset of `failed`
    ratio: float = 0.0              # succeeded / total, 0.0 for an empty run
