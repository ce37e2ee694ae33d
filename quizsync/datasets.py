"""One configuration object per uploadable dataset.

The user roster and the question bank go through the same
load -> normalize -> preflight -> submit pipeline; only the values
below differ between them.
"""

from __future__ import annotations
from dataclasses import dataclass
from pathlib import Path
from typing import Callable

from .models import Endpoint
from .normalizers import DatasetKind, NormalizerPipeline, Record, get_default_normalizer
from .settings import Settings

LABEL_WIDTH = 50


@dataclass(frozen=True)
class Dataset:
    kind: DatasetKind
    noun: str                       # plural, used in log lines and the report
    path: Path
    endpoint: Endpoint
    normalizer: NormalizerPipeline
    delay: float                    # seconds to wait after each record
    requires_auth: bool
    progress_every: int             # 0 = no batch progress lines
    label: Callable[[int, Record], str]


def user_label(index: int, rec: Record) -> str:
    if not isinstance(rec, dict):
        return f"User {index}"
    return f"{rec.get('NameOfStu', 'Unknown user')} ({rec.get('StuID', '?')})"


def question_label(index: int, rec: Record) -> str:
    text = ""
    if isinstance(rec, dict):
        text = rec.get("questionText") or rec.get("question") or ""
    text = " ".join(str(text).split()) or "Unknown question"
    if len(text) > LABEL_WIDTH:
        text = text[:LABEL_WIDTH] + "..."
    return f"Question {index}: {text}"


def get_dataset(kind: DatasetKind, settings: Settings) -> Dataset:
    if kind == "users":
        return Dataset(
            kind="users",
            noun="users",
            path=Path(settings.users_path),
            endpoint=Endpoint(path="/api/auth/register"),
            normalizer=get_default_normalizer("users"),
            delay=settings.user_delay,
            requires_auth=False,
            progress_every=0,
            label=user_label,
        )
    if kind == "questions":
        return Dataset(
            kind="questions",
            noun="questions",
            path=Path(settings.questions_path),
            endpoint=Endpoint(path="/api/quiz/create", auth=True),
            normalizer=get_default_normalizer("questions"),
            delay=settings.question_delay,
            requires_auth=True,
            progress_every=50,
            label=question_label,
        )
    raise ValueError(f"unknown dataset kind: {kind!r}")
