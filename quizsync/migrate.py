import logging
import time
from typing import Callable, List, Optional, Sequence, Tuple

from .client import ApiClient
from .datasets import Dataset
from .errors import LoadError
from .loader import load_records
from .models import RunSummary, SubmissionResult
from .normalizers.types import Record
from .preflight import run_preflight
from .reporter import summarize
from .submitter import Submitter

log = logging.getLogger(__name__)

PREVIEW = 3


def select(records: List[Record], only: Optional[Sequence[int]]) -> Tuple[List[int], List[Record]]:
    """Pick records by 1-based number; all of them when `only` is empty."""
    if not only:
        return list(range(1, len(records) + 1)), list(records)
    bad = [n for n in only if not 1 <= n <= len(records)]
    if bad:
        raise LoadError(f"record number(s) out of range 1..{len(records)}: {', '.join(map(str, bad))}")
    numbers = sorted(set(only))
    return numbers, [records[n - 1] for n in numbers]


def prepare(
    dataset: Dataset, only: Optional[Sequence[int]] = None, explain: bool = False
) -> Tuple[List[int], List[Record]]:
    """
    Load, select and normalize a dataset. No network traffic.

    Returns the 1-based source numbers alongside the normalized records.

    Raises:
        LoadError
    """
    records = load_records(dataset.path)
    numbers, picked = select(records, only)
    log.info("found %d %s in %s", len(records), dataset.noun, dataset.path)
    for n, rec in zip(numbers[:PREVIEW], picked[:PREVIEW]):
        log.info("  %s", dataset.label(n, rec))
    if len(picked) > PREVIEW:
        log.info("  ... and %d more", len(picked) - PREVIEW)

    normalized = []
    for n, rec in zip(numbers, picked):
        if explain:
            fixes = dataset.normalizer.pending_fixes(rec)
            if fixes:
                log.info("%s needs fixing:", dataset.label(n, rec))
                for f in fixes:
                    log.info("  - %s", f)
        normalized.append(dataset.normalizer.normalize_record(rec))
    return numbers, normalized


def migrate(
    dataset: Dataset,
    client: ApiClient,
    access_key: Optional[str] = None,
    only: Optional[Sequence[int]] = None,
    explain: bool = False,
    sleep: Callable[[float], None] = time.sleep,
) -> Tuple[RunSummary, List[SubmissionResult]]:
    """
    Upload one dataset: prepare it, check the API, then submit every record.

    Raises:
        LoadError: the source file is missing or malformed (nothing sent).
        PreflightError: the API is down or the key is refused (nothing sent).
    """
    numbers, records = prepare(dataset, only=only, explain=explain)
    if not records:
        log.warning("no %s found to migrate", dataset.noun)
        return summarize([]), []

    run_preflight(client, access_key=access_key, require_auth=dataset.requires_auth)

    submitter = Submitter(
        client, dataset.endpoint, delay=dataset.delay, access_key=access_key,
        label=dataset.label, sleep=sleep,
    )
    log.info("starting upload of %d %s", len(records), dataset.noun)
    results: List[SubmissionResult] = []
    try:
        for result in submitter.iter_submit(records, numbers=numbers):
            results.append(result)
            if dataset.progress_every and len(results) % dataset.progress_every == 0:
                s = summarize(results)
                log.info(
                    "progress: %d/%d %s processed (%d successful, %d failed)",
                    s.total, len(records), dataset.noun, s.succeeded, s.failed,
                )
    except KeyboardInterrupt:
        s = summarize(results)
        log.error(
            "interrupted after %d/%d %s (%d successful, %d failed)",
            s.total, len(records), dataset.noun, s.succeeded, s.failed,
        )
        raise
    return summarize(results), results
