import json
from typing import Iterable, List

from .models import RunSummary, SubmissionResult


def summarize(results: Iterable[SubmissionResult]) -> RunSummary:
    """Count outcomes. `succeeded + failed == total` always holds."""
    results = list(results)
    total = len(results)
    succeeded = sum(1 for r in results if r.ok)
    failed = total - succeeded
    duplicates = sum(1 for r in results if not r.ok and r.duplicate)
    ratio = succeeded / total if total else 0.0
    return RunSummary(total=total, succeeded=succeeded, failed=failed, duplicates=duplicates, ratio=ratio)


def render_report(summary: RunSummary, results: Iterable[SubmissionResult], noun: str = "records") -> str:
    """
    Plain-text end-of-run report: counts, success rate, one line per failure
    with the server's (or the transport's) reason, and a closing verdict.
    """
    lines: List[str] = [
        "",
        "Migration summary:",
        f"  uploaded: {summary.succeeded} {noun}",
        f"  failed:   {summary.failed} {noun}",
        f"  success rate: {summary.ratio * 100:.1f}%",
    ]
    failures = [r for r in results if not r.ok]
    if failures:
        lines.append("")
        lines.append("Failures:")
        for r in failures:
            kind = "transport error" if r.status == "transport_failed" else "rejected"
            code = f" HTTP {r.http_status}" if r.http_status is not None else ""
            lines.append(f"  #{r.index} {r.label}: {kind}{code}: {r.message}")
            if r.details is not None:
                lines.append(f"      details: {json.dumps(r.details, default=str)}")

    lines.append("")
    if summary.total == 0:
        lines.append(f"No {noun} to upload.")
    elif summary.succeeded == summary.total:
        lines.append(f"All {noun} uploaded successfully.")
    elif summary.succeeded > 0:
        lines.append("Partial migration completed.")
    else:
        lines.append("Migration failed: no records were accepted.")
    if summary.duplicates:
        lines.append(f"{summary.duplicates} of the failures say the record already exists.")
    return "\n".join(lines)
