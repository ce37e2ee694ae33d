"""Command-line interface for quizsync.

    quizsync check                 # is the API up, is the access key good?
    quizsync users                 # register every user in users.json
    quizsync questions --explain   # upload data.json, listing fixes applied
    quizsync questions --only 4,16 # re-send just those questions
    quizsync all                   # users, then questions

Exit codes: 0 run completed (even with per-record failures), 2 input
error, 3 preflight failure, 130 interrupted.
"""

from __future__ import annotations
import argparse
import json
import logging
import sys
import time
from dataclasses import replace
from pathlib import Path
from typing import Callable, List, Optional

from pydantic import ValidationError

from .client import ApiClient
from .datasets import get_dataset
from .errors import LoadError, PreflightError
from .migrate import migrate, prepare
from .preflight import run_preflight
from .reporter import render_report
from .settings import Settings, load_settings
from .setup_logging import setup_logging

log = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_INPUT = 2
EXIT_PREFLIGHT = 3
EXIT_INTERRUPTED = 130


def _numbers(value: str) -> List[int]:
    try:
        out = [int(p) for p in value.split(",") if p.strip()]
    except ValueError:
        raise argparse.ArgumentTypeError(f"expected comma-separated record numbers, got {value!r}")
    if not out:
        raise argparse.ArgumentTypeError("expected at least one record number")
    return out


def build_parser() -> argparse.ArgumentParser:
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("--base-url", help="API base URL (default: $API_BASE_URL)")
    common.add_argument("--access-key", help="Access key for authenticated uploads (default: $ACCESS_KEY)")
    common.add_argument("--timeout", type=float, help="Per-request timeout in seconds")
    common.add_argument("--log-level", help="DEBUG, INFO, WARNING, ...")

    p = argparse.ArgumentParser(prog="quizsync", description="Upload users and questions to the quiz API.")
    sub = p.add_subparsers(dest="command", required=True)

    sub.add_parser("check", parents=[common], help="Run the API health/auth check only")

    for kind in ("users", "questions"):
        sp = sub.add_parser(kind, parents=[common], help=f"Upload {kind}")
        sp.add_argument("--path", type=Path, help="Source JSON file")
        sp.add_argument("--only", type=_numbers, metavar="N[,M...]", help="Send only these 1-based record numbers")
        sp.add_argument("--explain", action="store_true", help="List the fixes applied to each record")
        sp.add_argument("--dry-run", action="store_true", help="Print normalized records instead of sending them")
        sp.add_argument("--delay", type=float, help="Seconds to wait after each record")

    sp = sub.add_parser("all", parents=[common], help="Upload users, then questions")
    sp.add_argument("--between", type=float, default=5.0, help="Seconds to wait between the two uploads")
    return p


def _apply_overrides(settings: Settings, args: argparse.Namespace) -> Settings:
    update = {}
    if args.base_url:
        update["api_base_url"] = args.base_url
    if args.access_key:
        update["access_key"] = args.access_key
    if args.timeout is not None:
        update["timeout"] = args.timeout
    if args.log_level:
        update["log_level"] = args.log_level
    return settings.model_copy(update=update)


def _banner(title: str) -> None:
    sys.stdout.write("=" * 60 + "\n" + title.upper().center(60) + "\n" + "=" * 60 + "\n")


def _run_dataset(kind, args, settings: Settings, client: ApiClient, sleep) -> int:
    dataset = get_dataset(kind, settings)
    if getattr(args, "path", None):
        dataset = replace(dataset, path=args.path)
    if getattr(args, "delay", None) is not None:
        dataset = replace(dataset, delay=args.delay)
    only = getattr(args, "only", None)
    explain = getattr(args, "explain", False)

    if getattr(args, "dry_run", False):
        try:
            _, records = prepare(dataset, only=only, explain=explain)
        except LoadError as e:
            log.error("cannot read %s: %s", dataset.noun, e)
            return EXIT_INPUT
        sys.stdout.write(json.dumps(records, indent=2, ensure_ascii=False) + "\n")
        return EXIT_OK

    _banner(f"{dataset.noun} migration")
    try:
        summary, results = migrate(
            dataset, client, access_key=settings.access_key, only=only, explain=explain, sleep=sleep,
        )
    except LoadError as e:
        log.error("migration aborted, cannot read %s: %s", dataset.noun, e)
        return EXIT_INPUT
    except PreflightError as e:
        log.error("migration aborted, %s: %s", type(e).__name__, e)
        return EXIT_PREFLIGHT

    sys.stdout.write(render_report(summary, results, noun=dataset.noun) + "\n")
    return EXIT_OK


def main(
    argv: Optional[List[str]] = None,
    client: Optional[ApiClient] = None,
    sleep: Callable[[float], None] = time.sleep,
) -> int:
    args = build_parser().parse_args(argv)
    try:
        settings = _apply_overrides(load_settings(), args)
    except ValidationError as e:
        problems = "; ".join(f"{'.'.join(map(str, err['loc']))}: {err['msg']}" for err in e.errors())
        sys.stderr.write(f"error: invalid configuration: {problems}\n")
        return EXIT_INPUT
    # --dry-run owns stdout for the JSON dump
    setup_logging(settings.log_level, stream=sys.stderr if getattr(args, "dry_run", False) else sys.stdout)

    owns_client = client is None
    if owns_client:
        client = ApiClient(settings.api_base_url, timeout=settings.timeout)
    try:
        if args.command == "check":
            try:
                run_preflight(client, access_key=settings.access_key, require_auth=bool(settings.access_key))
            except PreflightError as e:
                log.error("%s: %s", type(e).__name__, e)
                return EXIT_PREFLIGHT
            return EXIT_OK

        if args.command == "all":
            code = _run_dataset("users", args, settings, client, sleep)
            if code != EXIT_OK:
                return code
            log.info("waiting %.0f seconds before starting questions migration", args.between)
            sleep(args.between)
            return _run_dataset("questions", args, settings, client, sleep)

        return _run_dataset(args.command, args, settings, client, sleep)
    except KeyboardInterrupt:
        return EXIT_INTERRUPTED
    finally:
        if owns_client:
            client.close()


if __name__ == "__main__":
    raise SystemExit(main())
