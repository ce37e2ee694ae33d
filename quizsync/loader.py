"""Read a dataset file into a list of records."""

import json
import logging
from pathlib import Path
from typing import List, Union

from .errors import NotFoundError, ParseError
from .normalizers.types import Record

log = logging.getLogger(__name__)


def load_records(path: Union[str, Path]) -> List[Record]:
    """Parse `path` as a JSON array.

    Raises:
        NotFoundError: the file does not exist.
        ParseError: the file is not valid JSON, or its top level is not an array.
    """
    p = Path(path)
    log.info("reading records from %s", p)
    try:
        text = p.read_text(encoding="utf-8")
    except FileNotFoundError as e:
        raise NotFoundError(f"{p}: no such file") from e
    except (IsADirectoryError, UnicodeDecodeError) as e:
        raise ParseError(f"{p}: cannot read as UTF-8 text: {e}") from e

    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise ParseError(f"{p}: invalid JSON at line {e.lineno} column {e.colno}: {e.msg}") from e

    if not isinstance(data, list):
        raise ParseError(f"{p}: expected a JSON array at the top level, got {type(data).__name__}")

    odd = sum(1 for r in data if not isinstance(r, dict))
    if odd:
        log.warning("%s: %d entries are not JSON objects; sending them as-is", p, odd)
    return data
