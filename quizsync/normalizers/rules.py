from copy import deepcopy
import re
from typing import Any, Iterable, Optional, Sequence
from .base import Normalizer
from .types import Record

_NEWLINE_RUN = re.compile(r"[\r\n]+")


class ScalarizeArrayField(Normalizer):
    """
    Replace list values of `field` with their first element (None if empty).
    Walks nested objects and lists, so `options[*].images` is covered.
    If `within` is given, only those top-level containers are walked.
    """
    removes_fields = False

    def __init__(self, field: str, within: Optional[Sequence[str]] = None):
        self.field = field
        self.within = tuple(within) if within else None
        where = f" in {', '.join(self.within)}" if self.within else ""
        self.description = f"'{field}' given as an array instead of a single value{where}"

    def normalize_record(self, rec: Record) -> Record:
        if not isinstance(rec, dict):
            return rec
        if self.within is None:
            return scalarize(rec, self.field)
        r = deepcopy(rec)
        for key in self.within:
            if key in r:
                r[key] = scalarize(r[key], self.field)
        return r


class CollapseWhitespace(Normalizer):
    """Trim a string field and turn each run of newlines into one space."""
    removes_fields = False

    def __init__(self, field: str):
        self.field = field
        self.description = f"'{field}' has newlines or surrounding whitespace"

    def normalize_record(self, rec: Record) -> Record:
        if not isinstance(rec, dict) or not isinstance(rec.get(self.field), str):
            return rec
        r = deepcopy(rec)
        r[self.field] = collapse_newlines(r[self.field])
        return r


class RemoveField(Normalizer):
    """Drop a top-level field the server does not accept."""
    removes_fields = True

    def __init__(self, field: str):
        self.field = field
        self.description = f"unsupported field '{field}'"

    def normalize_record(self, rec: Record) -> Record:
        if not isinstance(rec, dict) or self.field not in rec:
            return rec
        r = deepcopy(rec)
        del r[self.field]
        return r


class KeepFields(Normalizer):
    """Drop every top-level field outside an allow-list."""
    removes_fields = True

    def __init__(self, fields: Iterable[str]):
        self.fields = tuple(fields)
        self.description = f"fields outside {', '.join(self.fields)}"

    def normalize_record(self, rec: Record) -> Record:
        if not isinstance(rec, dict):
            return rec
        return {k: deepcopy(v) for k, v in rec.items() if k in self.fields}


# --- Value helpers ---

def first_or_none(value: Any):
    """Unwrap a (possibly nested) list to its first element, or None if empty."""
    while isinstance(value, list):
        value = value[0] if value else None
    return value

def scalarize(node: Any, field: str):
    """Return a copy of `node` with every `field` list replaced by first_or_none."""
    if isinstance(node, dict):
        out = {}
        for k, v in node.items():
            if k == field and isinstance(v, list):
                v = first_or_none(v)
            out[k] = scalarize(v, field)
        return out
    if isinstance(node, list):
        return [scalarize(x, field) for x in node]
    return node

def collapse_newlines(s: str) -> str:
    """Trim, then replace each run of newline characters with a single space."""
    return _NEWLINE_RUN.sub(" ", s.strip())
