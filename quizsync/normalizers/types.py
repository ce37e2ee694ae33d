# quizsync/normalizers/types.py
from typing import Any, Dict, Literal

DatasetKind = Literal["users", "questions"]

# A record is whatever the source JSON holds; the remote API owns the schema.
Record = Dict[str, Any]
