from .pipeline import get_default_normalizer, NormalizerPipeline
from .rules import CollapseWhitespace, KeepFields, RemoveField, ScalarizeArrayField
from .types import DatasetKind, Record
from .base import Normalizer

__all__ = [
    "get_default_normalizer",
    "NormalizerPipeline",
    "CollapseWhitespace",
    "KeepFields",
    "RemoveField",
    "ScalarizeArrayField",
    "DatasetKind",
    "Record",
    "Normalizer",
]
