from copy import deepcopy
from typing import List
from .base import Normalizer
from .types import DatasetKind, Record
from .rules import CollapseWhitespace, KeepFields, RemoveField, ScalarizeArrayField

USER_FIELDS = ("NameOfStu", "StuID", "AccessKey")


class NormalizerPipeline(Normalizer):
    """
    A chain of normalizers.
    Each stage takes the output of the previous stage. Stages that remove
    fields always run after the others, whatever order they were given in.
    """
    def __init__(self, stages: List[Normalizer]):
        self.stages = (
            [s for s in stages if not getattr(s, "removes_fields", False)]
            + [s for s in stages if getattr(s, "removes_fields", False)]
        )

    def normalize_record(self, rec: Record) -> Record:
        out = deepcopy(rec)  # Don't mutate the input
        for stage in self.stages:
            out = stage.normalize_record(out)
        return out

    def pending_fixes(self, rec: Record) -> List[str]:
        """Describe each stage that would change `rec`."""
        found = []
        cur = deepcopy(rec)
        for stage in self.stages:
            nxt = stage.normalize_record(cur)
            if nxt != cur:
                found.append(getattr(stage, "description", type(stage).__name__))
            cur = nxt
        return found


def get_default_normalizer(kind: DatasetKind) -> NormalizerPipeline:
    """
    Factory for the rule set each dataset needs before the server accepts it.
    """
    if kind == "users":
        return NormalizerPipeline([
            CollapseWhitespace("NameOfStu"),
            KeepFields(USER_FIELDS),
        ])
    if kind == "questions":
        return NormalizerPipeline([
            CollapseWhitespace("directions"),
            ScalarizeArrayField("images", within=("options", "CorrectAns")),
            RemoveField("questionImages"),
        ])
    raise ValueError(f"unknown dataset kind: {kind!r}")
