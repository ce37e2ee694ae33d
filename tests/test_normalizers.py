import copy

import pytest

from quizsync.normalizers import (
    CollapseWhitespace, KeepFields, NormalizerPipeline, RemoveField, ScalarizeArrayField,
    get_default_normalizer,
)


def test_scalarize_options_images():
    rec = {"options": [{"images": ["a.png", "b.png"]}]}
    out = ScalarizeArrayField("images").normalize_record(rec)
    assert out == {"options": [{"images": "a.png"}]}

def test_scalarize_empty_array_becomes_none():
    rec = {"CorrectAns": [{"text": "x", "images": []}]}
    out = ScalarizeArrayField("images").normalize_record(rec)
    assert out["CorrectAns"][0]["images"] is None

def test_scalarize_leaves_scalars_and_missing_fields():
    rec = {"options": [{"images": "a.png"}, {"text": "no images"}], "n": 3}
    assert ScalarizeArrayField("images").normalize_record(rec) == rec

def test_scalarize_nested_lists_unwrap_fully():
    rec = {"images": [["a.png", "b.png"], "c.png"]}
    out = ScalarizeArrayField("images").normalize_record(rec)
    assert out == {"images": "a.png"}

def test_scalarize_within_only_touches_named_containers():
    rec = {"images": ["top.png"], "options": [{"images": ["o.png"]}], "extra": [{"images": ["e.png"]}]}
    out = ScalarizeArrayField("images", within=("options",)).normalize_record(rec)
    assert out["images"] == ["top.png"]
    assert out["options"] == [{"images": "o.png"}]
    assert out["extra"] == [{"images": ["e.png"]}]

def test_collapse_directions():
    out = CollapseWhitespace("directions").normalize_record({"directions": "line1\n\nline2\n"})
    assert out == {"directions": "line1 line2"}

def test_collapse_windows_newlines():
    out = CollapseWhitespace("directions").normalize_record({"directions": "  a\r\nb\r\n\r\nc  "})
    assert out["directions"] == "a b c"

def test_collapse_ignores_non_strings():
    rec = {"directions": None}
    assert CollapseWhitespace("directions").normalize_record(rec) == rec
    assert CollapseWhitespace("directions").normalize_record({}) == {}

@pytest.mark.parametrize("rec", [
    {"questionText": "q", "questionImages": ["x.png"]},
    {"questionText": "q"},
])
def test_remove_field_always_absent(rec):
    out = RemoveField("questionImages").normalize_record(rec)
    assert "questionImages" not in out
    assert out["questionText"] == "q"

def test_keep_fields():
    rec = {"NameOfStu": "A", "StuID": "1", "AccessKey": "k", "Class": "12"}
    assert KeepFields(("NameOfStu", "StuID", "AccessKey")).normalize_record(rec) == {
        "NameOfStu": "A", "StuID": "1", "AccessKey": "k",
    }

def test_rules_pass_non_objects_through():
    for rule in (ScalarizeArrayField("images"), CollapseWhitespace("d"), RemoveField("x"), KeepFields(["a"])):
        assert rule.normalize_record("not a record") == "not a record"


class CopyXToY:
    """Depends on field x, so x must still be there when this runs."""
    def normalize_record(self, rec):
        r = dict(rec)
        if "x" in r:
            r["y"] = r["x"]
        return r

def test_pipeline_runs_removals_last():
    pipe = NormalizerPipeline([RemoveField("x"), CopyXToY()])
    assert pipe.normalize_record({"x": 1}) == {"y": 1}

def test_pipeline_does_not_mutate_input(sample_questions):
    original = copy.deepcopy(sample_questions[1])
    get_default_normalizer("questions").normalize_record(sample_questions[1])
    assert sample_questions[1] == original

def test_question_pipeline_fixes_defective_question(sample_questions):
    out = get_default_normalizer("questions").normalize_record(sample_questions[1])
    assert out["directions"] == "Study the figures below carefully."
    assert [o["images"] for o in out["options"]] == ["fig1.png", None]
    assert out["CorrectAns"][0]["images"] == "fig1.png"
    assert "questionImages" not in out

def test_user_pipeline(sample_users):
    out = get_default_normalizer("users").normalize_record(sample_users[1])
    assert out == {"NameOfStu": "Ms. Kashish  Pratap", "StuID": "S002", "AccessKey": "9999000011112222"}

@pytest.mark.parametrize("kind", ["users", "questions"])
def test_pipelines_are_idempotent(kind, sample_users, sample_questions):
    pipe = get_default_normalizer(kind)
    for rec in sample_users + sample_questions:
        once = pipe.normalize_record(rec)
        assert pipe.normalize_record(once) == once

def test_pending_fixes(sample_questions):
    pipe = get_default_normalizer("questions")
    assert pipe.pending_fixes(sample_questions[0]) == []
    fixes = pipe.pending_fixes(sample_questions[1])
    assert len(fixes) == 3
    assert any("directions" in f for f in fixes)
    assert any("questionImages" in f for f in fixes)

def test_unknown_kind():
    with pytest.raises(ValueError):
        get_default_normalizer("devices")
