from __future__ import annotations

import random

import pytest

from patchengine import (
    EngineConfig,
    HunkChangeType,
    apply_hunks,
    detect_language,
    format_unified_diff,
    generate_diff,
    parse_unified_diff,
)

ROUND_TRIP_CASES = [
    ("", ""),
    ("a\nb\nc\n", "a\nb\nc\n"),
    ("a\nb\nc\n", "a\nx\nc\n"),
    ("a\nb\nc", "a\nc"),
    ("a\nc\n", "a\nb\nc\n"),
    ("x\ny", "y\nx"),
    ("", "brand new\nfile\n"),
    ("gone\nentirely\n", ""),
    ("def f():\n    return 1\n\n\ndef g():\n    return 2\n", "def f():\n    return 10\n\n\ndef g():\n    return 20\n"),
    ("1\n2\n3\n4\n5\n6\n7\n8\n", "0\n1\n2\nthree\n4\n5\n7\n8\n9\n"),
]


@pytest.mark.parametrize(("old", "new"), ROUND_TRIP_CASES)
def test_generated_diff_replays_to_new_content(old: str, new: str) -> None:
    diff = generate_diff(old, new, "sample.txt")

    result = apply_hunks(old, diff.hunks)

    assert result.ok
    assert result.content == new


@pytest.mark.parametrize(("old", "new"), ROUND_TRIP_CASES)
def test_formatted_diff_parses_back_and_replays(old: str, new: str) -> None:
    diff = generate_diff(old, new, "pkg/sample.py")

    parsed = parse_unified_diff(format_unified_diff(diff))

    assert parsed is not None
    assert parsed.file_path == "pkg/sample.py"
    assert [hunk.model_dump(exclude={"id"}) for hunk in parsed.hunks] == [
        hunk.model_dump(exclude={"id"}) for hunk in diff.hunks
    ]
    assert apply_hunks(old, parsed.hunks).content == new


def test_randomised_edits_round_trip() -> None:
    rng = random.Random(20240611)
    alphabet = ["alpha", "beta", "gamma", "  alpha", "", "}"]
    for _ in range(200):
        old = "\n".join(rng.choice(alphabet) for _ in range(rng.randint(0, 12)))
        new = "\n".join(rng.choice(alphabet) for _ in range(rng.randint(0, 12)))

        diff = generate_diff(old, new, "random.txt")

        assert apply_hunks(old, diff.hunks).content == new, (old, new)


def test_generate_records_counts_and_context() -> None:
    diff = generate_diff("a\nb\nc", "a\nc", "notes.txt")

    assert len(diff.hunks) == 1
    hunk = diff.hunks[0]
    assert hunk.old_start == 2
    assert hunk.new_start == 2
    assert hunk.old_lines == ["b"]
    assert hunk.new_lines == []
    assert hunk.old_count == len(hunk.old_lines)
    assert hunk.new_count == len(hunk.new_lines)
    assert hunk.context_before == ["a"]
    assert hunk.context_after == []
    assert hunk.change_type is HunkChangeType.DELETE
    assert diff.old_content == "a\nb\nc"
    assert diff.new_content == "a\nc"
    assert diff.stats().model_dump() == {"hunks": 1, "additions": 0, "deletions": 1}


def test_generate_identical_content_has_no_hunks() -> None:
    diff = generate_diff("same\n", "same\n", "same.txt")

    assert diff.is_empty
    assert diff.additions == 0
    assert diff.deletions == 0


def test_context_lines_follow_config() -> None:
    old = "1\n2\n3\n4\nX"
    new = "1\n2\n3\n4\nY"

    assert generate_diff(old, new, "f").hunks[0].context_before == ["2", "3", "4"]
    assert generate_diff(old, new, "f", config=EngineConfig(context_lines=1)).hunks[0].context_before == ["4"]
    assert generate_diff(old, new, "f", config=EngineConfig(context_lines=0)).hunks[0].context_before == []


def test_context_lines_are_clamped() -> None:
    assert EngineConfig(context_lines=50).context_lines == 10
    assert EngineConfig(context_lines=-4).context_lines == 0


def test_format_emits_headers_and_prefixed_lines() -> None:
    diff = generate_diff("a\nb", "a\nc", "n.txt")

    assert format_unified_diff(diff) == "--- a/n.txt\n+++ b/n.txt\n@@ -2,1 +2,1 @@\n a\n-b\n+c"


def test_format_includes_trailing_context() -> None:
    diff = parse_unified_diff("--- a/t.txt\n+++ b/t.txt\n@@ -1,3 +1,3 @@\n a\n-b\n+c\n d")

    assert diff is not None
    assert format_unified_diff(diff) == "--- a/t.txt\n+++ b/t.txt\n@@ -1,3 +1,3 @@\n a\n-b\n+c\n d"


def test_detect_language_table() -> None:
    assert detect_language("src/app/view.tsx") == "typescript"
    assert detect_language("main.PY") == "python"
    assert detect_language("README.md") == "markdown"
    assert detect_language("Makefile") == "plaintext"
    assert detect_language("archive.tar.gz") == "plaintext"
    assert detect_language("release.v1/NOTES") == "plaintext"
    assert detect_language("pyproject.toml", {"toml": "toml"}) == "toml"


def test_generate_uses_configured_languages() -> None:
    config = EngineConfig(languages={"toml": "toml"})

    diff = generate_diff("a", "b", "pyproject.toml", config=config)

    assert diff.language == "toml"
    assert generate_diff("a", "b", "lib.rs").language == "rust"
