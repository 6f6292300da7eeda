"""Tests for text and I/O utilities."""

import pytest

from storyreel.utils import (
    clean_summary_text,
    count_words,
    create_job_dir,
    new_job_id,
    split_into_segments,
    truncate_for_preview,
)
from storyreel.utils.io_utils import is_valid_job_id


def test_clean_summary_text_strips_citations_and_whitespace():
    raw = "The city [1] approved\n\nthe plan [2, 3] on Monday ."
    assert clean_summary_text(raw) == "The city approved the plan on Monday."


def test_split_300_words_into_three_hundreds():
    text = " ".join(f"w{i}" for i in range(300))

    parts = split_into_segments(text, 3)

    assert [count_words(part) for part in parts] == [100, 100, 100]
    assert " ".join(parts) == text


def test_split_is_balanced_and_contiguous():
    text = " ".join(f"w{i}" for i in range(11))

    parts = split_into_segments(text, 3)

    assert [count_words(part) for part in parts] == [4, 4, 3]
    assert " ".join(parts) == text


def test_split_with_fewer_words_than_parts():
    assert split_into_segments("only two", 3) == ["only", "two", ""]


def test_split_rejects_zero_parts():
    with pytest.raises(ValueError):
        split_into_segments("text", 0)


def test_truncate_for_preview():
    assert truncate_for_preview("a" * 150, 100) == "a" * 100 + "..."
    assert truncate_for_preview("short", 100) == "short..."


def test_new_job_id_is_valid_and_unique():
    ids = {new_job_id() for _ in range(50)}
    assert len(ids) == 50
    assert all(is_valid_job_id(job_id) for job_id in ids)


def test_create_job_dir(tmp_path):
    job_dir = create_job_dir(str(tmp_path / "stories"), "abc123def456")
    assert job_dir.is_dir()

    with pytest.raises(FileExistsError):
        create_job_dir(str(tmp_path / "stories"), "abc123def456")


def test_create_job_dir_rejects_path_traversal(tmp_path):
    with pytest.raises(ValueError):
        create_job_dir(str(tmp_path), "../escape")
