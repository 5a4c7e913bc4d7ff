"""Unit tests for size planning and chunk sizing."""

import os
import stat

import pytest

from jsmerge.core.planner import (
    MAX_CHUNK_SIZE,
    MIN_CHUNK_SIZE,
    optimal_chunk_size,
    plan_inputs,
    total_size,
)
from jsmerge.errors import InputFileError, NoInputFilesError
from jsmerge.models import InputFile


def test_plan_inputs_preserves_order_and_sizes(write_inputs):
    paths = write_inputs({"b.json": '{"id":2}\n', "a.json": '{"id":1}\n{"id":3}\n'})
    files = plan_inputs(paths)

    assert [f.path for f in files] == paths
    assert [f.size for f in files] == [9, 18]
    assert total_size(files) == 27


def test_plan_inputs_accepts_strings(write_inputs):
    (path,) = write_inputs({"a.json": "{}\n"})
    files = plan_inputs([str(path)])
    assert files[0].path == path


def test_plan_inputs_keeps_planned_entries_without_stat(tmp_path, write_inputs):
    (path,) = write_inputs({"a.json": "{}\n"})
    already = InputFile(path=tmp_path / "gone.json", size=42)

    files = plan_inputs([already, path])

    assert files[0] is already
    assert files[1] == InputFile(path=path, size=3)


def test_plan_inputs_empty_list():
    with pytest.raises(NoInputFilesError):
        plan_inputs([])


def test_no_input_files_error_is_an_os_error():
    with pytest.raises(OSError):
        plan_inputs([])


def test_plan_inputs_missing_file(tmp_path, write_inputs):
    (good,) = write_inputs({"a.json": "{}\n"})
    missing = tmp_path / "missing.json"

    with pytest.raises(InputFileError) as exc_info:
        plan_inputs([good, missing])

    assert exc_info.value.path == str(missing)
    assert isinstance(exc_info.value, OSError)
    assert "missing.json" in str(exc_info.value)


def test_plan_inputs_rejects_directory(tmp_path):
    with pytest.raises(InputFileError, match="not a regular file"):
        plan_inputs([tmp_path])


@pytest.mark.skipif(
    not hasattr(os, "geteuid") or os.geteuid() == 0,
    reason="root can read files without read permission",
)
def test_plan_inputs_unreadable_file(write_inputs):
    (path,) = write_inputs({"secret.json": "{}\n"})
    path.chmod(0)
    try:
        with pytest.raises(InputFileError, match="permission denied"):
            plan_inputs([path])
    finally:
        path.chmod(stat.S_IRUSR | stat.S_IWUSR)


@pytest.mark.parametrize(
    "total,expected",
    [
        (0, MIN_CHUNK_SIZE),
        (10 * 1024 * 1024, MIN_CHUNK_SIZE),
        (256 * 1024 * 1024, 256 * 1024),
        (1024 * 1024 * 1024, MAX_CHUNK_SIZE),
        (50 * 1024 * 1024 * 1024, MAX_CHUNK_SIZE),
    ],
)
def test_optimal_chunk_size_scales_and_clamps(total, expected):
    assert optimal_chunk_size(total) == expected


def test_optimal_chunk_size_never_shrinks_as_input_grows():
    sizes = [optimal_chunk_size(2**n) for n in range(0, 40)]
    assert sizes == sorted(sizes)


@pytest.mark.parametrize(
    "override,expected",
    [(1, MIN_CHUNK_SIZE), (200_000, 200_000), (10**9, MAX_CHUNK_SIZE)],
)
def test_optimal_chunk_size_override_is_clamped(override, expected):
    assert optimal_chunk_size(0, override) == expected
