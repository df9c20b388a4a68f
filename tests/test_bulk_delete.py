"""Tests for chunked deletion."""

import math

import pytest

from bulk_delete import DELETE_BATCH_SIZE, chunked, delete_in_batches
from exceptions import BulkDeleteError


class RecordingCommit:
    """Commits chunks and remembers them; can fail on a given call."""

    def __init__(self, fail_on=None):
        self.fail_on = fail_on
        self.chunks = []

    def __call__(self, chunk):
        if self.fail_on is not None and len(self.chunks) + 1 == self.fail_on:
            raise RuntimeError("quota exceeded")
        self.chunks.append(list(chunk))
        return len(chunk)


def test_default_batch_size_stays_under_store_limit():
    assert DELETE_BATCH_SIZE == 450
    assert DELETE_BATCH_SIZE < 500


@pytest.mark.parametrize("n, size", [(0, 450), (1, 450), (450, 450), (451, 450), (1000, 450), (7, 3), (9, 3)])
def test_commit_count_is_ceil_n_over_b(n, size):
    commit = RecordingCommit()
    deleted = delete_in_batches(list(range(n)), commit, batch_size=size)

    assert deleted == n
    assert len(commit.chunks) == math.ceil(n / size)
    assert all(len(c) <= size for c in commit.chunks)


def test_chunks_are_consecutive_and_in_order():
    commit = RecordingCommit()
    delete_in_batches(list(range(10)), commit, batch_size=4)
    assert commit.chunks == [[0, 1, 2, 3], [4, 5, 6, 7], [8, 9]]


def test_failure_keeps_earlier_chunks_and_skips_later():
    commit = RecordingCommit(fail_on=2)

    with pytest.raises(BulkDeleteError) as info:
        delete_in_batches(list(range(10)), commit, batch_size=4, label="batches")

    assert commit.chunks == [[0, 1, 2, 3]]
    assert info.value.deleted == 4
    assert info.value.collection == "batches"
    assert isinstance(info.value.__cause__, RuntimeError)


def test_count_comes_from_commit():
    deleted = delete_in_batches(list(range(5)), lambda chunk: len(chunk) - 1, batch_size=2)
    assert deleted == 2


def test_chunked_rejects_zero_size():
    with pytest.raises(ValueError):
        list(chunked([1, 2], 0))
