from __future__ import annotations

import pickle

import numpy as np
import pytest

from common import settings
from spritelayer.runtime.sort import merge_runs, stable_argsort
from spritelayer.runtime.worker import SortTaskError, SortWorkerPool


def test_inline_pool_maps_in_order(inline_pool: SortWorkerPool) -> None:
    assert inline_pool.inline
    out = inline_pool.map_chunks(lambda i, c: (i, c * 2), [1, 2, 3])
    assert out == [(0, 2), (1, 4), (2, 6)]


@pytest.mark.integration
def test_thread_pool_maps_in_order(thread_pool: SortWorkerPool) -> None:
    assert not thread_pool.inline
    out = thread_pool.map_chunks(lambda i, c: c + i, list(range(10)))
    assert out == [2 * i for i in range(10)]


def test_chunk_errors_are_wrapped(thread_pool: SortWorkerPool) -> None:
    def boom(i: int, c: int) -> int:
        if i == 1:
            raise ZeroDivisionError("boom")
        return c

    with pytest.raises(SortTaskError) as ei:
        thread_pool.map_chunks(boom, [0, 1, 2])
    assert ei.value.chunk_index == 1
    assert isinstance(ei.value.original, ZeroDivisionError)


def test_sort_task_error_pickles() -> None:
    err = SortTaskError(3, ValueError("x"))
    back = pickle.loads(pickle.dumps(err))
    assert isinstance(back, SortTaskError)
    assert str(back) == str(err)


def test_close_is_idempotent() -> None:
    pool = SortWorkerPool(num_workers=2)
    pool.close()
    pool.close()
    assert pool.closed
    with pytest.raises(RuntimeError):
        pool.map_chunks(lambda i, c: c, [1])


def test_default_worker_count_from_settings(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("SL_SORT_WORKERS", "0")
    settings.reload_from_env()
    with SortWorkerPool() as pool:
        assert pool.num_workers == 0
        assert pool.inline


def test_merge_runs_prefers_left_on_ties() -> None:
    a = (np.array([1.0, 2.0, 2.0]), np.array([0, 1, 2], dtype=np.int64))
    b = (np.array([2.0, 3.0]), np.array([3, 4], dtype=np.int64))
    keys, idx = merge_runs(a, b)
    assert keys.tolist() == [1.0, 2.0, 2.0, 2.0, 3.0]
    assert idx.tolist() == [0, 1, 2, 3, 4]


@pytest.mark.parametrize("use_numba", [True, False])
def test_parallel_argsort_matches_stable_argsort(
    thread_pool: SortWorkerPool, monkeypatch: pytest.MonkeyPatch, use_numba: bool
) -> None:
    monkeypatch.setattr(settings.get(), "USE_NUMBA", use_numba)
    rng = np.random.default_rng(5)
    keys = rng.integers(-50, 50, size=10_001).astype(np.float64)
    keys[::97] = -np.inf
    expected = np.argsort(keys, kind="stable")
    got = stable_argsort(keys, thread_pool, min_items=2)
    np.testing.assert_array_equal(got, expected)


def test_small_inputs_skip_the_pool(inline_pool: SortWorkerPool) -> None:
    calls: list[int] = []
    original = inline_pool.map_chunks

    def spy(fn, chunks):
        calls.append(len(chunks))
        return original(fn, chunks)

    inline_pool.map_chunks = spy  # type: ignore[method-assign]
    keys = np.array([3.0, 1.0, 2.0])
    assert stable_argsort(keys, inline_pool, min_items=10).tolist() == [1, 2, 0]
    assert calls == []
    assert stable_argsort(keys, inline_pool, min_items=2).tolist() == [1, 2, 0]
    assert calls == [2]
