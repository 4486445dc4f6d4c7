"""
どこで: `spritelayer.runtime` の安定ソート。
何を: キー配列の安定 argsort を、単一スレッドまたはワーカプール上のチャンク分割 + 安定マージで行う。
なぜ: 数万要素の y-sort をフレーム予算内に収めつつ、並列版が逐次版と完全に同じ順序を返すため。

安定性の規則:
- 各チャンクは `np.argsort(kind="stable")`。
- マージは隣接ランの対ごとに行い、キーが等しければ左（先に現れた）ランを優先する。
  これにより結果は全体の `np.argsort(kind="stable")` とビット一致する。
"""

from __future__ import annotations

import numpy as np
from numba import njit  # type: ignore[attr-defined]

from common import settings

from .worker import SortWorkerPool


@njit(cache=True)
def _merge_runs_njit(
    keys_a: np.ndarray,
    idx_a: np.ndarray,
    keys_b: np.ndarray,
    idx_b: np.ndarray,
    out_keys: np.ndarray,
    out_idx: np.ndarray,
) -> None:
    na = keys_a.shape[0]
    nb = keys_b.shape[0]
    i = 0
    j = 0
    k = 0
    while i < na and j < nb:
        # 同値は a を優先（安定）
        if keys_b[j] < keys_a[i]:
            out_keys[k] = keys_b[j]
            out_idx[k] = idx_b[j]
            j += 1
        else:
            out_keys[k] = keys_a[i]
            out_idx[k] = idx_a[i]
            i += 1
        k += 1
    while i < na:
        out_keys[k] = keys_a[i]
        out_idx[k] = idx_a[i]
        i += 1
        k += 1
    while j < nb:
        out_keys[k] = keys_b[j]
        out_idx[k] = idx_b[j]
        j += 1
        k += 1


def merge_runs(
    a: tuple[np.ndarray, np.ndarray], b: tuple[np.ndarray, np.ndarray]
) -> tuple[np.ndarray, np.ndarray]:
    """ソート済みラン (keys, idx) を 2 本マージする。"""
    keys_a, idx_a = a
    keys_b, idx_b = b
    n = keys_a.shape[0] + keys_b.shape[0]
    out_keys = np.empty(n, dtype=keys_a.dtype)
    out_idx = np.empty(n, dtype=np.int64)
    kernel = _merge_runs_njit if settings.get().USE_NUMBA else _merge_runs_njit.py_func
    kernel(keys_a, idx_a, keys_b, idx_b, out_keys, out_idx)
    return out_keys, out_idx


def _sort_chunk(_index: int, chunk: tuple[np.ndarray, int]) -> tuple[np.ndarray, np.ndarray]:
    keys, start = chunk
    local = np.argsort(keys, kind="stable")
    return keys[local], local.astype(np.int64) + start


def stable_argsort(
    keys: np.ndarray,
    pool: SortWorkerPool | None = None,
    *,
    min_items: int | None = None,
) -> np.ndarray:
    """キーの安定 argsort を返す。

    `pool` があり要素数が `min_items` 以上のとき、ワーカ数ぶんのチャンクに分けて並列ソートする。
    """
    keys = np.ascontiguousarray(keys)
    n = keys.shape[0]
    if min_items is None:
        min_items = settings.get().PARALLEL_MIN_ITEMS
    if pool is None or n < max(2, min_items):
        return np.argsort(keys, kind="stable").astype(np.int64)

    n_chunks = max(2, pool.num_workers)
    bounds = np.linspace(0, n, n_chunks + 1).astype(np.int64)
    chunks = [
        (keys[bounds[i] : bounds[i + 1]], int(bounds[i]))
        for i in range(n_chunks)
        if bounds[i + 1] > bounds[i]
    ]
    runs = pool.map_chunks(_sort_chunk, chunks)
    while len(runs) > 1:
        merged = [merge_runs(runs[i], runs[i + 1]) for i in range(0, len(runs) - 1, 2)]
        if len(runs) % 2:
            merged.append(runs[-1])
        runs = merged
    return runs[0][1]


__all__ = ["stable_argsort", "merge_runs"]
