"""
どこで: `spritelayer.depth` の深度割り当て。
何を: 実効レイヤー表と各オブジェクトの y から、最終深度 `z = base_depth(layer) + offset` を算出する。
なぜ: レイヤー間の前後関係を保ったまま、同一レイヤー内を y で並べる（擬似 2.5D）ため。

方式（`DepthStrategy`）:
- y-sort 無効: `z = base_depth(layer)`。
- GLOBAL: 全体を 1 回安定ソートし、i 番目（0 始まり, N 個）に `i * (1 / N)` を加算。
  オフセットは全体順位に比例するため、レイヤー間隔が 1.0 を超えることが前提（丸めない）。
- BUCKET: レイヤーごとに安定ソートし、i 番目（m 個中）に `i / (m + 1)` を加算。
  1 個だけのバケットはオフセット 0 で、ちょうど `base_depth` になる。

精度について:
- 計算は float32。N（またはバケットサイズ）と基準深度の大きさが 2^23 に近づくと、
  隣接オフセットが同じ値に丸められて深度が一致しうる。これは許容された限界で特別扱いしない。
"""

from __future__ import annotations

import logging
from typing import Callable, Generic, Hashable, Iterator, Sequence, TypeVar

import numpy as np

from common import settings

from ..core.scene import Entity
from ..runtime.sort import stable_argsort
from ..runtime.worker import SortWorkerPool
from .layer_index import LayerIndex
from .options import DepthStrategy
from .resolver import EffectiveLayerMap
from .sort_key import sort_keys

L = TypeVar("L", bound=LayerIndex)

PositionLookup = Callable[[Entity], "float | None"]

logger = logging.getLogger(__name__)


class DepthMap:
    """エンティティ → 最終深度（float32）。"""

    __slots__ = ("entities", "depths", "_index")

    def __init__(self, entities: list[Entity], depths: np.ndarray) -> None:
        if len(entities) != depths.shape[0]:
            raise ValueError("entities and depths must have the same length")
        self.entities = entities
        self.depths = depths
        self._index: dict[Entity, int] | None = None

    def _lookup(self) -> dict[Entity, int]:
        if self._index is None:
            self._index = {e: i for i, e in enumerate(self.entities)}
        return self._index

    def __len__(self) -> int:
        return len(self.entities)

    def __contains__(self, entity: object) -> bool:
        return entity in self._lookup()

    def get(self, entity: Entity) -> float | None:
        i = self._lookup().get(entity)
        return None if i is None else float(self.depths[i])

    def items(self) -> Iterator[tuple[Entity, float]]:
        for e, z in zip(self.entities, self.depths):
            yield e, float(z)

    def as_dict(self) -> dict[Entity, float]:
        return dict(self.items())


def base_depths(layers: Sequence[LayerIndex]) -> np.ndarray:
    """各レイヤー値の `base_depth()` を float32 配列で返す（同じ値は 1 度だけ評価）。"""
    cache: dict[Hashable, np.float32] = {}
    out = np.empty(len(layers), dtype=np.float32)
    for i, layer in enumerate(layers):
        z = cache.get(layer)
        if z is None:
            z = cache[layer] = np.float32(layer.base_depth())
        out[i] = z
    return out


class DepthAssigner(Generic[L]):
    """y-sort の有無と方式に応じて最終深度を算出する。"""

    def __init__(
        self,
        strategy: DepthStrategy | str | None = None,
        pool: SortWorkerPool | None = None,
        *,
        parallel: bool | None = None,
        parallel_min_items: int | None = None,
    ) -> None:
        cfg = settings.get()
        self.strategy = DepthStrategy(strategy) if strategy is not None else DepthStrategy.from_settings()
        self._pool = pool
        self._parallel = cfg.PARALLEL_Y_SORT if parallel is None else bool(parallel)
        self._min_items = cfg.PARALLEL_MIN_ITEMS if parallel_min_items is None else int(parallel_min_items)

    def assign(
        self,
        effective_layers: EffectiveLayerMap[L],
        position_lookup: PositionLookup,
        y_sort_enabled: bool,
    ) -> DepthMap:
        entities = list(effective_layers.entities)
        base = base_depths(effective_layers.layers)
        n = len(entities)
        if not y_sort_enabled or n == 0:
            return DepthMap(entities, base)

        ys = np.empty(n, dtype=np.float64)
        for i, entity in enumerate(entities):
            y = position_lookup(entity)
            ys[i] = 0.0 if y is None else y
        keys = sort_keys(ys)

        if self.strategy is DepthStrategy.GLOBAL:
            offsets = self._global_offsets(keys)
        else:
            offsets = self._bucket_offsets(keys, effective_layers.layers)
        return DepthMap(entities, (base + offsets).astype(np.float32))

    # ---- strategies ----------------------------------------------------
    def _argsort(self, keys: np.ndarray) -> np.ndarray:
        # most of the expense is here
        pool = self._pool if self._parallel else None
        return stable_argsort(keys, pool, min_items=self._min_items)

    def _global_offsets(self, keys: np.ndarray) -> np.ndarray:
        n = keys.shape[0]
        order = self._argsort(keys)
        scale = np.float32(1.0) / np.float32(n)
        offsets = np.empty(n, dtype=np.float32)
        offsets[order] = np.arange(n, dtype=np.float32) * scale
        return offsets

    def _bucket_offsets(self, keys: np.ndarray, layers: Sequence[L]) -> np.ndarray:
        buckets: dict[L, list[int]] = {}
        for i, layer in enumerate(layers):
            buckets.setdefault(layer, []).append(i)
        offsets = np.empty(keys.shape[0], dtype=np.float32)
        for members in buckets.values():
            idx = np.asarray(members, dtype=np.int64)
            m = idx.shape[0]
            order = self._argsort(keys[idx])
            offsets[idx[order]] = np.arange(m, dtype=np.float32) / np.float32(m + 1)
        logger.debug("bucket y-sort: %d bucket(s) over %d entities", len(buckets), keys.shape[0])
        return offsets


__all__ = ["DepthAssigner", "DepthMap", "PositionLookup", "base_depths"]
