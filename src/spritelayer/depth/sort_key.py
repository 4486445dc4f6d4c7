"""
どこで: `spritelayer.depth` の y-sort キー。
何を: 二次ソート座標 y を全順序のキーへ写像する `SortKey` とそのベクトル版 `sort_keys`。
なぜ: 「y が大きいほど奥（先に描く）」という規約を 1 か所で固定するため。

規約（互換性のため変更不可）:
- キー昇順 == y 降順。y が大きいオブジェクトほど小さいキー = 先に並ぶ = 奥に描かれる。
- 同じ y は同じキー。キー自体にタイブレークは持たない（安定性はソート側の責務）。
- NaN は最小キー（+inf の y よりも前）。
- 位置を持たないオブジェクトは y = 0.0 とみなす。
"""

from __future__ import annotations

import functools
import math
from typing import Sequence

import numpy as np

# +inf の y 用キー。float32 由来の有限値を反転したどのキーよりも小さく、NaN の -inf よりは大きい。
_POS_INF_KEY = -float(np.finfo(np.float64).max)


def key_value(y: float | None) -> float:
    """単一の y をキー値（float）へ変換する。"""
    if y is None:
        return -0.0
    y = float(y)
    if math.isnan(y):
        return -math.inf
    if y == math.inf:
        return _POS_INF_KEY
    return -y


def sort_keys(ys: np.ndarray | Sequence[float | None]) -> np.ndarray:
    """y の列を float64 のキー配列へ変換する（`key_value` と同じ順序）。"""
    if isinstance(ys, np.ndarray) and ys.dtype != object:
        arr = ys.astype(np.float64)
    else:
        arr = np.array([0.0 if y is None else float(y) for y in ys], dtype=np.float64)
    keys = -arr
    keys[arr == np.inf] = _POS_INF_KEY
    keys[np.isnan(arr)] = -np.inf
    return keys


@functools.total_ordering
class SortKey:
    """y-sort 用の全順序キー。"""

    __slots__ = ("value",)

    def __init__(self, y: float | None = None) -> None:
        self.value = key_value(y)

    @classmethod
    def missing(cls) -> "SortKey":
        """位置を持たないオブジェクト用の番兵キー。"""
        return cls(None)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, SortKey):
            return NotImplemented
        return self.value == other.value

    def __lt__(self, other: "SortKey") -> bool:
        if not isinstance(other, SortKey):
            return NotImplemented
        return self.value < other.value

    def __hash__(self) -> int:
        # -0.0 と 0.0 は等価なので同じハッシュになる
        return hash(self.value)

    def __repr__(self) -> str:
        return f"SortKey({self.value!r})"


__all__ = ["SortKey", "key_value", "sort_keys"]
