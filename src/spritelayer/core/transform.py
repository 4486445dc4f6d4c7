"""
どこで: `spritelayer.core` の変換コンポーネント。
何を: 親相対のローカル変換 `Transform` と、ワールド空間の 4x4 行列 `GlobalTransform`。
なぜ: 伝播（ホスト側）と深度書き込み（エンジン側）が同じ行列表現を共有するため。

データモデル（不変条件）:
- `Transform.translation/scale`: float32 ndarray (3,)。`rotation` は Z 軸回りのラジアン。
- `GlobalTransform.matrix`: float32 ndarray (4, 4)。平行移動は `matrix[:3, 3]`。
- 二次ソート軸（y-sort）は `matrix[1, 3]`、深度（z）は `matrix[2, 3]`。
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Iterable

import numpy as np


def _vec3(value: Iterable[float] | np.ndarray) -> np.ndarray:
    arr = np.asarray(value, dtype=np.float32).reshape(-1)
    if arr.shape != (3,):
        raise ValueError(f"expected 3 components, got shape {arr.shape}")
    return arr.copy()


@dataclass
class Transform:
    """親相対のローカル変換（平行移動・Z 回転・スケール）。"""

    translation: np.ndarray = field(default_factory=lambda: np.zeros(3, dtype=np.float32))
    rotation: float = 0.0
    scale: np.ndarray = field(default_factory=lambda: np.ones(3, dtype=np.float32))

    def __post_init__(self) -> None:
        self.translation = _vec3(self.translation)
        self.scale = _vec3(self.scale)
        self.rotation = float(self.rotation)

    @classmethod
    def from_xyz(cls, x: float, y: float, z: float = 0.0) -> "Transform":
        return cls(translation=np.array([x, y, z], dtype=np.float32))

    def compute_matrix(self) -> np.ndarray:
        """スケール → 回転 → 移動 の順で合成した 4x4 行列を返す。"""
        c, s = math.cos(self.rotation), math.sin(self.rotation)
        sx, sy, sz = (float(v) for v in self.scale)
        m = np.eye(4, dtype=np.float32)
        m[0, 0], m[0, 1] = c * sx, -s * sy
        m[1, 0], m[1, 1] = s * sx, c * sy
        m[2, 2] = sz
        m[:3, 3] = self.translation
        return m


class GlobalTransform:
    """ワールド空間の変換。伝播結果を保持し、深度成分のみエンジンが上書きする。

    `matrix` は描画が読む行列（深度書き込み後）、`propagated` は伝播が最後に書いた行列。
    伝播は `propagated` と比較するため、深度の上書きは次フレームの「移動」とみなされない。
    """

    __slots__ = ("matrix", "propagated")

    def __init__(self, matrix: np.ndarray | None = None) -> None:
        if matrix is None:
            self.matrix = np.eye(4, dtype=np.float32)
        else:
            m = np.asarray(matrix, dtype=np.float32)
            if m.shape != (4, 4):
                raise ValueError(f"GlobalTransform expects a 4x4 matrix, got {m.shape}")
            self.matrix = m.copy()
        self.propagated = self.matrix.copy()

    @classmethod
    def from_translation(cls, x: float, y: float, z: float = 0.0) -> "GlobalTransform":
        gt = cls()
        gt.matrix[:3, 3] = (x, y, z)
        gt.propagated[:3, 3] = (x, y, z)
        return gt

    def set_propagated(self, world: np.ndarray) -> None:
        """伝播結果で行列全体を置き換える（深度も伝播値に戻る）。"""
        self.matrix[:] = world
        self.propagated[:] = world

    @property
    def translation(self) -> np.ndarray:
        return self.matrix[:3, 3].copy()

    @property
    def y(self) -> float:
        return float(self.matrix[1, 3])

    @property
    def z(self) -> float:
        return float(self.matrix[2, 3])

    def set_depth(self, z: float) -> None:
        """深度成分のみを書き換える（平行移動 x/y・回転・スケールは保持）。"""
        self.matrix[2, 3] = np.float32(z)

    def __eq__(self, other: object) -> bool:
        return isinstance(other, GlobalTransform) and np.array_equal(self.matrix, other.matrix)

    def __repr__(self) -> str:
        x, y, z = (float(v) for v in self.matrix[:3, 3])
        return f"GlobalTransform(x={x:g}, y={y:g}, z={z:g})"


__all__ = ["Transform", "GlobalTransform"]
