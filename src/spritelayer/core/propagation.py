"""
どこで: `spritelayer.core` のワールド変換伝播（ホスト側の協調者）。
何を: ローカル `Transform` を親子階層に沿って合成し、`GlobalTransform` を更新する。
なぜ: 深度エンジンは伝播済みのワールド位置を入力とするため、エンジン単体でも
      フレームを駆動できる最小の伝播実装を用意する。

規則:
- world = parent_world @ local。親に `GlobalTransform` が無い（変換を持たないノード）場合は
  ローカル行列をそのままワールドとみなす。
- 前回の伝播結果（`GlobalTransform.propagated`）と行列が変わったときのみ書き換え、変更マークを付ける。
  深度エンジンが上書きした z は比較対象に含めない。
"""

from __future__ import annotations

import numpy as np

from .scene import Entity, SceneGraph
from .transform import GlobalTransform, Transform


def propagate_transforms(scene: SceneGraph) -> int:
    """全ルートから伝播し、更新した `GlobalTransform` の数を返す。"""
    updated = 0
    stack: list[tuple[Entity, np.ndarray | None]] = [(r, None) for r in reversed(scene.roots())]
    while stack:
        entity, parent_world = stack.pop()
        local = scene.get(entity, Transform)
        world: np.ndarray | None
        if local is None:
            world = None
        else:
            m = local.compute_matrix()
            world = m if parent_world is None else (parent_world @ m).astype(np.float32)
            current = scene.get(entity, GlobalTransform)
            if current is None:
                scene.insert(entity, GlobalTransform(world))
                updated += 1
            elif not np.array_equal(current.propagated, world):
                gt = scene.get_mut(entity, GlobalTransform)
                assert gt is not None
                gt.set_propagated(world)
                updated += 1
        for child in reversed(scene.children_of(entity)):
            stack.append((child, world))
    return updated


class TransformPropagation:
    """`propagate_transforms` を毎フレーム呼ぶ Tickable。"""

    def __init__(self, scene: SceneGraph) -> None:
        self._scene = scene

    def tick(self, dt: float) -> None:
        propagate_transforms(self._scene)


__all__ = ["propagate_transforms", "TransformPropagation"]
