"""
どこで: `spritelayer.core` の描画抽出（ホスト側の協調者）。
何を: `Sprite` と `GlobalTransform` を持つエンティティを z 昇順（奥→手前）に並べて取り出す。
なぜ: 深度エンジンの出力がそのまま描画順になることを、描画系なしで確認できるようにするため。
"""

from __future__ import annotations

from dataclasses import dataclass

from .scene import Entity, SceneGraph
from .transform import GlobalTransform

RGBA = tuple[float, float, float, float]


@dataclass
class Sprite:
    """描画対象であることを示す最小コンポーネント。"""

    name: str = ""
    color: RGBA = (1.0, 1.0, 1.0, 1.0)
    size: tuple[float, float] = (1.0, 1.0)


@dataclass(frozen=True)
class ExtractedSprite:
    entity: Entity
    name: str
    x: float
    y: float
    z: float


def extract_sprites(scene: SceneGraph) -> list[ExtractedSprite]:
    """描画順（z 昇順、同値は index 順）のスプライト列を返す。"""
    out: list[ExtractedSprite] = []
    for entity, sprite in scene.query(Sprite):
        gt = scene.get(entity, GlobalTransform)
        if gt is None:
            continue
        x, y, z = (float(v) for v in gt.matrix[:3, 3])
        out.append(ExtractedSprite(entity=entity, name=sprite.name, x=x, y=y, z=z))
    out.sort(key=lambda s: (s.z, s.entity.index))
    return out


class RenderExtraction:
    """毎フレーム抽出し、最新の描画列を `frame` に保持する Tickable。"""

    def __init__(self, scene: SceneGraph) -> None:
        self._scene = scene
        self.frame: list[ExtractedSprite] = []
        self.frame_id = 0

    def tick(self, dt: float) -> None:
        self.frame = extract_sprites(self._scene)
        self.frame_id += 1


__all__ = ["Sprite", "ExtractedSprite", "extract_sprites", "RenderExtraction"]
