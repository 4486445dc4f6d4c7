"""
どこで: `api` 入口（高レベル公開 API）。
何を: プラグイン・レイヤー型 Protocol・オプション・シーンストア・変換・フレームクロックを再輸出。
なぜ: 利用者が単一名前空間からシーン構築→プラグイン組み込み→フレーム駆動まで完結できるようにするため。

Usage:
    from enum import Enum
    from api import SceneGraph, SpriteLayerPlugin, Sprite, Transform, default_frame_clock

    class Layer(Enum):
        BACKGROUND = 0
        ACTORS = 10
        UI = 100

        def base_depth(self) -> float:
            return float(self.value)

    scene = SceneGraph()
    clock, extraction = default_frame_clock(scene)
    SpriteLayerPlugin(Layer).build(clock, scene)

    scene.spawn(Sprite("hero"), Transform.from_xyz(0, 10), Layer.ACTORS)
    clock.tick(1 / 60)
    extraction.frame  # 奥→手前の描画順
"""

from spritelayer.core.extract import ExtractedSprite, RenderExtraction, Sprite, extract_sprites
from spritelayer.core.frame_clock import FrameClock, ScheduleError
from spritelayer.core.propagation import TransformPropagation, propagate_transforms
from spritelayer.core.scene import Entity, HierarchySnapshot, SceneGraph
from spritelayer.core.transform import GlobalTransform, Transform
from spritelayer.depth import (
    DepthManaged,
    DepthStrategy,
    LayerIndex,
    PassPhase,
    PassReport,
    SortKey,
    SpriteLayerOptions,
    SpriteLayerSystem,
)
from spritelayer.plugin import SPRITE_LAYER_STAGE, SpriteLayerPlugin, default_frame_clock
from spritelayer.runtime import SortTaskError, SortWorkerPool

__all__ = [
    # メインAPI
    "SpriteLayerPlugin",
    "SpriteLayerOptions",
    "DepthStrategy",
    "LayerIndex",
    "default_frame_clock",
    # シーン（ホスト側）
    "SceneGraph",
    "Entity",
    "HierarchySnapshot",
    "Transform",
    "GlobalTransform",
    "Sprite",
    "ExtractedSprite",
    "extract_sprites",
    "propagate_transforms",
    "TransformPropagation",
    "RenderExtraction",
    "FrameClock",
    "ScheduleError",
    # 高度な使用
    "SpriteLayerSystem",
    "PassPhase",
    "PassReport",
    "DepthManaged",
    "SortKey",
    "SortWorkerPool",
    "SortTaskError",
    "SPRITE_LAYER_STAGE",
]

# バージョン情報
__version__ = "2026.10"
