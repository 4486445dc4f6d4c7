"""
どこで: `spritelayer` のプラグイン層。
何を: `SpriteLayerPlugin` が深度パスを FrameClock の「伝播の後・抽出の前」に挿入する。
なぜ: y-sort には伝播済みの y が必要で、描画抽出は書き込み済みの z を読む必要があるため。

通常、アプリ全体で 1 つのレイヤー型に対して 1 度だけ `build()` する。
既定では y-sort が有効。無効にするにはホストが `SpriteLayerOptions(y_sort=False)` を渡すか、
`system.options.y_sort = False` と書き換える。
"""

from __future__ import annotations

from typing import Generic, TypeVar

from .core.extract import RenderExtraction
from .core.frame_clock import RENDER_EXTRACT, TRANSFORM_PROPAGATE, FrameClock
from .core.propagation import TransformPropagation
from .core.scene import SceneGraph
from .depth.layer_index import LayerIndex
from .depth.options import DepthStrategy, SpriteLayerOptions
from .depth.system import SpriteLayerSystem
from .runtime.worker import SortWorkerPool

L = TypeVar("L", bound=LayerIndex)

SPRITE_LAYER_STAGE = "sprite_layer"


class SpriteLayerPlugin(Generic[L]):
    """レイヤー型 `L` の深度パスをフレームクロックへ組み込む。"""

    def __init__(
        self,
        layer_type: type[L],
        *,
        options: SpriteLayerOptions | None = None,
        strategy: DepthStrategy | str | None = None,
        pool: SortWorkerPool | None = None,
    ) -> None:
        self.layer_type = layer_type
        self.options = options if options is not None else SpriteLayerOptions()
        self.strategy = strategy
        self.pool = pool

    def build(self, clock: FrameClock, scene: SceneGraph) -> SpriteLayerSystem[L]:
        """システムを生成して `transform_propagate` と `render_extract` の間に挿入する。"""
        system: SpriteLayerSystem[L] = SpriteLayerSystem(
            self.layer_type,
            self.options,
            scene=scene,
            strategy=self.strategy,
            pool=self.pool,
        )
        clock.insert(SPRITE_LAYER_STAGE, system, after=TRANSFORM_PROPAGATE, before=RENDER_EXTRACT)
        return system


def default_frame_clock(scene: SceneGraph) -> tuple[FrameClock, RenderExtraction]:
    """伝播と抽出だけを持つ FrameClock を組み立てる（ホスト側の最小構成）。"""
    extraction = RenderExtraction(scene)
    clock = FrameClock(
        [
            (TRANSFORM_PROPAGATE, TransformPropagation(scene)),
            (RENDER_EXTRACT, extraction),
        ]
    )
    return clock, extraction


__all__ = ["SpriteLayerPlugin", "SPRITE_LAYER_STAGE", "default_frame_clock"]
