"""
どこで: `demo/basic.py`（ヘッドレスデモ）。
何を: 10 色のグラデーションを「レイヤー付き/なし」の 2 列に並べ、最上位レイヤーの白い四角を重ねる。
なぜ: レイヤー付きの列は生成順に関係なくレイヤー順に、レイヤーなしの列は z=0 のまま描かれることを
      描画順ログで確認するため（y-sort は無効）。

実行: `python demo/basic.py`
"""

from __future__ import annotations

import colorsys
import logging
from dataclasses import dataclass

import numpy as np

from api import (
    SceneGraph,
    Sprite,
    SpriteLayerOptions,
    SpriteLayerPlugin,
    Transform,
    default_frame_clock,
)
from common import setup_default_logging

logger = logging.getLogger("demo.basic")


@dataclass(frozen=True, order=True)
class DemoLayer:
    """`top=True` なら最上位、そうでなければ `middle / 256` の深さ。

    比較はフィールド順（top → middle）なので、どの Middle よりも Top が大きい。
    """

    top: bool = False
    middle: int = 0

    def base_depth(self) -> float:
        if self.top:
            return 100.0
        return self.middle / 256.0


TOP = DemoLayer(top=True)


def spawn_sprites(scene: SceneGraph, rng: np.random.Generator) -> None:
    # グラデーションを作ってシャッフル
    entries = []
    for i in range(10):
        r, g, b = colorsys.hls_to_rgb(i / 10.0, 0.5, 0.5)
        entries.append((DemoLayer(middle=i), (r, g, b, 1.0), (10.0 * i, 10.0 * i)))
    order = rng.permutation(len(entries))

    for k in order:
        layer, color, (x, y) = entries[int(k)]
        scene.spawn(
            Sprite(f"plain-{layer.middle}", color, (60.0, 60.0)),
            Transform.from_xyz(x - 80.0, y),
        )
        scene.spawn(
            Sprite(f"layered-{layer.middle}", color, (60.0, 60.0)),
            Transform.from_xyz(x + 80.0, y),
            layer,
        )

    white = (1.0, 1.0, 1.0, 1.0)
    scene.spawn(Sprite("white-plain", white, (30.0, 30.0)), Transform.from_xyz(-50.0, 0.0))
    scene.spawn(Sprite("white-top", white, (30.0, 30.0)), Transform.from_xyz(110.0, 0.0), TOP)


def main() -> None:
    setup_default_logging("INFO")
    scene = SceneGraph()
    clock, extraction = default_frame_clock(scene)
    SpriteLayerPlugin(DemoLayer, options=SpriteLayerOptions(y_sort=False)).build(clock, scene)
    spawn_sprites(scene, np.random.default_rng())

    clock.tick(1 / 60)
    for s in extraction.frame:
        logger.info("%-12s x=%7.1f y=%6.1f z=%9.5f", s.name, s.x, s.y, s.z)


if __name__ == "__main__":
    main()
