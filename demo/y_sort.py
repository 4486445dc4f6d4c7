"""
どこで: `demo/y_sort.py`（ヘッドレスデモ）。
何を: ランダムな 100 個の四角に対し、一定フレームごとにレイヤーを付け外しする。
なぜ: レイヤーが付いている間は y の大きいものほど奥に（y-sort）、外すと z=0 に戻ることを
      描画順ログで確認するため。

実行: `python demo/y_sort.py [frames] [toggle_every]`
"""

from __future__ import annotations

import colorsys
import logging
import sys
from enum import Enum

import numpy as np

from api import SceneGraph, Sprite, SpriteLayerPlugin, Transform, default_frame_clock
from common import setup_default_logging

logger = logging.getLogger("demo.y_sort")


class DemoLayer(Enum):
    MIDDLE = 1

    def base_depth(self) -> float:
        return 1.0


def spawn_squares(scene: SceneGraph, rng: np.random.Generator, count: int = 100) -> None:
    for i in range(count):
        r, g, b = colorsys.hls_to_rgb(float(rng.random()), 0.5, 0.5)
        x, y = rng.random(2) * 200.0 - 100.0
        scene.spawn(Sprite(f"sq{i:03d}", (r, g, b, 1.0), (50.0, 50.0)), Transform.from_xyz(x, y))


def set_layers(scene: SceneGraph, enabled: bool) -> None:
    entities = [e for e, _ in scene.query(Sprite)]
    for e in entities:
        if enabled:
            scene.insert(e, DemoLayer.MIDDLE)
        else:
            scene.remove(e, DemoLayer)
    logger.info("%s sprite layers", "Enabling" if enabled else "Disabling")


def main(frames: int = 120, toggle_every: int = 30) -> None:
    setup_default_logging("INFO")
    scene = SceneGraph()
    clock, extraction = default_frame_clock(scene)
    SpriteLayerPlugin(DemoLayer).build(clock, scene)
    spawn_squares(scene, np.random.default_rng())

    enabled = False
    for frame in range(frames):
        if frame and frame % toggle_every == 0:
            enabled = not enabled
            set_layers(scene, enabled)
        clock.tick(1 / 60)
        if frame % toggle_every == toggle_every - 1:
            back, front = extraction.frame[0], extraction.frame[-1]
            logger.info(
                "frame=%d layers=%s back=%s(y=%.1f z=%.4f) front=%s(y=%.1f z=%.4f)",
                frame,
                enabled,
                back.name,
                back.y,
                back.z,
                front.name,
                front.y,
                front.z,
            )


if __name__ == "__main__":
    args = [int(a) for a in sys.argv[1:3]]
    main(*args)
