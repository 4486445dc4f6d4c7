"""
深度パスのマイクロベンチ。

方針:
- 1 レイヤーに N 個のスプライトを置き、y-sort 有効/無効でフレーム全体（伝播→深度→抽出）を計測。
- 1 テスト 1 ベンチの原則に従い、parametrize で分割する。
"""

from __future__ import annotations

import numpy as np
import pytest

pytest.importorskip("pytest_benchmark")

from spritelayer.core.extract import Sprite
from spritelayer.core.scene import SceneGraph
from spritelayer.core.transform import Transform
from spritelayer.depth.options import SpriteLayerOptions
from spritelayer.plugin import SpriteLayerPlugin, default_frame_clock
from spritelayer.runtime.worker import SortWorkerPool
from tests._utils.layers import SpriteLayer

COUNTS = [1000, 2000, 4000, 8000, 16000]


def _setup(count: int, y_sort: bool, pool: SortWorkerPool | None):
    scene = SceneGraph()
    clock, _ = default_frame_clock(scene)
    SpriteLayerPlugin(SpriteLayer, options=SpriteLayerOptions(y_sort=y_sort), pool=pool).build(
        clock, scene
    )
    ys = np.random.random(count).astype(np.float32)
    for y in ys:
        scene.spawn(Sprite(), Transform.from_xyz(0.0, float(y)), SpriteLayer.MIDDLE)
    clock.tick(1 / 60)  # 初回の GlobalTransform 挿入を除外
    return clock


@pytest.mark.perf
@pytest.mark.parametrize("count", COUNTS)
def test_update_y_sorted(benchmark, count: int) -> None:  # type: ignore[no-untyped-def]
    clock = _setup(count, True, None)
    benchmark(clock.tick, 1 / 60)


@pytest.mark.perf
@pytest.mark.parametrize("count", COUNTS)
def test_update_unsorted(benchmark, count: int) -> None:  # type: ignore[no-untyped-def]
    clock = _setup(count, False, None)
    benchmark(clock.tick, 1 / 60)


@pytest.mark.perf
@pytest.mark.parametrize("count", COUNTS[-2:])
def test_update_y_sorted_parallel(benchmark, count: int) -> None:  # type: ignore[no-untyped-def]
    with SortWorkerPool(num_workers=4) as pool:
        clock = _setup(count, True, pool)
        benchmark(clock.tick, 1 / 60)
