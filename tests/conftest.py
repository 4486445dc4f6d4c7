"""共通フィクスチャ。

- 乱数シード固定
- 空シーン/伝播・抽出つきのフレームクロック
- インライン/スレッドのソートワーカプール
"""

from __future__ import annotations

from typing import Iterator

import numpy as np
import pytest

from common import settings
from spritelayer.core.extract import RenderExtraction
from spritelayer.core.frame_clock import FrameClock
from spritelayer.core.scene import SceneGraph
from spritelayer.plugin import default_frame_clock
from spritelayer.runtime.worker import SortWorkerPool


@pytest.fixture(scope="session", autouse=True)
def np_seed() -> None:
    """NumPy の乱数を固定。"""
    np.random.seed(12345)


@pytest.fixture(autouse=True)
def fresh_settings(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """環境変数由来の設定をテストごとに既定値へ戻す。"""
    for name in (
        "SL_PARALLEL_Y_SORT",
        "SL_PARALLEL_MIN_ITEMS",
        "SL_SORT_WORKERS",
        "SL_DEPTH_STRATEGY",
        "SL_USE_NUMBA",
        "SL_LOG_LEVEL",
    ):
        monkeypatch.delenv(name, raising=False)
    settings.reload_from_env()
    yield
    settings.reload_from_env()


@pytest.fixture()
def scene() -> SceneGraph:
    return SceneGraph()


@pytest.fixture()
def clock_and_frame(scene: SceneGraph) -> tuple[FrameClock, RenderExtraction]:
    return default_frame_clock(scene)


@pytest.fixture()
def inline_pool() -> Iterator[SortWorkerPool]:
    pool = SortWorkerPool(num_workers=0)
    yield pool
    pool.close()


@pytest.fixture()
def thread_pool() -> Iterator[SortWorkerPool]:
    pool = SortWorkerPool(num_workers=3)
    yield pool
    pool.close()
