"""
どこで: `spritelayer.depth` のフレームパス。
何を: 1 フレーム分の「レイヤー解決 → 深度割り当て → 変換書き込み」を順に実行する `SpriteLayerSystem`。
なぜ: 3 段の処理と、フレームをまたいで保持する最小限の状態（容量ヒント・管理マーカー）を 1 か所に束ねるため。

状態遷移（1 パス）: Idle → Propagating → Assigning → Writing → Idle

前提:
- ワールド変換の伝播が完了した後、描画抽出の前に呼ばれること（`SpriteLayerPlugin` が保証）。
- パス中にホストがシーン構造を並行変更しないこと（未定義動作）。
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from enum import Enum
from typing import Generic, TypeVar

from ..core.scene import Entity, SceneGraph
from ..core.transform import GlobalTransform
from ..runtime.worker import SortWorkerPool
from .assigner import DepthAssigner, DepthMap
from .layer_index import LayerIndex
from .options import DepthStrategy, SpriteLayerOptions
from .resolver import LayerResolver
from .writer import TransformWriter

L = TypeVar("L", bound=LayerIndex)

logger = logging.getLogger(__name__)


class PassPhase(Enum):
    IDLE = "idle"
    PROPAGATING = "propagating"
    ASSIGNING = "assigning"
    WRITING = "writing"


@dataclass(frozen=True)
class PassReport:
    """1 パスの集計（ログ/テスト用）。"""

    resolved: int
    written: int
    skipped: int
    cleared: int
    y_sort: bool
    strategy: DepthStrategy
    elapsed_ms: float


class SpriteLayerSystem(Generic[L]):
    """レイヤー型 `L` 1 種類に対する深度解決パス。"""

    def __init__(
        self,
        layer_type: type[L],
        options: SpriteLayerOptions | None = None,
        *,
        scene: SceneGraph | None = None,
        strategy: DepthStrategy | str | None = None,
        pool: SortWorkerPool | None = None,
    ) -> None:
        self.layer_type = layer_type
        self.options = options if options is not None else SpriteLayerOptions()
        self._scene = scene
        self._resolver: LayerResolver[L] = LayerResolver()
        self._assigner: DepthAssigner[L] = DepthAssigner(strategy, pool)
        self._writer = TransformWriter()
        self._phase = PassPhase.IDLE
        self.last_depths: DepthMap | None = None
        self.last_report: PassReport | None = None

    @property
    def phase(self) -> PassPhase:
        return self._phase

    @property
    def strategy(self) -> DepthStrategy:
        return self._assigner.strategy

    @property
    def resolver(self) -> LayerResolver[L]:
        return self._resolver

    def run(self, scene: SceneGraph | None = None) -> PassReport:
        """1 フレーム分の深度解決を実行する。"""
        if self._phase is not PassPhase.IDLE:
            raise RuntimeError(f"depth pass already in progress (phase={self._phase.value})")
        target = scene if scene is not None else self._scene
        if target is None:
            raise ValueError("SpriteLayerSystem.run() needs a scene")

        # オプションはパス開始時に 1 度だけ読む
        y_sort = bool(self.options.y_sort)
        t0 = time.perf_counter()
        try:
            self._phase = PassPhase.PROPAGATING
            hierarchy = target.snapshot_hierarchy()
            explicit = dict(target.query(self.layer_type))
            layers = self._resolver.resolve(hierarchy.roots, hierarchy, explicit)

            self._phase = PassPhase.ASSIGNING
            depths = self._assigner.assign(layers, _world_y_lookup(target), y_sort)

            self._phase = PassPhase.WRITING
            written = self._writer.apply(depths, target)
        finally:
            self._phase = PassPhase.IDLE

        report = PassReport(
            resolved=len(layers),
            written=written.written,
            skipped=written.skipped,
            cleared=written.cleared,
            y_sort=y_sort,
            strategy=self.strategy,
            elapsed_ms=(time.perf_counter() - t0) * 1000.0,
        )
        self.last_depths = depths
        self.last_report = report
        logger.debug(
            "depth pass: resolved=%d written=%d skipped=%d cleared=%d y_sort=%s (%.2f ms)",
            report.resolved,
            report.written,
            report.skipped,
            report.cleared,
            report.y_sort,
            report.elapsed_ms,
        )
        return report

    # -------- Tickable interface --------
    def tick(self, dt: float) -> None:
        self.run()


def _world_y_lookup(scene: SceneGraph):
    def lookup(entity: Entity) -> float | None:
        gt = scene.get(entity, GlobalTransform)
        return None if gt is None else gt.y

    return lookup


__all__ = ["PassPhase", "PassReport", "SpriteLayerSystem"]
