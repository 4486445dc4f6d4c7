"""
どこで: `spritelayer.depth` の変換書き込み。
何を: 算出済み深度を各エンティティの `GlobalTransform` の z 成分へ書き込み、
      管理対象から外れたエンティティの古い深度を基準値へ戻す。
なぜ: 深度は描画専用の値であり、意味のある移動として下流の変更監視へ伝えないため。
      また、前フレームの深度が残って無関係なオブジェクトとの前後関係を壊さないため。
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from ..core.scene import SceneGraph
from ..core.transform import GlobalTransform
from .assigner import DepthMap

NEUTRAL_DEPTH = 0.0

logger = logging.getLogger(__name__)


class DepthManaged:
    """深度がエンジン管理下にあることを示すマーカーコンポーネント。"""

    __slots__ = ()

    def __repr__(self) -> str:
        return "DepthManaged()"


@dataclass(frozen=True)
class WriteReport:
    written: int
    skipped: int
    cleared: int


class TransformWriter:
    """`DepthMap` をシーンへ反映する。"""

    def __init__(self, baseline: float = NEUTRAL_DEPTH) -> None:
        self._baseline = float(baseline)

    def apply(self, depth_map: DepthMap, scene: SceneGraph) -> WriteReport:
        # 1) 前フレームから外れたものを基準値へ戻す
        cleared = 0
        for entity, _ in scene.query(DepthManaged):
            if entity in depth_map:
                continue
            gt = scene.bypass_change_detection(entity, GlobalTransform)
            if gt is not None:
                gt.set_depth(self._baseline)
            scene.remove(entity, DepthManaged)
            cleared += 1

        # 2) 今フレームの深度を書き込む（変更マークは付けない）
        written = 0
        skipped = 0
        for entity, z in depth_map.items():
            gt = scene.bypass_change_detection(entity, GlobalTransform)
            if gt is None:
                # 変換を持たない or フレーム途中で破棄された
                skipped += 1
                continue
            gt.set_depth(z)
            if not scene.has(entity, DepthManaged):
                scene.insert(entity, DepthManaged())
            written += 1

        if skipped:
            logger.debug("skipped %d entity(ies) without a GlobalTransform", skipped)
        return WriteReport(written=written, skipped=skipped, cleared=cleared)


__all__ = ["DepthManaged", "TransformWriter", "WriteReport", "NEUTRAL_DEPTH"]
