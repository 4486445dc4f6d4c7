"""
どこで: `spritelayer.depth` の実行オプション。
何を: ホストが所有する `SpriteLayerOptions` と、オフセット算出方式 `DepthStrategy`。
なぜ: グローバルな可変リソースを隠さず、明示的に渡す設定値として扱うため。
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from common import settings


class DepthStrategy(str, Enum):
    """y-sort オフセットの算出方式。描画順は同じで、数値と性能特性のみ異なる。

    - GLOBAL: 全オブジェクトを 1 回ソートし、i 番目に `i / N` を加算。
    - BUCKET: レイヤーごとにソートし、i 番目（m 個中）に `i / (m + 1)` を加算。
    """

    GLOBAL = "global"
    BUCKET = "bucket"

    @classmethod
    def from_settings(cls) -> "DepthStrategy":
        return cls(settings.get().DEPTH_STRATEGY)


@dataclass
class SpriteLayerOptions:
    """深度解決の挙動を切り替える。

    ホストはいつでも書き換えてよい。エンジンは各パスの開始時に 1 度だけ読む。
    """

    y_sort: bool = True


__all__ = ["DepthStrategy", "SpriteLayerOptions"]
