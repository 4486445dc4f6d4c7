"""
どこで: `spritelayer.depth` サブパッケージ。
何を: y-sort キー・レイヤー解決・深度割り当て・変換書き込みと、それらを束ねるフレームパス。
なぜ: 「レイヤー + 画面上の y」から全体で比較可能な深度を毎フレーム決定するため。
"""

from .assigner import DepthAssigner, DepthMap
from .layer_index import LayerIndex
from .options import DepthStrategy, SpriteLayerOptions
from .resolver import EffectiveLayerMap, LayerResolver, resolve_layers
from .sort_key import SortKey, sort_keys
from .system import PassPhase, PassReport, SpriteLayerSystem
from .writer import DepthManaged, TransformWriter, WriteReport

__all__ = [
    "DepthAssigner",
    "DepthManaged",
    "DepthMap",
    "DepthStrategy",
    "EffectiveLayerMap",
    "LayerIndex",
    "LayerResolver",
    "PassPhase",
    "PassReport",
    "SortKey",
    "SpriteLayerOptions",
    "SpriteLayerSystem",
    "TransformWriter",
    "WriteReport",
    "resolve_layers",
    "sort_keys",
]
