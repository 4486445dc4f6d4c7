"""
どこで: `spritelayer.depth` のレイヤー型インターフェース。
何を: アプリ定義のレイヤー値が満たすべき `LayerIndex` Protocol。
なぜ: エンジンはレイヤー型をジェネリックに扱い、アプリごとに 1 つの型でインスタンス化するため。

契約（呼び出し側の責務）:
- ハッシュ可能・等価比較可能で、順序は `base_depth()` の単調性と一致すること。
- 異なるレイヤー同士の `base_depth()` は 1.0 以上離すこと。最終深度は
  `base_depth() <= z < base_depth() + 1.0` の範囲に入り、間隔が足りないと隣のレイヤーと衝突する。
  エンジンはこれを実行時に検査しない。
- 値は小さいほど精度が高い（float32 の仮数は 24 bit）。
"""

from __future__ import annotations

from typing import Hashable, Protocol, runtime_checkable


@runtime_checkable
class LayerIndex(Hashable, Protocol):
    """スプライトのレイヤーを表す値の型。"""

    def base_depth(self) -> float:
        """レイヤーに対応する基準深度（y-sort オフセット加算前の z）。"""
        ...


__all__ = ["LayerIndex"]
