"""
どこで: `spritelayer.runtime` サブパッケージ。
何を: ホスト所有のソートワーカプールと、チャンク分割 + 安定マージによる並列 argsort を提供。
なぜ: y-sort の重い部分（ソート）だけをデータ並列化し、結果は逐次版と一致させるため。
"""

from .sort import stable_argsort
from .worker import SortTaskError, SortWorkerPool

__all__ = ["SortWorkerPool", "SortTaskError", "stable_argsort"]
