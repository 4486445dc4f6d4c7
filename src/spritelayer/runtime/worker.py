"""
どこで: `spritelayer.runtime` のワーカ実行層。
何を: ホストが所有するソート用ワーカプール `SortWorkerPool`。チャンク単位の関数をワーカ
      （スレッド/インライン）へ投げ、入力順で結果を返す。例外は `SortTaskError` で文脈付きに伝搬。
なぜ: 深度エンジン自身はスレッドを生成・管理せず、ホストが共有するプールへ分割ソートを
      投げて完了までブロックするだけにするため。

注意:
- ワーカはスレッド（`multiprocessing.pool.ThreadPool`）。NumPy のソートは GIL を解放するため、
  キー配列をプロセス間でコピーせずに並列化できる。
- `num_workers < 1` はインライン実行（テストや小規模シーン向け）。
- `close()` は多重呼び出しに安全。
"""

from __future__ import annotations

import logging
from multiprocessing.pool import ThreadPool
from typing import Callable, Sequence, TypeVar

from common import settings

A = TypeVar("A")
R = TypeVar("R")

logger = logging.getLogger(__name__)


class SortTaskError(Exception):
    """チャンク処理中の例外をラップしてチャンク index 等の文脈を付与。

    シリアライズ/デシリアライズに耐えるよう、単一のメッセージ引数でも初期化できるようにする。
    """

    def __init__(
        self,
        chunk_index: int | None = None,
        original: Exception | None = None,
        message: str | None = None,
    ) -> None:
        # Unpickle 経路（例外は message だけで復元されることがある）
        if message is None and isinstance(chunk_index, str) and original is None:
            message = chunk_index
            chunk_index = None

        if message is None:
            message = f"SortTaskError(chunk_index={chunk_index}): {original}"
        super().__init__(message)
        self.chunk_index = chunk_index
        self.original = original

    def __reduce__(self):
        # ピクル化時はメッセージのみで再構築できるようにする
        return (SortTaskError, (str(self),))


class SortWorkerPool:
    """チャンク化された計算をワーカへ配るだけのプール。"""

    def __init__(self, num_workers: int | None = None) -> None:
        if num_workers is None:
            num_workers = settings.get().SORT_WORKERS
        self._num_workers = int(num_workers)
        self._inline = self._num_workers < 1
        self._pool: ThreadPool | None = None if self._inline else ThreadPool(self._num_workers)
        # 冪等な close() のための内部フラグ
        self._closed: bool = False

    @property
    def num_workers(self) -> int:
        return self._num_workers

    @property
    def inline(self) -> bool:
        return self._inline

    @property
    def closed(self) -> bool:
        return self._closed

    def map_chunks(self, fn: Callable[[int, A], R], chunks: Sequence[A]) -> list[R]:
        """`fn(index, chunk)` を全チャンクに適用し、入力順の結果リストを返す（完了まで待つ）。"""
        if self._closed:
            raise RuntimeError("SortWorkerPool is closed")
        if self._inline or self._pool is None:
            results: list[R] = []
            for i, chunk in enumerate(chunks):
                results.append(_run_chunk(fn, i, chunk))
            return results
        pending = [self._pool.apply_async(_run_chunk, (fn, i, c)) for i, c in enumerate(chunks)]
        return [p.get() for p in pending]

    def close(self) -> None:
        """プールを停止（多重呼び出しに安全）。"""
        if self._closed:
            return
        # 以降の例外で途中離脱しても、次回は no-op になるよう先にフラグを立てる
        self._closed = True
        if self._pool is not None:
            self._pool.close()
            self._pool.join()

    def __enter__(self) -> "SortWorkerPool":
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()


def _run_chunk(fn: Callable[[int, A], R], index: int, chunk: A) -> R:
    try:
        return fn(index, chunk)
    except SortTaskError:
        raise
    except Exception as e:
        # 例外を統一ログ（stacktrace 付き）
        logger.exception("[sort-worker] chunk=%s error=%s", index, e)
        raise SortTaskError(index, e) from e


__all__ = ["SortWorkerPool", "SortTaskError"]
