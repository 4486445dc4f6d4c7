"""
どこで: `spritelayer.core` の簡易フレームドライバ。
何を: ラベル付き `Tickable` の列を固定順序で呼び出す FrameClock（dt 測定と順序制約付き挿入）。
なぜ: 「ワールド変換の伝播 → 深度解決 → 描画抽出」の順序をホスト側で保証するため。
"""

from __future__ import annotations

import time
from typing import Sequence

from .tickable import Tickable

TRANSFORM_PROPAGATE = "transform_propagate"
RENDER_EXTRACT = "render_extract"


class ScheduleError(Exception):
    """要求された実行順序を満たせない場合に送出。"""


class FrameClock:
    """登録された Tickable をラベル順に実行するだけの極小クラス。"""

    def __init__(self, stages: Sequence[tuple[str, Tickable]] = ()):
        self._stages: list[tuple[str, Tickable]] = []
        for label, tickable in stages:
            self.add(label, tickable)
        self._last_time = time.perf_counter()

    def labels(self) -> tuple[str, ...]:
        return tuple(label for label, _ in self._stages)

    def index_of(self, label: str) -> int:
        for i, (name, _) in enumerate(self._stages):
            if name == label:
                return i
        raise ScheduleError(f"unknown stage: {label!r}")

    def add(self, label: str, tickable: Tickable) -> None:
        """末尾にステージを追加する。"""
        if label in self.labels():
            raise ScheduleError(f"duplicate stage label: {label!r}")
        self._stages.append((label, tickable))

    def insert(
        self,
        label: str,
        tickable: Tickable,
        *,
        after: str | None = None,
        before: str | None = None,
    ) -> None:
        """`after` の直後に挿入する。`before` 指定時はそれより前であることを検証する。"""
        if label in self.labels():
            raise ScheduleError(f"duplicate stage label: {label!r}")
        pos = self.index_of(after) + 1 if after is not None else 0
        if before is not None:
            limit = self.index_of(before)
            if pos > limit:
                raise ScheduleError(
                    f"cannot place {label!r} after {after!r} and before {before!r}"
                )
        self._stages.insert(pos, (label, tickable))

    # GUI フレームワークやホストループから呼ばせる
    def tick(self, dt: float | None = None) -> None:
        if dt is None:
            now = time.perf_counter()
            dt = now - self._last_time
            self._last_time = now

        for _, t in self._stages:
            t.tick(dt)


__all__ = ["FrameClock", "ScheduleError", "TRANSFORM_PROPAGATE", "RENDER_EXTRACT"]
