"""
どこで: `common.logging`
何を: デモ/ホスト向けのロギング初期化。ルートの最小構成と、深度エンジン（`spritelayer`）ロガーの個別レベル。
なぜ: ライブラリ側はハンドラを持たず、パスごとの DEBUG 集計を見たいときだけホストが有効化できるようにするため。

要点:
- 各モジュールは `logging.getLogger(__name__)` でロガーを取得する。
- `SL_LOG_LEVEL` が設定されていれば、`spritelayer` ロガーのレベルはそれを優先する。
"""

from __future__ import annotations

import logging

from .env import env_choice

ENGINE_LOGGER = "spritelayer"
_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def _to_level(level: int | str) -> int:
    if isinstance(level, str):
        return getattr(logging, level.upper(), logging.INFO)
    return int(level)


def setup_default_logging(
    level: int | str = "INFO", *, engine_level: int | str | None = None
) -> None:
    """最小限のロギング設定を適用する。

    - ルートロガーにハンドラが既にあれば basicConfig は行わない（ホストの設定を尊重）
    - `engine_level`（または `SL_LOG_LEVEL`）があれば `spritelayer` ロガーへ個別に適用する
    """
    root = logging.getLogger()
    if not root.handlers:
        logging.basicConfig(
            level=_to_level(level),
            format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        )

    env_level = env_choice("SL_LOG_LEVEL", (name.lower() for name in _LEVELS), "")
    chosen = env_level or engine_level
    if chosen:
        logging.getLogger(ENGINE_LOGGER).setLevel(_to_level(chosen))


__all__ = ["setup_default_logging", "ENGINE_LOGGER"]
