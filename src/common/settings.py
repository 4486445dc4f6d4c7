"""
どこで: `common.settings`
何を: 深度エンジンの環境変数を型付きで一元管理し、起動時に読み込む。
なぜ: `os.getenv` の散在を解消し、既定値/型の一貫性とテスト容易性を高めるため。

対応する環境変数:
- `SL_PARALLEL_Y_SORT`   : ワーカプールでの分割ソートを有効化（既定 true）
- `SL_PARALLEL_MIN_ITEMS`: 分割ソートへ切り替える最小要素数（既定 4096, 下限 2）
- `SL_SORT_WORKERS`      : ホストが生成するソートワーカ数（既定 4, 0 でインライン）
- `SL_DEPTH_STRATEGY`    : `global` | `bucket`（既定 global）
- `SL_USE_NUMBA`         : マージカーネルを njit 版で実行（既定 true）
"""

from __future__ import annotations

from dataclasses import dataclass

from .env import env_bool, env_choice, env_int

DEPTH_STRATEGIES = ("global", "bucket")


@dataclass
class _Settings:
    # 並列ソート
    PARALLEL_Y_SORT: bool = True
    PARALLEL_MIN_ITEMS: int = 4096
    SORT_WORKERS: int = 4

    # 深度割り当て
    DEPTH_STRATEGY: str = "global"

    # Misc
    USE_NUMBA: bool = True


_settings = _Settings()


def reload_from_env() -> None:
    """環境変数から設定を再読込。

    - bool は `env_bool`、int は `env_int`、列挙は `env_choice` を使用。
    - 一部は下限丸めを適用。
    """
    _settings.PARALLEL_Y_SORT = env_bool("SL_PARALLEL_Y_SORT", True)
    _settings.PARALLEL_MIN_ITEMS = env_int("SL_PARALLEL_MIN_ITEMS", 4096, min_value=2) or 2
    _settings.SORT_WORKERS = env_int("SL_SORT_WORKERS", 4, min_value=0) or 0

    _settings.DEPTH_STRATEGY = env_choice("SL_DEPTH_STRATEGY", DEPTH_STRATEGIES, "global")

    _settings.USE_NUMBA = env_bool("SL_USE_NUMBA", True)


def get() -> _Settings:
    """現在の設定スナップショットを返す。"""
    return _settings


# 初期ロード
reload_from_env()


__all__ = ["get", "reload_from_env", "_Settings", "DEPTH_STRATEGIES"]
