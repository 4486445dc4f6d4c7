"""
どこで: `common.env`
何を: 環境変数の軽量パースヘルパを提供（int/bool/選択肢付き str）。
なぜ: 各所に散在する `os.getenv` + 境界ガードを簡素化し、不正値を既定値へ丸めるため。
"""

from __future__ import annotations

import os
from typing import Iterable, Optional


def env_int(
    name: str, default: Optional[int] = None, *, min_value: Optional[int] = None
) -> Optional[int]:
    """整数環境変数を取得（存在しない/不正値は既定値）。

    Parameters
    ----------
    name : str
        環境変数名。
    default : Optional[int]
        既定値（`None` を渡すと `None` を許容）。
    min_value : Optional[int]
        下限（指定時、結果が下回れば下限に丸める）。

    Returns
    -------
    Optional[int]
        取得した整数値。未設定/不正時は `default` を返す。
    """
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        val = int(raw.strip())
    except ValueError:
        return default
    if min_value is not None and val < min_value:
        val = min_value
    return val


def env_bool(name: str, default: bool = False) -> bool:
    """真偽環境変数を取得（0/1, true/false を許容）。"""
    raw = os.getenv(name)
    if raw is None:
        return bool(default)
    try:
        # 数値優先
        return int(raw) != 0
    except ValueError:
        s = raw.strip().lower()
        if s in {"true", "t", "yes", "y", "on"}:
            return True
        if s in {"false", "f", "no", "n", "off"}:
            return False
        return bool(default)


def env_choice(name: str, choices: Iterable[str], default: str) -> str:
    """選択肢付きの文字列環境変数を取得する。

    大文字小文字は区別しない。選択肢外の値は `default` を返す。
    """
    raw = os.getenv(name)
    if raw is None:
        return default
    s = raw.strip().lower()
    allowed = {c.lower() for c in choices}
    return s if s in allowed else default


__all__ = ["env_int", "env_bool", "env_choice"]
