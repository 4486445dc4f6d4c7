"""
どこで: `common` パッケージ。
何を: 環境変数パース・型付き設定・ロギング初期化といった軽量ユーティリティ。
なぜ: エンジン本体（`spritelayer`）と公開 API（`api`）の双方から再利用する基盤を分離するため。
"""

from .logging import setup_default_logging

__all__ = [
    "setup_default_logging",
]
