"""
どこで: `spritelayer.core` サブパッケージ。
何を: シーンストア・変換コンポーネント・伝播/抽出の協調者・フレーム駆動（Tickable/FrameClock）を提供。
なぜ: 深度エンジンが読み書きする外部データの境界をまとめ、上位層から再利用可能にするため。
"""
