"""
どこで: `spritelayer` パッケージ（深度エンジン本体）。
何を: シーン側の境界（core）・深度解決（depth）・並列ソート（runtime）・組み込み（plugin）。
なぜ: レイヤーと y 位置から、全オブジェクトで比較可能な描画深度を毎フレーム決めるため。
"""
