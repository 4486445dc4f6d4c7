from __future__ import annotations

# What this tests
# - デモのレイヤー型が全順序を持ち、Top がどの Middle よりも上に来る。
# - basic デモがヘッドレスで最後まで実行できる。

from demo.basic import TOP, DemoLayer
from demo.basic import main as basic_main


def test_demo_layer_is_totally_ordered() -> None:
    layers = [TOP, DemoLayer(middle=9), DemoLayer(middle=0), DemoLayer(middle=4)]
    ordered = sorted(layers)
    assert ordered == [DemoLayer(middle=0), DemoLayer(middle=4), DemoLayer(middle=9), TOP]
    assert [layer.base_depth() for layer in ordered] == sorted(
        layer.base_depth() for layer in layers
    )


def test_basic_demo_runs_headless() -> None:
    basic_main()
