from __future__ import annotations

import pytest

from common import settings
from common.env import env_bool, env_choice, env_int


def test_env_int_parses_and_clamps(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("SL_TEST_INT", "7")
    assert env_int("SL_TEST_INT", 1) == 7
    monkeypatch.setenv("SL_TEST_INT", "-3")
    assert env_int("SL_TEST_INT", 1, min_value=0) == 0
    monkeypatch.setenv("SL_TEST_INT", "abc")
    assert env_int("SL_TEST_INT", 5) == 5
    monkeypatch.delenv("SL_TEST_INT")
    assert env_int("SL_TEST_INT", None) is None


@pytest.mark.parametrize(
    "raw,expected",
    [("1", True), ("0", False), ("yes", True), ("off", False), ("maybe", True)],
)
def test_env_bool_accepts_common_spellings(
    monkeypatch: pytest.MonkeyPatch, raw: str, expected: bool
) -> None:
    monkeypatch.setenv("SL_TEST_BOOL", raw)
    # 解釈できない値は既定値（True）
    assert env_bool("SL_TEST_BOOL", True) is expected


def test_env_choice_is_case_insensitive(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("SL_TEST_CHOICE", " BUCKET ")
    assert env_choice("SL_TEST_CHOICE", ("global", "bucket"), "global") == "bucket"
    monkeypatch.setenv("SL_TEST_CHOICE", "radix")
    assert env_choice("SL_TEST_CHOICE", ("global", "bucket"), "global") == "global"


def test_settings_defaults() -> None:
    cfg = settings.get()
    assert cfg.PARALLEL_Y_SORT is True
    assert cfg.PARALLEL_MIN_ITEMS == 4096
    assert cfg.SORT_WORKERS == 4
    assert cfg.DEPTH_STRATEGY == "global"
    assert cfg.USE_NUMBA is True


def test_settings_reload_from_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("SL_PARALLEL_Y_SORT", "0")
    monkeypatch.setenv("SL_PARALLEL_MIN_ITEMS", "1")
    monkeypatch.setenv("SL_SORT_WORKERS", "-2")
    monkeypatch.setenv("SL_DEPTH_STRATEGY", "bucket")
    settings.reload_from_env()
    cfg = settings.get()
    assert cfg.PARALLEL_Y_SORT is False
    assert cfg.PARALLEL_MIN_ITEMS == 2
    assert cfg.SORT_WORKERS == 0
    assert cfg.DEPTH_STRATEGY == "bucket"
