from __future__ import annotations

from collections.abc import Iterator

import pytest

from wprel.platform import detection
from wprel.platform.detection import Platform


@pytest.fixture(autouse=True)
def _clear_cache() -> Iterator[None]:
    detection.detect_platform.cache_clear()
    yield
    detection.detect_platform.cache_clear()


@pytest.mark.parametrize(
    ("sys_platform", "expected"),
    [
        ("linux", Platform.LINUX),
        ("darwin", Platform.MACOS),
        ("freebsd14", Platform.BSD),
        ("win32", Platform.WINDOWS),
        ("aix", Platform.UNKNOWN),
    ],
)
def test_detect_platform(
    monkeypatch: pytest.MonkeyPatch, sys_platform: str, expected: Platform
) -> None:
    monkeypatch.setattr(detection._sys, "platform", sys_platform)
    assert detection.detect_platform() == expected


def test_bsd_stat_flavour() -> None:
    assert Platform.MACOS.has_bsd_stat
    assert Platform.BSD.has_bsd_stat
    assert not Platform.LINUX.has_bsd_stat
