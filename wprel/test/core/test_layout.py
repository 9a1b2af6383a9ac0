"""Tests for wprel.core.layout."""

from __future__ import annotations

from pathlib import Path

import pytest

from wprel.core.layout import DeploymentRoot, detect_root
from wprel.core.result import Err, Ok


@pytest.fixture(autouse=True)
def _no_root_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("WPREL_ROOT", raising=False)


class TestDeploymentRoot:
    def test_paths(self, tmp_path: Path) -> None:
        root = DeploymentRoot(root=tmp_path)
        assert root.config_path == tmp_path / "wprel.toml"
        assert root.releases_dir() == tmp_path / "releases"
        assert root.releases_dir("builds") == tmp_path / "builds"
        assert root.current_link() == tmp_path / "current-release"


class TestDetectRoot:
    def test_explicit(self, tmp_path: Path) -> None:
        result = detect_root(explicit=tmp_path)

        assert isinstance(result, Ok)
        assert result.value.root == tmp_path.resolve()
        assert result.value.source == "option"

    def test_explicit_not_a_directory(self, tmp_path: Path) -> None:
        result = detect_root(explicit=tmp_path / "missing")

        assert isinstance(result, Err)

    def test_env(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("WPREL_ROOT", str(tmp_path))

        result = detect_root(start_dir=tmp_path / "elsewhere")

        assert isinstance(result, Ok)
        assert result.value.source == "env"

    def test_env_invalid(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("WPREL_ROOT", str(tmp_path / "nope"))

        assert isinstance(detect_root(), Err)

    def test_marker_upward(self, tmp_path: Path) -> None:
        (tmp_path / "wprel.toml").write_text("", encoding="utf-8")
        nested = tmp_path / "a" / "b"
        nested.mkdir(parents=True)

        result = detect_root(start_dir=nested)

        assert isinstance(result, Ok)
        assert result.value.root == tmp_path.resolve()
        assert result.value.source == "marker"

    def test_falls_back_to_cwd(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.chdir(tmp_path)

        result = detect_root()

        assert isinstance(result, Ok)
        assert result.value.root == tmp_path.resolve()
        assert result.value.source == "cwd"
