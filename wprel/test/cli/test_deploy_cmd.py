from __future__ import annotations

import io
import os
import tarfile
from pathlib import Path

import pytest
from typer.testing import CliRunner

from wprel import __version__
from wprel.cli.app import app, create_release_app

runner = CliRunner()


def _archive(path: Path, *, mtime: int = 1_760_000_123) -> Path:
    with tarfile.open(path, "w:gz") as tar:
        for name, content in {
            "index.php": b"<?php",
            "wp-content/plugins/advanced-custom-fields-pro/acf.php": b"<?php",
            "wp-content/mu-plugins/.keep": b"",
        }.items():
            info = tarfile.TarInfo(name=name)
            info.size = len(content)
            tar.addfile(info, io.BytesIO(content))
    os.utime(path, (mtime, mtime))
    return path


@pytest.fixture(autouse=True)
def _no_root_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("WPREL_ROOT", raising=False)


def test_create_release_defaults(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.chdir(tmp_path)
    _archive(tmp_path / "release.tar.gz")

    result = runner.invoke(create_release_app, [])

    assert result.exit_code == 0, result.output
    assert "Created release" in result.output
    releases = [p for p in (tmp_path / "releases").iterdir() if p.is_dir()]
    assert len(releases) == 1
    assert releases[0].name.startswith("release-")
    assert (tmp_path / "current-release").resolve() == releases[0].resolve()
    assert not (tmp_path / "release.tar.gz").exists()


def test_create_release_positional_args(tmp_path: Path) -> None:
    archive = _archive(tmp_path / "build.tar.gz")

    result = runner.invoke(
        create_release_app, [str(archive), "builds", "--root", str(tmp_path)]
    )

    assert result.exit_code == 0, result.output
    assert (tmp_path / "builds").is_dir()
    assert not (tmp_path / "releases").exists()


def test_missing_archive_exits_one_and_creates_nothing(tmp_path: Path) -> None:
    result = runner.invoke(
        create_release_app, [str(tmp_path / "missing.tar.gz"), "--root", str(tmp_path)]
    )

    assert result.exit_code == 1
    assert list(tmp_path.iterdir()) == []


def test_second_deploy_of_same_id_exits_one(tmp_path: Path) -> None:
    args = ["deploy", str(tmp_path / "release.tar.gz"), "--root", str(tmp_path)]
    _archive(tmp_path / "release.tar.gz")
    assert runner.invoke(app, args).exit_code == 0

    _archive(tmp_path / "release.tar.gz")
    result = runner.invoke(app, args)

    assert result.exit_code == 1
    assert len([p for p in (tmp_path / "releases").iterdir() if p.is_dir()]) == 1


def test_invalid_config_exits_two(tmp_path: Path) -> None:
    (tmp_path / "wprel.toml").write_text("[deploy\n", encoding="utf-8")
    _archive(tmp_path / "release.tar.gz")

    result = runner.invoke(
        app, ["deploy", str(tmp_path / "release.tar.gz"), "--root", str(tmp_path)]
    )

    assert result.exit_code == 2
    assert not (tmp_path / "releases").exists()


def test_version() -> None:
    result = runner.invoke(app, ["--version"])

    assert result.exit_code == 0
    assert __version__ in result.output
