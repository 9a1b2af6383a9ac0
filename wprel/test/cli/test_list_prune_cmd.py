from __future__ import annotations

import os
from pathlib import Path

import pytest

from wprel.cli.context import CLIContext
from wprel.core.config import Config
from wprel.core.layout import DeploymentRoot
from wprel.output.console import MockConsole


def _ctx(root: Path) -> CLIContext:
    return CLIContext(root=DeploymentRoot(root=root), config=Config(), console=MockConsole())


def _populate(root: Path, count: int) -> list[Path]:
    releases = root / "releases"
    releases.mkdir()
    dirs: list[Path] = []
    for i in range(count):
        d = releases / f"release-2026-10-18-id{i}"
        d.mkdir()
        a = releases / f"{d.name}.tar.gz"
        a.write_bytes(b"gz")
        os.utime(d, (1_700_000_000 + i, 1_700_000_000 + i))
        os.utime(a, (1_700_000_000 + i, 1_700_000_000 + i))
        dirs.append(d)
    return dirs


def test_list_marks_current(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    import wprel.cli.commands.list_cmd as list_cmd

    dirs = _populate(tmp_path, 2)
    (tmp_path / "current-release").symlink_to(dirs[0])
    ctx = _ctx(tmp_path)
    monkeypatch.setattr(list_cmd, "build_context", lambda _root=None: ctx)

    list_cmd.list_releases_cmd(releases_dir=None, root=None)

    console = ctx.console
    assert isinstance(console, MockConsole)
    assert console.messages[0].startswith("  release-2026-10-18-id1")
    assert console.messages[1].startswith("* release-2026-10-18-id0")
    assert console.find("id1.tar.gz")


def test_list_empty(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    import wprel.cli.commands.list_cmd as list_cmd

    ctx = _ctx(tmp_path)
    monkeypatch.setattr(list_cmd, "build_context", lambda _root=None: ctx)

    list_cmd.list_releases_cmd(releases_dir=None, root=None)

    assert isinstance(ctx.console, MockConsole)
    assert ctx.console.find("No releases")


def test_prune_dry_run_does_not_delete(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    import wprel.cli.commands.prune_cmd as prune_cmd

    dirs = _populate(tmp_path, 4)
    ctx = _ctx(tmp_path)
    monkeypatch.setattr(prune_cmd, "build_context", lambda _root=None: ctx)

    prune_cmd.prune(releases_dir=None, keep=2, yes=False, root=None)

    assert all(d.exists() for d in dirs)
    assert isinstance(ctx.console, MockConsole)
    assert ctx.console.find("DRY-RUN")


def test_prune_execute_keeps_newest_and_current(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    import wprel.cli.commands.prune_cmd as prune_cmd

    dirs = _populate(tmp_path, 4)
    (tmp_path / "current-release").symlink_to(dirs[0])
    ctx = _ctx(tmp_path)
    monkeypatch.setattr(prune_cmd, "build_context", lambda _root=None: ctx)

    prune_cmd.prune(releases_dir=None, keep=2, yes=True, root=None)

    assert [d.exists() for d in dirs] == [True, False, True, True]
    archives = sorted(p.name for p in (tmp_path / "releases").glob("*.tar.gz"))
    assert archives == ["release-2026-10-18-id2.tar.gz", "release-2026-10-18-id3.tar.gz"]


def test_prune_refuses_while_deploy_lock_held(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    import typer

    import wprel.cli.commands.prune_cmd as prune_cmd
    from wprel.services.deploy.service import LOCK_FILENAME

    dirs = _populate(tmp_path, 4)
    lock_file = tmp_path / "releases" / LOCK_FILENAME
    lock_file.write_text("4242\n", encoding="utf-8")
    ctx = _ctx(tmp_path)
    monkeypatch.setattr(prune_cmd, "build_context", lambda _root=None: ctx)

    with pytest.raises(typer.Exit) as exc_info:
        prune_cmd.prune(releases_dir=None, keep=1, yes=True, root=None)

    assert exc_info.value.exit_code == 1
    assert all(d.exists() for d in dirs)
    assert lock_file.read_text(encoding="utf-8") == "4242\n"
    assert isinstance(ctx.console, MockConsole)
    assert ctx.console.has_error()
    assert ctx.console.find("4242")


def test_prune_execute_releases_lock(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    import wprel.cli.commands.prune_cmd as prune_cmd
    from wprel.services.deploy.service import LOCK_FILENAME

    _populate(tmp_path, 3)
    ctx = _ctx(tmp_path)
    monkeypatch.setattr(prune_cmd, "build_context", lambda _root=None: ctx)

    prune_cmd.prune(releases_dir=None, keep=1, yes=True, root=None)

    assert not (tmp_path / "releases" / LOCK_FILENAME).exists()
    assert isinstance(ctx.console, MockConsole)
    assert ctx.console.find("Removed 4 entries")
