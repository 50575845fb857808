"""Tests for backup_projects.archiver."""

from __future__ import annotations

import tarfile
from collections.abc import Callable
from pathlib import Path

import pytest

from backup_projects.archiver import (
    ArchiveError,
    TarArchiver,
    TarfileArchiver,
    make_archiver,
)
from backup_projects.fingerprint import file_checksum
from backup_projects.models import ArchiverKind, BackupConfig

MakeProject = Callable[..., Path]


def _member_names(archive: Path) -> list[str]:
    with tarfile.open(archive) as tf:
        return tf.getnames()


@pytest.fixture(params=[TarArchiver, TarfileArchiver], ids=["tar", "tarfile"])
def archiver(request: pytest.FixtureRequest) -> TarArchiver | TarfileArchiver:
    return request.param()


class TestArchivers:
    def test_build_writes_archive(
        self,
        archiver: TarArchiver | TarfileArchiver,
        make_project: MakeProject,
        tmp_path: Path,
    ) -> None:
        project = make_project(tmp_path, "projA", {"a.txt": "a", "sub/b.txt": "b"})
        out = tmp_path / "out.tar"

        result = archiver.build(project, out)

        assert result == out
        names = _member_names(out)
        assert "projA/a.txt" in names
        assert "projA/sub/b.txt" in names

    def test_members_relative_to_basename(
        self,
        archiver: TarArchiver | TarfileArchiver,
        make_project: MakeProject,
        tmp_path: Path,
    ) -> None:
        project = make_project(tmp_path / "deep" / "nested", "projA")
        out = tmp_path / "out.tar"

        archiver.build(project, out)

        for name in _member_names(out):
            assert name == "projA" or name.startswith("projA/")

    def test_unchanged_directory_is_reproducible(
        self,
        archiver: TarArchiver | TarfileArchiver,
        make_project: MakeProject,
        tmp_path: Path,
    ) -> None:
        project = make_project(tmp_path, "projA", {"a.txt": "a", "b/c.txt": "c"})
        first = tmp_path / "first.tar"
        second = tmp_path / "second.tar"

        archiver.build(project, first)
        archiver.build(project, second)

        assert file_checksum(first) == file_checksum(second)

    def test_missing_project_raises(
        self, archiver: TarArchiver | TarfileArchiver, tmp_path: Path
    ) -> None:
        out = tmp_path / "out.tar"
        with pytest.raises(ArchiveError):
            archiver.build(tmp_path / "missing", out)
        assert not out.exists()

    def test_unwritable_output_raises(
        self,
        archiver: TarArchiver | TarfileArchiver,
        make_project: MakeProject,
        tmp_path: Path,
    ) -> None:
        project = make_project(tmp_path, "projA")
        with pytest.raises(ArchiveError):
            archiver.build(project, tmp_path / "no-such-dir" / "out.tar")

    def test_current_directory(
        self,
        archiver: TarArchiver | TarfileArchiver,
        make_project: MakeProject,
        tmp_path: Path,
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        project = make_project(tmp_path, "projA", {"a.txt": "a"})
        monkeypatch.chdir(project)
        out = tmp_path / "out.tar"

        archiver.build(".", out)

        assert "projA/a.txt" in _member_names(out)


class TestTarArchiver:
    def test_unknown_command_raises(
        self, make_project: MakeProject, tmp_path: Path
    ) -> None:
        project = make_project(tmp_path, "projA")
        archiver = TarArchiver(command="definitely-not-a-tar-binary")
        with pytest.raises(ArchiveError, match="Unable to run"):
            archiver.build(project, tmp_path / "out.tar")

    def test_relative_project_dir(
        self,
        make_project: MakeProject,
        tmp_path: Path,
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        make_project(tmp_path, "projA")
        monkeypatch.chdir(tmp_path)

        TarArchiver().build("projA", tmp_path / "out.tar")

        assert "projA/README.md" in _member_names(tmp_path / "out.tar")


class TestMakeArchiver:
    def test_default_is_tar(self) -> None:
        assert isinstance(make_archiver(BackupConfig(backup_to="/b")), TarArchiver)

    def test_tarfile(self) -> None:
        config = BackupConfig(backup_to="/b", archiver=ArchiverKind.TARFILE)
        assert isinstance(make_archiver(config), TarfileArchiver)
