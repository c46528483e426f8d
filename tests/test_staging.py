"""
Tests for staging and publishing of generated files.
"""

import stat
from pathlib import Path

import pytest

from aegis.core.errors import FilesystemError
from aegis.core.models.template import GeneratedFile
from aegis.core.services.staging import (
    clean_staging,
    publish_files,
    reset_staging,
    stage_files,
    staged_path,
)


def _mode(path: Path) -> int:
    return stat.S_IMODE(path.stat().st_mode)


@pytest.fixture
def staging_dir(tmp_path: Path) -> Path:
    path = tmp_path / "temp" / "staging"
    reset_staging(path)
    return path


class TestStaging:
    def test_reset_creates_private_dir(self, staging_dir: Path):
        assert staging_dir.is_dir()
        assert _mode(staging_dir) == 0o700

    def test_reset_empties(self, staging_dir: Path):
        (staging_dir / "leftover").write_text("old")
        reset_staging(staging_dir)
        assert list(staging_dir.iterdir()) == []

    def test_stage_mirrors_absolute_paths(self, tmp_path: Path, staging_dir: Path):
        target = tmp_path / "live" / "etc" / "aegis.env"
        file = GeneratedFile(path=str(target), content="KEY=value\n", mode=0o600)

        (staged,) = stage_files([file], staging_dir)

        assert staged == staging_dir / str(target).lstrip("/")
        assert staged.read_text() == "KEY=value\n"
        assert _mode(staged) == 0o600
        assert not target.exists()

    def test_clean(self, staging_dir: Path):
        clean_staging(staging_dir)
        assert not staging_dir.exists()
        clean_staging(staging_dir)


class TestPublish:
    def test_publish_installs_with_mode(self, tmp_path: Path, staging_dir: Path):
        live = tmp_path / "live"
        live.mkdir()
        files = [
            GeneratedFile(path=str(live / "run.sh"), content="#!/bin/sh\n", mode=0o750),
            GeneratedFile(path=str(live / "secret.pass"), content="pw", mode=0o600),
        ]
        stage_files(files, staging_dir)

        published = publish_files(files, staging_dir)

        assert published == [f.path for f in files]
        assert (live / "run.sh").read_text() == "#!/bin/sh\n"
        assert _mode(live / "run.sh") == 0o750
        assert _mode(live / "secret.pass") == 0o600
        assert sorted(p.name for p in live.iterdir()) == ["run.sh", "secret.pass"]

    def test_publish_replaces_existing(self, tmp_path: Path, staging_dir: Path):
        target = tmp_path / "cron"
        target.write_text("old entry\n")
        file = GeneratedFile(path=str(target), content="new entry\n")
        stage_files([file], staging_dir)

        publish_files([file], staging_dir)

        assert target.read_text() == "new entry\n"

    def test_unstaged_file(self, tmp_path: Path, staging_dir: Path):
        file = GeneratedFile(path=str(tmp_path / "x"), content="")
        with pytest.raises(FilesystemError, match="never staged"):
            publish_files([file], staging_dir)

    def test_missing_target_directory(self, tmp_path: Path, staging_dir: Path):
        file = GeneratedFile(path=str(tmp_path / "nowhere" / "x"), content="x")
        stage_files([file], staging_dir)
        with pytest.raises(FilesystemError, match="Cannot publish"):
            publish_files([file], staging_dir)

    def test_staged_path(self, staging_dir: Path):
        file = GeneratedFile(path="/etc/cron.d/aegis-backup", content="")
        assert staged_path(file, staging_dir) == staging_dir / "etc" / "cron.d" / "aegis-backup"
