"""
tests/test_exporters.py
Unit tests for crudgen.exporters: atomic writes, overwrite protection and
rollback of everything a run touched.
"""

from __future__ import annotations

import pathlib

import pytest

from crudgen.exporters import ArtifactTracker, ArtifactWriter, atomic_write


# ===========================================================================
# atomic_write
# ===========================================================================


class TestAtomicWrite:
    def test_writes_content(self, tmp_path: pathlib.Path) -> None:
        target = tmp_path / "out.php"
        atomic_write(target, "<?php\n")
        assert target.read_text(encoding="utf-8") == "<?php\n"

    def test_leaves_no_temp_files(self, tmp_path: pathlib.Path) -> None:
        atomic_write(tmp_path / "a.php", "x")
        atomic_write(tmp_path / "a.php", "y")
        assert sorted(p.name for p in tmp_path.iterdir()) == ["a.php"]

    def test_missing_directory_raises(self, tmp_path: pathlib.Path) -> None:
        with pytest.raises(OSError):
            atomic_write(tmp_path / "missing" / "a.php", "x")


# ===========================================================================
# ArtifactWriter
# ===========================================================================


class TestArtifactWriter:
    def test_creates_parents_and_tracks_them(self, tmp_path: pathlib.Path) -> None:
        writer = ArtifactWriter()
        target = tmp_path / "app" / "Models" / "Post.php"
        artifact = writer.write(target, "<?php\n", kind="model")

        assert artifact.created is True
        assert artifact.kind == "model"
        assert target.is_file()
        assert writer.tracker.created_files == [target]
        assert writer.tracker.created_directories == [tmp_path / "app", tmp_path / "app" / "Models"]

    def test_existing_file_is_skipped_without_force(self, tmp_path: pathlib.Path) -> None:
        target = tmp_path / "Post.php"
        target.write_text("original", encoding="utf-8")
        writer = ArtifactWriter()

        artifact = writer.write(target, "generated")

        assert artifact.skipped is True
        assert target.read_text(encoding="utf-8") == "original"
        assert len(writer.tracker) == 0

    def test_force_overwrites_and_records_original(self, tmp_path: pathlib.Path) -> None:
        target = tmp_path / "Post.php"
        target.write_text("original", encoding="utf-8")
        writer = ArtifactWriter()

        artifact = writer.write(target, "generated", force=True)

        assert artifact.created is True
        assert target.read_text(encoding="utf-8") == "generated"
        assert writer.tracker.original_content(target) == "original"
        assert writer.tracker.created_files == []

    def test_update_marks_artifact(self, tmp_path: pathlib.Path) -> None:
        target = tmp_path / "web.php"
        target.write_text("<?php\n", encoding="utf-8")
        writer = ArtifactWriter()

        artifact = writer.update(target, "<?php\n// routes\n", kind="web routes")

        assert artifact.updated is True
        assert writer.tracker.modified_files == [target]


# ===========================================================================
# ArtifactTracker.rollback
# ===========================================================================


class TestRollback:
    def test_rollback_undoes_everything(self, tmp_path: pathlib.Path) -> None:
        routes = tmp_path / "routes.php"
        routes.write_text("before", encoding="utf-8")
        writer = ArtifactWriter()
        created = tmp_path / "app" / "Http" / "Controllers" / "PostController.php"

        writer.write(created, "controller")
        writer.update(routes, "after")
        result = writer.tracker.rollback()

        assert result.clean
        assert routes.read_text(encoding="utf-8") == "before"
        assert not created.exists()
        assert not (tmp_path / "app").exists()
        assert result.restored_files == [str(routes)]
        assert result.rolled_back_files == [str(created)]
        assert len(result.removed_directories) == 3
        assert len(writer.tracker) == 0

    def test_first_original_is_kept_across_edits(self, tmp_path: pathlib.Path) -> None:
        layout = tmp_path / "layout.blade.php"
        layout.write_text("v1", encoding="utf-8")
        writer = ArtifactWriter()

        writer.update(layout, "v2")
        writer.update(layout, "v3")
        writer.tracker.rollback()

        assert layout.read_text(encoding="utf-8") == "v1"

    def test_non_empty_directories_are_kept(self, tmp_path: pathlib.Path) -> None:
        writer = ArtifactWriter()
        created = tmp_path / "views" / "posts" / "index.blade.php"
        writer.write(created, "index")
        (tmp_path / "views" / "keep.txt").write_text("user file", encoding="utf-8")

        result = writer.tracker.rollback()

        assert not (tmp_path / "views" / "posts").exists()
        assert (tmp_path / "views" / "keep.txt").exists()
        assert result.removed_directories == [str(tmp_path / "views" / "posts")]

    def test_rollback_tolerates_missing_files(self, tmp_path: pathlib.Path) -> None:
        tracker = ArtifactTracker()
        tracker.record_created(tmp_path / "gone.php")
        result = tracker.rollback()
        assert result.clean
        assert result.rolled_back_files == [str(tmp_path / "gone.php")]

    def test_modification_of_created_file_is_not_recorded(self, tmp_path: pathlib.Path) -> None:
        tracker = ArtifactTracker()
        path = tmp_path / "new.php"
        tracker.record_created(path)
        tracker.record_modified(path, "irrelevant")
        assert tracker.modified_files == []
        assert tracker.is_tracked(path)
