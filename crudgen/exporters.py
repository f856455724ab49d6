# File: crudgen/exporters.py
"""
NexaFlow CrudGen - Artifact Writer & Rollback Tracker
=======================================================

Responsible for:
    1. Writing generated artifacts atomically (write-to-temp then rename).
    2. Refusing to overwrite existing files unless ``force`` is set.
    3. Creating missing parent directories, and remembering which ones were
       created.
    4. Remembering the original content of every pre-existing file that is
       overwritten or appended to.
    5. Undoing all of the above on demand (``ArtifactTracker.rollback``).

One tracker covers one model's run.  Rollback order:

    - restore modified files to their recorded content;
    - delete files the run created;
    - delete directories the run created, innermost first, and only when
      they are empty.

Rollback never raises.  Each failure is logged and collected in the
returned ``RollbackResult`` so the original error stays the one reported.
"""

from __future__ import annotations

import logging
import os
import tempfile
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional

from crudgen.models import GeneratedArtifact
from crudgen.utils import count_lines

# ---------------------------------------------------------------------------
# Logger
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("crudgen.exporters")


# ---------------------------------------------------------------------------
# Rollback bookkeeping
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class RollbackResult:
    """What a rollback undid, plus anything it could not undo."""

    rolled_back_files: List[str] = field(default_factory=list)
    restored_files: List[str] = field(default_factory=list)
    removed_directories: List[str] = field(default_factory=list)
    errors: List[str] = field(default_factory=list)

    @property
    def clean(self) -> bool:
        return not self.errors


class ArtifactTracker:
    """
    Records every filesystem effect of one model's run.

    Files and directories are kept in creation order; directories are
    recorded outermost first, so reversing the list yields a safe removal
    order.
    """

    __slots__ = ("_created_files", "_created_directories", "_modified_files")

    def __init__(self) -> None:
        self._created_files: List[Path] = []
        self._created_directories: List[Path] = []
        self._modified_files: Dict[Path, str] = {}

    # -- Recording ----------------------------------------------------------

    def record_created(self, path: Path) -> None:
        if path not in self._created_files:
            self._created_files.append(path)

    def record_directory(self, path: Path) -> None:
        if path not in self._created_directories:
            self._created_directories.append(path)

    def record_modified(self, path: Path, original_content: str) -> None:
        """Remember *path*'s content before its first modification in this run."""
        if path in self._created_files or path in self._modified_files:
            return
        self._modified_files[path] = original_content

    # -- Query --------------------------------------------------------------

    @property
    def created_files(self) -> List[Path]:
        return list(self._created_files)

    @property
    def created_directories(self) -> List[Path]:
        return list(self._created_directories)

    @property
    def modified_files(self) -> List[Path]:
        return list(self._modified_files)

    def original_content(self, path: Path) -> Optional[str]:
        return self._modified_files.get(path)

    def is_tracked(self, path: Path) -> bool:
        return path in self._created_files or path in self._modified_files

    def __len__(self) -> int:
        return len(self._created_files) + len(self._modified_files)

    def __repr__(self) -> str:
        return (
            f"<ArtifactTracker created={len(self._created_files)} "
            f"modified={len(self._modified_files)} "
            f"dirs={len(self._created_directories)}>"
        )

    # -- Rollback -----------------------------------------------------------

    def rollback(self) -> RollbackResult:
        result: RollbackResult = RollbackResult()

        for path, original in self._modified_files.items():
            try:
                atomic_write(path, original)
                result.restored_files.append(str(path))
                logger.warning("Restored original content of %s.", path)
            except OSError as exc:
                message: str = f"Could not restore {path}: {exc}"
                logger.error(message)
                result.errors.append(message)

        for path in reversed(self._created_files):
            try:
                if path.exists():
                    path.unlink()
                result.rolled_back_files.append(str(path))
                logger.warning("Removed %s.", path)
            except OSError as exc:
                message = f"Could not remove {path}: {exc}"
                logger.error(message)
                result.errors.append(message)

        for directory in reversed(self._created_directories):
            if not directory.is_dir():
                continue
            if any(directory.iterdir()):
                logger.debug("Keeping non-empty directory %s.", directory)
                continue
            try:
                directory.rmdir()
                result.removed_directories.append(str(directory))
                logger.warning("Removed empty directory %s.", directory)
            except OSError as exc:
                message = f"Could not remove directory {directory}: {exc}"
                logger.error(message)
                result.errors.append(message)

        self._created_files.clear()
        self._created_directories.clear()
        self._modified_files.clear()
        return result


# ---------------------------------------------------------------------------
# Atomic write
# ---------------------------------------------------------------------------


def atomic_write(target_path: Path, content: str) -> None:
    """
    Write *content* to *target_path* through a temporary sibling file.

    ``os.replace`` is atomic when source and destination share a
    filesystem, which creating the temp file in the target directory
    guarantees.  On failure the temp file is removed and the error
    propagates.
    """
    fd: int = -1
    tmp_path: str = ""
    try:
        fd, tmp_path = tempfile.mkstemp(
            dir=str(target_path.parent),
            prefix=f".{target_path.name}.",
            suffix=".tmp",
        )
        os.write(fd, content.encode("utf-8"))
        os.fsync(fd)
        os.close(fd)
        fd = -1
        os.replace(tmp_path, str(target_path))
        tmp_path = ""
    finally:
        if fd >= 0:
            os.close(fd)
        if tmp_path and os.path.exists(tmp_path):
            os.unlink(tmp_path)


# ---------------------------------------------------------------------------
# Writer
# ---------------------------------------------------------------------------


class ArtifactWriter:
    """
    The only component that touches the filesystem during generation.

    Every effect is reported to the ``ArtifactTracker`` it was built with.
    """

    def __init__(self, tracker: Optional[ArtifactTracker] = None) -> None:
        self.tracker: ArtifactTracker = tracker if tracker is not None else ArtifactTracker()

    def _ensure_parent(self, path: Path) -> None:
        missing: List[Path] = []
        parent: Path = path.parent
        while not parent.exists():
            missing.append(parent)
            if parent.parent == parent:
                break
            parent = parent.parent
        for directory in reversed(missing):
            directory.mkdir()
            self.tracker.record_directory(directory)
            logger.debug("Created directory %s.", directory)

    def write(
        self,
        path: Path,
        content: str,
        force: bool = False,
        kind: str = "",
    ) -> GeneratedArtifact:
        """
        Write a whole artifact.

        An existing target is left untouched (``created=False``) unless
        *force* is set, in which case its content is recorded first.
        """
        if path.exists():
            if not force:
                logger.info("Skipping %s: %s already exists.", kind or "file", path)
                return GeneratedArtifact(path=path, content=content, created=False, kind=kind)
            self.tracker.record_modified(path, path.read_text(encoding="utf-8"))
            atomic_write(path, content)
            logger.info("Overwrote %s: %s", kind or "file", path)
            return GeneratedArtifact(path=path, content=content, created=True, kind=kind)

        self._ensure_parent(path)
        atomic_write(path, content)
        self.tracker.record_created(path)
        logger.info("Created %s: %s (%d lines)", kind or "file", path, count_lines(content))
        return GeneratedArtifact(path=path, content=content, created=True, kind=kind)

    def update(self, path: Path, new_content: str, kind: str = "") -> GeneratedArtifact:
        """Replace the content of an existing file, keeping its original for rollback."""
        self.tracker.record_modified(path, path.read_text(encoding="utf-8"))
        atomic_write(path, new_content)
        logger.info("Updated %s: %s", kind or "file", path)
        return GeneratedArtifact(
            path=path, content=new_content, created=True, kind=kind, updated=True
        )


__all__: List[str] = [
    "RollbackResult",
    "ArtifactTracker",
    "atomic_write",
    "ArtifactWriter",
]
