"""File-operations port and its local filesystem implementation."""

from __future__ import annotations

import errno
import logging
import os
import shutil
from pathlib import Path
from typing import Callable, Protocol

from nameit.errors import FileOperationError, ValidationError

ACTIONS = ("copy", "move", "rename")

logger = logging.getLogger(__name__)


class FileOperations(Protocol):
    """Contract for the filesystem mutations applied to renamed files."""

    def copy(self, src: Path, dst: Path) -> None:
        """Copy ``src`` to ``dst`` keeping the source."""

    def rename(self, src: Path, dst: Path) -> None:
        """Rename ``src`` to ``dst`` on the same volume."""

    def move(self, src: Path, dst: Path) -> None:
        """Copy ``src`` to ``dst`` then delete the source."""


class LocalFileOperations:
    """File operations backed by ``shutil`` and ``os``."""

    def copy(self, src: Path, dst: Path) -> None:
        try:
            shutil.copy2(src, dst)
        except OSError as exc:
            raise _operation_error("copy", src, dst, exc) from exc

    def rename(self, src: Path, dst: Path) -> None:
        try:
            os.replace(src, dst)
        except OSError as exc:
            if exc.errno == errno.EXDEV:
                raise FileOperationError(
                    what=f"cannot rename {src} to {dst} across volumes.",
                    why="rename only changes the name within one mount point",
                    remediation="use --move to copy the file and remove the original",
                ) from exc
            raise _operation_error("rename", src, dst, exc) from exc

    def move(self, src: Path, dst: Path) -> None:
        self.copy(src, dst)
        try:
            os.remove(src)
        except OSError as exc:
            raise _operation_error("remove original after moving", src, dst, exc) from exc


def validate_source_path(path: str | Path) -> Path:
    """Validate that an input path exists and is a regular file."""
    source = Path(path)
    if not source.exists():
        raise FileOperationError(
            what=f"file not found: {source}",
            why="the provided path does not exist",
            remediation="provide an existing file path",
        )
    if not source.is_file():
        raise FileOperationError(
            what=f"path must reference a file: {source}",
            why="directories cannot be renamed by nameit",
            remediation="point nameit at files only",
        )
    return source


def build_destination(source: Path, name: str, destination_dir: str | Path | None = None) -> Path:
    """Place ``name`` plus the source's last extension next to the source or in ``destination_dir``."""
    candidate = Path(name)
    if not name or candidate.is_absolute() or len(candidate.parts) != 1 or name in {".", ".."}:
        raise FileOperationError(
            what=f"rendered name '{name}' is not a plain filename.",
            why="names must not be empty or contain path separators",
            remediation="choose values without '/' or use --destination for directories",
        )
    filename = f"{name}{source.suffix}"
    parent = Path(destination_dir) if destination_dir is not None else source.parent
    return parent / filename


def apply_action(
    action: str,
    source: Path,
    target: Path,
    ops: FileOperations,
    *,
    replace: bool = False,
    test: bool = False,
    confirm: Callable[[Path], bool] | None = None,
) -> str:
    """Apply a copy/move/rename and report what happened.

    Returns ``"tested"`` in test mode, ``"skipped"`` when an existing target
    was not confirmed, otherwise the action name.
    """
    if action not in ACTIONS:
        options = ", ".join(ACTIONS)
        raise ValidationError(
            what=f"unsupported file action '{action}'.",
            why=f"nameit can only {options} files",
            remediation=f"choose one of: {options}",
        )
    if test:
        return "tested"
    if target.exists() and not replace:
        if confirm is None or not confirm(target):
            logger.info("Skipped %s: %s already exists", source, target)
            return "skipped"

    getattr(ops, action)(source, target)
    logger.info("%s %s -> %s", action.capitalize(), source, target)
    return action


def _operation_error(operation: str, src: Path, dst: Path, exc: OSError) -> FileOperationError:
    return FileOperationError(
        what=f"failed to {operation}: {src} -> {dst}",
        why=exc.strerror or str(exc),
        remediation="check the paths and permissions, then re-run for this file",
    )
