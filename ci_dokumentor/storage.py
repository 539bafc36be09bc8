"""Filesystem access used by renderers and migrations."""

from __future__ import annotations

import contextlib
import os
import shutil
import stat
import tempfile
from pathlib import Path
from typing import List

from .content import Content, ContentLike


class FileReader:
    """Read-only view of the filesystem."""

    def exists(self, path: Path) -> bool:
        return Path(path).is_file()

    def read(self, path: Path) -> Content:
        return Content(Path(path).read_bytes())

    def list_dir(self, path: Path) -> List[Path]:
        return sorted(Path(path).iterdir())

    def find(self, root: Path, pattern: str) -> List[Path]:
        """Return files under ``root`` matching the glob ``pattern``, sorted."""
        return sorted(candidate for candidate in Path(root).glob(pattern) if candidate.is_file())


class FileWriter:
    """Mutating filesystem operations; every write is atomic."""

    def write_atomic(self, path: Path, data: ContentLike) -> None:
        """Replace ``path`` with ``data`` through a sibling temp file and rename.

        The parent directory must already exist.
        """
        target = Path(path)
        payload = Content(data).to_bytes()
        mode = None
        if target.exists():
            mode = stat.S_IMODE(target.stat().st_mode)

        fd, tmp_path = tempfile.mkstemp(dir=target.parent, prefix=f".{target.name}.", suffix=".tmp")
        try:
            with os.fdopen(fd, "wb") as handle:
                handle.write(payload)
                handle.flush()
                os.fsync(handle.fileno())
            if mode is not None:
                os.chmod(tmp_path, mode)
            os.replace(tmp_path, target)
        except BaseException:
            with contextlib.suppress(OSError):
                os.unlink(tmp_path)
            raise

    def copy(self, source: Path, destination: Path) -> None:
        shutil.copyfile(source, destination)

    def delete(self, path: Path) -> None:
        with contextlib.suppress(FileNotFoundError):
            Path(path).unlink()

    def scratch_path(self, destination: Path) -> Path:
        """Reserve a private temp file named after ``destination``."""
        target = Path(destination)
        fd, tmp_path = tempfile.mkstemp(prefix=f"ci-dokumentor-{target.stem}-", suffix=target.suffix)
        os.close(fd)
        return Path(tmp_path)


__all__ = ["FileReader", "FileWriter"]
