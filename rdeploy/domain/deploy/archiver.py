"""
tar.gz archive creation
"""
import os
import stat
import tarfile
from pathlib import Path
from typing import Optional, Union

from ...core.exceptions import ArchiveError
from ...core.logging import get_logger

logger = get_logger(__name__)


def archive_directory(
    src_dir: Union[str, Path],
    output: Union[str, Path],
    root_name: Optional[str] = None,
) -> Path:
    """
    Pack a directory tree into a gzip compressed tar file.

    With ``root_name`` every entry is nested under that single top-level
    directory. Without it the contents of ``src_dir`` sit directly at the
    archive root. Only directories and regular files are archived;
    symlinks and special files are skipped.

    Args:
        src_dir: Directory to pack
        output: Archive path, replaced if it already exists
        root_name: Optional top-level directory name inside the archive

    Returns:
        Path of the written archive

    Raises:
        ArchiveError: Source missing or archive could not be written
    """
    src = Path(src_dir).expanduser()
    out = Path(output)

    if not src.is_dir():
        raise ArchiveError(f"Source directory does not exist: {src}")

    try:
        if out.exists() or out.is_symlink():
            out.unlink()

        with tarfile.open(out, "w:gz") as tar:
            if root_name:
                tar.add(str(src), arcname=root_name, recursive=False)
            for path, arcname in _walk_entries(src):
                if root_name:
                    arcname = f"{root_name}/{arcname}"
                tar.add(str(path), arcname=arcname, recursive=False)
    except (OSError, tarfile.TarError) as e:
        raise ArchiveError(f"Failed to archive {src} → {out}: {e}") from e

    logger.debug(f"[archive] {src} → {out}")
    return out


def _walk_entries(src: Path):
    """Yield (path, relative posix name) for every directory and regular file under src"""
    for dirpath, dirnames, filenames in os.walk(src):
        dirnames.sort()
        base = Path(dirpath)
        for name in dirnames + sorted(filenames):
            path = base / name
            mode = os.lstat(path).st_mode
            if not (stat.S_ISDIR(mode) or stat.S_ISREG(mode)):
                continue
            yield path, path.relative_to(src).as_posix()
