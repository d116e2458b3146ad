"""
Content-hash change detection and staging
"""
import os
import stat
import shutil
import hashlib
from pathlib import Path
from typing import Dict, List, Optional, Union

from ...core.constants import HASH_READ_BLOCK, STAGING_DIR_NAME
from ...core.exceptions import FsError
from ...core.logging import get_logger
from ...core.utils import ErrorPolicy, run_guarded
from ...infrastructure.state.digest_store import DigestCacheStore
from .models import ChangeReport

logger = get_logger(__name__)

STAGING_SEGMENT = f"/{STAGING_DIR_NAME}/"


def compute_file_digest(path: Union[str, Path]) -> str:
    """MD5 hex digest of a file's content"""
    hasher = hashlib.md5()
    with open(path, 'rb') as f:
        while True:
            chunk = f.read(HASH_READ_BLOCK)
            if not chunk:
                break
            hasher.update(chunk)
    return hasher.hexdigest()


def scan_digests(target_dir: Union[str, Path], exclude: Optional[Path] = None) -> Dict[str, str]:
    """
    Digest every regular file under target_dir.
    
    Files below a ``temp`` directory and the ``exclude`` file are skipped,
    as are files that cannot be read.
    
    Returns:
        Mapping of path string → hex digest
    """
    excluded = os.path.abspath(exclude) if exclude else None
    digests: Dict[str, str] = {}
    
    for dirpath, dirnames, filenames in os.walk(str(target_dir)):
        dirnames.sort()
        for name in sorted(filenames):
            path = os.path.join(dirpath, name)
            if STAGING_SEGMENT in Path(path).as_posix():
                continue
            if excluded and os.path.abspath(path) == excluded:
                continue
            try:
                if not stat.S_ISREG(os.lstat(path).st_mode):
                    continue
                digests[path] = compute_file_digest(path)
            except OSError as e:
                logger.warning(f"Skipping unreadable file {path}: {e}")
    
    return digests


def detect_changes(previous: Dict[str, str], current: Dict[str, str]) -> List[str]:
    """
    Paths in current that are new or whose digest differs from previous.
    
    Paths that only exist in previous (deleted files) are not reported.
    """
    return sorted(
        path for path, digest in current.items()
        if previous.get(path) != digest
    )


def reset_staging_dir(staging_dir: Path) -> None:
    """Delete and recreate the staging directory"""
    try:
        shutil.rmtree(staging_dir)
    except FileNotFoundError:
        pass
    except OSError as e:
        raise FsError(f"Failed to clear {staging_dir}: {e}") from e
    
    try:
        staging_dir.mkdir(parents=True)
    except OSError as e:
        raise FsError(f"Failed to create {staging_dir}: {e}") from e


class ChangeDetector:
    """
    Find files changed since the last run and copy them to ``temp/``.
    
    Process:
    1. Load previous digests from the cache (missing or corrupt → empty)
    2. Digest the current tree
    3. Diff: new or modified files only
    4. Recreate ``{target}/temp``
    5. Copy changed files into it, flattened to their base names
    6. Save current digests (failure is logged, not raised)
    """
    
    def __init__(self, target_dir: Union[str, Path], store: DigestCacheStore):
        self.target_dir = str(Path(target_dir).expanduser())
        self.store = store
    
    @property
    def staging_dir(self) -> Path:
        return Path(self.target_dir) / STAGING_DIR_NAME
    
    def run(self) -> ChangeReport:
        """
        Returns:
            ChangeReport with the changed paths and staging directory
        
        Raises:
            FsError: Target directory missing or staging directory not writable
        """
        if not os.path.isdir(self.target_dir):
            raise FsError(f"Target directory does not exist: {self.target_dir}")
        
        previous = self.store.load()
        current = scan_digests(self.target_dir, exclude=self.store.cache_file)
        changed = detect_changes(previous, current)
        
        staging_dir = self.staging_dir
        reset_staging_dir(staging_dir)
        
        # Same base name in different directories: last copy wins
        for path in changed:
            dest = staging_dir / os.path.basename(path)
            try:
                shutil.copyfile(path, dest)
            except OSError as e:
                logger.error(f"Failed to copy {path} → {dest}: {e}")
        
        run_guarded(
            ErrorPolicy.BEST_EFFORT,
            f"Saving digest cache {self.store.cache_file}",
            lambda: self.store.save(current),
        )
        
        logger.info(f"Processed {len(changed)} changed file(s)")
        return ChangeReport(changed=changed, staging_dir=staging_dir)


def detect_and_stage(target_dir: Union[str, Path], cache_file: Union[str, Path]) -> int:
    """Run change detection and return the number of changed files"""
    return ChangeDetector(target_dir, DigestCacheStore(cache_file)).run().count
