"""
File-based digest cache storage
"""
import json
from pathlib import Path
from typing import Dict, Union

from ...core.logging import get_logger

logger = get_logger(__name__)


class DigestCacheStore:
    """
    JSON file holding the path → digest map of the previous run.
    
    Read once and rewritten once per run; concurrent writers are not
    supported.
    """
    
    def __init__(self, cache_file: Union[str, Path]):
        """
        Initialize digest cache store.
        
        Args:
            cache_file: Path of the JSON cache file
        """
        self.cache_file = Path(cache_file).expanduser()
    
    def load(self) -> Dict[str, str]:
        """Load the previous mapping, empty if missing or unreadable"""
        if not self.cache_file.exists():
            return {}
        
        try:
            data = json.loads(self.cache_file.read_text(encoding='utf-8'))
        except (OSError, ValueError) as e:
            logger.warning(f"Ignoring unreadable digest cache {self.cache_file}: {e}")
            return {}
        
        if not isinstance(data, dict):
            logger.warning(f"Ignoring malformed digest cache {self.cache_file}")
            return {}
        return {str(k): str(v) for k, v in data.items()}
    
    def save(self, digests: Dict[str, str]) -> None:
        """Overwrite the cache with the current mapping"""
        self.cache_file.parent.mkdir(parents=True, exist_ok=True)
        self.cache_file.write_text(
            json.dumps(digests, indent=2, sort_keys=True, ensure_ascii=False),
            encoding='utf-8'
        )
