"""
Change detection models
"""
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional


@dataclass
class ChangeReport:
    """
    Result of one change detection run.
    
    Attributes:
        changed: Paths that are new or whose digest changed
        staging_dir: Directory the changed files were copied into
    """
    changed: List[str] = field(default_factory=list)
    staging_dir: Optional[Path] = None

    @property
    def count(self) -> int:
        return len(self.changed)
