# src/tabmerge/models.py
from dataclasses import dataclass

@dataclass(frozen=True)
class FileRecord:
    """Immutable snapshot of one open document."""
    name: str
    path: str
    content: str
