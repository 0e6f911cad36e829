# src/tabmerge/core/enumerator.py
import sys
import asyncio
from pathlib import Path
from typing import List, Optional, Sequence, Union

from tabmerge.config import BINARY_SNIFF_SIZE
from tabmerge.models import FileRecord

PathLike = Union[str, Path]

def _is_binary_file(path: Path) -> bool:
    """
    Reads the first bytes to check for null bytes.
    Returns True if likely binary, False if likely text.
    """
    with path.open("rb") as f:
        chunk = f.read(BINARY_SNIFF_SIZE)
        return b'\0' in chunk

def display_path(path: Path, root: Path) -> str:
    """Workspace-relative POSIX path, or the absolute path when outside the root."""
    try:
        return path.relative_to(root).as_posix()
    except ValueError:
        return str(path)

def read_record(path: Path, root: Path) -> FileRecord:
    """
    Loads one document. Raises OSError / UnicodeDecodeError on failure,
    and ValueError when the document does not look like text.
    """
    if _is_binary_file(path):
        raise ValueError("binary content")
    # newline="" keeps the document's own line endings
    with open(path, "r", encoding="utf-8", newline="") as f:
        content = f.read()
    return FileRecord(name=path.name, path=display_path(path, root), content=content)

async def _read_or_skip(raw_path: PathLike, root: Path) -> Optional[FileRecord]:
    try:
        # Relative paths are taken relative to the workspace root
        path = (root / Path(raw_path)).resolve()
        return await asyncio.to_thread(read_record, path, root)
    except (OSError, UnicodeDecodeError, ValueError) as e:
        print(f"  > [Warning] Skipping {raw_path} (read error: {e})", file=sys.stderr)
        return None

async def list_open_text_documents(paths: Sequence[PathLike], root: Optional[PathLike] = None) -> List[FileRecord]:
    """
    Reads every open document concurrently and returns the ones that loaded,
    in the order of `paths` (not completion order).
    Duplicate paths are kept; a document that fails to read is dropped.
    """
    root_dir = Path(root).resolve() if root is not None else Path.cwd().resolve()
    results = await asyncio.gather(*(_read_or_skip(p, root_dir) for p in paths))
    return [record for record in results if record is not None]
