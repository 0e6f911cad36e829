# src/tabmerge/core/session.py
import enum
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Sequence, Union

from tabmerge.core.combiner import combine
from tabmerge.core.enumerator import PathLike, list_open_text_documents
from tabmerge.core.presenter import Presenter
from tabmerge.core.selection import SelectionState
from tabmerge.errors import SessionStateError
from tabmerge.models import FileRecord


class SessionState(enum.Enum):
    AWAITING_ENUMERATION = "awaiting_enumeration"
    READY = "ready"


# --- Messages exchanged between the selection front end and the host ---

@dataclass(frozen=True)
class RequestFiles:
    """Asks the host to enumerate the open documents."""


@dataclass(frozen=True)
class GenerateFile:
    """Asks the host to show `text` as a new document."""
    text: str


@dataclass(frozen=True)
class FilesUpdated:
    """Host reply carrying the enumerated snapshot."""
    files: List[FileRecord]


Request = Union[RequestFiles, GenerateFile]


class Session:
    """
    Owns the records and selection for one view, from creation to disposal.

    Enumeration re-enters AWAITING_ENUMERATION and ends in READY with every
    record selected. When enumerations overlap, the most recently started one
    wins; results of older ones are returned to their caller but not stored.
    """

    def __init__(self, paths: Sequence[PathLike], presenter: Presenter, root: Optional[PathLike] = None):
        self.paths = list(paths)
        self.presenter = presenter
        self.root = Path(root) if root is not None else None
        self.state = SessionState.AWAITING_ENUMERATION
        self.records: List[FileRecord] = []
        self.selection = SelectionState(0)
        self._request_counter = 0

    async def handle(self, message: Request) -> Optional[FilesUpdated]:
        match message:
            case RequestFiles():
                files = await self.refresh()
                return FilesUpdated(files=files)
            case GenerateFile(text=text):
                await self.presenter.present(text)
                return None
            case _:
                raise TypeError(f"Unsupported message: {message!r}")

    async def refresh(self) -> List[FileRecord]:
        self._request_counter += 1
        request_id = self._request_counter
        self.state = SessionState.AWAITING_ENUMERATION

        files = await list_open_text_documents(self.paths, self.root)

        if request_id == self._request_counter:
            self.records = files
            self.selection = SelectionState(len(files))
            self.state = SessionState.READY
        return files

    def _require_ready(self) -> None:
        if self.state is not SessionState.READY:
            raise SessionStateError("Open documents have not been enumerated yet")

    def selected_records(self) -> List[FileRecord]:
        self._require_ready()
        return self.selection.select(self.records)

    def combine_selected(self) -> str:
        return combine(self.selected_records())

    async def generate(self) -> str:
        """Combines the current selection and presents it. Returns the text."""
        text = self.combine_selected()
        await self.handle(GenerateFile(text=text))
        return text
