# src/tabmerge/core/presenter.py
import sys
import asyncio
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Optional, TextIO, Union

class Presenter(ABC):
    """Materializes a combined text as a new document."""

    @abstractmethod
    async def present(self, text: str) -> None:
        """Shows `text` as a new, unsaved document."""


class StdoutPresenter(Presenter):
    def __init__(self, stream: Optional[TextIO] = None):
        self.stream = stream

    async def present(self, text: str) -> None:
        # Resolved at call time so pytest's capsys sees the output
        stream = self.stream if self.stream is not None else sys.stdout
        stream.write(text)
        if text and not text.endswith("\n"):
            stream.write("\n")
        stream.flush()


class FilePresenter(Presenter):
    """Writes the combined text to a file, replacing any previous content."""

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)

    def _write(self, text: str) -> None:
        with open(self.path, "w", encoding="utf-8") as f:
            f.write(text)

    async def present(self, text: str) -> None:
        await asyncio.to_thread(self._write, text)
