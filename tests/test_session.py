# tests/test_session.py

import sys
import time
import asyncio
import pytest
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from tabmerge.core import enumerator as enumerator_module
from tabmerge.core import session as session_module
from tabmerge.core.enumerator import list_open_text_documents
from tabmerge.core.presenter import FilePresenter, Presenter, StdoutPresenter
from tabmerge.core.session import (
    FilesUpdated, GenerateFile, RequestFiles, Session, SessionState,
)
from tabmerge.errors import SessionStateError
from tabmerge.models import FileRecord


class RecordingPresenter(Presenter):
    def __init__(self):
        self.shown = []

    async def present(self, text: str) -> None:
        self.shown.append(text)


@pytest.fixture
def workspace(tmp_path):
    """
    A workspace with a few text documents, a binary one,
    and one that is not valid UTF-8.
    """
    src = tmp_path / "src"
    src.mkdir()
    (src / "main.py").write_text("print('main')", encoding="utf-8")
    (src / "utils.py").write_text("def util(): pass", encoding="utf-8")
    (tmp_path / "README.md").write_text("# Project", encoding="utf-8")
    (tmp_path / "image.png").write_bytes(b"\x89PNG\r\n\x1a\n\x00\x00\x00\rIHDR")
    (tmp_path / "latin1.txt").write_bytes("caf\xe9".encode("latin-1"))
    return tmp_path

# --- Enumerator ---

def test_enumerate_keeps_given_order(workspace):
    paths = ["README.md", "src/utils.py", "src/main.py"]
    records = asyncio.run(list_open_text_documents(paths, workspace))

    assert [r.path for r in records] == paths
    assert [r.name for r in records] == ["README.md", "utils.py", "main.py"]
    assert records[0].content == "# Project"

def test_enumerate_order_ignores_completion_order(monkeypatch, workspace):
    """Earlier documents finish last, the result still follows the given order."""
    real_read = enumerator_module.read_record
    delays = {"README.md": 0.3, "utils.py": 0.15, "main.py": 0.0}
    finished = []

    def slow_read(path, root):
        time.sleep(delays[path.name])
        finished.append(path.name)
        return real_read(path, root)

    monkeypatch.setattr(enumerator_module, "read_record", slow_read)
    paths = ["README.md", "src/utils.py", "src/main.py"]
    records = asyncio.run(list_open_text_documents(paths, workspace))

    assert finished == ["main.py", "utils.py", "README.md"]
    assert [r.path for r in records] == paths

def test_enumerate_keeps_line_endings(workspace):
    (workspace / "crlf.txt").write_bytes(b"a\r\nb\r\n")
    (workspace / "cr.txt").write_bytes(b"x\ry")
    records = asyncio.run(list_open_text_documents(["crlf.txt", "cr.txt"], workspace))

    assert [r.content for r in records] == ["a\r\nb\r\n", "x\ry"]

def test_enumerate_skips_invalid_path(workspace, capsys):
    records = asyncio.run(list_open_text_documents(["README.md", "bad\0name"], workspace))

    assert [r.path for r in records] == ["README.md"]
    assert "Skipping bad" in capsys.readouterr().err

def test_enumerate_drops_unreadable_documents(workspace, capsys):
    paths = ["src/main.py", "missing.txt", "image.png", "latin1.txt", "src", "README.md"]
    records = asyncio.run(list_open_text_documents(paths, workspace))

    assert [r.path for r in records] == ["src/main.py", "README.md"]
    err = capsys.readouterr().err
    assert "Skipping missing.txt" in err
    assert "Skipping image.png" in err
    assert "Skipping latin1.txt" in err

def test_enumerate_keeps_duplicates(workspace):
    records = asyncio.run(list_open_text_documents(["README.md", "README.md"], workspace))
    assert len(records) == 2

def test_enumerate_outside_root_uses_absolute_path(workspace, tmp_path_factory):
    other = tmp_path_factory.mktemp("elsewhere") / "outside.txt"
    other.write_text("out", encoding="utf-8")

    records = asyncio.run(list_open_text_documents([str(other)], workspace))

    assert records == [FileRecord(name="outside.txt", path=str(other.resolve()), content="out")]

def test_enumerate_nothing():
    assert asyncio.run(list_open_text_documents([])) == []

# --- Presenters ---

def test_file_presenter_writes_exact_text(tmp_path):
    target = tmp_path / "out.txt"
    asyncio.run(FilePresenter(target).present("a\n\nb"))
    assert target.read_text(encoding="utf-8") == "a\n\nb"

def test_stdout_presenter(capsys):
    asyncio.run(StdoutPresenter().present("combined"))
    assert capsys.readouterr().out == "combined\n"

# --- Session ---

def test_session_starts_awaiting_enumeration(workspace):
    session = Session(["README.md"], RecordingPresenter(), root=workspace)
    assert session.state is SessionState.AWAITING_ENUMERATION
    with pytest.raises(SessionStateError):
        session.combine_selected()

def test_session_request_files(workspace):
    session = Session(["src/main.py", "README.md"], RecordingPresenter(), root=workspace)
    reply = asyncio.run(session.handle(RequestFiles()))

    assert isinstance(reply, FilesUpdated)
    assert [f.path for f in reply.files] == ["src/main.py", "README.md"]
    assert session.state is SessionState.READY
    assert session.selection.selected_indices() == [0, 1]

def test_session_generate_presents_selection(workspace):
    presenter = RecordingPresenter()
    session = Session(["src/main.py", "src/utils.py", "README.md"], presenter, root=workspace)

    async def scenario():
        await session.handle(RequestFiles())
        session.selection.toggle(1)
        return await session.generate()

    text = asyncio.run(scenario())

    assert text == (
        "// ===== File: src/main.py =====\n\nprint('main')\n\n"
        "// ===== File: README.md =====\n\n# Project"
    )
    assert presenter.shown == [text]
    assert session.state is SessionState.READY

def test_session_generate_file_message(workspace):
    presenter = RecordingPresenter()
    session = Session([], presenter, root=workspace)
    assert asyncio.run(session.handle(GenerateFile(text="raw <text>"))) is None
    assert presenter.shown == ["raw <text>"]

def test_session_rejects_unknown_message(workspace):
    session = Session([], RecordingPresenter(), root=workspace)
    with pytest.raises(TypeError):
        asyncio.run(session.handle("getFiles"))

def test_session_refresh_resets_selection(workspace):
    session = Session(["src/main.py", "README.md"], RecordingPresenter(), root=workspace)

    async def scenario():
        await session.handle(RequestFiles())
        session.selection.set_all(False)
        (workspace / "README.md").write_text("# Changed", encoding="utf-8")
        await session.handle(RequestFiles())

    asyncio.run(scenario())

    assert session.selection.selected_indices() == [0, 1]
    assert session.records[1].content == "# Changed"

def test_session_last_request_wins(monkeypatch, workspace):
    """An older enumeration finishing after a newer one must not overwrite it."""
    calls = []

    async def fake_enumerate(paths, root):
        release = asyncio.Event()
        calls.append(release)
        await release.wait()
        return [FileRecord(name=f"n{len(calls)}", path=f"call-{id(release)}", content="")]

    monkeypatch.setattr(session_module, "list_open_text_documents", fake_enumerate)
    session = Session(["x"], RecordingPresenter(), root=workspace)

    async def scenario():
        first = asyncio.create_task(session.refresh())
        await asyncio.sleep(0)
        second = asyncio.create_task(session.refresh())
        await asyncio.sleep(0)

        calls[1].set()
        newest = await second
        assert session.state is SessionState.READY

        calls[0].set()
        stale = await first
        return newest, stale

    newest, stale = asyncio.run(scenario())

    assert session.records == newest
    assert session.records != stale
    assert session.state is SessionState.READY

def test_presenter_is_abstract():
    with pytest.raises(TypeError):
        Presenter()
