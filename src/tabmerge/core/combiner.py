# src/tabmerge/core/combiner.py
from typing import Iterable

from tabmerge.config import HEADER_TEMPLATE, SECTION_SEPARATOR
from tabmerge.models import FileRecord

def format_header(path: str) -> str:
    """Returns the header line that opens a record's section."""
    return HEADER_TEMPLATE.format(path=path)

def combine(selected: Iterable[FileRecord]) -> str:
    """
    Merges the records into one text, in the order given.
    Each section is the path header, a blank line, then the raw content.
    Sections are separated by one blank line; no records gives "".
    """
    sections = [format_header(record.path) + SECTION_SEPARATOR + record.content for record in selected]
    return SECTION_SEPARATOR.join(sections)
