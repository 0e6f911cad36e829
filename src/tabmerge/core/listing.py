# src/tabmerge/core/listing.py
from typing import List, Optional, Sequence

from tabmerge.config import EMPTY_LIST_MESSAGE
from tabmerge.core.escape import escape
from tabmerge.core.selection import SelectionState
from tabmerge.models import FileRecord

def format_listing(records: Sequence[FileRecord], selection: SelectionState,
                   token_counts: Optional[Sequence[int]] = None) -> str:
    """Plain-text table of the records, numbered from 1, with their selection marks."""
    if not records:
        return EMPTY_LIST_MESSAGE

    lines = []
    for i, record in enumerate(records):
        mark = "[x]" if selection.is_selected(i) else "[ ]"
        line = f"{i+1:>3}  {mark}  {record.name:<24}  {record.path}"
        if token_counts is not None:
            line += f"  ({token_counts[i]} tokens)"
        lines.append(line)
    return "\n".join(lines)

def render_listing_html(records: Sequence[FileRecord], selection: SelectionState) -> str:
    """Renders the selection list as HTML checkbox items."""
    if not records:
        return f"<p id=\"loading\">{escape(EMPTY_LIST_MESSAGE)}</p>"

    items: List[str] = []
    for i, record in enumerate(records):
        checked = " checked" if selection.is_selected(i) else ""
        items.append(
            f"<div class=\"file-item\">\n"
            f"  <input type=\"checkbox\" id=\"file-{i}\" data-index=\"{i}\"{checked}>\n"
            f"  <div class=\"file-info\">\n"
            f"    <label for=\"file-{i}\">{escape(record.name)}</label>\n"
            f"    <div class=\"file-path\">{escape(record.path)}</div>\n"
            f"  </div>\n"
            f"</div>"
        )
    return "<div id=\"file-list\" class=\"file-list\">\n" + "\n".join(items) + "\n</div>"
