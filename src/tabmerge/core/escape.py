# src/tabmerge/core/escape.py

# Only for names/paths shown in listings, never for file content.
_ESCAPE_TABLE = str.maketrans({
    "&": "&amp;",
    "<": "&lt;",
    ">": "&gt;",
    '"': "&quot;",
    "'": "&#39;",
})

def escape(text: str) -> str:
    """HTML-escapes a display string in a single pass."""
    return text.translate(_ESCAPE_TABLE)
