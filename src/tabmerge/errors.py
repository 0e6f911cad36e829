# src/tabmerge/errors.py

class TabmergeError(Exception):
    """Base class for tabmerge errors."""


class SessionStateError(TabmergeError):
    """Raised when a session operation needs records that have not arrived yet."""
