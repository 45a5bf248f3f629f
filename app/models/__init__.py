from .entry import Entry, TABLE_NAME, ROOT_ID

__all__ = [
    "Entry",
    "TABLE_NAME",
    "ROOT_ID",
]
