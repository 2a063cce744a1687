import re
from typing import Iterable, List, Optional, Sequence

from .cells import Cell, as_display_string

UNSAFE_CHARS = re.compile(r"[^A-Za-z0-9_]")

# name of the surrogate key column every table gets
RESERVED_NAMES = ("id",)


def normalize_header(cell: Optional[Cell], position: int) -> str:
    """Column name for one header cell; ``position`` is 0-based."""
    name = as_display_string(cell).strip()
    if not name:
        name = f"column_{position + 1}"
    return UNSAFE_CHARS.sub("_", name).lower()


def _unique(name: str, taken: set) -> str:
    if name not in taken:
        return name
    n = 2
    while f"{name}_{n}" in taken:
        n += 1
    return f"{name}_{n}"


def normalize_headers(
    header_row: Sequence[Optional[Cell]], reserved: Iterable[str] = RESERVED_NAMES
) -> List[str]:
    """Turn the header row into unique, lowercase, identifier-safe column names.

    Empty headers become ``column_<n>``; a name already used by an earlier
    column or by a reserved column gets a ``_2``, ``_3``, ... suffix.
    """
    taken = set(reserved)
    names = []
    for position, cell in enumerate(header_row):
        name = _unique(normalize_header(cell, position), taken)
        taken.add(name)
        names.append(name)
    return names
