from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Optional


@dataclass(frozen=True)
class SourceLocation:
    file_path: Optional[Path] = None
    json_pointer: Optional[str] = None
    line: Optional[int] = None  # 1-based
    column: Optional[int] = None  # 1-based


def lookup_source(
    source_map: Optional[Dict[str, Dict[str, int]]],
    json_pointer: Optional[str],
    file_path: Optional[Path] = None,
) -> SourceLocation:
    """Find the position of *json_pointer*, falling back to the closest enclosing value."""
    if not source_map or json_pointer is None:
        return SourceLocation(file_path=file_path, json_pointer=json_pointer)

    pointer = json_pointer
    entry = source_map.get(pointer)
    while entry is None and pointer:
        pointer = pointer.rsplit("/", 1)[0]
        entry = source_map.get(pointer)

    if not entry:
        return SourceLocation(file_path=file_path, json_pointer=json_pointer)

    return SourceLocation(
        file_path=file_path,
        json_pointer=json_pointer,
        line=entry.get("line"),
        column=entry.get("column"),
    )


def format_source(loc: Optional[SourceLocation]) -> str:
    """Render *loc* as ``" (at file:line:column, /pointer)"`` for log messages."""
    if loc is None:
        return ""

    parts = []
    if loc.file_path is not None:
        parts.append(":".join(str(p) for p in (loc.file_path, loc.line, loc.column) if p is not None))
    if loc.json_pointer is not None:
        # the whole document is addressed by the empty pointer
        parts.append(loc.json_pointer or "/")

    return f" (at {', '.join(parts)})" if parts else ""
