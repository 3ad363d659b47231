# propedit/utils/signature.py
"""
Lightweight structure checks so an upload named .docx really is a Word package
(and likewise for .xlsx/.pptx) before it reaches the editor.
"""
from __future__ import annotations
from propedit.errors import ArchiveCorrupt
from propedit.office.archive import list_entries

# OOXML packages are ZIP containers; the main part's folder tells them apart
_PART_PREFIXES = {
    ".docx": "word/",
    ".xlsx": "xl/",
    ".pptx": "ppt/",
}

def _is_zip(data: bytes) -> bool:
    return data.startswith(b"PK\x03\x04") or data.startswith(b"PK\x05\x06")

def _names(data: bytes) -> list[str]:
    try:
        return list_entries(data)
    except ArchiveCorrupt:
        return []

def detect_extension(data: bytes) -> str | None:
    """Return a normalized extension (with dot), or None if not an OOXML package."""
    if not _is_zip(data):
        return None
    names = _names(data)
    for ext, prefix in _PART_PREFIXES.items():
        if any(n.startswith(prefix) for n in names):
            return ext
    return None

def ext_equivalent(a: str, b: str) -> bool:
    """True if both name the same extension, ignoring case and the leading dot."""
    a = a.lstrip(".").lower()
    b = b.lstrip(".").lower()
    return a == b
