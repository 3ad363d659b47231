# propedit/office/archive.py
"""
In-memory ZIP access for OOXML packages:
- Read one named entry as text.
- Replace one named entry and re-pack, carrying every other entry over
  unchanged (order, ZipInfo metadata, compression type, archive comment).
Inputs are never mutated; callers always get a fresh buffer back.
"""
from __future__ import annotations
import logging
import zipfile
import zlib
from contextlib import contextmanager
from io import BytesIO
from typing import Iterator

from propedit.errors import ArchiveCorrupt, EntryNotFound

logger = logging.getLogger(__name__)

# zipfile raises these for truncated data, CRC mismatches,
# encrypted members and unsupported compression methods
_READ_ERRORS = (zipfile.BadZipFile, zlib.error, EOFError, NotImplementedError, RuntimeError)


@contextmanager
def _open(archive_bytes: bytes) -> Iterator[zipfile.ZipFile]:
    try:
        zin = zipfile.ZipFile(BytesIO(archive_bytes), "r")
    except (zipfile.BadZipFile, EOFError, ValueError) as exc:
        raise ArchiveCorrupt("Error reading ZIP file.") from exc
    with zin:
        yield zin


def _read_member(zin: zipfile.ZipFile, item: zipfile.ZipInfo | str) -> bytes:
    try:
        return zin.read(item)
    except _READ_ERRORS as exc:
        name = item.filename if isinstance(item, zipfile.ZipInfo) else item
        raise ArchiveCorrupt(f"Error reading ZIP entry {name!r}.") from exc


def list_entries(archive_bytes: bytes) -> list[str]:
    with _open(archive_bytes) as zin:
        return zin.namelist()


def extract_entry(archive_bytes: bytes, entry_path: str) -> str:
    with _open(archive_bytes) as zin:
        if entry_path not in zin.namelist():
            raise EntryNotFound(entry_path)
        data = _read_member(zin, entry_path)
    try:
        return data.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise ArchiveCorrupt(f"Entry {entry_path!r} is not UTF-8 text.") from exc


def replace_entry_and_repack(archive_bytes: bytes, entry_path: str, new_entry_text: str) -> bytes:
    """Untouched entries keep their decompressed bytes; they are recompressed, so raw deflate streams may differ."""
    new_data = new_entry_text.encode("utf-8")
    out = BytesIO()
    with _open(archive_bytes) as zin:
        if entry_path not in zin.namelist():
            raise EntryNotFound(entry_path)
        with zipfile.ZipFile(out, "w") as zout:
            zout.comment = zin.comment
            for item in zin.infolist():
                if item.filename == entry_path:
                    zout.writestr(item, new_data)
                else:
                    # writestr(ZipInfo) keeps the member's compress_type, dates and attributes
                    zout.writestr(item, _read_member(zin, item))
    logger.debug("Repacked archive: replaced %s (%d bytes)", entry_path, len(new_data))
    return out.getvalue()
