# propedit/office/session.py
"""
Load/save orchestration for one metadata edit cycle.

load:  archive -> docProps/core.xml text -> field values -> editable form
save:  edits -> canonical form -> patched xml (from the pristine text) -> repacked archive

A MetadataEditor holds at most one EditSession. Every step of load/save runs
before any state is touched, so a failure leaves the editor exactly as it was.
"""
from __future__ import annotations
import logging
from dataclasses import dataclass, field
from datetime import tzinfo
from enum import Enum
from pathlib import PurePath
from types import MappingProxyType
from typing import Mapping, Optional

from propedit.errors import InvalidTimestamp, NoActiveSession, UnknownField
from propedit.office import archive, codec, timestamps
from propedit.settings import CORE_PROPERTIES_PATH

logger = logging.getLogger(__name__)


class SessionState(Enum):
    EMPTY = "empty"
    LOADED = "loaded"


@dataclass(frozen=True)
class EditSession:
    """Everything a save needs: the original bytes, the pristine xml and the shown values."""
    archive: bytes = field(repr=False)
    xml_text: str = field(repr=False)
    fields: Mapping[str, str]
    filename: Optional[str] = None
    tz: Optional[tzinfo] = None


def updated_filename(name: Optional[str]) -> str:
    """report.docx -> report-updated.docx"""
    if not name:
        return "document-updated"
    path = PurePath(name)
    if not path.suffix:
        return f"{path.name}-updated"
    return f"{path.stem}-updated{path.suffix}"


class MetadataEditor:
    def __init__(self):
        self._session: Optional[EditSession] = None

    @property
    def state(self) -> SessionState:
        return SessionState.LOADED if self._session is not None else SessionState.EMPTY

    @property
    def session(self) -> Optional[EditSession]:
        return self._session

    def _require_session(self) -> EditSession:
        if self._session is None:
            raise NoActiveSession()
        return self._session

    def load(self, file_bytes: bytes, filename: Optional[str] = None,
             tz: Optional[tzinfo] = None) -> dict[str, str]:
        xml_text = archive.extract_entry(file_bytes, CORE_PROPERTIES_PATH)
        stored = codec.decode(xml_text)

        display = dict(stored)
        for key in codec.TIMESTAMP_FIELDS:
            try:
                display[key] = timestamps.to_editable(stored[key], tz)
            except InvalidTimestamp:
                logger.warning("Unreadable %s timestamp %r in %s; showing it empty",
                               key, stored[key], filename or "upload")
                display[key] = ""

        self._session = EditSession(
            archive=file_bytes,
            xml_text=xml_text,
            fields=MappingProxyType(dict(display)),
            filename=filename,
            tz=tz,
        )
        logger.info("Loaded %s (%d bytes)", filename or "upload", len(file_bytes))
        return display

    def _to_updates(self, edits: Mapping[str, str], tz: Optional[tzinfo]) -> dict[str, str]:
        updates = {}
        for key, value in edits.items():
            if key not in codec.FIELD_TAGS:
                raise UnknownField(key)
            if key in codec.TIMESTAMP_FIELDS:
                if not value:
                    continue
                value = timestamps.to_canonical(value, tz)
            updates[key] = value
        return updates

    def save(self, edits: Optional[Mapping[str, str]] = None) -> bytes:
        session = self._require_session()
        updates = self._to_updates(edits or {}, session.tz)
        xml_text = codec.encode(session.xml_text, updates)
        data = archive.replace_entry_and_repack(session.archive, CORE_PROPERTIES_PATH, xml_text)
        logger.info("Saved %s with %s", self.download_name(), sorted(updates) or "no changes")
        return data

    def download_name(self) -> str:
        return updated_filename(self._require_session().filename)

    def reset(self) -> None:
        self._session = None
