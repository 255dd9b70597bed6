"""
Remittance Archive Store.

File-based JSON backups of charges removed after their remittance cycle.
One document per period: remessa_<period>.json = {"cobrancas": [...]}.

Blocking file I/O runs in a worker thread so the event loop keeps serving
other requests.
"""

import asyncio
import json
import os
import re
import tempfile
from pathlib import Path
from typing import Any, Dict, List

from backend.app.core.config import settings
from backend.app.core.exceptions import ResourceNotFoundError, ValidationError

ARCHIVE_PREFIX = "remessa_"
ARCHIVE_SUFFIX = ".json"
ARCHIVE_LIST_KEY = "cobrancas"

_PERIOD_CHARS = r"[A-Za-z0-9_-]+"
PERIOD_PATTERN = rf"^{_PERIOD_CHARS}$"

_PERIOD_RE = re.compile(PERIOD_PATTERN)
_FILENAME_RE = re.compile(rf"^{ARCHIVE_PREFIX}{_PERIOD_CHARS}\{ARCHIVE_SUFFIX}$")


class _PeriodLock:
    """Lock plus the number of appends currently holding or awaiting it."""

    def __init__(self):
        self.lock = asyncio.Lock()
        self.users = 0


class ArchiveStore:
    """Read-merge-write JSON archives in a single directory."""

    def __init__(self, directory: str):
        self.directory = Path(directory)
        # Serializes merges per period within this process only; entries are
        # dropped once no append is using them
        self._locks: Dict[str, _PeriodLock] = {}

    @staticmethod
    def file_name(period: str) -> str:
        if not period or not _PERIOD_RE.match(period):
            raise ValidationError("Invalid period label", field="periodo", details={"value": period})
        return f"{ARCHIVE_PREFIX}{period}{ARCHIVE_SUFFIX}"

    async def append(self, period: str, snapshots: List[Dict[str, Any]]) -> Path:
        """Append snapshots to the period's archive, rewriting the whole document."""
        name = self.file_name(period)
        entry = self._locks.get(period)
        if entry is None:
            entry = self._locks[period] = _PeriodLock()
        entry.users += 1
        try:
            async with entry.lock:
                return await asyncio.to_thread(self._merge_and_write, name, snapshots)
        finally:
            entry.users -= 1
            if entry.users == 0:
                del self._locks[period]

    def _merge_and_write(self, name: str, snapshots: List[Dict[str, Any]]) -> Path:
        self.directory.mkdir(parents=True, exist_ok=True)
        path = self.directory / name

        document = {ARCHIVE_LIST_KEY: []}
        if path.exists():
            # A corrupt archive raises here and is left untouched
            with path.open("r", encoding="utf-8") as fh:
                document = json.load(fh)
            if not isinstance(document.get(ARCHIVE_LIST_KEY), list):
                raise ValueError(f"{name} has no '{ARCHIVE_LIST_KEY}' list")

        document[ARCHIVE_LIST_KEY].extend(snapshots)

        fd, tmp_path = tempfile.mkstemp(dir=self.directory, prefix=f".{name}.", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                json.dump(document, fh, ensure_ascii=False, indent=2)
            os.replace(tmp_path, path)
        except BaseException:
            if os.path.exists(tmp_path):
                os.unlink(tmp_path)
            raise
        return path

    async def list_files(self) -> List[str]:
        """Archive file names, newest first."""
        return await asyncio.to_thread(self._list_files)

    def _list_files(self) -> List[str]:
        if not self.directory.is_dir():
            return []
        entries = [
            entry for entry in self.directory.iterdir()
            if entry.is_file() and _FILENAME_RE.match(entry.name)
        ]
        entries.sort(key=lambda entry: (entry.stat().st_mtime, entry.name), reverse=True)
        return [entry.name for entry in entries]

    def resolve(self, name: str) -> Path:
        """Path of an existing archive file, or ResourceNotFoundError."""
        if not _FILENAME_RE.match(name or ""):
            raise ResourceNotFoundError("Archive file", name)
        path = self.directory / name
        if not path.is_file():
            raise ResourceNotFoundError("Archive file", name)
        return path


archive_store = ArchiveStore(settings.archive_dir)


def get_archive_store() -> ArchiveStore:
    """FastAPI dependency for the archive store."""
    return archive_store
