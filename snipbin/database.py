"""
Paste repository backed by the sharded filesystem layout.
Handles paste save, load with read-time expiry, and health checks.

A paste's creation time is never written into the record: the file's
modification time is the only clock, so rewriting a file restarts its TTL.
"""
import os
import time
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional, Union

from snipbin.config import settings
from snipbin.errors import (
    CorruptRecordError,
    InvalidTTLError,
    PasteExpiredError,
    PasteNotFoundError,
    WriteFailureError,
)
from snipbin.identifiers import generate_id
from snipbin.models import Paste
from snipbin.storage import StorageLayout, decode_record, encode_record
from snipbin.ttl import is_expired, is_valid_ttl


class PasteRepository:
    """Save and load pastes through the storage layout."""

    def __init__(self, root: Union[str, Path]):
        self.layout = StorageLayout(root)

    def init_storage(self) -> None:
        """Create the storage root if it does not exist."""
        self.layout.root.mkdir(parents=True, exist_ok=True)

    def is_healthy(self) -> bool:
        """Check that the storage root exists and is writable."""
        root = self.layout.root
        return root.is_dir() and os.access(root, os.W_OK | os.X_OK)

    def save(self, title: str, body: Union[str, bytes], ttl: str) -> str:
        """
        Save a new paste.

        The file is opened create/truncate/write-only with owner-only
        permissions and fsynced before returning. Identifier collisions are
        not checked; a collision overwrites the existing file.

        Args:
            title: Paste title (already validated by the caller)
            body: Paste content, text or raw bytes
            ttl: TTL registry label

        Returns:
            The generated paste identifier

        Raises:
            InvalidTTLError: If ttl is not a registry label
            WriteFailureError: If the shard, open, write or sync fails
        """
        if not is_valid_ttl(ttl):
            raise InvalidTTLError(ttl)

        paste_id = generate_id()
        path = self.layout.paste_path(paste_id, ttl)
        data = encode_record(title, body)

        try:
            self.layout.ensure_shard(paste_id)
            fd = os.open(path, os.O_CREAT | os.O_WRONLY | os.O_TRUNC, 0o600)
            with os.fdopen(fd, "wb") as f:
                f.write(data)
                f.flush()
                os.fsync(f.fileno())
        except OSError as e:
            raise WriteFailureError(str(e), paste_id) from e

        return paste_id

    def load(self, paste_id: str, now: Optional[float] = None) -> Paste:
        """
        Load a paste, deleting it if its TTL has elapsed.

        Args:
            paste_id: Identifier that already passed is_valid_id
            now: Optional clock override in epoch seconds

        Returns:
            The stored paste

        Raises:
            PasteNotFoundError: No file for this id (or it vanished mid-read)
            PasteExpiredError: The file was expired and has been removed
            CorruptRecordError: The filename or content can't be parsed, or the
                file exists but can't be stat'ed or read (wraps the OSError)
        """
        files = self.layout.find_paste_files(paste_id)
        if not files:
            raise PasteNotFoundError(paste_id)
        if len(files) > 1:
            raise CorruptRecordError(
                f"Multiple files stored for paste id: {[f.name for f in files]}", paste_id
            )

        path = files[0]
        parsed = self.layout.parse_filename(path.name)
        if parsed is None:
            raise CorruptRecordError(f"Invalid paste file format: {path.name}", paste_id)
        ttl = parsed[1]
        if not is_valid_ttl(ttl):
            raise CorruptRecordError(f"Invalid TTL in paste file: {path.name}", paste_id)

        try:
            created_at = path.stat().st_mtime
        except FileNotFoundError:
            raise PasteNotFoundError(paste_id)
        except OSError as e:
            raise CorruptRecordError(f"Cannot stat paste file {path.name}: {e}", paste_id) from e

        if now is None:
            now = self._get_current_time()

        if is_expired(created_at, ttl, now):
            path.unlink(missing_ok=True)
            raise PasteExpiredError(paste_id)

        try:
            data = path.read_bytes()
        except FileNotFoundError:
            raise PasteNotFoundError(paste_id)
        except OSError as e:
            raise CorruptRecordError(f"Cannot read paste file {path.name}: {e}", paste_id) from e

        try:
            title, body = decode_record(data)
        except CorruptRecordError as e:
            e.paste_id = paste_id
            raise

        return Paste(
            id=paste_id,
            title=title,
            body=body,
            ttl=ttl,
            created_at=datetime.fromtimestamp(created_at, tz=timezone.utc),
        )

    def _get_current_time(self) -> float:
        return time.time()


# Global repository instance
db = PasteRepository(settings.STORAGE_ROOT)


def get_repository() -> PasteRepository:
    """FastAPI dependency returning the global repository."""
    return db
