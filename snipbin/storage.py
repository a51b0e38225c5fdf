"""
On-disk layout of the paste store.

Pastes live under a storage root split into 256 shard directories named after
the first two hex characters of the paste id:

    <root>/<id[:2]>/<id>_<ttl>.txt

The TTL label is carried only in the filename. The file content is the title,
a newline, then the raw body.
"""
from pathlib import Path
from typing import List, Optional, Tuple, Union

from snipbin.errors import CorruptRecordError

SHARD_COUNT = 256
RECORD_SUFFIX = ".txt"


class StorageLayout:
    """Maps paste identifiers to shard directories and file paths."""

    def __init__(self, root: Union[str, Path]):
        self.root = Path(root)

    @staticmethod
    def shard_name(paste_id: str) -> str:
        return paste_id[:2]

    def shard_dir(self, paste_id: str) -> Path:
        return self.root / self.shard_name(paste_id)

    def shard_dir_for_index(self, index: int) -> Path:
        return self.root / f"{index % SHARD_COUNT:02x}"

    def paste_path(self, paste_id: str, ttl: str) -> Path:
        return self.shard_dir(paste_id) / f"{paste_id}_{ttl}{RECORD_SUFFIX}"

    def ensure_shard(self, paste_id: str) -> Path:
        """Create the shard directory for paste_id if missing."""
        shard = self.shard_dir(paste_id)
        shard.mkdir(mode=0o755, parents=True, exist_ok=True)
        return shard

    def find_paste_files(self, paste_id: str) -> List[Path]:
        """
        Find the stored files for an identifier.

        The caller only knows the id, not the TTL, so the shard is matched
        against ``<id>_*.txt``. A missing shard directory yields no matches.

        Args:
            paste_id: Already validated paste identifier

        Returns:
            Sorted list of matching paths (normally zero or one)
        """
        return sorted(self.shard_dir(paste_id).glob(f"{paste_id}_*{RECORD_SUFFIX}"))

    @staticmethod
    def parse_filename(name: str) -> Optional[Tuple[str, str]]:
        """Split ``<id>_<ttl>.txt`` into (id, ttl), or None if the name doesn't fit."""
        if not name.endswith(RECORD_SUFFIX):
            return None
        parts = name[: -len(RECORD_SUFFIX)].split("_")
        if len(parts) != 2 or not parts[0] or not parts[1]:
            return None
        return parts[0], parts[1]


def encode_record(title: str, body: Union[str, bytes]) -> bytes:
    if isinstance(body, str):
        body = body.encode("utf-8")
    return title.encode("utf-8") + b"\n" + body


def decode_record(data: bytes) -> Tuple[str, bytes]:
    """
    Split raw file content into (title, body).

    Raises:
        CorruptRecordError: If there is no title separator or the title
            is not valid UTF-8
    """
    parts = data.split(b"\n", 1)
    if len(parts) < 2:
        raise CorruptRecordError("Invalid paste content")
    try:
        title = parts[0].decode("utf-8")
    except UnicodeDecodeError as e:
        raise CorruptRecordError(f"Invalid paste title encoding: {e}") from e
    return title, parts[1]
