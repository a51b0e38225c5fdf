"""
Background expiration sweep.

Reads only expire pastes that somebody asks for, so files nobody reads would
stay on disk forever. The sweeper walks a rotating window of shard
directories per pass and removes everything past its TTL. With the default
window of 16, all 256 shards are covered once every 16 passes.
"""
import os
import threading
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Tuple, Union

from snipbin.storage import SHARD_COUNT, StorageLayout
from snipbin.ttl import is_expired, is_valid_ttl

DEFAULT_WINDOW = 16


@dataclass
class SweepReport:
    """Outcome of a single sweep pass."""
    shards: List[str] = field(default_factory=list)
    examined: int = 0
    deleted: int = 0
    failed: List[Tuple[str, OSError]] = field(default_factory=list)


class ExpirationSweeper:
    """Incremental sweeper holding its own rotating shard offset."""

    def __init__(
        self,
        root: Union[str, Path],
        window: int = DEFAULT_WINDOW,
        start_offset: int = 0,
    ):
        if window < 1 or window > SHARD_COUNT:
            raise ValueError(f"window must be between 1 and {SHARD_COUNT}, got {window}")
        self.layout = StorageLayout(root)
        self.window = window
        self.offset = start_offset % SHARD_COUNT
        self._lock = threading.Lock()

    def sweep(self, now: Optional[float] = None) -> SweepReport:
        """
        Run one pass over the current window and advance the offset.

        Missing shard directories are skipped. Shards that exist but cannot
        be listed are recorded in the report and the pass continues.
        Unparseable names and unknown TTL labels are left alone.

        Args:
            now: Optional clock override in epoch seconds

        Returns:
            SweepReport for this pass
        """
        with self._lock:
            if now is None:
                now = time.time()
            report = SweepReport()
            for index in range(self.offset, self.offset + self.window):
                shard = self.layout.shard_dir_for_index(index)
                report.shards.append(shard.name)
                try:
                    self._sweep_shard(shard, now, report)
                except FileNotFoundError:
                    continue
                except OSError as e:
                    report.failed.append((shard.name, e))
            self.offset = (self.offset + self.window) % SHARD_COUNT
            return report

    def _sweep_shard(self, shard: Path, now: float, report: SweepReport) -> None:
        with os.scandir(shard) as entries:
            for entry in entries:
                if not entry.is_file(follow_symlinks=False):
                    continue
                parsed = self.layout.parse_filename(entry.name)
                if parsed is None or not is_valid_ttl(parsed[1]):
                    continue
                report.examined += 1
                try:
                    created_at = entry.stat(follow_symlinks=False).st_mtime
                except FileNotFoundError:
                    continue
                if is_expired(created_at, parsed[1], now):
                    try:
                        os.unlink(entry.path)
                    except FileNotFoundError:
                        continue
                    report.deleted += 1
