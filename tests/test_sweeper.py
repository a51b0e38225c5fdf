"""
Expiration sweeper tests.
"""
import pytest

from snipbin.sweeper import ExpirationSweeper


def _plant(root, name, content=b"t\nb"):
    shard = root / name[:2]
    shard.mkdir(parents=True, exist_ok=True)
    path = shard / name
    path.write_bytes(content)
    return path


@pytest.fixture
def sweeper(storage_root):
    storage_root.mkdir(parents=True, exist_ok=True)
    return ExpirationSweeper(storage_root)


def test_full_rotation_visits_every_shard_once(sweeper):
    visited = []
    for _ in range(16):
        visited.extend(sweeper.sweep().shards)

    assert len(visited) == 256
    assert set(visited) == {f"{i:02x}" for i in range(256)}
    assert sweeper.offset == 0


def test_window_advances_offset(sweeper):
    report = sweeper.sweep()
    assert report.shards[0] == "00"
    assert report.shards[-1] == "0f"
    assert sweeper.offset == 16

    report = sweeper.sweep()
    assert report.shards[0] == "10"


def test_start_offset_wraps(storage_root):
    sweeper = ExpirationSweeper(storage_root, window=16, start_offset=256 + 240)
    report = sweeper.sweep()
    assert report.shards == [f"{i:02x}" for i in range(240, 256)]
    assert sweeper.offset == 0


def test_custom_window_cycle(storage_root):
    sweeper = ExpirationSweeper(storage_root, window=64)
    for _ in range(4):
        sweeper.sweep()
    assert sweeper.offset == 0


@pytest.mark.parametrize("window", [0, -1, 257])
def test_invalid_window(storage_root, window):
    with pytest.raises(ValueError):
        ExpirationSweeper(storage_root, window=window)


def test_deletes_expired_and_keeps_fresh(sweeper, storage_root, backdate):
    expired = _plant(storage_root, "0100000000000000_1h.txt")
    fresh = _plant(storage_root, "0200000000000000_1h.txt")
    long_lived = _plant(storage_root, "0300000000000000_7d.txt")
    backdate(expired, 2)
    backdate(long_lived, 48)

    report = sweeper.sweep()

    assert not expired.exists()
    assert fresh.exists()
    assert long_lived.exists()
    assert report.deleted == 1
    assert report.examined == 3


def test_only_sweeps_current_window(sweeper, storage_root, backdate):
    outside = _plant(storage_root, "2000000000000000_1h.txt")
    backdate(outside, 2)

    sweeper.sweep()
    assert outside.exists()

    sweeper.sweep()
    sweeper.sweep()
    assert not outside.exists()


def test_skips_foreign_entries(sweeper, storage_root, backdate):
    foreign = [
        _plant(storage_root, "0400000000000000_99h.txt"),
        _plant(storage_root, "0400000000000001.txt"),
        _plant(storage_root, "0400000000000002_1h_x.txt"),
        _plant(storage_root, "0400000000000003_1h.md"),
    ]
    for path in foreign:
        backdate(path, 1000)
    (storage_root / "04" / "nested_1h.txt").mkdir()

    report = sweeper.sweep()

    assert all(path.exists() for path in foreign)
    assert report.deleted == 0
    assert report.failed == []


def test_missing_shards_are_not_errors(storage_root):
    sweeper = ExpirationSweeper(storage_root / "never-created")
    report = sweeper.sweep()
    assert report.failed == []
    assert report.deleted == 0


def test_repeated_sweeps_are_idempotent(storage_root, backdate):
    path = _plant(storage_root, "0500000000000000_1h.txt")
    backdate(path, 5)

    first = ExpirationSweeper(storage_root)
    second = ExpirationSweeper(storage_root)
    assert first.sweep().deleted == 1
    report = second.sweep()
    assert report.deleted == 0
    assert report.failed == []


def test_unlistable_shard_is_reported(sweeper, storage_root, backdate):
    (storage_root / "00").write_text("not a directory")
    expired = _plant(storage_root, "0100000000000000_1h.txt")
    backdate(expired, 2)

    report = sweeper.sweep()

    assert [shard for shard, _ in report.failed] == ["00"]
    assert isinstance(report.failed[0][1], OSError)
    assert not expired.exists()


def test_clock_override(sweeper, storage_root):
    path = _plant(storage_root, "0600000000000000_3h.txt")
    mtime = path.stat().st_mtime

    assert sweeper.sweep(now=mtime + 3 * 3600).deleted == 0
    sweeper.offset = 0
    assert sweeper.sweep(now=mtime + 3 * 3600 + 1).deleted == 1
