"""
Shared fixtures: an isolated storage root per test and an API client wired to it.
"""
import os
import time

import pytest
from fastapi.testclient import TestClient

from snipbin.database import PasteRepository, get_repository
from snipbin.main import app


def _backdate(path, hours: float) -> None:
    stamp = time.time() - hours * 3600
    os.utime(path, (stamp, stamp))


@pytest.fixture
def backdate():
    """Backdate a file's mtime by the given number of hours."""
    return _backdate


@pytest.fixture
def storage_root(tmp_path):
    return tmp_path / "pastes"


@pytest.fixture
def repo(storage_root):
    repository = PasteRepository(storage_root)
    repository.init_storage()
    return repository


@pytest.fixture
def client(repo):
    app.dependency_overrides[get_repository] = lambda: repo
    yield TestClient(app)
    app.dependency_overrides = {}
