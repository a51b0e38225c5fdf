import re

import pytest

from snipbin.identifiers import generate_id, is_valid_id

ID_PATTERN = re.compile(r"^[0-9a-f]{16}$")


def test_generate_id_shape():
    for _ in range(200):
        assert ID_PATTERN.match(generate_id())


def test_generate_id_is_random():
    ids = {generate_id() for _ in range(1000)}
    assert len(ids) == 1000


def test_generated_ids_pass_validation():
    assert is_valid_id(generate_id())


@pytest.mark.parametrize(
    "value",
    [
        "",
        "a1b2c3d4e5f6071",      # 15 chars
        "a1b2c3d4e5f607189",    # 17 chars
        "A1B2C3D4E5F60718",     # uppercase
        "a1b2c3d4e5f6071g",     # non-hex
        "a1b2c3d4e5f6071/",
        "../../etc/passwd",
        "a1b2c3d4e5f6071*",
        None,
        1234567890123456,
    ],
)
def test_is_valid_id_rejects(value):
    assert not is_valid_id(value)


def test_is_valid_id_accepts_lowercase_hex():
    assert is_valid_id("a1b2c3d4e5f60718")
    assert is_valid_id("0000000000000000")
    assert is_valid_id("ffffffffffffffff")
