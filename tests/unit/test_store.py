"""Unit tests for the content-addressed blob store."""

import pytest

from sprig.core.errors import IntegrityError, ObjectNotFoundError
from sprig.core.hash import hash_object
from sprig.core.objects import Blob
from sprig.core.store import ObjectStore


@pytest.fixture
def store(tmp_path):
    return ObjectStore(tmp_path / "objects")


def test_put_returns_salted_fingerprint(store):
    fingerprint = store.put(b"content", "a.txt")

    assert fingerprint == hash_object(b"content", "a.txt")
    assert store.exists(fingerprint)


def test_fanout_layout(store):
    fingerprint = store.put(b"content", "a.txt")
    assert store.path(fingerprint) == store.root / fingerprint[:2] / fingerprint[2:]


def test_put_is_idempotent(store):
    first = store.put(b"content", "a.txt")
    mtime = store.path(first).stat().st_mtime_ns

    second = store.put(b"content", "a.txt")

    assert first == second
    assert store.path(first).stat().st_mtime_ns == mtime


def test_get_returns_bytes(store):
    fingerprint = store.put(b"\x00binary\xff", "bin")
    assert store.get(fingerprint) == b"\x00binary\xff"


def test_get_missing(store):
    with pytest.raises(ObjectNotFoundError) as exc_info:
        store.get("a" * 40)
    assert exc_info.value.fingerprint == "a" * 40


def test_get_detects_tampering(store):
    fingerprint = store.put(b"original", "a.txt")
    store.path(fingerprint).write_bytes(Blob(b"tampered", "a.txt").encode())

    with pytest.raises(IntegrityError):
        store.get(fingerprint)


def test_clear(store):
    fingerprint = store.put(b"content", "a.txt")
    store.clear()

    assert not store.exists(fingerprint)
    assert store.root.is_dir()
