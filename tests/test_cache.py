import pytest

from a113.cache import Bucket, BucketHandle


def test_query_missing_key_marks_handle_queried():
    bucket = Bucket()
    value, handle = bucket.query("shader", BucketHandle.NONE)
    assert value is None
    assert handle == BucketHandle.QUERIED


def test_commit_then_query_returns_same_object():
    bucket = Bucket()
    payload = ["vertex"]
    returned = bucket.commit("shader", payload)
    assert returned is payload
    value, handle = bucket.query("shader")
    assert value is payload
    assert handle & BucketHandle.QUERIED


def test_already_queried_handle_skips_lookup():
    bucket = Bucket()
    bucket.store("k", "v")
    value, handle = bucket.query("k", BucketHandle.QUERIED)
    assert value is None
    assert handle == BucketHandle.QUERIED


def test_bypass_commit_does_not_store():
    bucket = Bucket()
    returned = bucket.commit("k", "v", BucketHandle.BYPASS)
    assert returned == "v"
    assert "k" not in bucket
    assert len(bucket) == 0


def test_disable_handle_combines_bypass_and_queried():
    assert BucketHandle.DISABLE == BucketHandle.BYPASS | BucketHandle.QUERIED
    bucket = Bucket()
    bucket.store("k", "v")
    value, _ = bucket.query("k", BucketHandle.DISABLE)
    assert value is None
    bucket.commit("other", "x", BucketHandle.DISABLE)
    assert "other" not in bucket


def test_store_overwrites_existing_value():
    bucket = Bucket()
    bucket.commit("k", "old")
    bucket.store("k", "new")
    value, _ = bucket.query("k")
    assert value == "new"
    assert len(bucket) == 1


@pytest.mark.parametrize("keys", [["a"], ["a", "b", "c"]])
def test_len_counts_distinct_keys(keys):
    bucket = Bucket()
    for key in keys + keys:
        bucket.commit(key, key.upper())
    assert len(bucket) == len(keys)
    for key in keys:
        assert bucket.query(key)[0] == key.upper()