import pytest

from gitlite.objects import Blob, hash_content


@pytest.fixture()
def content():
    return b'content'


@pytest.fixture()
def blob(content):
    return Blob(content)


def test_properly_initialize(content):
    blob = Blob(content)

    assert blob.content == content


def test_serialize_and_deserialize_return_the_same_blob(blob):
    raw = blob.serialize()
    out = Blob.deserialize(raw)

    assert blob.content == out.content


def test_hash_properly_when_empty():
    assert len(Blob(b'').get_hash()) == 40


def test_hash_do_not_change_on_same_object(blob):
    assert blob.get_hash() == blob.get_hash()


def test_hash_equal_for_equal_content(content):
    assert Blob(content).get_hash() == Blob(bytes(content)).get_hash() == hash_content(content)


def test_hash_different_with_different_blobs():
    first = Blob(b'first')
    second = Blob(b'second')

    assert first.get_hash() != second.get_hash()
