import pytest

from school_cms.config import settings
from school_cms.utils.auth import hash_password, verify_admin_password, verify_password
from school_cms.utils.tags import deserialize_tags, serialize_tags


def test_tags_keep_order_and_unicode():
    tags = ["Matric dance", "Grade 12", "Ntšhepiso"]

    stored = serialize_tags(tags)

    assert stored == '["Matric dance", "Grade 12", "Ntšhepiso"]'
    assert deserialize_tags(stored) == tags


def test_no_tags_are_stored_as_null():
    assert serialize_tags(None) is None
    assert serialize_tags([]) == "[]"


@pytest.mark.parametrize("raw", [None, "", "not json", '{"a": 1}', "42"])
def test_unusable_tag_values_read_as_empty(raw):
    assert deserialize_tags(raw) == []


def test_decoded_lists_pass_through():
    assert deserialize_tags(["a", "b"]) == ["a", "b"]


def test_password_round_trip():
    hashed = hash_password("s3cret", rounds=4)

    assert verify_password("s3cret", hashed)
    assert not verify_password("wrong", hashed)
    assert not verify_password("s3cret", "not-a-bcrypt-hash")


def test_admin_password_requires_configured_hash(monkeypatch):
    monkeypatch.setattr(settings, "ADMIN_PASSWORD_HASH", "")

    with pytest.raises(ValueError):
        verify_admin_password("anything")
