import pytest
from bson import ObjectId

from campus_social.utils.errors import AuthorizationError
from campus_social.utils.ownership import ensure_owner, owns_resource


def test_owns_resource_compares_ids_as_strings():
    uid = ObjectId()
    assert owns_resource({"_id": uid}, {"author_id": str(uid)})
    assert not owns_resource({"_id": ObjectId()}, {"author_id": str(uid)})


def test_owns_resource_custom_owner_field():
    uid = ObjectId()
    assert owns_resource({"_id": uid}, {"organizer_id": str(uid)}, owner_field="organizer_id")
    assert not owns_resource({"_id": uid}, {"author_id": str(uid)}, owner_field="organizer_id")


def test_owns_resource_missing_principal_or_resource():
    assert not owns_resource(None, {"author_id": "x"})
    assert not owns_resource({"_id": ObjectId()}, None)
    assert not owns_resource({"_id": ObjectId()}, {})


def test_ensure_owner_message():
    with pytest.raises(AuthorizationError) as exc:
        ensure_owner({"_id": ObjectId()}, {"author_id": "someone"}, action="delete this post")
    assert exc.value.status_code == 403
    assert exc.value.message == "Not authorized to delete this post"
