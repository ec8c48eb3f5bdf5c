from datetime import datetime

import pytest
from bson import ObjectId

from campus_social.utils.errors import ValidationError
from campus_social.utils.pagination import PageParams, after_cursor, decode_cursor, encode_cursor


def test_cursor_round_trip():
    ts = datetime(2024, 3, 1, 12, 30, 45, 123000)
    oid = ObjectId()
    cursor = decode_cursor(encode_cursor(ts, oid))
    assert cursor.created_at == ts
    assert cursor.id == oid


@pytest.mark.parametrize("value", ["", "###", "bm90LWEtY3Vyc29y", encode_cursor(datetime(2024, 1, 1), "zzz")])
def test_decode_cursor_rejects_garbage(value):
    with pytest.raises(ValidationError) as exc:
        decode_cursor(value)
    assert exc.value.message == "Invalid cursor"


def test_page_params_skip():
    assert PageParams(page=1, limit=10).skip == 0
    assert PageParams(page=3, limit=20).skip == 40


def test_after_cursor_keeps_base_query():
    ts = datetime(2024, 1, 1)
    oid = ObjectId()
    query = after_cursor({"is_public": True}, decode_cursor(encode_cursor(ts, oid)))
    base, keyset = query["$and"]
    assert base == {"is_public": True}
    assert {"created_at": {"$lt": ts}} in keyset["$or"]
    assert {"created_at": ts, "_id": {"$lt": oid}} in keyset["$or"]
