# campus_social/utils/counted.py
"""
Counted collections: an array of user ids plus a counter of its length,
stored on the same document.

Every change goes through a single conditional update that touches the
array and the counter together, so `<count> == len(<array>)` holds after
each write and concurrent togglers cannot lose an update.
"""
from typing import Optional, Tuple

from bson import ObjectId
from pymongo import ReturnDocument

from .errors import NotFoundError


def is_member(doc: Optional[dict], array_field: str, user_id: str) -> bool:
    return bool(doc) and str(user_id) in [str(x) for x in doc.get(array_field, [])]


async def toggle_membership(
    collection,
    entity_id: ObjectId,
    user_id: str,
    array_field: str,
    count_field: str,
    extra_filter: Optional[dict] = None,
    not_found: str = "Not found",
) -> Tuple[dict, Optional[bool]]:
    """
    Remove `user_id` if present, add it otherwise.

    Returns (updated_doc, added). `added` is None when `extra_filter`
    blocked the add (e.g. capacity reached).
    """
    doc = await collection.find_one_and_update(
        {"_id": entity_id, array_field: user_id},
        {"$pull": {array_field: user_id}, "$inc": {count_field: -1}},
        return_document=ReturnDocument.AFTER,
    )
    if doc:
        return doc, False

    add_filter = {"_id": entity_id, array_field: {"$ne": user_id}}
    if extra_filter:
        add_filter.update(extra_filter)
    doc = await collection.find_one_and_update(
        add_filter,
        {"$push": {array_field: user_id}, "$inc": {count_field: 1}},
        return_document=ReturnDocument.AFTER,
    )
    if doc:
        return doc, True

    current = await collection.find_one({"_id": entity_id})
    if not current:
        raise NotFoundError(not_found)
    if is_member(current, array_field, user_id):
        # A concurrent request from the same user added it in between
        return current, True
    return current, None


async def add_membership(
    collection,
    entity_id: ObjectId,
    user_id: str,
    array_field: str,
    count_field: str,
    extra_filter: Optional[dict] = None,
    not_found: str = "Not found",
) -> Tuple[dict, bool]:
    """
    Idempotent add. Returns (doc, added_now).

    Raises NotFoundError when no document matches `_id` plus `extra_filter`.
    """
    scope = {"_id": entity_id}
    if extra_filter:
        scope.update(extra_filter)
    doc = await collection.find_one_and_update(
        {**scope, array_field: {"$ne": user_id}},
        {"$push": {array_field: user_id}, "$inc": {count_field: 1}},
        return_document=ReturnDocument.AFTER,
    )
    if doc:
        return doc, True
    current = await collection.find_one(scope)
    if not current:
        raise NotFoundError(not_found)
    return current, False
