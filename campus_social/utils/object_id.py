from bson import ObjectId

from .errors import ValidationError


def ensure_oid(id_str: str, what: str = "") -> ObjectId:
    if not id_str or not ObjectId.is_valid(str(id_str)):
        label = f"{what} ID" if what else "ID"
        raise ValidationError(f"Invalid {label} format")
    return ObjectId(str(id_str))
