from marshmallow import ValidationError as SchemaValidationError

from ..errors import ValidationError
from .claim import AdminClaimSchema, ClaimSchema, ClaimSubmitSchema
from .item import AdminItemSchema, ItemEditSchema, ItemSchema, ItemSubmitSchema, ItemSummarySchema


def load_or_raise(schema, data, message: str | None = None) -> dict:
    """Load ``data`` through ``schema`` and translate failures into a 400."""
    try:
        return schema.load(data or {})
    except SchemaValidationError as err:
        raise ValidationError(message, fields=err.messages)


__all__ = [
    "AdminClaimSchema",
    "AdminItemSchema",
    "ClaimSchema",
    "ClaimSubmitSchema",
    "ItemEditSchema",
    "ItemSchema",
    "ItemSubmitSchema",
    "ItemSummarySchema",
    "load_or_raise",
]
