from marshmallow import EXCLUDE, Schema, fields

from ..uploads import UploadStore
from .fields import CappedString, IsoDate


class ItemEditSchema(Schema):
    """Fields an administrator may overwrite with the ``edit`` action."""

    class Meta:
        unknown = EXCLUDE

    title = CappedString(120, required=True)
    description = CappedString(2000, required=True)
    category = CappedString(60, required=True)
    location_found = CappedString(120, required=True)
    date_found = IsoDate(required=True)


class ItemSubmitSchema(ItemEditSchema):
    reporter_name = CappedString(80, required=True)
    reporter_email = CappedString(120, required=True)


class ItemSummarySchema(Schema):
    id = fields.Int()
    title = fields.Str()
    description = fields.Str()
    category = fields.Str()
    location_found = fields.Str()
    date_found = fields.Str()
    photo_filename = fields.Str(allow_none=True)
    photo_url = fields.Function(lambda it: UploadStore.url_for(it.photo_filename))
    status = fields.Str()
    created_at = fields.DateTime()


class ItemSchema(ItemSummarySchema):
    reporter_name = fields.Str()
    reporter_email = fields.Str()


class AdminItemSchema(Schema):
    id = fields.Int()
    title = fields.Str()
    category = fields.Str()
    location_found = fields.Str()
    date_found = fields.Str()
    status = fields.Str()
    created_at = fields.DateTime()
