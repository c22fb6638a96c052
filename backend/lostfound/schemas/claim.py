from marshmallow import EXCLUDE, Schema, fields

from ..uploads import UploadStore
from .fields import CappedString


class ClaimSubmitSchema(Schema):
    class Meta:
        unknown = EXCLUDE

    claimant_name = CappedString(80, required=True)
    claimant_email = CappedString(120, required=True)
    student_id = CappedString(40, load_default=None)
    message = CappedString(1500, required=True)


class ClaimSchema(Schema):
    id = fields.Int()
    item_id = fields.Int()
    claimant_name = fields.Str()
    claimant_email = fields.Str()
    student_id = fields.Str(allow_none=True)
    message = fields.Str()
    proof_filename = fields.Str(allow_none=True)
    proof_url = fields.Function(lambda c: UploadStore.url_for(c.proof_filename))
    status = fields.Str()
    created_at = fields.DateTime()


class AdminClaimSchema(Schema):
    id = fields.Int()
    item_id = fields.Int()
    claimant_name = fields.Str()
    claimant_email = fields.Str()
    student_id = fields.Str(allow_none=True)
    status = fields.Str()
    created_at = fields.DateTime()
    item_title = fields.Function(lambda c: c.item.title if c.item else None)
    item_status = fields.Function(lambda c: c.item.status if c.item else None)
