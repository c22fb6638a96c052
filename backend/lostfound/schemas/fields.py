from __future__ import annotations

from datetime import datetime

from marshmallow import ValidationError, fields


class CappedString(fields.String):
    """String that is cut to ``cap`` characters and then trimmed.

    An empty result counts as missing when the field is required.
    """

    def __init__(self, cap: int, **kwargs):
        super().__init__(**kwargs)
        self.cap = cap

    def _deserialize(self, value, attr, data, **kwargs):
        if value is None:
            value = ""
        if not isinstance(value, (str, int, float)):
            raise ValidationError("Not a valid string.")
        text = str(value)[: self.cap].strip()
        if not text:
            if self.required:
                raise ValidationError("Field is required.")
            return None
        return text


class IsoDate(CappedString):
    """Calendar date as a ``YYYY-MM-DD`` string."""

    def __init__(self, **kwargs):
        super().__init__(cap=10, **kwargs)

    def _deserialize(self, value, attr, data, **kwargs):
        text = super()._deserialize(value, attr, data, **kwargs)
        if text is None:
            return None
        try:
            parsed = datetime.strptime(text, "%Y-%m-%d").date()
        except ValueError:
            raise ValidationError("Date must be in YYYY-MM-DD format.")
        # Stored zero-padded so string comparison matches calendar order
        return parsed.isoformat()
