from datetime import date, datetime

from marshmallow import fields


class IsoDateTime(fields.Field):
    """
    ISO 8601 date or datetime carried as text.

    Documents keep dates as ISO strings, so the field normalizes on load and
    passes stored strings through on dump.
    """

    default_error_messages = {"invalid": "Not a valid ISO 8601 date."}

    def __init__(self, *, as_date=False, **kwargs):
        self.as_date = as_date
        super().__init__(**kwargs)

    def _serialize(self, value, attr, obj, **kwargs):
        if value is None:
            return None
        if isinstance(value, (datetime, date)):
            return value.isoformat()
        return str(value)

    def _deserialize(self, value, attr, data, **kwargs):
        if isinstance(value, datetime):
            parsed = value
        elif isinstance(value, str) and value.strip():
            try:
                parsed = datetime.fromisoformat(value.strip().replace('Z', '+00:00'))
            except ValueError:
                raise self.make_error("invalid") from None
        else:
            raise self.make_error("invalid")
        return parsed.date().isoformat() if self.as_date else parsed.isoformat()
