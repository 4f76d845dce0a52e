"""
jiraanalyst.utils.fields

Custom Marshmallow fields and the base options schema shared by the config and service-output schemas.
"""
from marshmallow import fields, ValidationError, Schema, pre_load

from jiraanalyst.constants import PROJECT_KEY_RE


class ProjectKeyField(fields.Str):
    """
    Marshmallow field for validating Jira project keys (e.g., PROJ).
    Keys are upper-cased before matching, as Jira treats them case-insensitively.
    """
    def _deserialize(self, value, attr, data, **kwargs):
        value = super()._deserialize(value, attr, data, **kwargs).strip().upper()
        if not PROJECT_KEY_RE.match(value):
            raise ValidationError("Invalid Jira project key format (e.g., PROJ).")
        return value


class OptionalDateString(fields.Str):
    """
    String field where null, omission and blank strings all mean "no date".
    """
    def __init__(self, **kwargs):
        kwargs.setdefault('load_default', None)
        kwargs.setdefault('allow_none', True)
        super().__init__(**kwargs)

    def _deserialize(self, value, attr, data, **kwargs):
        value = super()._deserialize(value, attr, data, **kwargs)
        value = value.strip()
        return value or None


class BaseOptionsSchema(Schema):
    """
    Base schema for options/config sections. Strips string fields, lowercases emails and
    coerces empty strings to None for required fields.
    """
    @pre_load
    def normalize(self, data, **kwargs):
        data = dict(data)
        for k, v in list(data.items()):
            if isinstance(v, str):
                v = v.strip()
                if 'email' in k:
                    v = v.lower()
                field_obj = self.fields.get(k)
                if field_obj and getattr(field_obj, 'required', False) and v == '':
                    data[k] = None
                else:
                    data[k] = v
        return data

