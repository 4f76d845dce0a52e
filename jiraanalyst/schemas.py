"""
schemas.py

Marshmallow schemas describing what the text-generation service must return at each stage.
Validation is strict: unknown keys are ignored, but missing or mistyped required data is an error.
"""
from marshmallow import Schema, fields, validate, EXCLUDE, ValidationError, validates

from jiraanalyst.constants import MIN_PRIORITY_ACTIONS, MAX_PRIORITY_ACTIONS
from jiraanalyst.utils.fields import OptionalDateString


class IssueBreakdownItemSchema(Schema):
    """
    One record of the issue breakdown. Key and summary are checked separately by the
    extractor, because a record missing either one stands for an invalid row and is dropped
    rather than failing the whole response.
    """
    class Meta:
        unknown = EXCLUDE

    issueKey = fields.Str(load_default="")
    summary = fields.Str(load_default="")
    status = fields.Str(load_default="")
    assignee = fields.Str(load_default="")
    recommendation = fields.Str(load_default="")
    createdDate = OptionalDateString()
    resolvedDate = OptionalDateString()


class BreakdownSchema(Schema):
    """Output of the first stage: a single issueBreakdown collection."""
    class Meta:
        unknown = EXCLUDE

    issueBreakdown = fields.List(
        fields.Raw(),
        required=True,
        error_messages={"required": "Response is missing the issueBreakdown collection.", "null": "issueBreakdown may not be null."},
    )


class SummaryAndActionsSchema(Schema):
    """Output of the second stage: the overall summary and the prioritized actions."""
    class Meta:
        unknown = EXCLUDE

    summary = fields.Str(
        required=True,
        validate=validate.Length(min=1, error="Summary may not be empty."),
        error_messages={"required": "Response is missing the summary."},
    )
    priorityActions = fields.List(
        fields.Str(validate=validate.Length(min=1, error="Priority actions may not be empty.")),
        required=True,
        validate=validate.Length(
            min=MIN_PRIORITY_ACTIONS,
            max=MAX_PRIORITY_ACTIONS,
            error=f"Expected {MIN_PRIORITY_ACTIONS}-{MAX_PRIORITY_ACTIONS} priority actions.",
        ),
        error_messages={"required": "Response is missing the priorityActions list."},
    )

    @validates("summary")
    def validate_summary(self, value, **kwargs):
        if not value.strip():
            raise ValidationError("Summary may not be blank.")
