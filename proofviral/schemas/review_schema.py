from marshmallow import Schema, fields, validates, ValidationError, EXCLUDE

from proofviral.models.review import STATUSES


class WholeNumber(fields.Integer):
    """Integer field that parses form strings but refuses fractional numbers such as 4.5."""

    def _deserialize(self, value, attr, data, **kwargs):
        if isinstance(value, float) and not value.is_integer():
            raise self.make_error("invalid")
        return super()._deserialize(value, attr, data, **kwargs)


class ReviewSubmissionSchema(Schema):
    """
    Public review form input.

    Anything else the client sends (status, sentiment, photo_url, ...) is
    dropped; new reviews are always created as 'pending'.
    """
    class Meta:
        unknown = EXCLUDE

    customer_name = fields.Str(required=True, error_messages={
        "required": "Name is required"
    })
    customer_email = fields.Email(required=True, error_messages={
        "required": "Email is required",
        "invalid": "Invalid email format"
    })
    rating = WholeNumber(required=True, error_messages={
        "required": "Please select a rating",
        "invalid": "Rating must be a whole number"
    })
    review_text = fields.Str(required=True, error_messages={
        "required": "Review text is required"
    })

    @validates('customer_name')
    def validate_customer_name(self, value, **kwargs):
        if not value.strip():
            raise ValidationError("Name is required")
        if len(value) > 255:
            raise ValidationError("Name must be less than 255 characters")

    @validates('rating')
    def validate_rating(self, value, **kwargs):
        if value < 1:
            raise ValidationError("Please select a rating")
        if value > 5:
            raise ValidationError("Rating must be between 1 and 5")

    @validates('review_text')
    def validate_review_text(self, value, **kwargs):
        if not value.strip():
            raise ValidationError("Review text is required")


class ReviewFilterSchema(Schema):
    status = fields.Str(load_default='all')

    @validates('status')
    def validate_status(self, value, **kwargs):
        if value != 'all' and value not in STATUSES:
            raise ValidationError(f"Status must be one of: all, {', '.join(STATUSES)}")
