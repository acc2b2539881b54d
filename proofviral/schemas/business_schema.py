from marshmallow import Schema, fields, validates, ValidationError

from proofviral.models.business import PLANS


class UpdateBusinessSchema(Schema):
    business_name = fields.Str(required=True, error_messages={
        "required": "Business name is required"
    })
    business_url = fields.Url(required=True, error_messages={
        "required": "Business website is required",
        "invalid": "Business website must be a valid URL"
    })
    # Empty string clears the logo
    logo_url = fields.Str(required=False, allow_none=True, load_default=None)

    @validates('business_name')
    def validate_business_name(self, value, **kwargs):
        if not value or not value.strip():
            raise ValidationError("Business name cannot be empty")
        if len(value) > 255:
            raise ValidationError("Business name must be less than 255 characters")


class PlanChangeSchema(Schema):
    plan = fields.Str(required=True, error_messages={"required": "plan is required"})

    @validates('plan')
    def validate_plan(self, value, **kwargs):
        if value not in PLANS:
            raise ValidationError(f"Plan must be one of: {', '.join(PLANS)}")
