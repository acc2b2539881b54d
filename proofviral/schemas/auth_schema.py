from marshmallow import Schema, fields, validates, ValidationError
import re

class SignupSchema(Schema):
    """
    Sign-up Request Validation Schema
    
    Validates account creation input:
    - Email must be valid format
    - Password must be strong (min 8 chars, 1 uppercase, 1 number)
    - Business name and website are required
    
    Example:
        schema = SignupSchema()
        result = schema.load(request_data)
    """
    email = fields.Email(required=True, error_messages={
        "required": "Email is required",
        "invalid": "Invalid email format"
    })
    
    password = fields.Str(required=True, error_messages={
        "required": "Password is required"
    })
    
    business_name = fields.Str(required=True, error_messages={
        "required": "Business name is required"
    })
    
    business_url = fields.Url(required=True, error_messages={
        "required": "Business website is required",
        "invalid": "Business website must be a valid URL"
    })
    
    @validates('password')
    def validate_password(self, value, **kwargs):
        """
        Validate password strength
        
        Requirements:
        - Minimum 8 characters
        - At least 1 uppercase letter
        - At least 1 number
        """
        if len(value) < 8:
            raise ValidationError("Password must be at least 8 characters long")
        
        if not re.search(r'[A-Z]', value):
            raise ValidationError("Password must contain at least one uppercase letter")
        
        if not re.search(r'\d', value):
            raise ValidationError("Password must contain at least one number")
    
    @validates('business_name')
    def validate_business_name(self, value, **kwargs):
        if len(value.strip()) < 2:
            raise ValidationError("Business name must be at least 2 characters")
        
        if len(value) > 255:
            raise ValidationError("Business name must be less than 255 characters")


class LoginSchema(Schema):
    email = fields.Email(required=True, error_messages={
        "required": "Email is required",
        "invalid": "Invalid email format"
    })
    password = fields.Str(required=True, error_messages={
        "required": "Password is required"
    })
