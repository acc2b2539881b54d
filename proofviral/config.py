import os
from dotenv import load_dotenv
from datetime import timedelta

load_dotenv()

class Config:
    # Database - Render provides this as DATABASE_URL
    SQLALCHEMY_DATABASE_URI = os.getenv('DATABASE_URL')
    
    # Fix for Render's postgres:// vs postgresql://
    if SQLALCHEMY_DATABASE_URI and SQLALCHEMY_DATABASE_URI.startswith('postgres://'):
        SQLALCHEMY_DATABASE_URI = SQLALCHEMY_DATABASE_URI.replace('postgres://', 'postgresql://', 1)
    
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SECRET_KEY = os.getenv('SECRET_KEY')
    JWT_SECRET_KEY = os.getenv('JWT_SECRET_KEY')
    JWT_ACCESS_TOKEN_EXPIRES = timedelta(hours=24)
    JWT_REFRESH_TOKEN_EXPIRES = timedelta(days=30)

    LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO')

    # Public origin of the web app, used for review page links, share URLs
    # and the widget loader script
    PUBLIC_APP_URL = os.getenv('PUBLIC_APP_URL', 'http://localhost:5000').rstrip('/')

    # Claude / Anthropic (sentiment analysis)
    CLAUDE_API_KEY = os.getenv('CLAUDE_API_KEY')
    # Support comma-separated list of models for fallback
    _claude_models = os.getenv('CLAUDE_MODEL', 'claude-sonnet-4-5,claude-haiku-4-5,claude-3-5-sonnet-20241022')
    CLAUDE_MODELS = [m.strip() for m in _claude_models.split(',') if m.strip()]
    CLAUDE_MODEL = CLAUDE_MODELS[0]
    CLAUDE_MAX_TOKENS = int(os.getenv('CLAUDE_MAX_TOKENS', '1024'))

    # Blob storage (S3 or any S3-compatible service)
    AWS_ACCESS_KEY_ID = os.getenv('AWS_ACCESS_KEY_ID')
    AWS_SECRET_ACCESS_KEY = os.getenv('AWS_SECRET_ACCESS_KEY')
    AWS_REGION = os.getenv('AWS_REGION', 'us-east-1')
    S3_ENDPOINT_URL = os.getenv('S3_ENDPOINT_URL')  # None means AWS itself
    # Base URL objects are publicly served from; {bucket} is substituted
    STORAGE_PUBLIC_URL = os.getenv('STORAGE_PUBLIC_URL', 'https://{bucket}.s3.amazonaws.com')
    REVIEW_PHOTOS_BUCKET = os.getenv('REVIEW_PHOTOS_BUCKET', 'review-photos')
    BUSINESS_LOGOS_BUCKET = os.getenv('BUSINESS_LOGOS_BUCKET', 'business-logos')
    SOCIAL_CARDS_BUCKET = os.getenv('SOCIAL_CARDS_BUCKET', 'social-cards')

    # Upload limits
    REVIEW_PHOTO_MAX_BYTES = 5 * 1024 * 1024
    LOGO_MAX_BYTES = 2 * 1024 * 1024

    # Widget
    WIDGET_ROTATION_MS = 5000
    WIDGET_REVIEW_LIMIT = 10


class TestConfig(Config):
    TESTING = True
    SQLALCHEMY_DATABASE_URI = 'sqlite://'
    SECRET_KEY = 'test-secret'
    JWT_SECRET_KEY = 'test-jwt-secret-with-enough-length-for-hs256'
    PUBLIC_APP_URL = 'http://testserver'
    CLAUDE_API_KEY = 'test-key'
    CLAUDE_MODELS = ['claude-test']
    CLAUDE_MODEL = 'claude-test'
    STORAGE_PUBLIC_URL = 'https://storage.test/{bucket}'
