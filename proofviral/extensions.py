from flask_sqlalchemy import SQLAlchemy
from flask_jwt_extended import JWTManager

"""
Flask Extensions - Initialized here, configured in proofviral/__init__.py

Extensions are created before the app and bound in create_app(), which keeps
models and blueprints free of circular imports.
"""
# Database ORM
# Usage: from proofviral.extensions import db

db = SQLAlchemy()

# JWT Authentication - Handles session tokens
# Usage: from proofviral.extensions import jwt

jwt = JWTManager()
