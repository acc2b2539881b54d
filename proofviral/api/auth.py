from flask import Blueprint, request, jsonify, current_app
from marshmallow import ValidationError
from flask_jwt_extended import jwt_required, get_jwt, get_jwt_identity
from proofviral.extensions import db
from proofviral.schemas.auth_schema import SignupSchema, LoginSchema
from proofviral.services.session import (
    AuthenticationError,
    get_current_user,
    issue_tokens,
    refresh_access_token,
    session_required,
    sign_in,
    sign_out,
    sign_up,
)

# Create Blueprint
bp = Blueprint('auth', __name__)

# Initialize schemas
signup_schema = SignupSchema()
login_schema = LoginSchema()


def user_to_dict(user):
    return {
        "id": user.id,
        "email": user.email,
        "created_at": user.created_at.isoformat() if user.created_at else None
    }


@bp.route('/signup', methods=['POST'])
def signup():
    """
    Sign-up Endpoint
    
    Creates the user account and its business profile in one transaction.
    The business starts on the 'free' plan with a fresh random widget_id.
    
    Request Body:
        {
            "email": "owner@example.com",
            "password": "SecurePass123",
            "business_name": "Acme Coffee",
            "business_url": "https://acme.coffee"
        }
    
    Returns:
        201: Account created, with JWT tokens
        400: Validation error or email already exists
        500: Server error
    """
    try:
        data = request.get_json() or {}
        
        try:
            validated_data = signup_schema.load(data)
        except ValidationError as err:
            return jsonify({"error": "Validation failed", "details": err.messages}), 400
        
        try:
            user, business = sign_up(
                validated_data['email'],
                validated_data['password'],
                validated_data['business_name'],
                validated_data['business_url']
            )
        except AuthenticationError as err:
            return jsonify({"error": str(err)}), 400
        
        return jsonify({
            "message": "Account created! Welcome to ProofViral!",
            "user": user_to_dict(user),
            "business": business.to_dict(),
            **issue_tokens(user, business)
        }), 201
        
    except Exception as e:
        db.session.rollback()
        current_app.logger.exception("Signup error: %s", e)
        return jsonify({"error": "Failed to create account"}), 500


@bp.route('/login', methods=['POST'])
def login():
    """
    Login Endpoint

    Responses:
      200 Login successful
      400 Missing email or password
      401 Invalid credentials
      500 Server error
    """
    data = request.get_json() or {}
    
    try:
        validated_data = login_schema.load(data)
    except ValidationError as err:
        return jsonify({"error": "Validation failed", "details": err.messages}), 400

    try:
        user, business = sign_in(validated_data['email'], validated_data['password'])
    except AuthenticationError as err:
        current_app.logger.warning("Login failed for email=%s", validated_data['email'])
        return jsonify({"error": str(err)}), 401
    except Exception as e:
        db.session.rollback()
        current_app.logger.exception("Login error: %s", e)
        return jsonify({"error": "Failed to sign in"}), 500

    return jsonify({
        "message": "Login successful",
        "user": user_to_dict(user),
        "business": business.to_dict(),
        **issue_tokens(user, business)
    }), 200


@bp.route('/refresh', methods=['POST'])
@jwt_required(refresh=True)
def refresh():
    """
    Refresh Token Endpoint
    - Requires a valid refresh token of a session that was not signed out
    - Returns a new access token for the same session
    """
    current_user_id = get_jwt_identity()
    try:
        new_access_token = refresh_access_token(current_user_id, get_jwt())
    except Exception as e:
        db.session.rollback()
        current_app.logger.exception("Refresh error for user_id=%s: %s", current_user_id, e)
        return jsonify({"error": "Failed to refresh token"}), 500

    if not new_access_token:
        return jsonify({"error": "User not found"}), 404

    return jsonify({
        "access_token": new_access_token
    }), 200


@bp.route('/logout', methods=['POST'])
@session_required
def logout(session):
    """End the session: the access token and its refresh token stop working."""
    try:
        sign_out(session)
        return jsonify({"message": "Signed out"}), 200
    except Exception as e:
        db.session.rollback()
        current_app.logger.exception("Logout error for user_id=%s: %s", session.user_id, e)
        return jsonify({"error": "Failed to sign out"}), 500


@bp.route('/me', methods=['GET'])
@session_required
def me(session):
    """
    Return the signed-in user and their business.
    - Requires valid access token
    """
    try:
        user, business = get_current_user(session)
    except Exception as e:
        db.session.rollback()
        current_app.logger.exception("Error loading user_id=%s: %s", session.user_id, e)
        return jsonify({"error": "Failed to load account"}), 500

    if not user:
        return jsonify({"error": "User not found"}), 404

    return jsonify({
        "user": user_to_dict(user),
        "business": business.to_dict() if business else None
    }), 200
