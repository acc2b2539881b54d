"""
Session / Identity Adapter

Wraps the JWT-based authentication so page handlers receive an explicit
SessionContext argument instead of reading ambient auth state.
"""
import logging
import uuid
from dataclasses import dataclass
from functools import wraps
from typing import Optional

from flask import jsonify
from flask_jwt_extended import (
    create_access_token,
    create_refresh_token,
    get_jwt,
    get_jwt_identity,
    jwt_required,
)
from sqlalchemy import or_
from werkzeug.security import check_password_hash, generate_password_hash

from proofviral.extensions import db
from proofviral.models.business import Business
from proofviral.models.token_blocklist import TokenBlocklist
from proofviral.models.user import User

logger = logging.getLogger(__name__)


class AuthenticationError(Exception):
    """Sign-up or sign-in was refused."""


@dataclass(frozen=True)
class SessionContext:
    user_id: str
    business_id: str
    email: str
    jti: str
    session_id: Optional[str] = None

    @classmethod
    def from_jwt(cls):
        """Build the context from the verified JWT of the current request."""
        claims = get_jwt()
        return cls(
            user_id=get_jwt_identity(),
            business_id=claims.get('business_id'),
            email=claims.get('email'),
            jti=claims.get('jti'),
            session_id=claims.get('sid'),
        )


def session_required(view):
    """
    Require a valid access token and pass the SessionContext as ``session``.

    Usage:
        @bp.route('', methods=['GET'])
        @session_required
        def list_things(session):
            ...
    """
    @wraps(view)
    @jwt_required()
    def wrapper(*args, **kwargs):
        session = SessionContext.from_jwt()
        if not session.business_id:
            logger.warning("Session without business_id claim for user_id=%s", session.user_id)
            return jsonify({"error": "Unauthorized"}), 401
        return view(*args, session=session, **kwargs)
    return wrapper


def session_claims(user, business, session_id):
    return {
        "business_id": business.id,
        "email": user.email,
        "sid": session_id,
    }


def issue_tokens(user, business):
    """Access and refresh tokens for a new sign-in, sharing one session id."""
    claims = session_claims(user, business, str(uuid.uuid4()))
    return {
        "access_token": create_access_token(identity=user.id, additional_claims=claims),
        "refresh_token": create_refresh_token(identity=user.id, additional_claims=claims),
    }


def sign_up(email, password, business_name, business_url):
    """
    Create the user and its single business in one transaction.

    Returns:
        tuple: (user, business)

    Raises:
        AuthenticationError: If the email is already registered
    """
    if User.query.filter_by(email=email).first():
        raise AuthenticationError("Email already registered")

    user = User(email=email, password_hash=generate_password_hash(password))
    db.session.add(user)
    db.session.flush()  # Generates user.id without committing

    business = Business(
        user_id=user.id,
        business_name=business_name.strip(),
        business_url=business_url,
        plan='free'
    )
    db.session.add(business)
    db.session.commit()

    logger.info("Signed up user_id=%s business_id=%s", user.id, business.id)
    return user, business


def sign_in(email, password):
    """
    Verify credentials.

    Returns:
        tuple: (user, business)

    Raises:
        AuthenticationError: On unknown email, wrong password or missing business
    """
    user = User.query.filter_by(email=email).first()
    if not user or not check_password_hash(user.password_hash, password):
        raise AuthenticationError("Invalid email or password")

    business = Business.query.filter_by(user_id=user.id).first()
    if not business:
        raise AuthenticationError("No business profile for this account")

    return user, business


def sign_out(session):
    """
    End the session: revoke the presented token and every other token of the
    same sign-in, including its refresh token.
    """
    db.session.add(TokenBlocklist(jti=session.jti, session_id=session.session_id, user_id=session.user_id))
    db.session.commit()
    logger.info("Signed out user_id=%s", session.user_id)


def is_token_revoked(jwt_payload):
    jti = jwt_payload.get('jti')
    sid = jwt_payload.get('sid')
    criteria = [TokenBlocklist.jti == jti]
    if sid:
        criteria.append(TokenBlocklist.session_id == sid)
    return db.session.query(TokenBlocklist.jti).filter(or_(*criteria)).first() is not None


def refresh_access_token(user_id, jwt_payload):
    """
    New access token for the session the refresh token belongs to.

    Returns:
        str or None when the user or business no longer exists
    """
    user = db.session.get(User, user_id)
    business = Business.query.filter_by(user_id=user_id).first() if user else None
    if not user or not business:
        return None
    claims = session_claims(user, business, jwt_payload.get('sid'))
    return create_access_token(identity=user.id, additional_claims=claims)


def get_current_user(session):
    """Return (user, business) for the session, or (None, None)."""
    user = db.session.get(User, session.user_id)
    if not user:
        return None, None
    business = Business.query.filter_by(user_id=user.id).first()
    return user, business
