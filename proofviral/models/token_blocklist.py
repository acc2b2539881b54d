from proofviral.extensions import db
from datetime import datetime


class TokenBlocklist(db.Model):
    """
    Revoked JWTs. A token is rejected when its jti is listed here, or when
    its session id (``sid`` claim, shared by the access and refresh tokens of
    one sign-in) is listed.
    """
    __tablename__ = 'token_blocklist'

    jti = db.Column(db.String(36), primary_key=True)
    session_id = db.Column(db.String(36), nullable=True, index=True)
    user_id = db.Column(db.String(36), db.ForeignKey('users.id', ondelete='CASCADE'), nullable=False)
    revoked_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)
