from proofviral.extensions import db
from datetime import datetime
import uuid

class User(db.Model):
    __tablename__ = 'users'
    
    """
    User Model - An authenticated account that owns exactly one Business.
    
    Attributes:
        id (str): Unique identifier (UUID)
        email (str): Login email (unique across the system)
        password_hash (str): Werkzeug password hash (never store plaintext)
        created_at (datetime): When the user signed up
    """
    
    id = db.Column(db.String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    email = db.Column(db.String(255), unique=True, nullable=False)
    password_hash = db.Column(db.String(255), nullable=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    
    business = db.relationship('Business', backref='user', uselist=False, cascade='all, delete-orphan')
