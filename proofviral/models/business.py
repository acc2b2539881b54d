from proofviral.extensions import db
from datetime import datetime
import uuid

PLANS = ('free', 'pro', 'enterprise')


class Business(db.Model):
    __tablename__ = 'businesses'
    
    """
    Business Model - One per tenant/user.
    
    The widget_id is an unguessable public token. It is the only way the
    public review form and the embeddable widget address a business.
    
    Attributes:
        id (str): Unique identifier (UUID)
        user_id (str): Owning user (unique - one business per user)
        business_name (str): Display name
        business_url (str): External website URL
        logo_url (str): Public URL of the uploaded logo (nullable)
        widget_id (str): Public widget token
        plan (str): Subscription tier - 'free', 'pro', 'enterprise'
        created_at (datetime): When the business was created
    """
    
    id = db.Column(db.String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = db.Column(db.String(36), db.ForeignKey('users.id', ondelete='CASCADE'), unique=True, nullable=False)
    business_name = db.Column(db.String(255), nullable=False)
    business_url = db.Column(db.Text, nullable=False)
    logo_url = db.Column(db.Text, nullable=True)
    widget_id = db.Column(db.String(36), unique=True, nullable=False, default=lambda: str(uuid.uuid4()))
    plan = db.Column(db.String(20), nullable=False, default='free')
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    
    reviews = db.relationship('Review', backref='business', cascade='all, delete-orphan', lazy='dynamic')

    __table_args__ = (
        db.CheckConstraint("plan IN ('free', 'pro', 'enterprise')", name='ck_businesses_plan'),
    )
    
    def to_dict(self):
        return {
            "id": self.id,
            "user_id": self.user_id,
            "business_name": self.business_name,
            "business_url": self.business_url,
            "logo_url": self.logo_url,
            "widget_id": self.widget_id,
            "plan": self.plan,
            "created_at": self.created_at.isoformat() if self.created_at else None
        }

    def to_public_dict(self):
        """Fields that unauthenticated visitors may see."""
        return {
            "business_name": self.business_name,
            "business_url": self.business_url,
            "logo_url": self.logo_url,
            "widget_id": self.widget_id
        }
