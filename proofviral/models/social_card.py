from proofviral.extensions import db
from datetime import datetime
import uuid

PLATFORMS = ('instagram', 'twitter')


class SocialCard(db.Model):
    __tablename__ = 'social_cards'
    
    """
    SocialCard Model - Bookkeeping row written each time a share image is
    generated for a review. shared_count starts at 0 and nothing increments it.
    """
    
    id = db.Column(db.String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    review_id = db.Column(db.String(36), db.ForeignKey('reviews.id', ondelete='CASCADE'), nullable=False)
    card_url = db.Column(db.Text, nullable=True)  # null when the image could not be stored
    platform = db.Column(db.String(20), nullable=False)
    shared_count = db.Column(db.Integer, nullable=False, default=0)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
