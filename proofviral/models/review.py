from proofviral.extensions import db
from proofviral.maybe import UNSET, Value
from datetime import datetime
from collections import namedtuple
import uuid

STATUSES = ('pending', 'approved', 'rejected')
SENTIMENT_LABELS = ('positive', 'neutral', 'negative')

Sentiment = namedtuple('Sentiment', ['score', 'label'])


class Review(db.Model):
    __tablename__ = 'reviews'
    
    """
    Review Model - One customer submission for a business.
    
    Created by the public review form with status 'pending'. Only the owning
    business moves it to 'approved' or 'rejected'. Sentiment columns stay
    NULL until an analysis succeeds, and are always written together.
    """
    
    id = db.Column(db.String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    business_id = db.Column(db.String(36), db.ForeignKey('businesses.id', ondelete='CASCADE'), nullable=False, index=True)
    customer_name = db.Column(db.String(255), nullable=False)
    customer_email = db.Column(db.String(255), nullable=False)
    rating = db.Column(db.Integer, nullable=False)
    review_text = db.Column(db.Text, nullable=False)
    photo_url = db.Column(db.Text, nullable=True)
    sentiment_score = db.Column(db.Float, nullable=True)
    sentiment_label = db.Column(db.String(20), nullable=True)
    status = db.Column(db.String(20), nullable=False, default='pending')
    created_at = db.Column(db.DateTime, default=datetime.utcnow, index=True)

    social_cards = db.relationship('SocialCard', backref='review', cascade='all, delete-orphan')

    __table_args__ = (
        db.CheckConstraint('rating >= 1 AND rating <= 5', name='ck_reviews_rating'),
        db.CheckConstraint("status IN ('pending', 'approved', 'rejected')", name='ck_reviews_status'),
    )

    @property
    def sentiment(self):
        """UNSET until analyzed, otherwise Value(Sentiment(score, label))."""
        if self.sentiment_label is None or self.sentiment_score is None:
            return UNSET
        return Value(Sentiment(self.sentiment_score, self.sentiment_label))

    def to_dict(self):
        sentiment = self.sentiment
        return {
            "id": self.id,
            "business_id": self.business_id,
            "customer_name": self.customer_name,
            "customer_email": self.customer_email,
            "rating": self.rating,
            "review_text": self.review_text,
            "photo_url": self.photo_url,
            "sentiment_score": sentiment.value.score if isinstance(sentiment, Value) else None,
            "sentiment_label": sentiment.value.label if isinstance(sentiment, Value) else None,
            "status": self.status,
            "created_at": self.created_at.isoformat() if self.created_at else None
        }

    def to_widget_dict(self):
        # No email: widget output is public
        return {
            "id": self.id,
            "customer_name": self.customer_name,
            "rating": self.rating,
            "review_text": self.review_text,
            "photo_url": self.photo_url,
            "created_at": self.created_at.isoformat() if self.created_at else None
        }
