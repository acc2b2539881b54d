"""
Data Access Layer

Query and mutation helpers for businesses, reviews and social_cards. Every
function is scoped by the owning business (or user, or public widget token).
Database failures are logged, rolled back and re-raised as DataAccessError so
route handlers can turn them into a single error response.
"""
import logging
from functools import wraps

from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError

from proofviral.extensions import db
from proofviral.models.business import Business
from proofviral.models.review import Review, STATUSES
from proofviral.models.social_card import SocialCard

logger = logging.getLogger(__name__)


class DataAccessError(Exception):
    """A query or mutation against the database failed."""


def _wrap_db_errors(fn):
    @wraps(fn)
    def wrapper(*args, **kwargs):
        try:
            return fn(*args, **kwargs)
        except SQLAlchemyError as exc:
            db.session.rollback()
            logger.error("Database error in %s: %s", fn.__name__, exc)
            raise DataAccessError(str(exc)) from exc
    return wrapper


# ---------------------------------------------------------------------------
# businesses
# ---------------------------------------------------------------------------

@_wrap_db_errors
def get_business_for_user(user_id):
    return Business.query.filter_by(user_id=user_id).first()


@_wrap_db_errors
def get_business(business_id):
    return db.session.get(Business, business_id)


@_wrap_db_errors
def get_business_by_widget_id(widget_id):
    if not widget_id:
        return None
    return Business.query.filter_by(widget_id=widget_id).first()


@_wrap_db_errors
def update_business_profile(business, business_name, business_url, logo_url):
    business.business_name = business_name
    business.business_url = business_url
    business.logo_url = logo_url or None
    db.session.commit()
    return business


@_wrap_db_errors
def update_business_plan(business, plan):
    business.plan = plan
    db.session.commit()
    return business


# ---------------------------------------------------------------------------
# reviews
# ---------------------------------------------------------------------------

@_wrap_db_errors
def list_reviews(business_id, status=None, limit=None):
    """Reviews of a business, newest first, optionally filtered by status."""
    query = Review.query.filter_by(business_id=business_id)
    if status:
        query = query.filter_by(status=status)
    query = query.order_by(Review.created_at.desc())
    if limit:
        query = query.limit(limit)
    return query.all()


@_wrap_db_errors
def count_reviews_by_status(business_id):
    rows = (
        db.session.query(Review.status, func.count(Review.id))
        .filter(Review.business_id == business_id)
        .group_by(Review.status)
        .all()
    )
    counts = {status: 0 for status in STATUSES}
    for status, count in rows:
        counts[status] = count
    counts['all'] = sum(counts[s] for s in STATUSES)
    return counts


@_wrap_db_errors
def list_review_ratings(business_id):
    """(rating, status) of every review of the business."""
    return (
        db.session.query(Review.rating, Review.status)
        .filter(Review.business_id == business_id)
        .all()
    )


@_wrap_db_errors
def get_review_for_business(review_id, business_id):
    return Review.query.filter_by(id=review_id, business_id=business_id).first()


@_wrap_db_errors
def insert_review(business_id, customer_name, customer_email, rating, review_text, photo_url=None):
    review = Review(
        business_id=business_id,
        customer_name=customer_name,
        customer_email=customer_email,
        rating=rating,
        review_text=review_text,
        photo_url=photo_url,
        status='pending'
    )
    db.session.add(review)
    db.session.commit()
    return review


@_wrap_db_errors
def update_review_status(review, status):
    review.status = status
    db.session.commit()
    return review


@_wrap_db_errors
def update_review_sentiment(review, score, label):
    # Both columns in one commit: never one without the other
    review.sentiment_score = score
    review.sentiment_label = label
    db.session.commit()
    return review


@_wrap_db_errors
def list_widget_reviews(business_id, limit):
    """Approved 5-star reviews only, newest first."""
    return (
        Review.query
        .filter_by(business_id=business_id, status='approved', rating=5)
        .order_by(Review.created_at.desc())
        .limit(limit)
        .all()
    )


# ---------------------------------------------------------------------------
# social_cards
# ---------------------------------------------------------------------------

@_wrap_db_errors
def insert_social_card(review_id, card_url, platform):
    card = SocialCard(
        review_id=review_id,
        card_url=card_url,
        platform=platform,
        shared_count=0
    )
    db.session.add(card)
    db.session.commit()
    return card


@_wrap_db_errors
def count_social_shares(business_id):
    """Sum of shared_count over the social cards of a business's reviews."""
    total = (
        db.session.query(func.coalesce(func.sum(SocialCard.shared_count), 0))
        .join(Review, SocialCard.review_id == Review.id)
        .filter(Review.business_id == business_id)
        .scalar()
    )
    return int(total or 0)
