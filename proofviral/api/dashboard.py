import math

from flask import Blueprint, jsonify, current_app

from proofviral.services import data_access
from proofviral.services.session import session_required

bp = Blueprint('dashboard', __name__)

RECENT_REVIEWS_LIMIT = 5


def average_rating(ratings):
    """Mean of all ratings, rounded half-up to one decimal; 0 with no ratings."""
    if not ratings:
        return 0
    mean = sum(ratings) / len(ratings)
    return math.floor(mean * 10 + 0.5) / 10


@bp.route('/stats', methods=['GET'])
@session_required
def get_dashboard_stats(session):
    """
    Dashboard Statistics Endpoint
    
    Returns for the current business:
    - Total reviews (any status)
    - Average rating over all reviews regardless of status
    - Pending reviews awaiting moderation
    - Social shares (shared_count over the business's social cards)
    - Five most recent reviews
    """
    business_id = session.business_id
    current_app.logger.debug("Dashboard: Fetching stats for business_id=%s", business_id)
    
    try:
        business = data_access.get_business(business_id)
        rows = data_access.list_review_ratings(business_id)
        recent = data_access.list_reviews(business_id, limit=RECENT_REVIEWS_LIMIT)
        social_shares = data_access.count_social_shares(business_id)
    except data_access.DataAccessError:
        return jsonify({"error": "Failed to load dashboard data"}), 500
    
    if not business:
        return jsonify({"error": "Business not found"}), 404
    
    stats = {
        "total_reviews": len(rows),
        "avg_rating": average_rating([rating for rating, _ in rows]),
        "pending_reviews": sum(1 for _, status in rows if status == 'pending'),
        "social_shares": social_shares
    }
    
    current_app.logger.info("Dashboard: Stats successfully retrieved for business_id=%s", business_id)
    
    return jsonify({
        "stats": stats,
        "recent_reviews": [review.to_dict() for review in recent],
        "business": business.to_dict()
    }), 200
